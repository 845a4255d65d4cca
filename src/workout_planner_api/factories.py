"""Factories for empty program records and fresh-id copies of existing ones."""
from typing import Dict, Optional

from workout_planner_api.models import (
    Exercise,
    Set,
    WorkoutProgram,
    WorkoutSession,
    WorkoutWeek,
    new_id,
)

# Header notes for the named circuit variants. The names are display labels
# only; every variant behaves as a plain circuit.
CIRCUIT_TEMPLATES: Dict[str, str] = {
    "Circuit": "Perform exercises in sequence with minimal rest",
    "Superset": "Perform these exercises back-to-back with no rest between",
    "EMOM": "Every Minute On the Minute for 10 minutes",
    "AMRAP": "As Many Rounds As Possible in 12 minutes",
    "Tabata": "8 rounds of 20s work, 10s rest",
}


def create_set(**fields) -> Set:
    return Set(id=new_id(), **fields)


def create_exercise(name: str = "New Exercise") -> Exercise:
    """New exercise with one empty set."""
    return Exercise(id=new_id(), name=name, sets=[create_set()], notes="")


def create_session(day: int = 1, week_id: Optional[str] = None, name: Optional[str] = None) -> WorkoutSession:
    """New session named ``Day N`` with one empty exercise."""
    return WorkoutSession(
        id=new_id(),
        name=name or f"Day {day}",
        day=day,
        exercises=[create_exercise()],
        circuits=[],
        week_id=week_id,
    )


def create_week(order: int = 1, name: Optional[str] = None) -> WorkoutWeek:
    """New week with one session."""
    week_id = new_id()
    return WorkoutWeek(
        id=week_id,
        name=name or f"Week {order}",
        order=order,
        sessions=[create_session(day=1, week_id=week_id)],
    )


def create_program(name: str = "My Workout Program") -> WorkoutProgram:
    """New program with one week."""
    return WorkoutProgram(id=new_id(), name=name, sessions=[], weeks=[create_week()])


def create_circuit_header(circuit_id: str, name: str = "Circuit") -> Exercise:
    """Placeholder exercise that marks where a circuit starts in a session."""
    return Exercise(
        id=new_id(),
        name=name,
        sets=[],
        notes=CIRCUIT_TEMPLATES.get(name, ""),
        is_circuit=True,
        circuit_id=circuit_id,
    )


# ---------------------------------------------------------------------------
# Fresh-id copies
# ---------------------------------------------------------------------------


def clone_exercise(exercise: Exercise) -> Exercise:
    """Copy an exercise and its sets under new ids. Circuit links are kept as-is."""
    copied = exercise.model_copy(deep=True)
    copied.id = new_id()
    for exercise_set in copied.sets:
        exercise_set.id = new_id()
    return copied


def clone_session(session: WorkoutSession, week_id: Optional[str] = None) -> WorkoutSession:
    """Copy a session with new ids for it, its exercises, sets and circuits.

    Circuit ids and membership lists are remapped so the copy's circuits
    point at the copy's exercises.
    """
    copied = session.model_copy(deep=True)
    copied.id = new_id()
    if week_id is not None:
        copied.week_id = week_id

    circuit_ids = {circuit.id: new_id() for circuit in copied.circuits}
    exercise_ids: Dict[str, str] = {}
    for exercise in copied.exercises:
        old_id = exercise.id
        exercise.id = new_id()
        exercise_ids[old_id] = exercise.id
        for exercise_set in exercise.sets:
            exercise_set.id = new_id()
        if exercise.circuit_id in circuit_ids:
            exercise.circuit_id = circuit_ids[exercise.circuit_id]

    for circuit in copied.circuits:
        circuit.id = circuit_ids[circuit.id]
        circuit.exercises = [exercise_ids[eid] for eid in circuit.exercises if eid in exercise_ids]
    return copied


def clone_week(week: WorkoutWeek, order: Optional[int] = None) -> WorkoutWeek:
    copied = week.model_copy(deep=True)
    copied.id = new_id()
    if order is not None:
        copied.order = order
    copied.sessions = [clone_session(session, week_id=copied.id) for session in week.sessions]
    return copied


def create_sample_program() -> WorkoutProgram:
    """Two-session demo program in a single week."""
    week_id = new_id()
    upper = WorkoutSession(
        id=new_id(),
        name="Upper Body",
        day=1,
        week_id=week_id,
        exercises=[
            Exercise(
                id=new_id(),
                name="Bench Press",
                sets=[create_set(reps="10,8,8,6", weight="135,145,155,165", rest="90s")],
                notes="Focus on chest contraction",
            ),
            Exercise(
                id=new_id(),
                name="Pull-ups",
                sets=[create_set(reps="8,8,8", weight="BW", rest="60s")],
            ),
        ],
    )
    lower = WorkoutSession(
        id=new_id(),
        name="Lower Body",
        day=2,
        week_id=week_id,
        exercises=[
            Exercise(
                id=new_id(),
                name="Squats",
                sets=[create_set(reps="10,8,6", weight="185,205,225", rest="120s")],
            ),
            Exercise(
                id=new_id(),
                name="Romanian Deadlift",
                sets=[create_set(reps="10,10,10", weight="135,145,155", rest="90s")],
                notes="Keep back straight",
            ),
        ],
    )
    week = WorkoutWeek(id=week_id, name="Week 1", order=1, sessions=[upper, lower])
    return WorkoutProgram(id=new_id(), name="Sample Training Program", weeks=[week])
