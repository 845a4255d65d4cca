"""Circuit edits within a session.

A circuit is stored twice: as a ``Circuit`` record on the session (whose
``exercises`` list is the membership source of truth) and as a contiguous
block in ``session.exercises``: the header exercise (``is_circuit``)
followed by its members (``is_in_circuit``). Every operation here keeps the
two in step.
"""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from workout_planner_api.factories import create_circuit_header, create_set
from workout_planner_api.models import (
    Circuit,
    EditResult,
    Exercise,
    Notice,
    WorkoutProgram,
    invalid_update,
    merge_model,
    new_id,
)
from workout_planner_api.services.program_adapter import find_session

logger = logging.getLogger(__name__)


def _not_found(program: WorkoutProgram, what: str, item_id: str) -> EditResult:
    logger.warning("%s %s not found in program %s", what, item_id, program.id)
    return EditResult(
        program=program,
        notice=Notice(title=f"{what} Not Found", description=f"The selected {what.lower()} no longer exists."),
    )


def add_circuit(program: WorkoutProgram, session_id: str, name: str = "Circuit") -> EditResult:
    """Append a circuit and its header exercise to a session."""
    edited = program.model_copy(deep=True)
    session = find_session(edited, session_id)
    if session is None:
        return _not_found(program, "Session", session_id)

    name = name or "Circuit"
    circuit = Circuit(id=new_id(), name=name, exercises=[])
    session.exercises.append(create_circuit_header(circuit.id, name))
    session.circuits.append(circuit)
    return EditResult(program=edited, active_session_id=session_id, created_id=circuit.id)


def create_circuit(program: WorkoutProgram, session_id: str) -> EditResult:
    return add_circuit(program, session_id, "Circuit")


def create_superset(program: WorkoutProgram, session_id: str) -> EditResult:
    return add_circuit(program, session_id, "Superset")


def create_emom(program: WorkoutProgram, session_id: str) -> EditResult:
    return add_circuit(program, session_id, "EMOM")


def create_amrap(program: WorkoutProgram, session_id: str) -> EditResult:
    return add_circuit(program, session_id, "AMRAP")


def create_tabata(program: WorkoutProgram, session_id: str) -> EditResult:
    return add_circuit(program, session_id, "Tabata")


def update_circuit(
    program: WorkoutProgram,
    session_id: str,
    circuit_id: str,
    updates: Dict[str, Any],
) -> EditResult:
    """Merge ``updates`` into a circuit; a new name is copied to its header.

    Membership is not editable here. Use ``add_exercise_to_circuit`` or
    delete the member exercise instead.
    """
    edited = program.model_copy(deep=True)
    session = find_session(edited, session_id)
    if session is None:
        return _not_found(program, "Session", session_id)

    index = next((i for i, c in enumerate(session.circuits) if c.id == circuit_id), -1)
    if index < 0:
        return _not_found(program, "Circuit", circuit_id)

    try:
        session.circuits[index] = merge_model(session.circuits[index], updates, protected=("id", "exercises"))
    except ValidationError as e:
        return invalid_update(program, "Circuit", e, session_id)

    new_name = updates.get("name")
    if new_name:
        for exercise in session.exercises:
            if exercise.is_circuit and exercise.circuit_id == circuit_id:
                exercise.name = new_name
    return EditResult(program=edited, active_session_id=session_id)


def delete_circuit(program: WorkoutProgram, session_id: str, circuit_id: str) -> EditResult:
    """Remove a circuit, its header and every member exercise."""
    edited = program.model_copy(deep=True)
    session = find_session(edited, session_id)
    if session is None:
        return _not_found(program, "Session", session_id)

    circuit = session.find_circuit(circuit_id)
    members = set(circuit.exercises) if circuit else set()

    def belongs(exercise: Exercise) -> bool:
        if exercise.id in members:
            return True
        return exercise.circuit_id == circuit_id and (exercise.is_circuit or exercise.is_in_circuit)

    session.exercises = [exercise for exercise in session.exercises if not belongs(exercise)]
    session.circuits = [c for c in session.circuits if c.id != circuit_id]
    return EditResult(program=edited, active_session_id=session_id)


def add_exercise_to_circuit(
    program: WorkoutProgram,
    session_id: str,
    circuit_id: str,
    exercise: Optional[Dict[str, Any]] = None,
) -> EditResult:
    """Insert a new member exercise at the end of a circuit's block.

    The insert position is right after the last contiguous member following
    the header, so the block stays contiguous. Without a header the exercise
    goes to the end of the session.
    """
    edited = program.model_copy(deep=True)
    session = find_session(edited, session_id)
    if session is None:
        return _not_found(program, "Session", session_id)

    circuit = session.find_circuit(circuit_id)
    if circuit is None:
        return _not_found(program, "Circuit", circuit_id)

    fields: Dict[str, Any] = {"name": "New Exercise", "notes": ""}
    fields.update(exercise or {})
    fields["id"] = new_id()
    try:
        member = Exercise.model_validate(fields)
    except ValidationError as e:
        return invalid_update(program, "Exercise", e, session_id)
    if not member.sets:
        member.sets = [create_set()]
    member.is_in_circuit = True
    member.is_circuit = False
    member.circuit_id = circuit_id

    circuit.exercises.append(member.id)
    member.circuit_order = len(circuit.exercises)

    header_index = session.circuit_header_index(circuit_id)
    if header_index < 0:
        session.exercises.append(member)
    else:
        insert_at = header_index + 1
        while (
            insert_at < len(session.exercises)
            and session.exercises[insert_at].is_in_circuit
            and session.exercises[insert_at].circuit_id == circuit_id
        ):
            insert_at += 1
        session.exercises.insert(insert_at, member)
    return EditResult(program=edited, active_session_id=session_id, created_id=member.id)
