"""Exercise and set edits."""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from workout_planner_api.factories import clone_exercise, create_exercise, create_set
from workout_planner_api.models import EditResult, Exercise, Notice, WorkoutProgram, invalid_update, merge_model
from workout_planner_api.services.circuit_operations import delete_circuit
from workout_planner_api.services.program_adapter import find_session, locate_exercise, locate_set

logger = logging.getLogger(__name__)


def _not_found(program: WorkoutProgram, what: str, item_id: str) -> EditResult:
    logger.warning("%s %s not found in program %s", what, item_id, program.id)
    return EditResult(
        program=program,
        notice=Notice(title=f"{what} Not Found", description=f"The selected {what.lower()} no longer exists."),
    )


def add_exercise(
    program: WorkoutProgram,
    session_id: str,
    exercise: Optional[Dict[str, Any]] = None,
) -> EditResult:
    """Append an exercise (one empty set by default) to a session."""
    edited = program.model_copy(deep=True)
    session = find_session(edited, session_id)
    if session is None:
        return _not_found(program, "Session", session_id)

    new_exercise = create_exercise()
    if exercise:
        try:
            new_exercise = merge_model(new_exercise, exercise)
        except ValidationError as e:
            return invalid_update(program, "Exercise", e, session_id)
        if not new_exercise.sets:
            new_exercise.sets = [create_set()]
    session.exercises.append(new_exercise)
    return EditResult(program=edited, active_session_id=session_id, created_id=new_exercise.id)


def update_exercise(program: WorkoutProgram, exercise_id: str, updates: Dict[str, Any]) -> EditResult:
    edited = program.model_copy(deep=True)
    session, index = locate_exercise(edited, exercise_id)
    if session is None:
        return _not_found(program, "Exercise", exercise_id)

    # Circuit links change only through circuit operations
    try:
        session.exercises[index] = merge_model(
            session.exercises[index],
            updates,
            protected=("id", "is_circuit", "is_in_circuit", "circuit_id"),
        )
    except ValidationError as e:
        return invalid_update(program, "Exercise", e, session.id)
    return EditResult(program=edited, active_session_id=session.id)


def delete_exercise(program: WorkoutProgram, exercise_id: str) -> EditResult:
    """Remove an exercise.

    Deleting a circuit header deletes the whole circuit. Deleting a member
    also drops it from the circuit's membership list.
    """
    session, index = locate_exercise(program, exercise_id)
    if session is None:
        return _not_found(program, "Exercise", exercise_id)

    target = session.exercises[index]
    if target.is_circuit and target.circuit_id:
        return delete_circuit(program, session.id, target.circuit_id)

    edited = program.model_copy(deep=True)
    session, index = locate_exercise(edited, exercise_id)
    del session.exercises[index]
    if target.is_in_circuit and target.circuit_id:
        circuit = session.find_circuit(target.circuit_id)
        if circuit is not None:
            circuit.exercises = [eid for eid in circuit.exercises if eid != exercise_id]
    return EditResult(program=edited, active_session_id=session.id)


def duplicate_exercise(program: WorkoutProgram, exercise_id: str) -> EditResult:
    """Insert a fresh-id copy right after the original. Circuit headers are not duplicated."""
    edited = program.model_copy(deep=True)
    session, index = locate_exercise(edited, exercise_id)
    if session is None:
        return _not_found(program, "Exercise", exercise_id)

    source = session.exercises[index]
    if source.is_circuit:
        return EditResult(
            program=program,
            notice=Notice(
                title="Cannot Duplicate Circuit",
                description="Add a new circuit instead of duplicating its header.",
            ),
        )

    copied = clone_exercise(source)
    session.exercises.insert(index + 1, copied)
    if copied.is_in_circuit and copied.circuit_id:
        circuit = session.find_circuit(copied.circuit_id)
        if circuit is not None:
            position = circuit.exercises.index(source.id) + 1 if source.id in circuit.exercises else len(circuit.exercises)
            circuit.exercises.insert(position, copied.id)
    return EditResult(program=edited, active_session_id=session.id, created_id=copied.id)


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------


def add_set(program: WorkoutProgram, exercise_id: str, values: Optional[Dict[str, Any]] = None) -> EditResult:
    edited = program.model_copy(deep=True)
    session, index = locate_exercise(edited, exercise_id)
    if session is None:
        return _not_found(program, "Exercise", exercise_id)

    new_set = create_set()
    if values:
        try:
            new_set = merge_model(new_set, values)
        except ValidationError as e:
            return invalid_update(program, "Set", e, session.id)
    session.exercises[index].sets.append(new_set)
    return EditResult(program=edited, active_session_id=session.id, created_id=new_set.id)


def update_set(program: WorkoutProgram, set_id: str, updates: Dict[str, Any]) -> EditResult:
    edited = program.model_copy(deep=True)
    exercise, index = locate_set(edited, set_id)
    if exercise is None:
        return _not_found(program, "Set", set_id)

    try:
        exercise.sets[index] = merge_model(exercise.sets[index], updates)
    except ValidationError as e:
        return invalid_update(program, "Set", e)
    return EditResult(program=edited)


def delete_set(program: WorkoutProgram, set_id: str) -> EditResult:
    """Remove a set. An exercise always keeps at least one set."""
    edited = program.model_copy(deep=True)
    exercise, index = locate_set(edited, set_id)
    if exercise is None:
        return _not_found(program, "Set", set_id)

    if len(exercise.sets) <= 1:
        logger.warning("Refusing to delete last set %s of exercise %s", set_id, exercise.id)
        return EditResult(
            program=program,
            notice=Notice(title="Cannot Delete Set", description="An exercise must have at least one set."),
        )

    del exercise.sets[index]
    return EditResult(program=edited)


def get_exercise(program: WorkoutProgram, exercise_id: str) -> Optional[Exercise]:
    session, index = locate_exercise(program, exercise_id)
    if session is None:
        return None
    return session.exercises[index]
