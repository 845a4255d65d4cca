"""
Program Editing API Routes

Stateless structural edits: each request carries the program being edited
and gets back an ``EditResult`` with the edited copy. Refused edits (for
example deleting the last session of a week) return the program unchanged
with a ``notice`` and status 200.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter
from pydantic import Field

from workout_planner_api.factories import create_program, create_sample_program
from workout_planner_api.models import CamelModel, EditResult, WorkoutProgram
from workout_planner_api.services import (
    circuit_operations,
    exercise_operations,
    session_operations,
    week_operations,
)

router = APIRouter(prefix="/programs", tags=["Program Editing"])


class ProgramRequest(CamelModel):
    program: WorkoutProgram


class AddSessionRequest(ProgramRequest):
    name: Optional[str] = None
    week_id: Optional[str] = None


class SessionRequest(ProgramRequest):
    session_id: str
    active_session_id: Optional[str] = None
    week_id: Optional[str] = None
    updates: Dict[str, Any] = Field(default_factory=dict)


class CircuitRequest(ProgramRequest):
    session_id: str
    circuit_id: Optional[str] = None
    name: str = "Circuit"
    updates: Dict[str, Any] = Field(default_factory=dict)
    exercise: Optional[Dict[str, Any]] = None


class ExerciseRequest(ProgramRequest):
    session_id: Optional[str] = None
    exercise_id: Optional[str] = None
    exercise: Optional[Dict[str, Any]] = None
    updates: Dict[str, Any] = Field(default_factory=dict)


class SetRequest(ProgramRequest):
    exercise_id: Optional[str] = None
    set_id: Optional[str] = None
    updates: Dict[str, Any] = Field(default_factory=dict)


class WeekRequest(ProgramRequest):
    week_id: Optional[str] = None
    name: Optional[str] = None
    new_index: Optional[int] = None
    updates: Dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Programs
# ---------------------------------------------------------------------------


@router.post("/new", response_model=WorkoutProgram)
def new_program(name: str = "My Workout Program"):
    return create_program(name)


@router.post("/sample", response_model=WorkoutProgram)
def sample_program():
    return create_sample_program()


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.post("/sessions/add", response_model=EditResult)
def add_session(request: AddSessionRequest):
    return session_operations.add_session(request.program, request.name, request.week_id)


@router.post("/sessions/update", response_model=EditResult)
def update_session(request: SessionRequest):
    return session_operations.update_session(
        request.program, request.session_id, request.updates, request.active_session_id
    )


@router.post("/sessions/delete", response_model=EditResult)
def delete_session(request: SessionRequest):
    return session_operations.delete_session(request.program, request.session_id, request.active_session_id)


@router.post("/sessions/clone", response_model=EditResult)
def clone_session(request: SessionRequest):
    return session_operations.clone_session(request.program, request.session_id, request.week_id)


# ---------------------------------------------------------------------------
# Circuits
# ---------------------------------------------------------------------------


@router.post("/circuits/add", response_model=EditResult)
def add_circuit(request: CircuitRequest):
    """Add a circuit. ``name`` is a display label (Circuit, Superset, EMOM, AMRAP, Tabata...)."""
    return circuit_operations.add_circuit(request.program, request.session_id, request.name)


@router.post("/circuits/update", response_model=EditResult)
def update_circuit(request: CircuitRequest):
    return circuit_operations.update_circuit(
        request.program, request.session_id, request.circuit_id or "", request.updates
    )


@router.post("/circuits/delete", response_model=EditResult)
def delete_circuit(request: CircuitRequest):
    return circuit_operations.delete_circuit(request.program, request.session_id, request.circuit_id or "")


@router.post("/circuits/exercises", response_model=EditResult)
def add_exercise_to_circuit(request: CircuitRequest):
    return circuit_operations.add_exercise_to_circuit(
        request.program, request.session_id, request.circuit_id or "", request.exercise
    )


# ---------------------------------------------------------------------------
# Exercises and sets
# ---------------------------------------------------------------------------


@router.post("/exercises/add", response_model=EditResult)
def add_exercise(request: ExerciseRequest):
    return exercise_operations.add_exercise(request.program, request.session_id or "", request.exercise)


@router.post("/exercises/update", response_model=EditResult)
def update_exercise(request: ExerciseRequest):
    return exercise_operations.update_exercise(request.program, request.exercise_id or "", request.updates)


@router.post("/exercises/delete", response_model=EditResult)
def delete_exercise(request: ExerciseRequest):
    return exercise_operations.delete_exercise(request.program, request.exercise_id or "")


@router.post("/exercises/duplicate", response_model=EditResult)
def duplicate_exercise(request: ExerciseRequest):
    return exercise_operations.duplicate_exercise(request.program, request.exercise_id or "")


@router.post("/sets/add", response_model=EditResult)
def add_set(request: SetRequest):
    return exercise_operations.add_set(request.program, request.exercise_id or "", request.updates)


@router.post("/sets/update", response_model=EditResult)
def update_set(request: SetRequest):
    return exercise_operations.update_set(request.program, request.set_id or "", request.updates)


@router.post("/sets/delete", response_model=EditResult)
def delete_set(request: SetRequest):
    return exercise_operations.delete_set(request.program, request.set_id or "")


# ---------------------------------------------------------------------------
# Weeks
# ---------------------------------------------------------------------------


@router.post("/weeks/add", response_model=EditResult)
def add_week(request: WeekRequest):
    return week_operations.add_week(request.program, request.name, request.week_id)


@router.post("/weeks/update", response_model=EditResult)
def update_week(request: WeekRequest):
    return week_operations.update_week(request.program, request.week_id or "", request.updates)


@router.post("/weeks/delete", response_model=EditResult)
def delete_week(request: WeekRequest):
    return week_operations.delete_week(request.program, request.week_id or "")


@router.post("/weeks/move", response_model=EditResult)
def move_week(request: WeekRequest):
    return week_operations.move_week(request.program, request.week_id or "", request.new_index or 0)


@router.post("/weeks/clone", response_model=EditResult)
def clone_week(request: WeekRequest):
    return week_operations.clone_week(request.program, request.week_id or "")
