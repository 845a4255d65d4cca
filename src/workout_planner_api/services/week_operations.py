"""Week edits. Weeks are kept ordered with ``order`` contiguous from 1."""
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from workout_planner_api.factories import clone_week as _clone_week
from workout_planner_api.factories import create_week
from workout_planner_api.models import EditResult, Notice, WorkoutProgram, invalid_update, merge_model
from workout_planner_api.services.program_adapter import nest_flat_program, renumber_weeks

logger = logging.getLogger(__name__)


def _week_not_found(program: WorkoutProgram, week_id: str) -> EditResult:
    logger.warning("Week %s not found in program %s", week_id, program.id)
    return EditResult(
        program=program,
        notice=Notice(title="Week Not Found", description="The selected week no longer exists."),
    )


def add_week(program: WorkoutProgram, name: Optional[str] = None, after_week_id: Optional[str] = None) -> EditResult:
    """Add a week holding one empty session.

    A flat program is first converted so its sessions become week 1.
    """
    edited = nest_flat_program(program.model_copy(deep=True))

    position = len(edited.weeks)
    if after_week_id:
        index = next((i for i, w in enumerate(edited.weeks) if w.id == after_week_id), -1)
        if index < 0:
            return _week_not_found(program, after_week_id)
        position = index + 1

    week = create_week(order=position + 1, name=name)
    edited.weeks.insert(position, week)
    renumber_weeks(edited.weeks)
    return EditResult(program=edited, active_session_id=week.sessions[0].id, created_id=week.id)


def update_week(program: WorkoutProgram, week_id: str, updates: Dict[str, Any]) -> EditResult:
    """Merge ``updates`` into a week. ``order`` changes go through ``move_week``."""
    edited = program.model_copy(deep=True)
    index = next((i for i, w in enumerate(edited.weeks) if w.id == week_id), -1)
    if index < 0:
        return _week_not_found(program, week_id)

    try:
        edited.weeks[index] = merge_model(edited.weeks[index], updates, protected=("id", "order"))
    except ValidationError as e:
        return invalid_update(program, "Week", e)
    return EditResult(program=edited)


def update_week_name(program: WorkoutProgram, week_id: str, name: str) -> EditResult:
    return update_week(program, week_id, {"name": name})


def delete_week(program: WorkoutProgram, week_id: str) -> EditResult:
    edited = program.model_copy(deep=True)
    index = next((i for i, w in enumerate(edited.weeks) if w.id == week_id), -1)
    if index < 0:
        return _week_not_found(program, week_id)

    if len(edited.weeks) <= 1:
        logger.warning("Refusing to delete last week %s of program %s", week_id, program.id)
        return EditResult(
            program=program,
            notice=Notice(title="Cannot Delete Week", description="A program must have at least one week."),
        )

    del edited.weeks[index]
    renumber_weeks(edited.weeks)
    return EditResult(program=edited)


def move_week(program: WorkoutProgram, week_id: str, new_index: int) -> EditResult:
    edited = program.model_copy(deep=True)
    index = next((i for i, w in enumerate(edited.weeks) if w.id == week_id), -1)
    if index < 0:
        return _week_not_found(program, week_id)

    week = edited.weeks.pop(index)
    new_index = max(0, min(new_index, len(edited.weeks)))
    edited.weeks.insert(new_index, week)
    renumber_weeks(edited.weeks)
    return EditResult(program=edited)


def clone_week(program: WorkoutProgram, week_id: str) -> EditResult:
    """Append a fresh-id copy of a week at the end of the program."""
    edited = program.model_copy(deep=True)
    source = edited.find_week(week_id)
    if source is None:
        return _week_not_found(program, week_id)

    copied = _clone_week(source, order=len(edited.weeks) + 1)
    copied.name = f"{source.name} (Copy)"
    edited.weeks.append(copied)
    active = copied.sessions[0].id if copied.sessions else None
    return EditResult(program=edited, active_session_id=active, created_id=copied.id)
