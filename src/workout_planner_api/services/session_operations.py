"""Session (training day) edits on a program.

Every operation takes a program and returns an ``EditResult`` holding an
edited copy. The input program is never modified. Refused edits return the
input unchanged with a ``Notice`` for the UI.
"""
import logging
from typing import Any, Dict, Optional

from workout_planner_api.factories import clone_session as _clone_session
from pydantic import ValidationError

from workout_planner_api.models import (
    EditResult,
    Notice,
    WorkoutProgram,
    WorkoutSession,
    invalid_update,
    merge_model,
    new_id,
)
from workout_planner_api.services.program_adapter import locate_session, renumber_days

logger = logging.getLogger(__name__)


def _session_not_found(program: WorkoutProgram, session_id: str, active_session_id: Optional[str]) -> EditResult:
    logger.warning("Session %s not found in program %s", session_id, program.id)
    return EditResult(
        program=program,
        active_session_id=active_session_id,
        notice=Notice(title="Session Not Found", description="The selected session no longer exists."),
    )


def add_session(
    program: WorkoutProgram,
    name: Optional[str] = None,
    week_id: Optional[str] = None,
) -> EditResult:
    """Append a new empty session and make it the active one.

    Nested programs take the session into ``week_id``, or the last week when
    no week is given. Flat programs append to ``program.sessions``.
    """
    edited = program.model_copy(deep=True)

    if edited.is_flat:
        sessions = edited.sessions
        target_week_id = None
    else:
        week = edited.find_week(week_id) if week_id else edited.weeks[-1]
        if week is None:
            logger.warning("Week %s not found in program %s", week_id, program.id)
            return EditResult(
                program=program,
                notice=Notice(title="Week Not Found", description="The selected week no longer exists."),
            )
        sessions = week.sessions
        target_week_id = week.id

    day = len(sessions) + 1
    session = WorkoutSession(
        id=new_id(),
        name=name or f"Day {day}",
        day=day,
        exercises=[],
        circuits=[],
        week_id=target_week_id,
    )
    sessions.append(session)
    return EditResult(program=edited, active_session_id=session.id, created_id=session.id)


def update_session(
    program: WorkoutProgram,
    session_id: str,
    updates: Dict[str, Any],
    active_session_id: Optional[str] = None,
) -> EditResult:
    """Merge ``updates`` into the session wherever it lives."""
    edited = program.model_copy(deep=True)
    _, sessions, index = locate_session(edited, session_id)
    if sessions is None:
        return _session_not_found(program, session_id, active_session_id)

    try:
        sessions[index] = merge_model(sessions[index], updates)
    except ValidationError as e:
        return invalid_update(program, "Session", e, active_session_id)
    return EditResult(program=edited, active_session_id=active_session_id)


def update_session_name(
    program: WorkoutProgram,
    session_id: str,
    name: str,
    active_session_id: Optional[str] = None,
) -> EditResult:
    return update_session(program, session_id, {"name": name}, active_session_id)


def delete_session(
    program: WorkoutProgram,
    session_id: str,
    active_session_id: Optional[str] = None,
) -> EditResult:
    """Remove a session and renumber the remaining days from 1.

    The last session of a week (or of a flat program) cannot be deleted. When
    the active session is removed, the first remaining session of the same
    container becomes active.
    """
    edited = program.model_copy(deep=True)
    week, sessions, index = locate_session(edited, session_id)
    if sessions is None:
        return _session_not_found(program, session_id, active_session_id)

    if len(sessions) <= 1:
        container = "week" if week is not None else "program"
        logger.warning("Refusing to delete last session %s of %s", session_id, container)
        return EditResult(
            program=program,
            active_session_id=active_session_id,
            notice=Notice(
                title="Cannot Delete Session",
                description=f"A {container} must have at least one session.",
            ),
        )

    del sessions[index]
    renumber_days(sessions)

    if active_session_id == session_id:
        active_session_id = sessions[0].id if sessions else None
    return EditResult(program=edited, active_session_id=active_session_id)


def clone_session(
    program: WorkoutProgram,
    session_id: str,
    week_id: Optional[str] = None,
) -> EditResult:
    """Copy a session to the end of its own week, or of ``week_id``."""
    edited = program.model_copy(deep=True)
    source_week, sessions, index = locate_session(edited, session_id)
    if sessions is None:
        return _session_not_found(program, session_id, None)

    target = sessions
    target_week_id = source_week.id if source_week is not None else None
    if week_id and not edited.is_flat:
        week = edited.find_week(week_id)
        if week is None:
            logger.warning("Week %s not found in program %s", week_id, program.id)
            return EditResult(
                program=program,
                notice=Notice(title="Week Not Found", description="The selected week no longer exists."),
            )
        target = week.sessions
        target_week_id = week.id

    copied = _clone_session(sessions[index], week_id=target_week_id)
    copied.day = len(target) + 1
    target.append(copied)
    return EditResult(program=edited, active_session_id=copied.id, created_id=copied.id)
