"""Adapters between the program shapes found in stored data.

Two shapes exist for the week -> session association:

- embedded: each week carries its sessions (``weeks[].sessions``)
- referenced: the program carries ``workouts`` and each week lists
  workout ids (``weeks[].workouts``)

Embedded is the canonical in-memory shape. Referenced data is converted at
the load boundary by ``embed_workout_references``. Flat programs (no weeks)
keep their sessions in ``program.sessions``; ``session_containers`` and
``locate_session`` are the only places that branch on flat vs nested.
"""
from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from workout_planner_api.models import (
        Exercise,
        Set,
        WorkoutProgram,
        WorkoutSession,
        WorkoutWeek,
    )

logger = logging.getLogger(__name__)


def embed_workout_references(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a referenced-shape program dict to the embedded shape.

    Weeks that already carry ``sessions`` are left alone. Workout ids with no
    matching entry in ``data["workouts"]`` are dropped with a warning.
    """
    weeks = data.get("weeks")
    workouts = data.get("workouts")
    if not isinstance(weeks, list) or not any(
        isinstance(w, dict) and "workouts" in w and "sessions" not in w for w in weeks
    ):
        return data

    by_id = {}
    for workout in workouts or []:
        if isinstance(workout, dict) and workout.get("id"):
            by_id[workout["id"]] = workout

    converted = dict(data)
    converted.pop("workouts", None)
    new_weeks = []
    for week in weeks:
        if not isinstance(week, dict) or "sessions" in week:
            new_weeks.append(week)
            continue
        week = dict(week)
        sessions = []
        for workout_id in week.pop("workouts", None) or []:
            workout = by_id.get(workout_id)
            if workout is None:
                logger.warning(
                    "Workout with ID %s not found in program %s", workout_id, data.get("id")
                )
                continue
            session = copy.deepcopy(workout)
            session.setdefault("weekId", week.get("id"))
            sessions.append(session)
        if not sessions:
            logger.warning("Week %s has no workouts defined", week.get("name"))
        week["sessions"] = sessions
        new_weeks.append(week)

    converted["weeks"] = new_weeks
    return converted


def to_reference_shape(program: "WorkoutProgram") -> Dict[str, Any]:
    """Dump a program in the referenced shape (``workouts`` + week id lists)."""
    data = program.to_json_dict()
    workouts: List[Dict[str, Any]] = []
    weeks = []
    for week in data.get("weeks", []):
        sessions = week.pop("sessions", [])
        workouts.extend(sessions)
        week["workouts"] = [session["id"] for session in sessions]
        weeks.append(week)
    data["weeks"] = weeks
    data["workouts"] = workouts
    return data


def session_containers(program: "WorkoutProgram") -> List[Tuple[Optional["WorkoutWeek"], List["WorkoutSession"]]]:
    """Return every (week, sessions list) pair. Flat programs yield one pair with week None."""
    if program.is_flat:
        return [(None, program.sessions)]
    return [(week, week.sessions) for week in program.weeks]


def locate_session(
    program: "WorkoutProgram", session_id: str
) -> Tuple[Optional["WorkoutWeek"], Optional[List["WorkoutSession"]], int]:
    """Find a session. Returns (week, container, index), or (None, None, -1)."""
    for week, sessions in session_containers(program):
        for index, session in enumerate(sessions):
            if session.id == session_id:
                return week, sessions, index
    return None, None, -1


def find_session(program: "WorkoutProgram", session_id: str) -> Optional["WorkoutSession"]:
    _, sessions, index = locate_session(program, session_id)
    if sessions is None:
        return None
    return sessions[index]


def locate_exercise(
    program: "WorkoutProgram", exercise_id: str
) -> Tuple[Optional["WorkoutSession"], int]:
    """Find an exercise. Returns (owning session, index) or (None, -1)."""
    for session in program.all_sessions():
        for index, exercise in enumerate(session.exercises):
            if exercise.id == exercise_id:
                return session, index
    return None, -1


def locate_set(
    program: "WorkoutProgram", set_id: str
) -> Tuple[Optional["Exercise"], int]:
    """Find a set. Returns (owning exercise, index) or (None, -1)."""
    for session in program.all_sessions():
        for exercise in session.exercises:
            for index, exercise_set in enumerate(exercise.sets):
                if exercise_set.id == set_id:
                    return exercise, index
    return None, -1


def renumber_days(sessions: List["WorkoutSession"]) -> None:
    """Make ``day`` contiguous from 1 in list order."""
    for index, session in enumerate(sessions):
        session.day = index + 1


def renumber_weeks(weeks: List["WorkoutWeek"]) -> None:
    for index, week in enumerate(weeks):
        week.order = index + 1


def nest_flat_program(program: "WorkoutProgram", week_name: str = "Week 1") -> "WorkoutProgram":
    """Move a flat program's sessions into a single first week, in place."""
    from workout_planner_api.models import WorkoutWeek

    if not program.is_flat:
        return program
    week = WorkoutWeek(name=week_name, order=1, sessions=list(program.sessions))
    for session in week.sessions:
        session.week_id = week.id
    renumber_days(week.sessions)
    program.weeks = [week]
    program.sessions = []
    return program
