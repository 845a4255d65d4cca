"""
Program schedule engine.

Expands a program (weeks of day-numbered sessions) onto calendar dates from
a chosen start date and tracks completion. Day offsets assume exactly seven
days per week:

    day_offset = (week.order - 1) * 7 + (session.day - 1)

At most one stored schedule is active; starting a program makes the new
schedule the active one.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Dict, List, Optional, Union

from workout_planner_api.config import SCHEDULES_KEY
from workout_planner_api.models import (
    ProgramSchedule,
    ScheduleCollection,
    ScheduledWorkout,
    ScheduleProgress,
    WorkoutProgram,
    new_id,
)
from workout_planner_api.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

DateLike = Union[date, datetime]


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _calendar_day(value: DateLike) -> date:
    """Local calendar day of a date or datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


class ScheduleService:
    """Schedules backed by a key-value store.

    The collection is loaded once at construction and written back in full
    after every change.
    """

    def __init__(self, store: KeyValueStore, key: str = SCHEDULES_KEY) -> None:
        self.store = store
        self.key = key
        self._collection = ScheduleCollection.from_storage(store.load(key))

    def _persist(self) -> None:
        self.store.save(self.key, self._collection.to_storage())

    @property
    def schedules(self) -> List[ProgramSchedule]:
        return list(self._collection.schedules)

    @property
    def active_schedule(self) -> Optional[ProgramSchedule]:
        return self._collection.active_schedule

    def get_schedule(self, schedule_id: str) -> Optional[ProgramSchedule]:
        return next((s for s in self._collection.schedules if s.id == schedule_id), None)

    def start_program(
        self,
        program: Union[WorkoutProgram, Dict[str, Any]],
        start_date: DateLike,
    ) -> ProgramSchedule:
        """Schedule every session of ``program`` from ``start_date`` and make it active.

        Never raises for malformed programs: missing weeks or empty weeks
        produce fewer (possibly zero) scheduled workouts and a warning.
        """
        if not isinstance(program, WorkoutProgram):
            program = WorkoutProgram.model_validate(program)
        start = _as_datetime(start_date)

        logger.info("Starting program %s (%s) on %s", program.name, program.id, start.date())

        scheduled: List[ScheduledWorkout] = []
        max_offset = 0
        if not program.weeks:
            logger.warning("Program %s has no weeks defined", program.id)

        for week in program.weeks:
            if not week.sessions:
                logger.warning("Week %s has no workouts defined", week.name)
                continue
            for session in week.sessions:
                offset = (week.order - 1) * DAYS_PER_WEEK + (session.day - 1)
                max_offset = max(max_offset, offset)
                workout_date = start + timedelta(days=offset)
                scheduled.append(
                    ScheduledWorkout(
                        id=new_id(),
                        date=workout_date,
                        workout_id=session.id,
                        program_id=program.id,
                        completed=False,
                        name=session.name,
                    )
                )
                logger.debug("Scheduling workout %r for %s", session.name, workout_date.date())

        schedule = ProgramSchedule(
            id=new_id(),
            program_id=program.id,
            program_name=program.name,
            start_date=start,
            end_date=start + timedelta(days=max_offset),
            scheduled_workouts=scheduled,
            active=True,
            created_at=datetime.now(timezone.utc),
        )

        self._collection.schedules.append(schedule)
        self._collection.active_schedule_id = schedule.id
        self._persist()

        logger.info(
            "Scheduled %d workouts for program %s through %s",
            len(scheduled), program.id, schedule.end_date.date(),
        )
        return schedule

    def workouts_for_day(self, day: DateLike) -> List[ScheduledWorkout]:
        """Scheduled workouts from every stored schedule falling on ``day`` (local time)."""
        target = _calendar_day(day)
        return [
            workout
            for schedule in self._collection.schedules
            for workout in schedule.scheduled_workouts
            if _calendar_day(workout.date) == target
        ]

    def upcoming_workouts(self, from_day: DateLike, days: int = 7) -> List[ScheduledWorkout]:
        """Incomplete workouts of the active schedule within ``days`` days of ``from_day``."""
        active = self.active_schedule
        if active is None:
            return []
        first = _calendar_day(from_day)
        last = first + timedelta(days=days - 1)
        upcoming = [
            workout
            for workout in active.scheduled_workouts
            if not workout.completed and first <= _calendar_day(workout.date) <= last
        ]
        return sorted(upcoming, key=lambda w: w.date)

    def complete_workout(self, scheduled_workout_id: str) -> Optional[ScheduledWorkout]:
        """Mark a scheduled workout completed. Repeated calls change nothing."""
        workout = self.get_scheduled_workout_by_id(scheduled_workout_id)
        if workout is None:
            logger.warning("Scheduled workout %s not found", scheduled_workout_id)
            return None
        if workout.completed:
            return workout

        # active_schedule shares this object
        workout.completed = True
        self._persist()
        logger.info("Completed scheduled workout %s", scheduled_workout_id)
        return workout

    def get_scheduled_workout_by_id(self, scheduled_workout_id: str) -> Optional[ScheduledWorkout]:
        for schedule in self._collection.schedules:
            for workout in schedule.scheduled_workouts:
                if workout.id == scheduled_workout_id:
                    return workout
        return None

    def schedule_progress(self, schedule_id: str) -> Optional[ScheduleProgress]:
        schedule = self.get_schedule(schedule_id)
        if schedule is None:
            return None
        total = len(schedule.scheduled_workouts)
        completed = sum(1 for w in schedule.scheduled_workouts if w.completed)
        percent = round(completed * 100 / total, 1) if total else 0.0
        return ScheduleProgress(schedule_id=schedule_id, completed=completed, total=total, percent=percent)
