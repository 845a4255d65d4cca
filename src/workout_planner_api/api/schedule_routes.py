"""
Schedule API Routes

Start a program on a date, query workouts by day and mark them complete.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from workout_planner_api.api.dependencies import get_schedule_service
from workout_planner_api.models import (
    CamelModel,
    ProgramSchedule,
    ScheduledWorkout,
    ScheduleProgress,
    WorkoutProgram,
)
from workout_planner_api.services.schedule_service import ScheduleService

router = APIRouter(tags=["Schedules"])


class StartProgramRequest(CamelModel):
    program: WorkoutProgram
    start_date: date


@router.post("/schedules", response_model=ProgramSchedule)
def start_program(request: StartProgramRequest, service: ScheduleService = Depends(get_schedule_service)):
    """
    Schedule a program from a start date and make it the active schedule.

    A program without weeks yields a schedule with no workouts.
    """
    return service.start_program(request.program, request.start_date)


@router.get("/schedules", response_model=List[ProgramSchedule])
def list_schedules(service: ScheduleService = Depends(get_schedule_service)):
    return service.schedules


@router.get("/schedules/active", response_model=ProgramSchedule)
def get_active_schedule(service: ScheduleService = Depends(get_schedule_service)):
    schedule = service.active_schedule
    if schedule is None:
        raise HTTPException(status_code=404, detail="No active schedule")
    return schedule


@router.get("/schedules/day/{day}", response_model=List[ScheduledWorkout])
def workouts_for_day(day: date, service: ScheduleService = Depends(get_schedule_service)):
    return service.workouts_for_day(day)


@router.get("/schedules/upcoming", response_model=List[ScheduledWorkout])
def upcoming_workouts(
    from_day: date = Query(..., alias="from"),
    days: int = Query(7, ge=1, le=366),
    service: ScheduleService = Depends(get_schedule_service),
):
    return service.upcoming_workouts(from_day, days)


@router.get("/schedules/{schedule_id}", response_model=ProgramSchedule)
def get_schedule(schedule_id: str, service: ScheduleService = Depends(get_schedule_service)):
    schedule = service.get_schedule(schedule_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


@router.get("/schedules/{schedule_id}/progress", response_model=ScheduleProgress)
def get_schedule_progress(schedule_id: str, service: ScheduleService = Depends(get_schedule_service)):
    progress = service.schedule_progress(schedule_id)
    if progress is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return progress


@router.get("/scheduled-workouts/{scheduled_workout_id}", response_model=ScheduledWorkout)
def get_scheduled_workout(scheduled_workout_id: str, service: ScheduleService = Depends(get_schedule_service)):
    workout = service.get_scheduled_workout_by_id(scheduled_workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Scheduled workout not found")
    return workout


@router.post("/scheduled-workouts/{scheduled_workout_id}/complete", response_model=ScheduledWorkout)
def complete_workout(scheduled_workout_id: str, service: ScheduleService = Depends(get_schedule_service)):
    """Mark a scheduled workout completed. Completing twice is harmless."""
    workout = service.complete_workout(scheduled_workout_id)
    if workout is None:
        raise HTTPException(status_code=404, detail="Scheduled workout not found")
    return workout
