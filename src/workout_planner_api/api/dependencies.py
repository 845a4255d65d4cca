"""FastAPI dependencies wiring routes to the configured store."""
from fastapi import Depends

from workout_planner_api.services.library_service import LibraryService
from workout_planner_api.services.schedule_service import ScheduleService
from workout_planner_api.services.storage import KeyValueStore, get_store


def get_schedule_service(store: KeyValueStore = Depends(get_store)) -> ScheduleService:
    return ScheduleService(store)


def get_library_service(store: KeyValueStore = Depends(get_store)) -> LibraryService:
    return LibraryService(store)
