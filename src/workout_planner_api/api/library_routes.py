"""
Library API Routes

Saved workouts, weeks and programs: /library/{kind} with kind in
workouts | weeks | programs.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from workout_planner_api.api.dependencies import get_library_service
from workout_planner_api.services.library_service import LibraryKind, LibraryService

router = APIRouter(prefix="/library", tags=["Library"])


@router.post("/migrate-presets")
def migrate_presets(service: LibraryService = Depends(get_library_service)):
    """Fold legacy presets into the workout library."""
    return {"success": True, "migrated": service.migrate_legacy_presets()}


@router.get("/{kind}")
def get_library(kind: LibraryKind, service: LibraryService = Depends(get_library_service)):
    return [item.to_json_dict() for item in service.get(kind)]


@router.get("/{kind}/{item_id}")
def get_library_item(kind: LibraryKind, item_id: str, service: LibraryService = Depends(get_library_service)):
    item = service.find(kind, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"{kind.value[:-1].capitalize()} not found in library")
    return item.to_json_dict()


@router.post("/{kind}", status_code=201)
def add_to_library(
    kind: LibraryKind,
    item: Dict[str, Any] = Body(...),
    name: Optional[str] = Query(None, description="Save under a different name"),
    service: LibraryService = Depends(get_library_service),
):
    """Save a copy of a workout, week or program. Missing set fields are filled with ""."""
    return service.add(kind, item, name).to_json_dict()


@router.put("/{kind}/{item_id}")
def update_library_item(
    kind: LibraryKind,
    item_id: str,
    item: Dict[str, Any] = Body(...),
    service: LibraryService = Depends(get_library_service),
):
    item = {**item, "id": item_id}
    updated = service.update(kind, item)
    if updated is None:
        raise HTTPException(status_code=404, detail=f"{kind.value[:-1].capitalize()} not found in library")
    return updated.to_json_dict()


@router.delete("/{kind}/{item_id}")
def remove_from_library(kind: LibraryKind, item_id: str, service: LibraryService = Depends(get_library_service)):
    removed = service.remove(kind, item_id)
    return {"success": removed, "id": item_id}

