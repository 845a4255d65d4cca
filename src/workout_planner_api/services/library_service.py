"""
Workout, week and program libraries.

Three independent collections of saved copies, one storage key each. Saved
items are normalized on the way in (every set gets an id, missing text
fields become "", missing flags become False) and stamped with
``savedAt`` / ``lastModified``. References between collections (a week's
sessions vs. the workout library) are not checked.

The old "preset" functions are aliases onto the workout library; anything
still stored under the legacy preset key is folded into the workout library
by ``migrate_legacy_presets``.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from workout_planner_api.config import (
    LEGACY_PRESETS_KEY,
    PROGRAM_LIBRARY_KEY,
    WEEK_LIBRARY_KEY,
    WORKOUT_LIBRARY_KEY,
)
from workout_planner_api.factories import clone_session, clone_week
from workout_planner_api.models import (
    CamelModel,
    EditResult,
    LibraryProgram,
    LibraryWeek,
    LibraryWorkout,
    Notice,
    WorkoutProgram,
    WorkoutSession,
    WorkoutWeek,
    new_id,
)
from workout_planner_api.services.program_adapter import find_session, nest_flat_program, renumber_weeks
from workout_planner_api.services.storage import KeyValueStore

logger = logging.getLogger(__name__)


class LibraryKind(str, Enum):
    WORKOUTS = "workouts"
    WEEKS = "weeks"
    PROGRAMS = "programs"


_KEYS = {
    LibraryKind.WORKOUTS: WORKOUT_LIBRARY_KEY,
    LibraryKind.WEEKS: WEEK_LIBRARY_KEY,
    LibraryKind.PROGRAMS: PROGRAM_LIBRARY_KEY,
}

_MODELS: Dict[LibraryKind, Type[CamelModel]] = {
    LibraryKind.WORKOUTS: LibraryWorkout,
    LibraryKind.WEEKS: LibraryWeek,
    LibraryKind.PROGRAMS: LibraryProgram,
}

LibraryItem = Union[LibraryWorkout, LibraryWeek, LibraryProgram]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class LibraryService:
    """Read and write the three library collections."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # Generic collection access
    # ------------------------------------------------------------------

    def get(self, kind: LibraryKind) -> List[LibraryItem]:
        """All items of ``kind``. Unreadable data counts as an empty collection."""
        raw = self.store.load(_KEYS[kind])
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.error("Library %s is not a list, treating as empty", kind.value)
            return []

        model = _MODELS[kind]
        items = []
        for entry in raw:
            try:
                items.append(model.model_validate(entry))
            except Exception as e:
                logger.warning("Skipping unreadable %s library entry: %s", kind.value, e)
        return items

    def _write(self, kind: LibraryKind, items: List[LibraryItem]) -> bool:
        return self.store.save(_KEYS[kind], [item.to_json_dict() for item in items])

    def _normalize(self, kind: LibraryKind, item: Union[CamelModel, Dict[str, Any]]) -> LibraryItem:
        """Deep-copy ``item`` into the library model for ``kind``."""
        data = item.model_dump() if isinstance(item, CamelModel) else dict(item)
        return _MODELS[kind].model_validate(data)

    def add(self, kind: LibraryKind, item: Union[CamelModel, Dict[str, Any]], name: Optional[str] = None) -> LibraryItem:
        """Append a normalized copy of ``item``.

        The item keeps its id unless it has none or the id is already in the
        library, in which case a new one is assigned.
        """
        saved = self._normalize(kind, item)
        items = self.get(kind)
        if any(existing.id == saved.id for existing in items):
            saved.id = new_id()
        if name:
            saved.name = name

        now = _now()
        saved.saved_at = saved.saved_at or now
        saved.last_modified = now
        items.append(saved)
        self._write(kind, items)
        logger.info("Saved %s %s (%s) to library", kind.value, saved.name, saved.id)
        return saved

    def update(self, kind: LibraryKind, item: Union[CamelModel, Dict[str, Any]]) -> Optional[LibraryItem]:
        """Replace the item with the same id. Returns None if it is not in the library."""
        updated = self._normalize(kind, item)
        items = self.get(kind)
        for index, existing in enumerate(items):
            if existing.id == updated.id:
                updated.saved_at = updated.saved_at or existing.saved_at
                updated.last_modified = _now()
                items[index] = updated
                self._write(kind, items)
                return updated

        logger.warning("Cannot update %s %s: not in library", kind.value, updated.id)
        return None

    def remove(self, kind: LibraryKind, item_id: str) -> bool:
        items = self.get(kind)
        remaining = [item for item in items if item.id != item_id]
        if len(remaining) == len(items):
            logger.warning("Cannot remove %s %s: not in library", kind.value, item_id)
            return False
        self._write(kind, remaining)
        logger.info("Removed %s %s from library", kind.value, item_id)
        return True

    def find(self, kind: LibraryKind, item_id: str) -> Optional[LibraryItem]:
        return next((item for item in self.get(kind) if item.id == item_id), None)

    # ------------------------------------------------------------------
    # Named operations
    # ------------------------------------------------------------------

    def get_workout_library(self) -> List[LibraryWorkout]:
        return self.get(LibraryKind.WORKOUTS)

    def get_week_library(self) -> List[LibraryWeek]:
        return self.get(LibraryKind.WEEKS)

    def get_program_library(self) -> List[LibraryProgram]:
        return self.get(LibraryKind.PROGRAMS)

    def add_workout_to_library(self, workout, name: Optional[str] = None) -> LibraryWorkout:
        return self.add(LibraryKind.WORKOUTS, workout, name)

    def add_week_to_library(self, week, name: Optional[str] = None) -> LibraryWeek:
        return self.add(LibraryKind.WEEKS, week, name)

    def add_program_to_library(self, program, name: Optional[str] = None) -> LibraryProgram:
        return self.add(LibraryKind.PROGRAMS, program, name)

    def update_workout_in_library(self, workout) -> Optional[LibraryWorkout]:
        return self.update(LibraryKind.WORKOUTS, workout)

    def update_week_in_library(self, week) -> Optional[LibraryWeek]:
        return self.update(LibraryKind.WEEKS, week)

    def update_program_in_library(self, program) -> Optional[LibraryProgram]:
        return self.update(LibraryKind.PROGRAMS, program)

    def remove_workout_from_library(self, workout_id: str) -> bool:
        return self.remove(LibraryKind.WORKOUTS, workout_id)

    def remove_week_from_library(self, week_id: str) -> bool:
        return self.remove(LibraryKind.WEEKS, week_id)

    def remove_program_from_library(self, program_id: str) -> bool:
        return self.remove(LibraryKind.PROGRAMS, program_id)

    # ------------------------------------------------------------------
    # Saving from a live program
    # ------------------------------------------------------------------

    def save_session_to_library(
        self, program: WorkoutProgram, session_id: str, name: Optional[str] = None
    ) -> Optional[LibraryWorkout]:
        session = find_session(program, session_id)
        if session is None:
            logger.warning("Workout %s not found in program %s", session_id, program.id)
            return None
        return self.add_workout_to_library(session, name)

    def save_week_to_library(
        self, program: WorkoutProgram, week_id: str, name: Optional[str] = None
    ) -> Optional[LibraryWeek]:
        week = program.find_week(week_id)
        if week is None:
            logger.warning("Week %s not found in program %s", week_id, program.id)
            return None
        return self.add_week_to_library(week, name)

    def save_program_to_library(self, program: WorkoutProgram, name: Optional[str] = None) -> LibraryProgram:
        return self.add_program_to_library(program, name)

    # ------------------------------------------------------------------
    # Legacy presets
    # ------------------------------------------------------------------

    def get_presets(self) -> List[LibraryWorkout]:
        """Deprecated: use ``get_workout_library``."""
        return self.get_workout_library()

    def save_preset(self, workout, name: Optional[str] = None) -> LibraryWorkout:
        """Deprecated: use ``add_workout_to_library``."""
        return self.add_workout_to_library(workout, name)

    def delete_preset(self, preset_id: str) -> bool:
        """Deprecated: use ``remove_workout_from_library``."""
        return self.remove_workout_from_library(preset_id)

    def migrate_legacy_presets(self) -> int:
        """Move entries from the legacy preset key into the workout library.

        Entries whose id is already in the workout library are skipped. The
        legacy key is deleted afterwards. Returns the number moved.
        """
        raw = self.store.load(LEGACY_PRESETS_KEY)
        if not raw:
            return 0
        if not isinstance(raw, list):
            logger.error("Legacy presets are not a list, leaving them in place")
            return 0

        items = self.get_workout_library()
        known = {item.id for item in items}
        moved = 0
        for entry in raw:
            try:
                preset = LibraryWorkout.model_validate(entry)
            except Exception as e:
                logger.warning("Skipping unreadable legacy preset: %s", e)
                continue
            if preset.id in known:
                continue
            preset.saved_at = preset.saved_at or _now()
            preset.last_modified = preset.last_modified or preset.saved_at
            items.append(preset)
            known.add(preset.id)
            moved += 1

        self._write(LibraryKind.WORKOUTS, items)
        self.store.delete(LEGACY_PRESETS_KEY)
        logger.info("Migrated %d legacy presets into the workout library", moved)
        return moved


# ---------------------------------------------------------------------------
# Loading library copies into a live program
# ---------------------------------------------------------------------------


def load_workout_into_program(
    program: WorkoutProgram,
    workout: Union[WorkoutSession, Dict[str, Any]],
    week_id: Optional[str] = None,
    day: Optional[int] = None,
) -> EditResult:
    """Add a fresh-id copy of a library workout to a week (or a flat program)."""
    if not isinstance(workout, WorkoutSession):
        workout = WorkoutSession.model_validate(workout)
    source = WorkoutSession.model_validate(workout.model_dump())

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

    copied = clone_session(source, week_id=target_week_id)
    copied.day = day or len(sessions) + 1
    sessions.append(copied)
    return EditResult(program=edited, active_session_id=copied.id, created_id=copied.id)


def load_week_into_program(program: WorkoutProgram, week: Union[WorkoutWeek, Dict[str, Any]]) -> EditResult:
    """Append a fresh-id copy of a library week as the program's last week."""
    if not isinstance(week, WorkoutWeek):
        week = WorkoutWeek.model_validate(week)
    source = WorkoutWeek.model_validate(week.model_dump())

    edited = nest_flat_program(program.model_copy(deep=True))
    copied = clone_week(source, order=len(edited.weeks) + 1)
    edited.weeks.append(copied)
    renumber_weeks(edited.weeks)
    active = copied.sessions[0].id if copied.sessions else None
    return EditResult(program=edited, active_session_id=active, created_id=copied.id)


def load_program_from_library(program: Union[WorkoutProgram, Dict[str, Any]]) -> WorkoutProgram:
    """Fresh-id working copy of a library program."""
    if not isinstance(program, WorkoutProgram):
        program = WorkoutProgram.model_validate(program)
    source = WorkoutProgram.model_validate(program.model_dump())
    copied = WorkoutProgram(id=new_id(), name=source.name)
    copied.sessions = [clone_session(s) for s in source.sessions]
    copied.weeks = [clone_week(w) for w in source.weeks]
    return copied
