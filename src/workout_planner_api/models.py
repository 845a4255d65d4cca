"""Data models for workout programs, schedules and library items."""
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_snake

from workout_planner_api.services.program_adapter import embed_workout_references

logger = logging.getLogger(__name__)

IntensityType = Literal["rpe", "percent", "absolute"]
WeightType = Literal["pounds", "kilos", "distance-m"]


def new_id() -> str:
    """Return a fresh unique identifier."""
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"  # Ignore UI-only fields

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump to the camelCase JSON shape used by storage and the UI."""
        return self.model_dump(mode="json", by_alias=True)

    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def _default_name(cls, value: Any, info: ValidationInfo) -> Any:
        # A null name falls back to the field default ("New Exercise", "Day 1", ...)
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


def merge_model(model: BaseModel, updates: Dict[str, Any], protected: tuple = ("id",)):
    """Return a copy of ``model`` with ``updates`` merged in.

    Update keys may be camelCase or snake_case. Keys listed in ``protected``
    are ignored.
    """
    data = model.model_dump()
    for key, value in updates.items():
        name = to_snake(key)
        if name in protected:
            continue
        data[name] = value
    return type(model).model_validate(data)


class Set(CamelModel):
    """A single prescribed set. Values are free text ("10,8,6", "BW", "90s")."""
    id: str = Field(default_factory=new_id)
    reps: str = ""
    weight: str = ""
    intensity: str = ""
    intensity_type: Optional[IntensityType] = None
    weight_type: Optional[WeightType] = None
    rest: str = ""

    @model_validator(mode="before")
    @classmethod
    def _legacy_rpe(cls, data: Any) -> Any:
        # Older records stored intensity under "rpe"
        if isinstance(data, dict) and "rpe" in data and not data.get("intensity"):
            data = dict(data)
            data["intensity"] = data.pop("rpe")
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _fallback_id(cls, value: Any) -> str:
        return value or new_id()

    @field_validator("reps", "weight", "intensity", "rest", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)


class Exercise(CamelModel):
    """A movement, a circuit header (is_circuit) or a circuit member (is_in_circuit)."""
    id: str = Field(default_factory=new_id)
    name: str = "New Exercise"
    sets: List[Set] = Field(default_factory=list)
    notes: str = ""
    is_circuit: bool = False
    is_in_circuit: bool = False
    circuit_id: Optional[str] = None
    circuit_order: Optional[int] = None
    is_group: bool = False
    group_id: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _fallback_id(cls, value: Any) -> str:
        return value or new_id()

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("is_circuit", "is_in_circuit", "is_group", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> bool:
        return bool(value)


class Circuit(CamelModel):
    """Named group of exercises. ``exercises`` is the ordered membership list."""
    id: str = Field(default_factory=new_id)
    name: str = "Circuit"
    exercises: List[str] = Field(default_factory=list)
    rounds: Optional[int] = None
    rest_between_exercises: Optional[str] = None
    rest_between_rounds: Optional[str] = None


class WorkoutSession(CamelModel):
    """One training day."""
    id: str = Field(default_factory=new_id)
    name: str = "Day 1"
    day: int = Field(1, description="1-based position within the week")
    exercises: List[Exercise] = Field(default_factory=list)
    circuits: List[Circuit] = Field(default_factory=list)
    week_id: Optional[str] = None

    def find_circuit(self, circuit_id: str) -> Optional[Circuit]:
        return next((c for c in self.circuits if c.id == circuit_id), None)

    def circuit_header_index(self, circuit_id: str) -> int:
        for index, exercise in enumerate(self.exercises):
            if exercise.is_circuit and exercise.circuit_id == circuit_id:
                return index
        return -1

    def circuit_block(self, circuit_id: str) -> List[Exercise]:
        """Members of a circuit in membership order, derived from the Circuit record."""
        circuit = self.find_circuit(circuit_id)
        if circuit is None:
            return []
        by_id = {exercise.id: exercise for exercise in self.exercises}
        return [by_id[eid] for eid in circuit.exercises if eid in by_id]


class WorkoutWeek(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str = "Week 1"
    order: int = 1
    sessions: List[WorkoutSession] = Field(default_factory=list)
    # Workout id references of a week saved without embedded sessions
    workouts: List[str] = Field(default_factory=list)

    @property
    def workout_ids(self) -> List[str]:
        """Reference view of the week: ids of its sessions in order, else its stored references."""
        if self.sessions:
            return [session.id for session in self.sessions]
        return list(self.workouts)


class WorkoutProgram(CamelModel):
    """A program is flat when it has no weeks and keeps its sessions in ``sessions``."""
    id: str = Field(default_factory=new_id)
    name: str = "My Workout Program"
    sessions: List[WorkoutSession] = Field(default_factory=list)
    weeks: List[WorkoutWeek] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _adapt_reference_weeks(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return embed_workout_references(data)
        return data

    @property
    def is_flat(self) -> bool:
        return not self.weeks

    def all_sessions(self) -> List[WorkoutSession]:
        if self.is_flat:
            return list(self.sessions)
        return [session for week in self.weeks for session in week.sessions]

    def find_week(self, week_id: str) -> Optional[WorkoutWeek]:
        return next((w for w in self.weeks if w.id == week_id), None)


# ---------------------------------------------------------------------------
# Library items
# ---------------------------------------------------------------------------


class LibraryStamps(CamelModel):
    saved_at: Optional[datetime] = None
    last_modified: Optional[datetime] = None


class LibraryWorkout(WorkoutSession, LibraryStamps):
    """Saved copy of a workout session."""


class LibraryWeek(WorkoutWeek, LibraryStamps):
    """Saved copy of a week."""


class LibraryProgram(WorkoutProgram, LibraryStamps):
    """Saved copy of a program."""


# ---------------------------------------------------------------------------
# Schedules
# ---------------------------------------------------------------------------


class ScheduledWorkout(CamelModel):
    """A workout bound to a calendar date."""
    id: str = Field(default_factory=new_id)
    date: datetime
    workout_id: str
    program_id: str
    completed: bool = False
    progress: Optional[int] = Field(None, ge=0, le=100)
    name: Optional[str] = None


class ProgramSchedule(CamelModel):
    id: str = Field(default_factory=new_id)
    program_id: str
    program_name: str = ""
    start_date: datetime
    end_date: Optional[datetime] = None
    scheduled_workouts: List[ScheduledWorkout] = Field(default_factory=list)
    # Derived from ScheduleCollection.active_schedule_id on every write
    active: bool = False
    created_at: datetime


class ScheduleProgress(CamelModel):
    schedule_id: str
    completed: int = 0
    total: int = 0
    percent: float = 0.0


class ScheduleCollection(CamelModel):
    """All stored schedules plus the id of the single active one."""
    active_schedule_id: Optional[str] = None
    schedules: List[ProgramSchedule] = Field(default_factory=list)

    @property
    def active_schedule(self) -> Optional[ProgramSchedule]:
        if not self.active_schedule_id:
            return None
        return next((s for s in self.schedules if s.id == self.active_schedule_id), None)

    @classmethod
    def from_storage(cls, raw: Any) -> "ScheduleCollection":
        """Build from the persisted JSON array (or ``None`` for an empty store)."""
        if not raw:
            return cls()
        if not isinstance(raw, list):
            logger.warning("Unexpected schedule collection shape: %s", type(raw).__name__)
            return cls()

        schedules = []
        for item in raw:
            try:
                schedules.append(ProgramSchedule.model_validate(item))
            except Exception as e:
                logger.warning("Skipping unreadable schedule record: %s", e)

        active_id = None
        for schedule in schedules:
            if schedule.active:
                active_id = schedule.id
        return cls(active_schedule_id=active_id, schedules=schedules)

    def to_storage(self) -> List[Dict[str, Any]]:
        """Dump to the persisted JSON array, deriving each ``active`` flag."""
        out = []
        for schedule in self.schedules:
            schedule.active = schedule.id == self.active_schedule_id
            out.append(schedule.to_json_dict())
        return out


# ---------------------------------------------------------------------------
# Edit results
# ---------------------------------------------------------------------------


class Notice(BaseModel):
    """User-visible message for a refused edit."""
    title: str
    description: str
    variant: Literal["default", "destructive"] = "destructive"


class EditResult(CamelModel):
    """Outcome of a structural edit.

    ``program`` is the edited copy, or the unchanged input when ``notice``
    is set.
    """
    program: WorkoutProgram
    active_session_id: Optional[str] = None
    created_id: Optional[str] = None
    notice: Optional[Notice] = None

    @property
    def applied(self) -> bool:
        return self.notice is None


def invalid_update(
    program: WorkoutProgram,
    what: str,
    error: ValidationError,
    active_session_id: Optional[str] = None,
) -> EditResult:
    """Refusal for an edit whose values do not validate. ``program`` is returned unchanged."""
    fields = ", ".join(".".join(str(part) for part in e["loc"]) for e in error.errors()) or what.lower()
    logger.warning("Rejected %s update in program %s: %s", what.lower(), program.id, error)
    return EditResult(
        program=program,
        active_session_id=active_session_id,
        notice=Notice(title=f"Invalid {what} Update", description=f"Invalid value for {fields}."),
    )
