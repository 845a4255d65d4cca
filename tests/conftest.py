"""
Test fixtures for workout-planner-api.

Provides an in-memory store, sample programs and a FastAPI TestClient
whose storage dependency points at that store, so tests run offline.
"""

import sys
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import workout_planner_api...`
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from workout_planner_api.main import app
from workout_planner_api.models import (
    Circuit,
    Exercise,
    Set,
    WorkoutProgram,
    WorkoutSession,
    WorkoutWeek,
)
from workout_planner_api.services.storage import InMemoryStore, get_store


# ---------------------------------------------------------------------------
# Storage and API client
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def client(store) -> TestClient:
    """Per-test FastAPI TestClient backed by the ``store`` fixture."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


def make_session(session_id: str, day: int, week_id=None, name=None) -> WorkoutSession:
    return WorkoutSession(
        id=session_id,
        name=name or f"Day {day}",
        day=day,
        week_id=week_id,
        exercises=[
            Exercise(id=f"{session_id}-ex1", name="Squat", sets=[Set(id=f"{session_id}-s1", reps="5")]),
        ],
    )


@pytest.fixture
def nested_program() -> WorkoutProgram:
    """Two weeks: week 1 has two sessions, week 2 has one."""
    return WorkoutProgram(
        id="prog-1",
        name="Strength Block",
        weeks=[
            WorkoutWeek(
                id="week-1",
                name="Week 1",
                order=1,
                sessions=[make_session("sess-1", 1, "week-1"), make_session("sess-2", 2, "week-1")],
            ),
            WorkoutWeek(
                id="week-2",
                name="Week 2",
                order=2,
                sessions=[make_session("sess-3", 1, "week-2")],
            ),
        ],
    )


@pytest.fixture
def flat_program() -> WorkoutProgram:
    return WorkoutProgram(
        id="prog-flat",
        name="Legacy Program",
        sessions=[make_session("flat-1", 1), make_session("flat-2", 2)],
    )


@pytest.fixture
def circuit_program() -> WorkoutProgram:
    """One session: a plain exercise, then a circuit header with two members, then a plain exercise."""
    session = WorkoutSession(
        id="sess-c",
        name="Conditioning",
        day=1,
        week_id="week-c",
        exercises=[
            Exercise(id="warmup", name="Row", sets=[Set(id="warmup-s1")]),
            Exercise(id="header", name="Superset", is_circuit=True, circuit_id="circ-1"),
            Exercise(id="m1", name="Push-up", sets=[Set(id="m1-s1")], is_in_circuit=True, circuit_id="circ-1", circuit_order=1),
            Exercise(id="m2", name="Pull-up", sets=[Set(id="m2-s1")], is_in_circuit=True, circuit_id="circ-1", circuit_order=2),
            Exercise(id="finisher", name="Plank", sets=[Set(id="finisher-s1"), Set(id="finisher-s2")]),
        ],
        circuits=[Circuit(id="circ-1", name="Superset", exercises=["m1", "m2"], rounds=3)],
    )
    week = WorkoutWeek(id="week-c", name="Week 1", order=1, sessions=[session])
    return WorkoutProgram(id="prog-c", name="Circuits", weeks=[week])


@pytest.fixture
def reference_program_dict() -> Dict[str, Any]:
    """Program in the id-reference shape: weeks list workout ids into ``workouts``."""
    return {
        "id": "prog-ref",
        "name": "Referenced",
        "workouts": [
            {"id": "w-a", "name": "Push", "day": 1, "exercises": []},
            {"id": "w-b", "name": "Pull", "day": 3, "exercises": []},
            {"id": "w-c", "name": "Legs", "day": 2, "exercises": []},
        ],
        "weeks": [
            {"id": "wk-1", "name": "Week 1", "order": 1, "workouts": ["w-a", "w-b"]},
            {"id": "wk-2", "name": "Week 2", "order": 2, "workouts": ["w-c", "missing"]},
        ],
    }
