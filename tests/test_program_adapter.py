"""Tests for program shape adapters and lookups."""
import logging

from workout_planner_api.models import WorkoutProgram
from workout_planner_api.services.program_adapter import (
    embed_workout_references,
    find_session,
    locate_exercise,
    locate_session,
    locate_set,
    nest_flat_program,
    renumber_days,
    to_reference_shape,
)


class TestEmbedWorkoutReferences:
    def test_embedded_data_passes_through(self):
        data = {"id": "p", "weeks": [{"id": "w", "sessions": []}]}
        assert embed_workout_references(data) is data

    def test_dangling_reference_logs_warning(self, reference_program_dict, caplog):
        with caplog.at_level(logging.WARNING):
            converted = embed_workout_references(reference_program_dict)
        assert "Workout with ID missing not found in program prog-ref" in caplog.text
        assert "workouts" not in converted
        assert [s["id"] for s in converted["weeks"][1]["sessions"]] == ["w-c"]

    def test_input_not_modified(self, reference_program_dict):
        embed_workout_references(reference_program_dict)
        assert reference_program_dict["weeks"][0]["workouts"] == ["w-a", "w-b"]

    def test_empty_week_logs_warning(self, caplog):
        data = {"id": "p", "workouts": [], "weeks": [{"id": "w", "name": "Rest Week", "order": 1, "workouts": []}]}
        with caplog.at_level(logging.WARNING):
            converted = embed_workout_references(data)
        assert converted["weeks"][0]["sessions"] == []
        assert "Week Rest Week has no workouts defined" in caplog.text

    def test_orders_kept_as_given(self):
        data = {
            "id": "p",
            "workouts": [{"id": "a", "day": 1}],
            "weeks": [
                {"id": "w0", "order": 0, "workouts": ["a"]},
                {"id": "w1", "order": 1, "workouts": []},
            ],
        }
        converted = embed_workout_references(data)
        assert [w["order"] for w in converted["weeks"]] == [0, 1]


def test_to_reference_shape(nested_program):
    data = to_reference_shape(nested_program)
    assert [w["workouts"] for w in data["weeks"]] == [["sess-1", "sess-2"], ["sess-3"]]
    assert [w["id"] for w in data["workouts"]] == ["sess-1", "sess-2", "sess-3"]
    assert "sessions" not in data["weeks"][0]

    reloaded = WorkoutProgram.model_validate(data)
    assert [s.id for s in reloaded.all_sessions()] == ["sess-1", "sess-2", "sess-3"]


class TestLookups:
    def test_locate_session_nested(self, nested_program):
        week, sessions, index = locate_session(nested_program, "sess-2")
        assert week.id == "week-1"
        assert sessions is nested_program.weeks[0].sessions
        assert index == 1

    def test_locate_session_flat(self, flat_program):
        week, sessions, index = locate_session(flat_program, "flat-2")
        assert week is None
        assert sessions is flat_program.sessions
        assert index == 1

    def test_locate_session_missing(self, nested_program):
        assert locate_session(nested_program, "nope") == (None, None, -1)
        assert find_session(nested_program, "nope") is None

    def test_locate_exercise_and_set(self, nested_program):
        session, index = locate_exercise(nested_program, "sess-3-ex1")
        assert session.id == "sess-3"
        assert index == 0

        exercise, set_index = locate_set(nested_program, "sess-2-s1")
        assert exercise.id == "sess-2-ex1"
        assert set_index == 0

        assert locate_exercise(nested_program, "nope") == (None, -1)
        assert locate_set(nested_program, "nope") == (None, -1)


def test_renumber_days(nested_program):
    sessions = nested_program.weeks[0].sessions
    sessions.reverse()
    renumber_days(sessions)
    assert [(s.id, s.day) for s in sessions] == [("sess-2", 1), ("sess-1", 2)]


def test_nest_flat_program(flat_program):
    nested = nest_flat_program(flat_program)
    assert nested is flat_program
    assert not nested.is_flat
    assert nested.sessions == []
    week = nested.weeks[0]
    assert week.name == "Week 1"
    assert week.order == 1
    assert [s.id for s in week.sessions] == ["flat-1", "flat-2"]
    assert all(s.week_id == week.id for s in week.sessions)
