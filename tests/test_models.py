"""Unit tests for data models."""
from workout_planner_api.models import (
    Exercise,
    ProgramSchedule,
    ScheduleCollection,
    Set,
    WorkoutProgram,
    WorkoutSession,
    WorkoutWeek,
    merge_model,
)


class TestRecordModels:
    """Test cases for program record models."""

    def test_set_values_are_text(self):
        s = Set(reps=10, weight=None, rest="90s")
        assert s.reps == "10"
        assert s.weight == ""
        assert s.intensity == ""
        assert s.rest == "90s"

    def test_set_gets_fallback_id(self):
        s = Set.model_validate({"id": None, "reps": "5"})
        assert s.id

    def test_set_legacy_rpe_becomes_intensity(self):
        s = Set.model_validate({"reps": "8", "rpe": 7})
        assert s.intensity == "7"

    def test_exercise_defaults(self):
        exercise = Exercise.model_validate({"name": "Deadlift", "notes": None, "isCircuit": None})
        assert exercise.notes == ""
        assert exercise.is_circuit is False
        assert exercise.is_in_circuit is False
        assert exercise.circuit_id is None

    def test_json_dump_is_camel_case(self):
        exercise = Exercise(name="Row", is_in_circuit=True, circuit_id="c1", circuit_order=1)
        data = exercise.to_json_dict()
        assert data["isInCircuit"] is True
        assert data["circuitId"] == "c1"
        assert data["circuitOrder"] == 1
        assert "is_in_circuit" not in data

    def test_accepts_camel_case_input(self):
        session = WorkoutSession.model_validate({"id": "s1", "name": "Push", "day": 2, "weekId": "w1"})
        assert session.week_id == "w1"
        assert session.day == 2

    def test_null_names_fall_back_to_defaults(self):
        assert Exercise.model_validate({"name": None}).name == "New Exercise"
        assert WorkoutSession.model_validate({"name": None}).name == "Day 1"
        assert WorkoutWeek.model_validate({"name": None}).name == "Week 1"
        assert WorkoutProgram.model_validate({"name": None}).name == "My Workout Program"

    def test_unknown_fields_ignored(self):
        session = WorkoutSession.model_validate({"id": "s1", "isExpanded": True})
        assert not hasattr(session, "is_expanded")


class TestProgram:
    def test_program_without_weeks_is_flat(self, flat_program):
        assert flat_program.is_flat
        assert [s.id for s in flat_program.all_sessions()] == ["flat-1", "flat-2"]

    def test_nested_program(self, nested_program):
        assert not nested_program.is_flat
        assert [s.id for s in nested_program.all_sessions()] == ["sess-1", "sess-2", "sess-3"]
        assert nested_program.find_week("week-2").name == "Week 2"
        assert nested_program.find_week("nope") is None

    def test_week_workout_ids(self, nested_program):
        assert nested_program.weeks[0].workout_ids == ["sess-1", "sess-2"]

    def test_standalone_week_keeps_references(self):
        week = WorkoutWeek.model_validate({"id": "wk", "order": 1, "workouts": ["w1", "w2"]})
        assert week.workout_ids == ["w1", "w2"]
        data = week.to_json_dict()
        assert data["workouts"] == ["w1", "w2"]
        assert WorkoutWeek.model_validate(data).workouts == ["w1", "w2"]

    def test_reference_shape_is_embedded_on_load(self, reference_program_dict):
        program = WorkoutProgram.model_validate(reference_program_dict)
        assert [s.id for s in program.weeks[0].sessions] == ["w-a", "w-b"]
        # The dangling "missing" id is dropped
        assert [s.id for s in program.weeks[1].sessions] == ["w-c"]
        assert program.weeks[1].sessions[0].week_id == "wk-2"

    def test_circuit_block_follows_membership(self, circuit_program):
        session = circuit_program.weeks[0].sessions[0]
        assert [e.id for e in session.circuit_block("circ-1")] == ["m1", "m2"]
        assert session.circuit_header_index("circ-1") == 1
        assert session.circuit_block("unknown") == []


class TestMergeModel:
    def test_merges_camel_case_keys(self):
        exercise = Exercise(id="e1", name="Squat")
        merged = merge_model(exercise, {"name": "Front Squat", "circuitOrder": 3})
        assert merged.name == "Front Squat"
        assert merged.circuit_order == 3
        assert exercise.name == "Squat"

    def test_protected_keys_ignored(self):
        exercise = Exercise(id="e1", name="Squat")
        merged = merge_model(exercise, {"id": "other", "circuitId": "c9"}, protected=("id", "circuit_id"))
        assert merged.id == "e1"
        assert merged.circuit_id is None


class TestScheduleCollection:
    def _schedule(self, schedule_id, active):
        return {
            "id": schedule_id,
            "programId": "p1",
            "programName": "P",
            "startDate": "2024-01-01T00:00:00",
            "endDate": "2024-01-01T00:00:00",
            "scheduledWorkouts": [],
            "active": active,
            "createdAt": "2024-01-01T00:00:00Z",
        }

    def test_empty_storage(self):
        collection = ScheduleCollection.from_storage(None)
        assert collection.schedules == []
        assert collection.active_schedule is None

    def test_last_active_entry_wins(self):
        raw = [self._schedule("a", True), self._schedule("b", True), self._schedule("c", False)]
        collection = ScheduleCollection.from_storage(raw)
        assert collection.active_schedule_id == "b"
        assert collection.active_schedule.id == "b"

    def test_to_storage_derives_active_flags(self):
        raw = [self._schedule("a", True), self._schedule("b", True)]
        collection = ScheduleCollection.from_storage(raw)
        collection.active_schedule_id = "a"
        stored = collection.to_storage()
        assert [s["active"] for s in stored] == [True, False]

    def test_unreadable_records_skipped(self):
        collection = ScheduleCollection.from_storage([{"id": "broken"}, self._schedule("ok", False)])
        assert [s.id for s in collection.schedules] == ["ok"]

    def test_non_list_storage_is_empty(self):
        assert ScheduleCollection.from_storage({"oops": 1}).schedules == []

    def test_schedule_round_trips_through_storage_shape(self):
        schedule = ProgramSchedule.model_validate(self._schedule("a", False))
        assert schedule.to_json_dict()["programId"] == "p1"
