"""Tests for the program editing HTTP routes."""
import pytest


@pytest.fixture
def program_json(nested_program):
    return nested_program.to_json_dict()


def test_new_program(client):
    resp = client.post("/programs/new", params={"name": "Base"})
    assert resp.status_code == 200
    program = resp.json()
    assert program["name"] == "Base"
    assert len(program["weeks"]) == 1
    assert len(program["weeks"][0]["sessions"]) == 1


def test_sample_program(client):
    program = client.post("/programs/sample").json()
    assert program["name"] == "Sample Training Program"


def test_add_session(client, program_json):
    resp = client.post("/programs/sessions/add", json={"program": program_json, "weekId": "week-1", "name": "Extra"})
    result = resp.json()
    sessions = result["program"]["weeks"][0]["sessions"]
    assert sessions[-1]["name"] == "Extra"
    assert sessions[-1]["day"] == 3
    assert result["activeSessionId"] == sessions[-1]["id"]
    assert result["notice"] is None


def test_delete_last_session_returns_notice(client, program_json):
    resp = client.post("/programs/sessions/delete", json={"program": program_json, "sessionId": "sess-3"})
    assert resp.status_code == 200
    result = resp.json()
    assert result["notice"]["title"] == "Cannot Delete Session"
    assert result["program"] == program_json


def test_delete_session_renumbers(client, program_json):
    result = client.post(
        "/programs/sessions/delete",
        json={"program": program_json, "sessionId": "sess-1", "activeSessionId": "sess-1"},
    ).json()
    sessions = result["program"]["weeks"][0]["sessions"]
    assert [(s["id"], s["day"]) for s in sessions] == [("sess-2", 1)]
    assert result["activeSessionId"] == "sess-2"


def test_update_and_clone_session(client, program_json):
    updated = client.post(
        "/programs/sessions/update",
        json={"program": program_json, "sessionId": "sess-2", "updates": {"name": "Pull"}},
    ).json()["program"]
    assert updated["weeks"][0]["sessions"][1]["name"] == "Pull"

    cloned = client.post(
        "/programs/sessions/clone",
        json={"program": updated, "sessionId": "sess-2", "weekId": "week-2"},
    ).json()
    week2 = cloned["program"]["weeks"][1]["sessions"]
    assert week2[-1]["name"] == "Pull"
    assert week2[-1]["weekId"] == "week-2"


def test_circuit_flow(client, program_json):
    added = client.post(
        "/programs/circuits/add", json={"program": program_json, "sessionId": "sess-1", "name": "AMRAP"}
    ).json()
    circuit_id = added["createdId"]

    with_member = client.post(
        "/programs/circuits/exercises",
        json={
            "program": added["program"],
            "sessionId": "sess-1",
            "circuitId": circuit_id,
            "exercise": {"name": "Burpee"},
        },
    ).json()
    session = with_member["program"]["weeks"][0]["sessions"][0]
    assert [e["name"] for e in session["exercises"]] == ["Squat", "AMRAP", "Burpee"]
    assert session["exercises"][2]["isInCircuit"] is True
    assert session["circuits"][0]["exercises"] == [with_member["createdId"]]

    renamed = client.post(
        "/programs/circuits/update",
        json={
            "program": with_member["program"],
            "sessionId": "sess-1",
            "circuitId": circuit_id,
            "updates": {"name": "Finisher"},
        },
    ).json()
    session = renamed["program"]["weeks"][0]["sessions"][0]
    assert session["exercises"][1]["name"] == "Finisher"

    deleted = client.post(
        "/programs/circuits/delete",
        json={"program": renamed["program"], "sessionId": "sess-1", "circuitId": circuit_id},
    ).json()
    session = deleted["program"]["weeks"][0]["sessions"][0]
    assert [e["name"] for e in session["exercises"]] == ["Squat"]
    assert session["circuits"] == []


def test_exercise_and_set_routes(client, program_json):
    added = client.post(
        "/programs/exercises/add",
        json={"program": program_json, "sessionId": "sess-1", "exercise": {"name": "Lunge"}},
    ).json()
    exercise_id = added["createdId"]

    with_set = client.post(
        "/programs/sets/add",
        json={"program": added["program"], "exerciseId": exercise_id, "updates": {"reps": "12"}},
    ).json()
    set_id = with_set["createdId"]

    updated = client.post(
        "/programs/sets/update",
        json={"program": with_set["program"], "setId": set_id, "updates": {"weight": "40"}},
    ).json()
    exercise = updated["program"]["weeks"][0]["sessions"][0]["exercises"][-1]
    assert [(s["reps"], s["weight"]) for s in exercise["sets"]] == [("", ""), ("12", "40")]

    refused = client.post(
        "/programs/sets/delete", json={"program": program_json, "setId": "sess-1-s1"}
    ).json()
    assert refused["notice"]["title"] == "Cannot Delete Set"

    duplicated = client.post(
        "/programs/exercises/duplicate", json={"program": updated["program"], "exerciseId": exercise_id}
    ).json()
    assert len(duplicated["program"]["weeks"][0]["sessions"][0]["exercises"]) == 3

    removed = client.post(
        "/programs/exercises/delete", json={"program": duplicated["program"], "exerciseId": exercise_id}
    ).json()
    names = [e["name"] for e in removed["program"]["weeks"][0]["sessions"][0]["exercises"]]
    assert names == ["Squat", "Lunge"]


def test_week_routes(client, program_json):
    added = client.post("/programs/weeks/add", json={"program": program_json, "name": "Deload"}).json()
    assert [w["order"] for w in added["program"]["weeks"]] == [1, 2, 3]

    moved = client.post(
        "/programs/weeks/move", json={"program": added["program"], "weekId": added["createdId"], "newIndex": 0}
    ).json()
    assert moved["program"]["weeks"][0]["name"] == "Deload"
    assert moved["program"]["weeks"][0]["order"] == 1

    cloned = client.post("/programs/weeks/clone", json={"program": moved["program"], "weekId": "week-1"}).json()
    assert cloned["program"]["weeks"][-1]["name"] == "Week 1 (Copy)"

    deleted = client.post("/programs/weeks/delete", json={"program": cloned["program"], "weekId": "week-2"}).json()
    assert [w["order"] for w in deleted["program"]["weeks"]] == [1, 2, 3]


def test_refused_edit_is_not_an_error(client, program_json):
    resp = client.post("/programs/weeks/update", json={"program": program_json, "weekId": "nope", "updates": {}})
    assert resp.status_code == 200
    assert resp.json()["notice"]["title"] == "Week Not Found"


def test_invalid_update_returns_notice(client, program_json):
    resp = client.post(
        "/programs/sets/update",
        json={"program": program_json, "setId": "sess-1-s1", "updates": {"intensityType": "bogus"}},
    )
    assert resp.status_code == 200
    result = resp.json()
    assert result["notice"]["title"] == "Invalid Set Update"
    assert result["program"] == program_json
