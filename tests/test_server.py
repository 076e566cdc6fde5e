import pytest
from fastapi.testclient import TestClient

import server.app as server_app
from fleet import BuildingConfig, CarConfig, build_coordinator


@pytest.fixture
def client(monkeypatch):
    config = BuildingConfig(
        name="Test Tower",
        total_floors=10,
        cars=[CarConfig("E1", capacity=2), CarConfig("E2", capacity=2)],
    )
    monkeypatch.setattr(server_app, "manager", server_app.DispatchManager(build_coordinator(config)))
    return TestClient(server_app.app)


def _pickup(client, person_id, origin, destination):
    return client.post(
        "/requests",
        json={"person_id": person_id, "name": person_id, "origin": origin, "destination": destination},
    )


def test_state(client):
    state = client.get("/state").json()
    assert state["building"] == "Test Tower"
    assert state["policy"] == "cost"
    assert [car["car_id"] for car in state["cars"]] == ["E1", "E2"]
    assert state["cars"][0] == {
        "car_id": "E1",
        "current_floor": 0,
        "mode": "IDLE",
        "direction": "NONE",
        "onboard": 0,
        "capacity": 2,
        "pending": 0,
    }


def test_request_then_dispatch(client):
    response = _pickup(client, "P1", 0, 6)
    assert response.status_code == 200
    body = response.json()
    assert body["request"]["assigned_car"] == "E1"
    assert body["request"]["direction"] == "UP"
    assert client.get("/state").json()["cars"][0]["pending"] == 1

    state = client.post("/dispatch").json()
    kinds = [event["kind"] for event in state["events"]]
    assert kinds == ["passenger_picked_up", "car_moved", "passenger_dropped_off"]
    assert state["events"][1]["direction"] == "UP"
    assert state["cars"][0]["current_floor"] == 6


def test_invalid_request_is_400(client):
    assert _pickup(client, "P1", 3, 3).status_code == 400
    assert _pickup(client, "P1", 0, 42).status_code == 400


def test_no_car_available_is_409(client):
    for index in range(4):
        assert _pickup(client, f"P{index}", 0, 5).status_code == 200
    response = _pickup(client, "P9", 0, 5)
    assert response.status_code == 409
    assert "No available elevator" in response.json()["detail"]


def test_maintenance(client):
    response = client.post("/cars/E1/maintenance", json={"maintenance": True, "reason": "inspection"})
    assert response.status_code == 200
    assert response.json()["cars"][0]["mode"] == "MAINTENANCE"
    assert _pickup(client, "P1", 0, 5).json()["request"]["assigned_car"] == "E2"
    assert client.post("/cars/E9/maintenance", json={"maintenance": True}).status_code == 404


def test_policy_switch(client):
    assert client.post("/policy", json={"name": "nearest"}).json()["policy"] == "nearest"
    assert client.post("/policy", json={"name": "bogus"}).status_code == 400


def test_websocket_sends_state_on_connect(client):
    with client.websocket_connect("/ws/events") as websocket:
        assert websocket.receive_json()["building"] == "Test Tower"


def test_policy_switch_with_options(client):
    response = client.post("/policy", json={"name": "cost", "options": {"behind_penalty": 4}})
    assert response.status_code == 200
    assert server_app.manager.coordinator.policy.behind_penalty == 4


def test_policy_switch_with_bad_option_is_400(client):
    response = client.post("/policy", json={"name": "nearest", "options": {"behind_penalty": 4}})
    assert response.status_code == 400
