"""Integration tests for athlete and goal endpoints."""
from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient

from conftest import TODAY


def _goal_payload(**overrides):
    payload = {
        "race_distance": "10k",
        "race_date": (TODAY + timedelta(weeks=10)).isoformat(),
        "experience_level": "intermediate",
        "current_frequency": 3,
        "longest_recent_run": 45,
        "available_days": ["Tuesday", "thursday", "saturday", "sunday"],
        "max_weekday_time": 60,
        "max_weekend_time": 90,
    }
    payload.update(overrides)
    return payload


def test_create_and_fetch_athlete(test_client: TestClient):
    response = test_client.post("/api/athletes", json={"name": "Ada", "email": "ada@example.com"})
    assert response.status_code == 201
    athlete_id = response.json()["id"]

    response = test_client.get(f"/api/athletes/{athlete_id}")
    assert response.status_code == 200
    assert response.json()["email"] == "ada@example.com"


def test_duplicate_email_is_rejected(test_client: TestClient, athlete):
    response = test_client.post("/api/athletes", json={"name": "Copy", "email": athlete.email})
    assert response.status_code == 400


def test_unknown_athlete_returns_404(test_client: TestClient):
    response = test_client.post("/api/athletes/999/goals", json=_goal_payload())
    assert response.status_code == 404


def test_create_goal_generates_plan(test_client: TestClient, athlete):
    response = test_client.post(f"/api/athletes/{athlete.id}/goals", json=_goal_payload())

    assert response.status_code == 201
    data = response.json()
    assert data["plan_id"] is not None
    assert data["goal"]["is_active"] is True
    assert data["goal"]["available_days"] == ["tuesday", "thursday", "saturday", "sunday"]


def test_create_goal_applies_default_fitness_values(test_client: TestClient, athlete):
    payload = _goal_payload()
    for field in ("current_frequency", "longest_recent_run", "max_weekday_time", "max_weekend_time"):
        payload.pop(field)

    response = test_client.post(f"/api/athletes/{athlete.id}/goals", json=payload)

    assert response.status_code == 201
    goal = response.json()["goal"]
    assert goal["current_frequency"] == 3
    assert goal["longest_recent_run"] == 30
    assert goal["max_weekday_time"] == 60
    assert goal["max_weekend_time"] == 90


def test_race_date_must_be_in_the_future(test_client: TestClient, athlete):
    response = test_client.post(
        f"/api/athletes/{athlete.id}/goals", json=_goal_payload(race_date=TODAY.isoformat())
    )
    assert response.status_code == 400


def test_goal_needs_two_known_days(test_client: TestClient, athlete):
    one_day = test_client.post(f"/api/athletes/{athlete.id}/goals", json=_goal_payload(available_days=["monday"]))
    assert one_day.status_code == 422

    bad_name = test_client.post(
        f"/api/athletes/{athlete.id}/goals", json=_goal_payload(available_days=["monday", "funday"])
    )
    assert bad_name.status_code == 422

    bad_distance = test_client.post(
        f"/api/athletes/{athlete.id}/goals", json=_goal_payload(race_distance="ultra")
    )
    assert bad_distance.status_code == 422


def test_new_goal_retires_the_previous_one(test_client: TestClient, athlete):
    first = test_client.post(f"/api/athletes/{athlete.id}/goals", json=_goal_payload()).json()
    second = test_client.post(
        f"/api/athletes/{athlete.id}/goals", json=_goal_payload(race_distance="half")
    ).json()

    response = test_client.get(f"/api/athletes/{athlete.id}/goals/active")
    assert response.status_code == 200
    data = response.json()
    assert data["goal"]["id"] == second["goal"]["id"]
    assert data["goal"]["id"] != first["goal"]["id"]
    assert data["plan"]["id"] == second["plan_id"]


def test_active_goal_is_empty_without_goals(test_client: TestClient, athlete):
    response = test_client.get(f"/api/athletes/{athlete.id}/goals/active")
    assert response.status_code == 200
    assert response.json()["goal"] is None


def test_update_goal_regenerates_plan(test_client: TestClient, athlete):
    created = test_client.post(f"/api/athletes/{athlete.id}/goals", json=_goal_payload()).json()
    goal_id = created["goal"]["id"]

    response = test_client.put(
        f"/api/athletes/{athlete.id}/goals/{goal_id}",
        json={"available_days": ["monday", "wednesday", "saturday"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["plan_id"] is not None
    assert data["goal"]["available_days"] == ["monday", "wednesday", "saturday"]

    plan = test_client.get(f"/api/athletes/{athlete.id}/workouts/plan").json()
    week_days = {w["date"] for w in plan["weeks"][0]["workouts"]}
    assert week_days == {
        TODAY.isoformat(),
        (TODAY + timedelta(days=2)).isoformat(),
        (TODAY + timedelta(days=5)).isoformat(),
    }


def test_update_goal_without_changes_is_rejected(test_client: TestClient, athlete):
    created = test_client.post(f"/api/athletes/{athlete.id}/goals", json=_goal_payload()).json()

    response = test_client.put(f"/api/athletes/{athlete.id}/goals/{created['goal']['id']}", json={})
    assert response.status_code == 400


def test_update_unknown_goal_returns_404(test_client: TestClient, athlete):
    response = test_client.put(f"/api/athletes/{athlete.id}/goals/999", json={"max_weekday_time": 45})
    assert response.status_code == 404


def test_delete_goal_removes_plan(test_client: TestClient, athlete):
    created = test_client.post(f"/api/athletes/{athlete.id}/goals", json=_goal_payload()).json()

    response = test_client.delete(f"/api/athletes/{athlete.id}/goals/{created['goal']['id']}")
    assert response.status_code == 200

    assert test_client.get(f"/api/athletes/{athlete.id}/goals/active").json()["goal"] is None
    plan = test_client.get(f"/api/athletes/{athlete.id}/workouts/plan").json()
    assert plan["weeks"] == []
