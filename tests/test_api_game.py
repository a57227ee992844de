"""Tests for the FastAPI game endpoints."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from storypath import EngineSettings, NarrativeEngine
from storypath.api import create_app


@pytest.fixture()
def client(engine: NarrativeEngine) -> TestClient:
    return TestClient(create_app(engine))


def _start(client: TestClient) -> dict[str, Any]:
    response = client.post("/api/game")
    assert response.status_code == 200
    return response.json()


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_start_returns_initial_game_state(client: TestClient) -> None:
    payload = _start(client)

    assert payload == {
        "locationId": "cellar",
        "locationName": "The Cellar",
        "imageUrl": "images/cellar.png",
        "sceneId": "start",
        "narrative": "A damp cellar. A door stands closed.",
        "actions": ["Open the door", "Climb to the attic", "Take the rope"],
        "inventory": [],
        "flags": {},
    }


def test_action_advances_state(client: TestClient) -> None:
    state = _start(client)

    response = client.post(
        "/api/game/action", json={"state": state, "action": "Open the door"}
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["sceneId"] == "hallway"
    assert payload["flags"] == {"doorOpened": True}
    assert payload["actions"] == ["Go back", "Walk the hallway"]


def test_item_use_consumes_item(client: TestClient) -> None:
    state = _start(client)
    state["inventory"] = ["key", "torch"]

    response = client.post("/api/game/item", json={"state": state, "item": "key"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["sceneId"] == "vault"
    assert payload["inventory"] == ["torch"]


def test_invalid_action_returns_conflict(client: TestClient) -> None:
    state = _start(client)

    response = client.post(
        "/api/game/action", json={"state": state, "action": "Walk the hallway"}
    )

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["error"] == "InvalidAction"
    assert detail["display"] == "That choice is no longer available."


def test_item_not_held_returns_conflict(client: TestClient) -> None:
    state = _start(client)

    response = client.post("/api/game/item", json={"state": state, "item": "rock"})

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "ItemNotHeld"


def test_unknown_location_returns_server_error(client: TestClient) -> None:
    state = _start(client)

    response = client.post(
        "/api/game/action", json={"state": state, "action": "Take the rope"}
    )

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "UnknownLocation"


def test_forged_state_is_reported_as_corrupt(client: TestClient) -> None:
    state = _start(client)
    state["sceneId"] = "ghost"

    response = client.post(
        "/api/game/action", json={"state": state, "action": "Open the door"}
    )

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "CorruptState"


def test_malformed_body_is_rejected(client: TestClient) -> None:
    response = client.post("/api/game/action", json={"action": "Open the door"})

    assert response.status_code == 422


def test_blank_flag_name_is_rejected(client: TestClient) -> None:
    state = _start(client)
    state["flags"] = {" ": True}

    response = client.post(
        "/api/game/action", json={"state": state, "action": "Open the door"}
    )

    assert response.status_code == 422


def test_app_loads_content_from_settings(
    tmp_path: Path, story_definitions: dict[str, Any]
) -> None:
    content_path = tmp_path / "story.json"
    content_path.write_text(json.dumps(story_definitions), encoding="utf-8")

    client = TestClient(create_app(settings=EngineSettings(content_path=content_path)))

    assert _start(client)["locationId"] == "cellar"
