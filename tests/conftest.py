"""Test configuration for the storypath project."""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import copy
from typing import Any

import pytest

from storypath import ContentRegistry, NarrativeEngine, load_registry_from_mapping

_CELLAR_STORY: dict[str, Any] = {
    "entry": {"locationId": "cellar", "sceneId": "start"},
    "locations": [
        {
            "id": "cellar",
            "name": "The Cellar",
            "image": "images/cellar.png",
            "scenes": {
                "start": {
                    "narrative": "A damp cellar. A door stands closed.",
                    "actions": [
                        {"text": "Open the door", "transition": {"sceneId": "hallway"}},
                        {
                            "text": "Walk the hallway",
                            "transition": {"sceneId": "hallway"},
                            "showIf": {"allSet": ["doorOpened"]},
                        },
                        {
                            "text": "Climb to the attic",
                            "transition": {"locationId": "attic", "sceneId": "landing"},
                        },
                        {
                            "text": "Take the rope",
                            "transition": {"locationId": "nowhere", "sceneId": "void"},
                        },
                    ],
                    "itemUse": {
                        "key": {"transition": {"sceneId": "vault"}, "consumed": True},
                        "torch": {
                            "transition": {"sceneId": "lit"},
                            "consumed": False,
                        },
                        "map": {
                            "transition": {"sceneId": "missing"},
                            "consumed": True,
                        },
                    },
                },
                "hallway": {
                    "narrative": "A narrow hallway lit by a single bulb.",
                    "actions": [
                        {"text": "Go back", "transition": {"sceneId": "start"}},
                        {
                            "text": "Walk the hallway",
                            "transition": {"sceneId": "hallway"},
                            "showIf": {"allSet": ["doorOpened"]},
                        },
                        {
                            "text": "Sneak past",
                            "transition": {"sceneId": "start"},
                            "showIf": {"noneSet": ["doorOpened"]},
                        },
                    ],
                    "onEnter": {"setsFlag": "doorOpened"},
                },
                "vault": {
                    "narrative": "The vault creaks open.",
                    "actions": [
                        {"text": "Leave", "transition": {"sceneId": "start"}},
                    ],
                    "onEnter": {"setsFlag": "vaultOpened"},
                },
                "lit": {
                    "narrative": "Torchlight reveals scratches on the wall.",
                    "actions": [
                        {"text": "Leave", "transition": {"sceneId": "start"}},
                    ],
                    "onEnter": {"setsFlag": "wallRead"},
                },
            },
        },
        {
            "id": "attic",
            "name": "The Attic",
            "image": "images/attic.png",
            "scenes": {
                "landing": {
                    "narrative": "Cobwebs drape the attic landing.",
                    "actions": [
                        {
                            "text": "Go down",
                            "transition": {"locationId": "cellar", "sceneId": "start"},
                        },
                    ],
                    "onEnter": {"addsItem": "torch", "setsFlag": "atticVisited"},
                }
            },
        },
    ],
}


@pytest.fixture()
def story_definitions() -> dict[str, Any]:
    """Return a fresh copy of the test story's raw definitions."""

    return copy.deepcopy(_CELLAR_STORY)


@pytest.fixture()
def registry(story_definitions: dict[str, Any]) -> ContentRegistry:
    return load_registry_from_mapping(story_definitions)


@pytest.fixture()
def engine(registry: ContentRegistry) -> NarrativeEngine:
    return NarrativeEngine(registry)

