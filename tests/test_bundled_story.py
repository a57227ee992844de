"""Play through the bundled Ashgrove Manor story."""

from __future__ import annotations

import pytest

from storypath import (
    EngineErrorKind,
    GameSession,
    NarrativeEngine,
    load_default_registry,
)


@pytest.fixture()
def session() -> GameSession:
    session = GameSession(NarrativeEngine(load_default_registry()))
    session.start()
    return session


def _act(session: GameSession, *commands: str) -> None:
    for command in commands:
        outcome = session.perform_action(command)
        assert outcome.ok, f"{command}: {outcome.error}"


def test_story_opens_in_the_foyer(session: GameSession) -> None:
    state = session.state

    assert state.location_name == "Ashgrove Manor"
    assert state.image_url == "images/manor.png"
    assert state.actions == ("Open the door", "Step outside")


def test_study_is_searched_only_once(session: GameSession) -> None:
    _act(session, "Open the door", "Enter the study", "Return to the hallway")

    state = session.state
    assert state.inventory == ("brass key",)
    assert "Enter the study" not in state.actions
    assert "Revisit the study" in state.actions

    _act(session, "Revisit the study", "Return to the hallway")
    assert session.state.inventory == ("brass key",)


def test_full_walkthrough_reads_the_letter(session: GameSession) -> None:
    _act(session, "Open the door", "Enter the study", "Return to the hallway")

    assert session.use_item("brass key").ok
    assert session.state.scene_id == "trapdoor"
    assert session.state.inventory == ()

    _act(session, "Descend to the vault")
    dark = session.use_item("lantern")
    assert dark.error is not None
    assert dark.error.kind is EngineErrorKind.ITEM_NOT_HELD

    _act(
        session,
        "Climb back up",
        "Return to the foyer",
        "Step outside",
        "Take the lantern",
        "Go back inside",
        "Open the door",
    )
    assert session.state.actions == (
        "Revisit the study",
        "Descend to the vault",
        "Return to the foyer",
    )

    _act(session, "Descend to the vault")
    lit = session.use_item("lantern")

    assert lit.ok
    assert session.state.scene_id == "vault_lit"
    assert session.state.inventory == ("lantern",)
    assert session.state.is_flag_set("letterRead")


def test_lantern_can_only_be_taken_once(session: GameSession) -> None:
    _act(session, "Step outside", "Take the lantern", "Go back inside", "Step outside")

    assert session.state.actions == ("Go back inside",)
    assert session.state.inventory == ("lantern",)
