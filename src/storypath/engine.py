"""Deterministic narrative engine driving player state across authored scenes."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence, Union

from .conditions import is_visible, visible_actions
from .content import ContentRegistry, Location, Scene, Transition
from .errors import EngineError, EngineErrorKind
from .state import PlayerState

logger = logging.getLogger(__name__)

TransitionResult = Union[PlayerState, EngineError]


class NarrativeEngine:
    """Compute successor states by walking a :class:`ContentRegistry`.

    The engine holds no state of its own. Each call takes the caller's
    :class:`PlayerState` and returns either a brand new state or an
    :class:`EngineError`; the input state is never modified and failures are
    returned rather than raised.
    """

    def __init__(self, registry: ContentRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ContentRegistry:
        return self._registry

    def initialize(self) -> PlayerState:
        """Return the state for a new session at the registry's entry point.

        The entry scene's ``onEnter`` effects are not applied: a new session
        always starts with an empty inventory and no flags.
        """

        entry = self._registry.entry
        target = self._resolve_target(entry.location_id or "", entry)
        if isinstance(target, EngineError):
            # The registry refuses to load without a resolvable entry point.
            raise RuntimeError(f"Entry point could not be resolved: {target}")
        location, scene = target
        return self._build_state(
            location, entry.scene_id, scene, inventory=(), flags={}
        )

    def apply_action(self, state: PlayerState, action_text: str) -> TransitionResult:
        """Follow the visible action labelled ``action_text``."""

        scene = self._current_scene(state)
        if isinstance(scene, EngineError):
            return scene

        for action in scene.actions:
            if action.text == action_text and is_visible(action.show_if, state.flags):
                break
        else:
            return EngineError(
                EngineErrorKind.INVALID_ACTION,
                f"'{action_text}' is not an available action here.",
            )

        logger.debug(
            "Action '%s' from %s/%s", action_text, state.location_id, state.scene_id
        )
        return self._enter(
            location_id=state.location_id,
            transition=action.transition,
            inventory=state.inventory,
            flags=state.flags,
        )

    def apply_item_use(self, state: PlayerState, item_id: str) -> TransitionResult:
        """Use one unit of ``item_id`` from the player's inventory."""

        if not state.has_item(item_id):
            return EngineError(
                EngineErrorKind.ITEM_NOT_HELD,
                f"You are not carrying '{item_id}'.",
            )

        scene = self._current_scene(state)
        if isinstance(scene, EngineError):
            return scene

        item_use = scene.item_use.get(item_id)
        if item_use is None:
            return EngineError(
                EngineErrorKind.ITEM_NOT_USABLE,
                f"Using '{item_id}' has no effect here.",
            )

        inventory: Sequence[str] = state.inventory
        if item_use.consumed:
            remaining = list(inventory)
            remaining.remove(item_id)
            inventory = remaining

        logger.debug(
            "Item '%s' used in %s/%s (consumed=%s)",
            item_id,
            state.location_id,
            state.scene_id,
            item_use.consumed,
        )
        return self._enter(
            location_id=state.location_id,
            transition=item_use.transition,
            inventory=inventory,
            flags=state.flags,
        )

    def _current_scene(self, state: PlayerState) -> Scene | EngineError:
        location = self._registry.get_location(state.location_id)
        if location is None:
            return EngineError(
                EngineErrorKind.CORRUPT_STATE,
                f"Current location '{state.location_id}' is not in the catalogue.",
            )

        scene = location.scenes.get(state.scene_id)
        if scene is None:
            return EngineError(
                EngineErrorKind.CORRUPT_STATE,
                f"Current scene '{state.scene_id}' does not exist in location "
                f"'{state.location_id}'.",
            )
        return scene

    def _resolve_target(
        self, location_id: str, transition: Transition
    ) -> tuple[Location, Scene] | EngineError:
        target_location_id = transition.location_id or location_id

        location = self._registry.get_location(target_location_id)
        if location is None:
            return EngineError(
                EngineErrorKind.UNKNOWN_LOCATION,
                f"Location '{target_location_id}' does not exist.",
            )

        scene = location.scenes.get(transition.scene_id)
        if scene is None:
            return EngineError(
                EngineErrorKind.UNKNOWN_SCENE,
                f"Scene '{transition.scene_id}' does not exist in location "
                f"'{target_location_id}'.",
            )
        return location, scene

    def _enter(
        self,
        *,
        location_id: str,
        transition: Transition,
        inventory: Sequence[str],
        flags: Mapping[str, bool],
    ) -> TransitionResult:
        target = self._resolve_target(location_id, transition)
        if isinstance(target, EngineError):
            return target
        location, scene = target

        next_inventory = list(inventory)
        next_flags = dict(flags)
        on_enter = scene.on_enter
        if on_enter is not None:
            # Items first, then flags.
            if on_enter.adds_item is not None:
                next_inventory.append(on_enter.adds_item)
            if on_enter.sets_flag is not None:
                next_flags[on_enter.sets_flag] = True

        return self._build_state(
            location,
            transition.scene_id,
            scene,
            inventory=next_inventory,
            flags=next_flags,
        )

    @staticmethod
    def _build_state(
        location: Location,
        scene_id: str,
        scene: Scene,
        *,
        inventory: Sequence[str],
        flags: Mapping[str, bool],
    ) -> PlayerState:
        return PlayerState(
            location_id=location.id,
            location_name=location.name,
            image_url=location.image,
            scene_id=scene_id,
            narrative=scene.narrative,
            actions=visible_actions(scene, flags),
            inventory=inventory,
            flags=flags,
        )


def initialize(registry: ContentRegistry) -> PlayerState:
    """Return the entry state for ``registry``."""

    return NarrativeEngine(registry).initialize()


def apply_action(
    registry: ContentRegistry, state: PlayerState, action_text: str
) -> TransitionResult:
    """Follow ``action_text`` from ``state`` using the content in ``registry``."""

    return NarrativeEngine(registry).apply_action(state, action_text)


def apply_item_use(
    registry: ContentRegistry, state: PlayerState, item_id: str
) -> TransitionResult:
    """Use ``item_id`` from ``state`` using the content in ``registry``."""

    return NarrativeEngine(registry).apply_item_use(state, item_id)


__all__ = [
    "NarrativeEngine",
    "TransitionResult",
    "apply_action",
    "apply_item_use",
    "initialize",
]
