"""Authored locations, scenes and the read-only registry that serves them."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShowIf:
    """Visibility predicate attached to an action."""

    all_set: tuple[str, ...] = ()
    none_set: tuple[str, ...] = ()


@dataclass(frozen=True)
class Transition:
    """Pointer to the scene reached by an action or item use.

    A ``location_id`` of ``None`` keeps the player in their current location.
    """

    scene_id: str
    location_id: str | None = None


@dataclass(frozen=True)
class Action:
    text: str
    transition: Transition
    show_if: ShowIf | None = None


@dataclass(frozen=True)
class ItemUse:
    transition: Transition
    consumed: bool = False


@dataclass(frozen=True)
class OnEnter:
    """Effects applied when a scene is entered."""

    adds_item: str | None = None
    sets_flag: str | None = None


@dataclass(frozen=True)
class Scene:
    narrative: str
    actions: tuple[Action, ...] = ()
    item_use: Mapping[str, ItemUse] = field(
        default_factory=lambda: MappingProxyType({})
    )
    on_enter: OnEnter | None = None


@dataclass(frozen=True)
class Location:
    id: str
    name: str
    image: str
    scenes: Mapping[str, Scene] = field(default_factory=lambda: MappingProxyType({}))


class ContentRegistry:
    """Immutable catalogue of locations keyed by identifier."""

    def __init__(self, locations: Mapping[str, Location], *, entry: Transition):
        if entry.location_id is None:
            raise ValueError("The entry point must name a location.")

        self._locations: Mapping[str, Location] = MappingProxyType(dict(locations))
        self._entry = entry

        if self.get_scene(entry.location_id, entry.scene_id) is None:
            raise ValueError(
                f"Entry point '{entry.location_id}/{entry.scene_id}' does not exist."
            )

    @property
    def entry(self) -> Transition:
        """Return the fixed starting location and scene."""

        return self._entry

    @property
    def locations(self) -> Mapping[str, Location]:
        return self._locations

    def get_location(self, location_id: str) -> Location | None:
        """Return the location registered under ``location_id`` if any."""

        return self._locations.get(location_id)

    def get_scene(self, location_id: str, scene_id: str) -> Scene | None:
        location = self.get_location(location_id)
        if location is None:
            return None
        return location.scenes.get(scene_id)

    def __len__(self) -> int:
        return len(self._locations)


def _require_string(value: Any, *, error_message: str, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        raise ValueError(error_message)
    if not allow_empty and not value.strip():
        raise ValueError(error_message)
    return value


def _coerce_string_list(value: Any, *, error_message: str) -> tuple[str, ...]:
    """Normalize optional string sequences into tuples.

    Args:
        value: The raw value extracted from a JSON definition.
        error_message: Error to raise when the value is not a list of strings.
    """

    if value is None:
        return ()
    if isinstance(value, list) and all(isinstance(entry, str) for entry in value):
        return tuple(value)
    raise ValueError(error_message)


def _parse_transition(payload: Any, *, context: str) -> Transition:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{context} must define a 'transition' object.")

    scene_id = _require_string(
        payload.get("sceneId"),
        error_message=f"{context} transition requires a non-empty 'sceneId' string.",
    )

    location_id = payload.get("locationId")
    if location_id is not None:
        location_id = _require_string(
            location_id,
            error_message=f"{context} transition must use a non-empty string 'locationId'.",
        )

    return Transition(scene_id=scene_id, location_id=location_id)


def _parse_show_if(payload: Any, *, context: str) -> ShowIf | None:
    if payload is None:
        return None
    if not isinstance(payload, Mapping):
        raise ValueError(f"{context} must define 'showIf' as an object.")

    return ShowIf(
        all_set=_coerce_string_list(
            payload.get("allSet"),
            error_message=f"{context} must define 'showIf.allSet' as a list of strings.",
        ),
        none_set=_coerce_string_list(
            payload.get("noneSet"),
            error_message=f"{context} must define 'showIf.noneSet' as a list of strings.",
        ),
    )


def _parse_on_enter(payload: Any, *, context: str) -> OnEnter | None:
    if payload is None:
        return None
    if not isinstance(payload, Mapping):
        raise ValueError(f"{context} must define 'onEnter' as an object.")

    adds_item = payload.get("addsItem")
    if adds_item is not None:
        adds_item = _require_string(
            adds_item,
            error_message=f"{context} must use a non-empty string 'onEnter.addsItem'.",
        )

    sets_flag = payload.get("setsFlag")
    if sets_flag is not None:
        sets_flag = _require_string(
            sets_flag,
            error_message=f"{context} must use a non-empty string 'onEnter.setsFlag'.",
        )

    if adds_item is None and sets_flag is None:
        return None
    return OnEnter(adds_item=adds_item, sets_flag=sets_flag)


def _parse_scene(location_id: str, scene_id: Any, payload: Any) -> Scene:
    if not isinstance(scene_id, str) or not scene_id.strip():
        raise ValueError(
            f"Scene keys in location '{location_id}' must be non-empty strings."
        )

    context = f"Scene '{scene_id}' in location '{location_id}'"
    if not isinstance(payload, Mapping):
        raise ValueError(f"{context} must map to an object definition.")

    narrative = _require_string(
        payload.get("narrative"),
        error_message=f"{context} is missing a narrative string.",
    )

    raw_actions = payload.get("actions", [])
    if not isinstance(raw_actions, list):
        raise ValueError(f"{context} must define a list of actions.")

    actions: list[Action] = []
    unconditional_texts: set[str] = set()
    for index, action_payload in enumerate(raw_actions):
        action_context = f"Action #{index} in scene '{scene_id}' ({location_id})"
        if not isinstance(action_payload, Mapping):
            raise ValueError(f"{action_context} must be an object definition.")

        text = _require_string(
            action_payload.get("text"),
            error_message=f"{action_context} must provide a non-empty 'text' string.",
        )
        show_if = _parse_show_if(action_payload.get("showIf"), context=action_context)
        if show_if is None:
            if text in unconditional_texts:
                raise ValueError(f"{context} defines duplicate action '{text}'.")
            unconditional_texts.add(text)

        actions.append(
            Action(
                text=text,
                transition=_parse_transition(
                    action_payload.get("transition"), context=action_context
                ),
                show_if=show_if,
            )
        )

    raw_item_use = payload.get("itemUse")
    item_use: dict[str, ItemUse] = {}
    if raw_item_use is not None:
        if not isinstance(raw_item_use, Mapping):
            raise ValueError(f"{context} must define 'itemUse' as an object.")
        for item_id, use_payload in raw_item_use.items():
            use_context = f"Item use '{item_id}' in scene '{scene_id}' ({location_id})"
            if not isinstance(item_id, str) or not item_id.strip():
                raise ValueError(f"{context} item use keys must be non-empty strings.")
            if not isinstance(use_payload, Mapping):
                raise ValueError(f"{use_context} must be an object definition.")

            consumed = use_payload.get("consumed", False)
            if not isinstance(consumed, bool):
                raise ValueError(f"{use_context} must define 'consumed' as a boolean.")

            item_use[item_id] = ItemUse(
                transition=_parse_transition(
                    use_payload.get("transition"), context=use_context
                ),
                consumed=consumed,
            )

    return Scene(
        narrative=narrative,
        actions=tuple(actions),
        item_use=MappingProxyType(item_use),
        on_enter=_parse_on_enter(payload.get("onEnter"), context=context),
    )


def _parse_location(index: int, payload: Any) -> Location:
    if not isinstance(payload, Mapping):
        raise ValueError(f"Location #{index} must be an object definition.")

    location_id = _require_string(
        payload.get("id"),
        error_message=f"Location #{index} must provide a non-empty 'id' string.",
    )
    name = _require_string(
        payload.get("name"),
        error_message=f"Location '{location_id}' must provide a non-empty 'name' string.",
    )
    image = _require_string(
        payload.get("image", ""),
        error_message=f"Location '{location_id}' must use a string 'image'.",
        allow_empty=True,
    )

    raw_scenes = payload.get("scenes")
    if not isinstance(raw_scenes, Mapping) or not raw_scenes:
        raise ValueError(
            f"Location '{location_id}' must define a non-empty mapping of scenes."
        )

    scenes = {
        scene_id: _parse_scene(location_id, scene_id, scene_payload)
        for scene_id, scene_payload in raw_scenes.items()
    }

    return Location(
        id=location_id,
        name=name,
        image=image,
        scenes=MappingProxyType(scenes),
    )


def load_registry_from_mapping(definitions: Mapping[str, Any]) -> ContentRegistry:
    """Convert authored content into a :class:`ContentRegistry`.

    ``definitions`` holds an ``entry`` object (``locationId``/``sceneId``) and a
    ``locations`` list. Transition targets are not resolved here; a dangling
    target is reported by the engine when a player tries to follow it.
    """

    if not isinstance(definitions, Mapping):
        raise ValueError("Content must be an object at the top level.")

    raw_locations = definitions.get("locations")
    if not isinstance(raw_locations, list) or not raw_locations:
        raise ValueError("Content must define a non-empty list of locations.")

    locations: dict[str, Location] = {}
    for index, location_payload in enumerate(raw_locations):
        location = _parse_location(index, location_payload)
        if location.id in locations:
            raise ValueError(f"Duplicate location id '{location.id}'.")
        locations[location.id] = location

    raw_entry = definitions.get("entry")
    if not isinstance(raw_entry, Mapping):
        raise ValueError("Content must define an 'entry' object.")
    entry = _parse_transition(raw_entry, context="Entry point")
    if entry.location_id is None:
        raise ValueError("Entry point must define a 'locationId'.")

    registry = ContentRegistry(locations, entry=entry)
    logger.debug(
        "Loaded %d locations (entry %s/%s)",
        len(registry),
        entry.location_id,
        entry.scene_id,
    )
    return registry


def load_registry_from_file(path: str | Path) -> ContentRegistry:
    """Load authored content from a JSON file on disk."""

    data_path = Path(path)
    with data_path.open("r", encoding="utf-8") as handle:
        raw_data = json.load(handle)

    return load_registry_from_mapping(raw_data)


def load_default_registry(
    package: str = "storypath.data",
    resource_name: str = "locations.json",
) -> ContentRegistry:
    """Read the bundled demo content from package data."""

    data_resource = resources.files(package).joinpath(resource_name)
    with data_resource.open("r", encoding="utf-8") as handle:
        raw_data = json.load(handle)

    return load_registry_from_mapping(raw_data)


__all__ = [
    "Action",
    "ContentRegistry",
    "ItemUse",
    "Location",
    "OnEnter",
    "Scene",
    "ShowIf",
    "Transition",
    "load_default_registry",
    "load_registry_from_file",
    "load_registry_from_mapping",
]
