"""Snapshot of a player's progress through the story."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Sequence


def _validate_label(value: Any, field_name: str, *, allow_empty: bool = False) -> str:
    """Validate string values used for state descriptors."""

    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string, got {type(value)!r}")

    if not allow_empty and not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return value


def _validate_labels(values: Any, field_name: str) -> tuple[str, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise TypeError(f"{field_name} must be a sequence of strings")
    return tuple(_validate_label(value, f"{field_name} entry") for value in values)


@dataclass(frozen=True)
class PlayerState:
    """Represents everything the front end needs to render a turn.

    ``location_name``, ``image_url`` and ``narrative`` are copied from the
    content catalogue when the state is produced. ``actions`` lists the labels
    visible at that moment; it is never recomputed afterwards.

    Instances are immutable. The engine returns a new state for every
    successful transition and never touches the one it was given. They are
    not hashable because ``flags`` is a read-only mapping view.
    """

    __hash__ = None  # type: ignore[assignment]

    location_id: str
    location_name: str
    image_url: str
    scene_id: str
    narrative: str
    actions: Sequence[str] = ()
    inventory: Sequence[str] = ()
    flags: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        _validate_label(self.location_id, "location_id")
        _validate_label(self.location_name, "location_name")
        _validate_label(self.image_url, "image_url", allow_empty=True)
        _validate_label(self.scene_id, "scene_id")
        _validate_label(self.narrative, "narrative")

        object.__setattr__(self, "actions", _validate_labels(self.actions, "actions"))
        object.__setattr__(
            self, "inventory", _validate_labels(self.inventory, "inventory")
        )

        if not isinstance(self.flags, Mapping):
            raise TypeError("flags must be a mapping of flag names to booleans")
        flags: Dict[str, bool] = {}
        for name, value in self.flags.items():
            _validate_label(name, "flag name")
            if not isinstance(value, bool):
                raise TypeError(f"flag '{name}' must be a boolean, got {type(value)!r}")
            flags[name] = value
        object.__setattr__(self, "flags", MappingProxyType(flags))

    def has_item(self, item_id: str) -> bool:
        return item_id in self.inventory

    def item_count(self, item_id: str) -> int:
        """Return how many units of ``item_id`` the player holds."""

        return sum(1 for item in self.inventory if item == item_id)

    def is_flag_set(self, name: str) -> bool:
        return self.flags.get(name, False)

    def to_payload(self) -> Dict[str, object]:
        """Return the camelCase ``GameState`` representation of this snapshot."""

        return {
            "locationId": self.location_id,
            "locationName": self.location_name,
            "imageUrl": self.image_url,
            "sceneId": self.scene_id,
            "narrative": self.narrative,
            "actions": list(self.actions),
            "inventory": list(self.inventory),
            "flags": dict(self.flags),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PlayerState":
        """Build a state from its ``GameState`` representation.

        Raises:
            ValueError: If a required key is missing.
            TypeError: If a value has the wrong type.
        """

        if not isinstance(payload, Mapping):
            raise TypeError("GameState payload must be a mapping")

        missing = [
            key
            for key in ("locationId", "locationName", "sceneId", "narrative")
            if key not in payload
        ]
        if missing:
            raise ValueError(
                "Invalid GameState payload: missing " + ", ".join(sorted(missing))
            )

        return cls(
            location_id=payload["locationId"],
            location_name=payload["locationName"],
            image_url=payload.get("imageUrl", ""),
            scene_id=payload["sceneId"],
            narrative=payload["narrative"],
            actions=payload.get("actions", ()),
            inventory=payload.get("inventory", ()),
            flags=payload.get("flags", {}),
        )


__all__ = ["PlayerState"]
