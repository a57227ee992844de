"""Typed failures returned by the narrative engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EngineErrorKind(str, Enum):
    """Enumerated reasons a transition can fail."""

    INVALID_ACTION = "InvalidAction"
    ITEM_NOT_HELD = "ItemNotHeld"
    ITEM_NOT_USABLE = "ItemNotUsable"
    UNKNOWN_LOCATION = "UnknownLocation"
    UNKNOWN_SCENE = "UnknownScene"
    CORRUPT_STATE = "CorruptState"


_RECOVERABLE_KINDS = frozenset(
    {
        EngineErrorKind.INVALID_ACTION,
        EngineErrorKind.ITEM_NOT_HELD,
        EngineErrorKind.ITEM_NOT_USABLE,
    }
)


@dataclass(frozen=True)
class EngineError:
    """Failure returned in place of a new player state.

    The caller's previous state stays the state of record whenever one of these
    is returned.
    """

    kind: EngineErrorKind
    message: str

    @property
    def recoverable(self) -> bool:
        """Return ``True`` for failures caused by player input.

        The remaining kinds point at broken content or a state that no longer
        matches the content catalogue.
        """

        return self.kind in _RECOVERABLE_KINDS

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class SessionBusyError(RuntimeError):
    """Raised when a turn is requested while another one is still pending."""


__all__ = ["EngineError", "EngineErrorKind", "SessionBusyError"]
