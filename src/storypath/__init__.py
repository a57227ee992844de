"""Core package for the storypath narrative engine."""

from .conditions import is_visible, visible_actions
from .content import (
    Action,
    ContentRegistry,
    ItemUse,
    Location,
    OnEnter,
    Scene,
    ShowIf,
    Transition,
    load_default_registry,
    load_registry_from_file,
    load_registry_from_mapping,
)
from .engine import (
    NarrativeEngine,
    TransitionResult,
    apply_action,
    apply_item_use,
    initialize,
)
from .errors import EngineError, EngineErrorKind, SessionBusyError
from .logging_config import setup_logging
from .session import GameSession, TurnResult, describe_error
from .settings import EngineSettings
from .state import PlayerState

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
    "is_visible",
    "visible_actions",
    "NarrativeEngine",
    "TransitionResult",
    "initialize",
    "apply_action",
    "apply_item_use",
    "EngineError",
    "EngineErrorKind",
    "SessionBusyError",
    "GameSession",
    "TurnResult",
    "describe_error",
    "EngineSettings",
    "setup_logging",
    "PlayerState",
]
