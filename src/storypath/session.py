"""Single-player session holding the state of record between turns."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable

from .engine import NarrativeEngine, TransitionResult
from .errors import EngineError, EngineErrorKind, SessionBusyError
from .state import PlayerState

logger = logging.getLogger(__name__)


_ERROR_MESSAGES = {
    EngineErrorKind.INVALID_ACTION: "That choice is no longer available.",
    EngineErrorKind.ITEM_NOT_HELD: "You don't have that item.",
    EngineErrorKind.ITEM_NOT_USABLE: "Nothing happens.",
    EngineErrorKind.UNKNOWN_LOCATION: "The story leads somewhere that doesn't exist yet.",
    EngineErrorKind.UNKNOWN_SCENE: "The story leads somewhere that doesn't exist yet.",
    EngineErrorKind.CORRUPT_STATE: "Your progress no longer matches the story.",
}


def describe_error(error: EngineError) -> str:
    """Return the player-facing message for ``error``."""

    return _ERROR_MESSAGES.get(error.kind, error.message)


@dataclass(frozen=True)
class TurnResult:
    """Outcome of a single turn.

    ``state`` is always the state of record after the turn. When ``error`` is
    set the turn failed and ``state`` is the unchanged previous state.
    """

    state: PlayerState
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        if self.error is None:
            return None
        return describe_error(self.error)


class GameSession:
    """Serialise player intents against a :class:`NarrativeEngine`.

    Only one turn may be in flight at a time. A second intent arriving while a
    turn is pending is rejected with :class:`SessionBusyError` instead of being
    computed against the same stale state.
    """

    def __init__(self, engine: NarrativeEngine) -> None:
        self._engine = engine
        self._state: PlayerState | None = None
        self._last_error: EngineError | None = None
        self._turn_lock = threading.Lock()

    @property
    def state(self) -> PlayerState:
        """Return the current state of record."""

        if self._state is None:
            raise RuntimeError("The session has not been started.")
        return self._state

    @property
    def started(self) -> bool:
        return self._state is not None

    @property
    def busy(self) -> bool:
        return self._turn_lock.locked()

    @property
    def last_error(self) -> EngineError | None:
        return self._last_error

    def start(self) -> PlayerState:
        """Begin a new playthrough at the story's entry point."""

        with self._claim_turn():
            self._state = self._engine.initialize()
            self._last_error = None
            logger.info(
                "Session started at %s/%s",
                self._state.location_id,
                self._state.scene_id,
            )
            return self._state

    def perform_action(self, action_text: str) -> TurnResult:
        """Select one of the currently visible actions."""

        return self._run_turn(
            lambda state: self._engine.apply_action(state, action_text)
        )

    def use_item(self, item_id: str) -> TurnResult:
        """Use an item from the player's inventory in the current scene."""

        return self._run_turn(lambda state: self._engine.apply_item_use(state, item_id))

    def _run_turn(
        self, step: Callable[[PlayerState], TransitionResult]
    ) -> TurnResult:
        with self._claim_turn():
            previous = self.state
            result = step(previous)

            if isinstance(result, EngineError):
                self._last_error = result
                _log_failure(previous, result)
                return TurnResult(state=previous, error=result)

            self._state = result
            self._last_error = None
            return TurnResult(state=result)

    def _claim_turn(self) -> "_TurnGuard":
        if not self._turn_lock.acquire(blocking=False):
            raise SessionBusyError("A turn is already in progress.")
        return _TurnGuard(self._turn_lock)


class _TurnGuard:
    """Release the session's turn lock when the turn finishes."""

    def __init__(self, lock: threading.Lock) -> None:
        self._lock = lock

    def __enter__(self) -> None:
        return None

    def __exit__(self, *exc_info: object) -> None:
        self._lock.release()


def _log_failure(state: PlayerState, error: EngineError) -> None:
    where = f"{state.location_id}/{state.scene_id}"
    if error.recoverable:
        logger.info("Turn rejected at %s: %s", where, error)
    elif error.kind is EngineErrorKind.CORRUPT_STATE:
        logger.error("Session state is inconsistent at %s: %s", where, error)
    else:
        logger.warning("Content defect reached from %s: %s", where, error)


__all__ = ["GameSession", "TurnResult", "describe_error"]
