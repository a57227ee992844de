"""Configuration helpers for running the story engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .content import ContentRegistry, load_default_registry, load_registry_from_file

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _normalise_path(value: str | None) -> Path | None:
    if value is None:
        return None

    trimmed = value.strip()
    if not trimmed:
        return None

    return Path(trimmed).expanduser()


def _normalise_string(value: str | None, *, default: str) -> str:
    if value is None:
        return default

    trimmed = value.strip()
    return trimmed or default


@dataclass(frozen=True)
class EngineSettings:
    """Runtime settings for the engine, its HTTP API and the terminal client.

    Values are read from environment variables so deployments can point the
    engine at different content without code changes. Paths are expanded to
    support ``~`` prefixes while empty strings are treated as if the variable
    was unset.
    """

    content_package: str = "storypath.data"
    content_resource_name: str = "locations.json"
    content_path: Path | None = None
    log_level: str = "WARNING"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineSettings":
        """Return settings populated from ``environ``.

        Args:
            environ: Optional mapping of environment variables. When omitted,
                :data:`os.environ` is used.
        """

        source = environ if environ is not None else os.environ

        log_level = _normalise_string(
            source.get("STORYPATH_LOG_LEVEL"), default="WARNING"
        ).upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(
                "STORYPATH_LOG_LEVEL must be one of " + ", ".join(_LOG_LEVELS) + "."
            )

        api_port = 8000
        port_raw = source.get("STORYPATH_API_PORT")
        if port_raw is not None and port_raw.strip():
            try:
                api_port = int(port_raw.strip())
            except ValueError as exc:
                raise ValueError("STORYPATH_API_PORT must be an integer.") from exc
            if not 0 < api_port < 65536:
                raise ValueError("STORYPATH_API_PORT must be between 1 and 65535.")

        return cls(
            content_package=_normalise_string(
                source.get("STORYPATH_CONTENT_PACKAGE"), default="storypath.data"
            ),
            content_resource_name=_normalise_string(
                source.get("STORYPATH_CONTENT_RESOURCE"), default="locations.json"
            ),
            content_path=_normalise_path(source.get("STORYPATH_CONTENT_PATH")),
            log_level=log_level,
            api_host=_normalise_string(
                source.get("STORYPATH_API_HOST"), default="127.0.0.1"
            ),
            api_port=api_port,
        )

    def load_registry(self) -> ContentRegistry:
        """Load the configured content, preferring ``content_path`` when set."""

        if self.content_path is not None:
            return load_registry_from_file(self.content_path)
        return load_default_registry(self.content_package, self.content_resource_name)


__all__ = ["EngineSettings"]
