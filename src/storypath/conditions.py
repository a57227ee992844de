"""Visibility rules for authored actions."""

from __future__ import annotations

from typing import Mapping

from .content import ShowIf, Scene


def is_visible(show_if: ShowIf | None, flags: Mapping[str, bool]) -> bool:
    """Return ``True`` when ``show_if`` holds for ``flags``.

    An absent predicate is always satisfied. Flags missing from ``flags`` count
    as unset.
    """

    if show_if is None:
        return True

    if not all(flags.get(name, False) for name in show_if.all_set):
        return False
    if any(flags.get(name, False) for name in show_if.none_set):
        return False
    return True


def visible_actions(scene: Scene, flags: Mapping[str, bool]) -> tuple[str, ...]:
    """Return the labels of the scene's visible actions in authored order."""

    return tuple(
        action.text for action in scene.actions if is_visible(action.show_if, flags)
    )


__all__ = ["is_visible", "visible_actions"]
