"""Command-line entry point for playing storypath adventures."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from storypath import (
    EngineSettings,
    GameSession,
    NarrativeEngine,
    PlayerState,
    setup_logging,
)

logger = logging.getLogger("storypath.cli")


def _format_state(state: PlayerState) -> str:
    """Create a printable representation of a player state."""

    lines = [f"=== {state.location_name} ===", "", state.narrative]
    if state.actions:
        lines.append("")
        for index, action in enumerate(state.actions, start=1):
            lines.append(f"  {index}. {action}")
    else:
        lines.append("")
        lines.append("  (There is nothing more to do here.)")
    if state.inventory:
        lines.append("")
        lines.append("You carry: " + ", ".join(state.inventory))
    return "\n".join(lines)


def _print_help() -> None:
    print("\n=== Help ===")
    print("Enter the number or the text of an action to choose it.")
    print("\nSystem commands:")
    print("  use <item> - Use an item from your inventory here.")
    print("  inventory - List the items you carry.")
    print("  help - Show this overview.")
    print("  quit - End the session.")


def _resolve_action(state: PlayerState, player_input: str) -> str:
    """Map a numeric choice onto its action label."""

    if player_input.isdigit():
        index = int(player_input)
        if 1 <= index <= len(state.actions):
            return state.actions[index - 1]
        return player_input

    lowered = player_input.lower()
    for action in state.actions:
        if action.lower() == lowered:
            return action
    return player_input


def run_cli(session: GameSession) -> None:
    """Drive a small interactive loop using ``input``/``print``."""

    print("Welcome to storypath!")
    print("Type 'help' for a command overview or 'quit' to leave.")
    print()

    state = session.start()
    print(_format_state(state))

    while True:
        try:
            raw_input = input("\n> ")
        except EOFError:
            print("\n\nReached end of input. Until next time!")
            break
        except KeyboardInterrupt:
            print("\n\nInterrupted. Until next time!")
            break

        player_input = raw_input.strip()
        if not player_input:
            print()
            print(_format_state(session.state))
            continue

        command, _, argument = player_input.partition(" ")
        command_lower = command.lower()

        if player_input.lower() in {"quit", "exit"}:
            print("\nThanks for playing!")
            break

        if command_lower == "help":
            _print_help()
            continue

        if command_lower == "inventory":
            items = session.state.inventory
            if items:
                print("\nYou carry: " + ", ".join(items))
            else:
                print("\nYour pockets are empty.")
            continue

        if command_lower == "use":
            item = argument.strip()
            if not item:
                print("\nUsage: use <item>")
                continue
            outcome = session.use_item(item)
        else:
            outcome = session.perform_action(
                _resolve_action(session.state, player_input)
            )

        if outcome.error is not None:
            print(f"\n{outcome.message}")
            continue

        print()
        print(_format_state(outcome.state))


def _serve(settings: EngineSettings, engine: NarrativeEngine) -> None:
    import uvicorn

    from storypath.api import create_app

    uvicorn.run(
        create_app(engine, settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a storypath adventure")
    parser.add_argument(
        "--content-path",
        type=Path,
        help=(
            "Path to a JSON file containing authored locations. "
            "Defaults to STORYPATH_CONTENT_PATH or the bundled demo story."
        ),
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        type=str.upper,
        help="Logging verbosity (default: STORYPATH_LOG_LEVEL or WARNING).",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the HTTP API with uvicorn instead of playing in the terminal.",
    )
    parser.add_argument(
        "--host",
        help="Host interface for --serve (default: STORYPATH_API_HOST or 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for --serve (default: STORYPATH_API_PORT or 8000).",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the configured adventure."""

    args = _parse_args(argv)

    try:
        settings = EngineSettings.from_env()
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(2) from exc

    overrides: dict[str, object] = {}
    if args.content_path is not None:
        overrides["content_path"] = args.content_path
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.host is not None:
        overrides["api_host"] = args.host
    if args.port is not None:
        overrides["api_port"] = args.port
    if overrides:
        settings = replace(settings, **overrides)

    setup_logging(settings.log_level)

    try:
        registry = settings.load_registry()
    except (OSError, ValueError) as exc:
        source = settings.content_path or "bundled content"
        print(f"Failed to load story content from '{source}': {exc}")
        raise SystemExit(2) from exc

    logger.info("Loaded %d locations", len(registry))
    engine = NarrativeEngine(registry)

    if args.serve:
        _serve(settings, engine)
        return

    run_cli(GameSession(engine))


if __name__ == "__main__":
    main()
