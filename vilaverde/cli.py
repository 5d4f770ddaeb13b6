"""
Vila Verde CLI - Command-line interface for the engine.

Usage:
    vilaverde catalog                          List buildings and their effects
    vilaverde simulate KIND@X,Z [KIND@X,Z ...] Run placements on a fresh settlement
    vilaverde autoplay --turns N --seed S      Let a random player build
    vilaverde serve --host H --port P          Run the REST API
"""

import argparse
import logging
import os
import random
import sys

from .catalog import create_default_catalog
from .engine_core import ActionGenerator, ActionResult, GridPosition
from .session import GameStore, Overlay

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Vila Verde - Sustainable settlement simulation engine",
        prog="vilaverde",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("VILAVERDE_LOG_LEVEL", "WARNING"),
        help="Logging level (default: $VILAVERDE_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("catalog", help="List buildings and their effects")

    simulate_parser = subparsers.add_parser("simulate", help="Run placements on a fresh settlement")
    simulate_parser.add_argument(
        "placements",
        nargs="+",
        metavar="KIND@X,Z",
        help="Placement intent, e.g. sustainable_house@0,0",
    )

    autoplay_parser = subparsers.add_parser("autoplay", help="Let a random player build")
    autoplay_parser.add_argument("--turns", type=int, default=20, help="Turns to play")
    autoplay_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    log_level = args.log_level.upper()
    if log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "catalog":
        cmd_catalog(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "autoplay":
        cmd_autoplay(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def parse_placement(text: str) -> tuple[str, GridPosition]:
    """Parse `KIND@X,Z` into a kind and a grid position."""
    try:
        kind, coords = text.split("@", 1)
        x, z = (int(part) for part in coords.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected KIND@X,Z, got {text!r}") from None
    return kind.strip(), GridPosition(x=x, z=z)


def cmd_catalog(args):
    """List buildings and their effects."""
    catalog = create_default_catalog()
    for definition in catalog:
        effects = ", ".join(f"{name} {value:+d}" for name, value in definition.effects.to_dict().items())
        print(f"{definition.kind.value:20} {definition.name:24} {effects}")


def cmd_simulate(args):
    """Run placements on a fresh settlement."""
    try:
        placements = [parse_placement(p) for p in args.placements]
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}")
        sys.exit(2)

    store = _new_store()
    failures = 0
    for kind, position in placements:
        # The engine places any catalog kind; locked ones are refused here
        if kind in store.catalog and not store.is_available(kind):
            print(f"  rejected [KIND_LOCKED] {store.catalog.definition_of(kind).name} is not unlocked yet")
            failures += 1
            continue
        result = store.place_building(position, kind)
        _print_result(store, result)
        if not result.success:
            failures += 1

    _print_summary(store)
    if failures:
        sys.exit(1)


def cmd_autoplay(args):
    """Let a random player build for a number of turns."""
    rng = random.Random(args.seed)
    store = _new_store()
    generator = ActionGenerator(catalog=store.catalog, rules=store.rules)

    for _ in range(args.turns):
        # Acknowledge whatever challenge is showing before building again
        if store.state.has_active_challenge:
            store.close_challenge()

        actions = generator.generate(store.state)
        if not actions:
            print("No legal placements left")
            break
        action = rng.choice(actions)
        payload = action.payload
        result = store.place_building(payload.position, payload.kind)
        _print_result(store, result)

    _print_summary(store)


def cmd_serve(args):
    """Run the REST API with uvicorn."""
    import uvicorn

    uvicorn.run("vilaverde.api.app:app", host=args.host, port=args.port)


def _new_store() -> GameStore:
    store = GameStore()
    store.open_overlays.discard(Overlay.WELCOME)
    return store


def _print_result(store: GameStore, result: ActionResult):
    if not result.success:
        print(f"  rejected [{result.error_code.value}] {result.error}")
        return
    for change in result.state_changes:
        print(f"  {change}")
    for notification in result.notifications:
        print(f"  ** {notification.kind.value.upper()}: {notification.title}")
        print(f"     {notification.text}")


def _print_summary(store: GameStore):
    state = store.state
    print(f"\nTurn {state.current_turn}, {state.building_count} building(s)")
    for name, value in state.indicators.to_dict().items():
        print(f"  {name:20} {value}")
    print(f"Available: {', '.join(k.value for k in store.available_kinds)}")
    print(f"Terrain limit: {state.terrain_limit(store.rules)}")
    if state.completed_challenge_ids:
        print(f"Completed challenges: {', '.join(sorted(state.completed_challenge_ids))}")


if __name__ == "__main__":
    main()
