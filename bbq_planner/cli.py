"""Command-line interface for BBQ Planner.

Provides subcommands to generate a BBQ shopping list from party
preferences, list the suggested meat/seafood choices, and serve the
JSON API.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING

import pydantic

from bbq_planner.aggregator import to_dict, to_plain_text, total
from bbq_planner.generation_client import ServiceError, make_generation_client
from bbq_planner.models import MEAT_OPTIONS, SEAFOOD_OPTIONS, Preferences
from bbq_planner.normalizer import ParseError
from bbq_planner.planner import (
    ValidationError,
    request_shopping_list,
    user_message,
    validate_preferences,
)

if TYPE_CHECKING:
    from bbq_planner.config import Config


logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Config bootstrap
# ------------------------------------------------------------------


def _load_config_safe() -> Config | None:
    """Load application config, returning None on failure.

    Returns:
        Config instance or None if loading fails.
    """
    try:
        from bbq_planner.config import load_config

        return load_config()
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _split_choices(raw: str | None) -> list[str]:
    """Split a comma-separated choice list.

    Args:
        raw: Comma-separated choices, or None.

    Returns:
        Stripped, non-blank choices.
    """
    if not raw:
        return []
    return [c.strip() for c in raw.replace("、", ",").split(",") if c.strip()]


def _preferences_from_args(args: argparse.Namespace) -> Preferences:
    """Build Preferences from parsed ``plan`` arguments.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Preferences instance.

    Raises:
        pydantic.ValidationError: If a value is out of range.
    """
    return Preferences(
        adults=args.adults,
        children=args.children,
        budget=args.budget,
        meat_choices=_split_choices(args.meat),
        seafood_choices=_split_choices(args.seafood),
        allergy_text=args.allergies,
        other_text=args.requests,
    )


# ------------------------------------------------------------------
# Subcommand handlers
# ------------------------------------------------------------------


def _handle_plan(args: argparse.Namespace) -> int:
    """Handle the ``plan`` subcommand.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    try:
        prefs = _preferences_from_args(args)
    except pydantic.ValidationError as exc:
        print(f"Error: invalid preferences: {exc}", file=sys.stderr)
        return 1

    try:
        validate_preferences(prefs)
    except ValidationError as exc:
        print(f"Error: {user_message(exc)}", file=sys.stderr)
        return 1

    cfg = _load_config_safe()
    if cfg is None:
        return 1
    if not cfg.has_api_key:
        print(
            "Error: Missing ANTHROPIC_API_KEY. "
            "Copy .env.example to .env and fill in your key.",
            file=sys.stderr,
        )
        return 1

    generator = make_generation_client(cfg)
    try:
        shopping_list = request_shopping_list(prefs, generator)
    except (ValidationError, ServiceError, ParseError) as exc:
        print(f"Error: {user_message(exc)}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(to_dict(shopping_list), ensure_ascii=False, indent=2))
    else:
        print(to_plain_text(shopping_list, total(shopping_list)))
    return 0


def _handle_options() -> int:
    """Handle the ``options`` subcommand.

    Returns:
        Exit code (always 0).
    """
    print("お肉: " + "、".join(MEAT_OPTIONS))
    print("海鮮: " + "、".join(SEAFOOD_OPTIONS))
    return 0


def _handle_serve(args: argparse.Namespace) -> int:
    """Handle the ``serve`` subcommand.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    cfg = _load_config_safe()
    if cfg is None:
        return 1

    from bbq_planner.app import create_app

    app = create_app(config=cfg)
    port: int = args.port if args.port is not None else cfg.flask_port
    app.run(port=port, debug=cfg.flask_debug)
    return 0


# ------------------------------------------------------------------
# Argument parser
# ------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="bbq-planner",
        description="BBQ Planner: AI-generated BBQ shopping lists.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_plan_parser(subparsers)
    subparsers.add_parser(
        "options",
        help="Show the suggested meat and seafood choices.",
    )
    _add_serve_parser(subparsers)

    return parser


def _add_plan_parser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    """Add the ``plan`` subcommand parser.

    Args:
        subparsers: Subparsers action from the main parser.
    """
    plan_parser = subparsers.add_parser(
        "plan",
        help="Generate a BBQ shopping list.",
    )
    plan_parser.add_argument(
        "--adults",
        type=int,
        default=2,
        help="Number of adults (default 2).",
    )
    plan_parser.add_argument(
        "--children",
        type=int,
        default=0,
        help="Number of children (default 0).",
    )
    plan_parser.add_argument(
        "--budget",
        type=float,
        default=10000,
        help="Total budget in yen (default 10000).",
    )
    plan_parser.add_argument(
        "--meat",
        default=None,
        help=f"Comma-separated meat choices (e.g. {','.join(MEAT_OPTIONS[:2])}).",
    )
    plan_parser.add_argument(
        "--seafood",
        default=None,
        help=(
            "Comma-separated seafood choices "
            f"(e.g. {','.join(SEAFOOD_OPTIONS[:2])})."
        ),
    )
    plan_parser.add_argument(
        "--allergies",
        default="",
        help="Allergies or foods to avoid.",
    )
    plan_parser.add_argument(
        "--requests",
        default="",
        help="Any other requests.",
    )
    plan_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the list as JSON instead of plain text.",
    )


def _add_serve_parser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
) -> None:
    """Add the ``serve`` subcommand parser.

    Args:
        subparsers: Subparsers action from the main parser.
    """
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the JSON API server.",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default from FLASK_PORT).",
    )


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """Run the CLI application.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    exit_code = _dispatch(args)
    sys.exit(exit_code)


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch a parsed command to the appropriate handler.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code from the handler.
    """
    command: str = args.command
    if command == "plan":
        return _handle_plan(args)
    if command == "options":
        return _handle_options()
    if command == "serve":
        return _handle_serve(args)
    return 1  # pragma: no cover
