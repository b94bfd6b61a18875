#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from respec.app import build_artifact_manager, replay_selections
from respec.config import (
    ConfigurationError,
    EngineConfig,
    configure_logging,
    get_engine_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from respec.domain.artifacts import ArtifactManager


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect a specification dataset")
    parser.add_argument(
        "--dataset",
        type=Path,
        help="Path to the dataset JSON file (default: $RESPEC_DATASET_PATH)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("fields", help="List known form fields and their options")

    check = subparsers.add_parser("check", help="Replay selections and report conflicts")
    check.add_argument(
        "--select",
        action="append",
        required=True,
        metavar="ID",
        help="Specification id to select (repeatable)",
    )
    check.add_argument(
        "--choose",
        action="append",
        default=[],
        choices=["a", "b", "A", "B"],
        help="Answer for the next open conflict, in order (repeatable)",
    )
    return parser.parse_args(list(argv))


def _build_config(args: argparse.Namespace) -> EngineConfig:
    config = get_engine_config()
    if args.dataset is not None:
        return EngineConfig(
            dataset_path=args.dataset,
            dependency_depth_limit=config.dependency_depth_limit,
            escalation_threshold=config.escalation_threshold,
        )
    if config.dataset_path is None:
        raise ValueError("No dataset given; pass --dataset or set RESPEC_DATASET_PATH")
    return config


def _print_fields(manager: ArtifactManager) -> None:
    graph = manager.graph
    for field_name in graph.known_fields():
        options = ", ".join(node.name for node in graph.get_specifications_for_field(field_name))
        print(f"{field_name}: {options}")


def _run_check(manager: ArtifactManager, args: argparse.Namespace) -> None:
    report = replay_selections(manager, args.select, choices=[c.lower() for c in args.choose])
    for question in report.open_questions:
        print(question)
        print()
    for update in report.form_updates:
        value = "-" if update.is_cleared else update.value
        marker = " (assumed)" if update.is_assumption else ""
        print(f"{update.field_name}: {value}{marker}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
        configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.WARNING)
        config = _build_config(parsed_args)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        manager = build_artifact_manager(config)
        if parsed_args.command == "fields":
            _print_fields(manager)
        else:
            _run_check(manager, parsed_args)

    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load `.env`, handle Ctrl+C, then run the CLI."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
