#!/usr/bin/env python3
"""Command-line entry point for the flashcard library."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from controllers.library_controller import LibraryController
from utils.constants import LOGS_DIR, ensure_base_dirs
from utils.errors import FlashcardError
from utils.logging_config import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage Dutch vocabulary flashcards.")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding cards.json, decks.json and save_states.json",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import cards from a CSV file")
    import_parser.add_argument("file", type=Path)

    export_parser = subparsers.add_parser("export", help="Export cards to a CSV file")
    export_parser.add_argument(
        "--deck",
        action="append",
        default=None,
        help="Deck name to export (repeatable); sub-decks are included",
    )
    export_parser.add_argument("file", type=Path)

    subparsers.add_parser("decks", help="List decks with card counts")
    subparsers.add_parser("saves", help="List saved game sessions")
    return parser


def _resolve_deck_ids(controller: LibraryController, names: list[str]) -> list[str] | None:
    deck_ids: list[str] = []
    for name in names:
        deck = controller.decks.find_by_name(name)
        if deck is None:
            print(f"Unknown deck: {name}", file=sys.stderr)
            return None
        deck_ids.append(deck.id)
    return deck_ids


def run(args: argparse.Namespace) -> int:
    controller = LibraryController(data_dir=args.data_dir)
    controller.load()

    if args.command == "import":
        report = controller.import_csv_file(args.file)
        for error in report.errors:
            print(error, file=sys.stderr)
        print(f"Imported {report.success_count} card(s)")
        if report.success_count and not controller.save():
            return 1
        return 0 if not report.errors else 2

    if args.command == "export":
        deck_ids = None
        if args.deck:
            deck_ids = _resolve_deck_ids(controller, args.deck)
            if deck_ids is None:
                return 1
        count = controller.export_csv_file(args.file, deck_ids)
        print(f"Exported {count} card(s) to {args.file}")
        return 0

    if args.command == "decks":
        for deck in controller.decks.get_all_decks_hierarchical():
            indent = "  " if deck.is_sub_deck else ""
            count = controller.decks.get_total_cards_in_deck_hierarchy(deck.id)
            print(f"{indent}{deck.name} ({count})")
        return 0

    if args.command == "saves":
        states = controller.save_states.list_save_states()
        if not states:
            print("No saved games")
        for state in states:
            print(
                f"{state.game_type.display_name}: {len(state.deck_ids)} deck(s), "
                f"saved {state.saved_at:%Y-%m-%d %H:%M}"
            )
        return 0

    return 1


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.data_dir is None:
        ensure_base_dirs()
    configure_logging(LOGS_DIR, level=args.log_level.upper())
    try:
        return run(args)
    except FlashcardError as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
