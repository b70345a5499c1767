#!/usr/bin/env python3
"""
Disc Tracker command line.

Preview or import a UDisc scorecard CSV without going through the API:
1. Tokenize the CSV
2. Resolve columns
3. Reconcile the player row
4. Persist the round (import only)

Usage:
    python -m disc_tracker.cli preview scorecard.csv [--player-name NAME]
    python -m disc_tracker.cli import scorecard.csv --user-id ID [--player-name NAME]
    python -m disc_tracker.cli init-db
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import psycopg2

from disc_tracker.errors import RoundImportError
from disc_tracker.importers.udisc_importer import UDiscImporter
from disc_tracker.storage.round_store import RoundStore
from disc_tracker.utils.csv_validator import CSVValidator

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="disc-tracker",
        description="Preview or import UDisc scorecard CSV exports",
    )
    parser.add_argument("--database-url", help="PostgreSQL URL (default: $DATABASE_URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    preview = sub.add_parser("preview", help="Reconcile a CSV and print the result")
    preview.add_argument("csv_path", type=Path)
    preview.add_argument("--player-name")

    imp = sub.add_parser("import", help="Import a CSV as a round")
    imp.add_argument("csv_path", type=Path)
    imp.add_argument("--user-id", required=True)
    imp.add_argument("--player-name")

    sub.add_parser("init-db", help="Create the rounds tables")
    return parser


def _read_csv(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")
    validator = CSVValidator()
    content = path.read_bytes()
    validator.validate_size(content)
    return validator.decode(content)


def run_preview(args: argparse.Namespace) -> int:
    # Preview never touches the store, so no connection is opened.
    importer = UDiscImporter(RoundStore(args.database_url))
    preview = importer.preview(_read_csv(args.csv_path), args.player_name)
    reconciled = preview.reconciled

    print(f"Player:  {reconciled.player_name}")
    print(f"Course:  {reconciled.course_name}"
          + (f" ({reconciled.layout_name})" if reconciled.layout_name else ""))
    print(f"Start:   {reconciled.start_time or '-'}")
    print(f"Total:   {reconciled.total_strokes if reconciled.total_strokes is not None else '-'}"
          f"  +/-: {reconciled.score_vs_par if reconciled.score_vs_par is not None else '-'}"
          f"  Rating: {reconciled.round_rating if reconciled.round_rating is not None else '-'}")
    print(f"Holes:   {len(reconciled.holes)} of {reconciled.holes_count} scored")
    for hole in reconciled.holes:
        par = hole.par if hole.par is not None else '-'
        print(f"  #{hole.play_order:<3} {hole.hole_label:<6} par {par:<3} strokes {hole.strokes}")

    print()
    print("Columns:")
    for key, header in preview.columns.to_dict().items():
        print(f"  {key}: {header}")
    return EXIT_OK


def run_import(args: argparse.Namespace) -> int:
    store = RoundStore(args.database_url)
    try:
        outcome = UDiscImporter(store).import_csv(
            _read_csv(args.csv_path),
            user_id=args.user_id,
            source_filename=args.csv_path.name,
            player_name=args.player_name,
        )
    finally:
        store.close()

    result = outcome.result
    print(f"Created round {result.round.id} for {outcome.player_name}")
    if not outcome.ok:
        print(f"Hole results failed ({result.attempted_holes} attempted): {result.hole_error}",
              file=sys.stderr)
        return EXIT_FAILED
    print(f"Inserted {result.holes_inserted} hole results")
    return EXIT_OK


def run_init_db(args: argparse.Namespace) -> int:
    store = RoundStore(args.database_url)
    try:
        store.init_schema()
    finally:
        store.close()
    print("Schema ready")
    return EXIT_OK


COMMANDS = {
    "preview": run_preview,
    "import": run_import,
    "init-db": run_init_db,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return EXIT_USAGE if e.code else EXIT_OK

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return COMMANDS[args.command](args)
    except RoundImportError as e:
        print(f"Error [{e.category}]: {e.message}", file=sys.stderr)
        if e.details is not None:
            print(f"  details: {e.details}", file=sys.stderr)
        return EXIT_FAILED
    except (FileNotFoundError, psycopg2.Error) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
