#!/usr/bin/env python3
"""
finance-import: import a bank export (or restore a backup) into a JSON ledger.

Every decision the import dialog would ask the operator for is taken from a
command-line flag, falling back to the dialog's own suggestion.

Examples
--------
    finance-import statement.csv --ledger ledger.json
    finance-import export.csv --ledger ledger.json --mode replace --date-format DD-MM-YYYY
    finance-import data.json --map 0=date --map 2=amount --map 1=description
    finance-import backup.json --ledger ledger.json --yes
"""
# finance_importer/cli.py
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from finance_importer.controllers import (
    ImportOrchestrator,
    LedgerSession,
    load_categories,
    read_file,
    run_import,
)
from finance_importer.data_model import CategoryItem, ColumnRole, DateFormat, ImportMode, ImportStep
from finance_importer.utilities import DEFAULT_RULES, configure_logging, load_import_rules

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_APPLIED = 1
EXIT_FILE_ERROR = 2

_DECIMAL_FLAGS = {"auto": "", ".": ".", ",": ","}


def parse_mapping(values: Optional[Sequence[str]]) -> Dict[int, ColumnRole]:
    """``["0=date", "2=amount"]`` -> ``{0: DATE, 2: AMOUNT}``."""
    out: Dict[int, ColumnRole] = {}
    for item in values or []:
        index, sep, role = item.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"--map expects INDEX=ROLE, got {item!r}")
        try:
            out[int(index)] = ColumnRole(role.strip().lower())
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Bad --map value {item!r}: {exc}") from exc
    return out


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="finance-import",
        description="Import a bank CSV/JSON export or restore a backup into a JSON ledger.",
    )
    ap.add_argument("input", type=Path, help="Path to the .csv or .json file to import")
    ap.add_argument("--ledger", type=Path,
                    help="Ledger backup file to import into (created if missing)")
    ap.add_argument("--categories", type=Path,
                    help="JSON list of existing categories (merged with the ledger's)")
    ap.add_argument("--output", type=Path,
                    help="Where to write the updated ledger (default: --ledger)")
    ap.add_argument("--mode", choices=["append", "replace"], default="append",
                    help="What to do with existing transactions (default: append)")
    ap.add_argument("--encoding", default="utf-8", help="Text encoding of the input file")
    ap.add_argument("--no-header", action="store_true", help="First row is data, not titles")
    ap.add_argument("--date-format", choices=[f.value for f in DateFormat],
                    help="Primary date format (default: guessed from the data)")
    ap.add_argument("--secondary-format", choices=[f.value for f in DateFormat],
                    help="Format tried for rows whose dates fail the primary format")
    ap.add_argument("--decimal-separator", choices=list(_DECIMAL_FLAGS), default="auto",
                    help="Decimal mark of the amount column (default: auto)")
    ap.add_argument("--map", action="append", metavar="INDEX=ROLE",
                    help="Override a column role (date, amount, description, category, skip); "
                         "may be given multiple times")
    ap.add_argument("--skip-groups", action="store_true",
                    help="Do not bulk-categorize detected description groups")
    ap.add_argument("--group", action="append", metavar="SIGNATURE=CATEGORY",
                    help="Assign a detected group to a category; may be given multiple times")
    ap.add_argument("--rules", type=Path, help="JSON file overriding the import rules")
    ap.add_argument("--yes", action="store_true",
                    help="Confirm a destructive restore when the input is a backup")
    return ap


def _merge_categories(base: List[CategoryItem], extra: List[CategoryItem]) -> List[CategoryItem]:
    ids = {c.id for c in base}
    return base + [c for c in extra if c.id not in ids]


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    configure_logging()

    if not args.input.exists():
        raise SystemExit(f"Input file not found: {args.input}")
    if not args.input.is_file():
        raise SystemExit(f"Input path is not a file: {args.input}")

    try:
        overrides = parse_mapping(args.map)
    except argparse.ArgumentTypeError as exc:
        ap.error(str(exc))
    group_categories: Dict[str, str] = {}
    for item in args.group or []:
        sig, sep, cat = item.partition("=")
        if not sep:
            ap.error(f"--group expects SIGNATURE=CATEGORY, got {item!r}")
        group_categories[sig.strip().lower()] = cat.strip()

    rules = load_import_rules(args.rules) if args.rules else DEFAULT_RULES
    session = LedgerSession.load(args.ledger) if args.ledger else LedgerSession()
    existing = list(session.categories)
    if args.categories:
        existing = _merge_categories(existing, load_categories(args.categories))

    orchestrator = ImportOrchestrator(
        existing,
        session.has_transactions,
        session.apply_import,
        session.restore_backup,
        rules=rules,
    )

    try:
        name, text = read_file(args.input, encoding=args.encoding)
    except (OSError, UnicodeDecodeError) as exc:
        log.error("Could not read %s: %s", args.input, exc)
        print(f"Import failed: could not read {args.input.name} ({exc})")
        return EXIT_FILE_ERROR
    step = run_import(
        orchestrator,
        name,
        text,
        mode=ImportMode(args.mode.upper()),
        overrides=overrides,
        has_header=False if args.no_header else None,
        date_format=DateFormat(args.date_format) if args.date_format else None,
        secondary_format=DateFormat(args.secondary_format) if args.secondary_format else None,
        decimal_char=_DECIMAL_FLAGS[args.decimal_separator],
        group_categories=group_categories,
        skip_groups=args.skip_groups,
        restore=args.yes,
    )

    if orchestrator.error:
        print(f"Import failed: {orchestrator.error}")
        return EXIT_FILE_ERROR
    if step is ImportStep.BACKUP_CONFIRM:
        print(f"{name} is a full backup; re-run with --yes to replace the ledger.")
        orchestrator.cancel()
        return EXIT_NOT_APPLIED

    result = orchestrator.last_result
    if result is not None:
        print(
            f"Imported {len(result.transactions)} transactions "
            f"({len(result.new_categories)} categories touched, "
            f"{result.dropped_count} rows dropped)."
        )
    else:
        print(f"Restored backup {name}: {len(session.transactions)} transactions.")

    out = args.output or args.ledger
    if out is not None:
        session.save(out)
        print(f"Ledger written to {out}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
