#!/usr/bin/env python3
"""
Address Dedup: Command-Line Runner

Reads a CSV of address records, runs one adjacent-duplicate finder within
each group, and writes the duplicate rows and/or the table with those rows
removed (anti-join).

Usage:
    address-dedup sim-addrs \
        --input visits.csv \
        --group-by patient_id \
        --column address \
        --filter-blanks \
        --duplicates-out dups.csv \
        --deduped-out visits_clean.csv

Rows are compared in file order, so sort the file beforehand (e.g. by
patient and visit date).
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from .algorithms.engine import anti_join
from .algorithms.matchers import FINDERS
from .algorithms.rules import ExtractionRules
from .errors import AddressDedupError

logger = logging.getLogger(__name__)

# Finders taking each optional CLI flag
_ADDR_COLUMN = {
    "same-addrs", "sim-addrs", "sim-text", "same-nums",
    "sim-street-names", "facil-names", "precise-text",
}
_FILTER_BLANKS = {"same-addrs", "sim-addrs"}
_FILTER_POBOX = {
    "same-addrs", "adj-addrs", "same-nums",
    "sim-street-names", "facil-names", "precise-text",
}
_USES_RULES = _ADDR_COLUMN | {"adj-addrs"}


# ---------------------------------------------------------------------------
# CSV I/O
# ---------------------------------------------------------------------------


def read_rows(path: str | Path) -> tuple[list[dict[str, Any]], list[str]]:
    """Load a CSV file; returns (rows, fieldnames)."""
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        fieldnames = list(reader.fieldnames or [])
    logger.info("Loaded %d rows from %s", len(rows), path)
    return rows, fieldnames


def write_rows(path: str | Path, rows: list[dict[str, Any]], fieldnames: list[str]) -> None:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)
    logger.info("Wrote %d rows to %s", len(rows), out_path)


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Find adjacent duplicate address rows within groups",
    )
    parser.add_argument("method", choices=sorted(FINDERS), help="Finder to run")
    parser.add_argument("--input", required=True, help="CSV file to scan")
    parser.add_argument(
        "--group-by",
        nargs="+",
        required=True,
        help="Grouping column(s), e.g. the patient identifier",
    )
    parser.add_argument("--column", help="Address (or date, for same-dates) column")
    parser.add_argument("--second-column", help="Second address column (adj-addrs)")
    parser.add_argument("--lon", help="Longitude column (same-coords)")
    parser.add_argument("--lat", help="Latitude column (same-coords)")
    parser.add_argument("--pattern", help="Regular expression (precise-text)")
    parser.add_argument("--filter-blanks", action="store_true", help="Drop blank addresses")
    parser.add_argument("--filter-pobox", action="store_true", help="Drop PO Box addresses")
    parser.add_argument(
        "--in-context",
        action="store_true",
        help="Return both rows of every matching pair",
    )
    parser.add_argument("--sort-by", nargs="+", help="Sort the duplicates by these columns")
    parser.add_argument("--rules", help="Path to match_rules.yaml (default: built-in patterns)")
    parser.add_argument("--duplicates-out", help="Where to write the duplicate rows")
    parser.add_argument("--deduped-out", help="Where to write the input minus duplicates")
    return parser.parse_args(argv)


def build_kwargs(args: argparse.Namespace) -> dict[str, Any]:
    """Translate CLI flags into keyword arguments for the chosen finder."""
    method = args.method
    kwargs: dict[str, Any] = {
        "include_context": args.in_context,
        "sort_keys": args.sort_by,
    }

    if method == "same-coords":
        kwargs.update(lon=args.lon, lat=args.lat)
    elif method == "adj-addrs":
        kwargs.update(first_addr=args.column, second_addr=args.second_column)
    elif method == "same-dates":
        kwargs["date_col"] = args.column
    else:
        kwargs["addr_col"] = args.column

    if method == "precise-text":
        kwargs["pattern"] = args.pattern
    if method in _FILTER_BLANKS:
        kwargs["filter_blanks"] = args.filter_blanks
    elif args.filter_blanks:
        logger.warning("--filter-blanks is ignored by %s", method)
    if method in _FILTER_POBOX:
        kwargs["filter_pobox"] = args.filter_pobox
    elif args.filter_pobox:
        logger.warning("--filter-pobox is ignored by %s", method)
    if args.rules and method in _USES_RULES:
        kwargs["rules"] = ExtractionRules.from_yaml(args.rules)

    return kwargs


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    args = parse_args(argv)

    rows, fieldnames = read_rows(args.input)
    finder = FINDERS[args.method]

    try:
        kwargs = build_kwargs(args)
        duplicates = finder(rows, args.group_by, **kwargs)
    except AddressDedupError as exc:
        logger.error("%s failed: %s", args.method, exc)
        return 1

    if args.duplicates_out:
        write_rows(args.duplicates_out, duplicates, fieldnames)
    if args.deduped_out:
        write_rows(args.deduped_out, anti_join(rows, duplicates), fieldnames)
    if not args.duplicates_out and not args.deduped_out:
        print(f"\n{len(duplicates)} duplicate row(s) found. "
              f"Use --duplicates-out / --deduped-out to save them.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
