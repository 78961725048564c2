"""
Address Dedup: Adjacency Match Engine

Finds rows whose derived value repeats the value of the row immediately
before (and optionally after) them within a partition of the table.

Strategy:
    1. Partition rows by the group keys, keeping input order inside each
       partition (the order encodes the record sequence)
    2. Walk each adjacent (earlier, later) pair in a partition and compare
       earlier_extractor(earlier) with later_extractor(later)
    3. Predecessor pass: flag the later row of every matching pair
    4. Successor pass (bidirectional only): flag the earlier row
    5. Drop candidates rejected by the exclusion filters
    6. Emit successor hits, then predecessor hits, each in table order
    7. Optionally stable-sort by the caller's keys

A row matching both its predecessor and its successor is emitted twice in
bidirectional mode.  The output is meant to be subtracted from the input
with anti_join().
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from ..errors import MissingParameter
from .extractors import Comparator, ExclusionFilter, Extractor, Row, values_equal

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    PREDECESSOR_ONLY = "predecessor-only"
    BIDIRECTIONAL = "bidirectional"


class Role(str, Enum):
    """Position of a flagged row inside its matching pair."""

    LATER = "later"      # flagged by the predecessor pass
    EARLIER = "earlier"  # flagged by the successor pass


FilterValue = Callable[[Row, Role], Any]


def column_value(column: str) -> FilterValue:
    """Filter target reading the flagged row's own column."""
    return lambda row, role: row.get(column)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class MatchConfig:
    """
    One parameterisation of the engine.

    Parameters
    ----------
    group_keys : sequence of str
        Columns partitioning the table.  Required.
    extractor : callable
        row -> comparable value.  Used for both sides of a pair unless
        earlier_extractor / later_extractor are given.
    comparator : callable
        (later_value, earlier_value) -> bool.
    direction : Direction
        PREDECESSOR_ONLY flags only the later row of a pair; BIDIRECTIONAL
        also runs the successor pass and flags the earlier row.
    filters : tuple of ExclusionFilter
        Applied to filter_value(row, role) of every candidate.
    filter_value : callable, optional
        Selects the raw value the filters inspect.  Required when filters
        are set.
    columns : tuple of str
        Target columns every row must carry.
    sort_keys : sequence of str, optional
        Stable sort applied to the final result.
    label : str
        Noun used in the "Found N ..." log line.
    """

    group_keys: Sequence[str]
    extractor: Extractor
    comparator: Comparator = values_equal
    direction: Direction = Direction.PREDECESSOR_ONLY
    filters: tuple[ExclusionFilter, ...] = ()
    filter_value: FilterValue | None = None
    columns: tuple[str, ...] = ()
    sort_keys: Sequence[str] | None = None
    label: str = "duplicate(s)"
    earlier_extractor: Extractor | None = None
    later_extractor: Extractor | None = None

    def __post_init__(self) -> None:
        self.group_keys = normalize_keys(self.group_keys)
        if not self.group_keys:
            raise MissingParameter(
                "group_keys", "At least one grouping variable must be provided.",
            )
        if self.sort_keys is not None:
            self.sort_keys = normalize_keys(self.sort_keys)
        self.direction = Direction(self.direction)
        if self.filters and self.filter_value is None:
            raise ValueError("filter_value is required when filters are set")


def normalize_keys(keys: str | Iterable[str] | None) -> tuple[str, ...]:
    if keys is None:
        return ()
    if isinstance(keys, str):
        return (keys,) if keys else ()
    return tuple(k for k in keys if k)


# ---------------------------------------------------------------------------
# Partitioning
# ---------------------------------------------------------------------------


def partition_rows(
    table: Sequence[Row],
    group_keys: Sequence[str],
) -> dict[tuple, list[int]]:
    """
    Group row indices by their group-key values.

    Partitions come back in order of first appearance; indices inside a
    partition keep table order.
    """
    groups: dict[tuple, list[int]] = defaultdict(list)
    for idx, row in enumerate(table):
        groups[tuple(row[k] for k in group_keys)].append(idx)
    return dict(groups)


def _check_columns(table: Sequence[Row], columns: Iterable[str]) -> None:
    for col in columns:
        for row in table:
            if col not in row:
                raise MissingParameter(col, f"Column {col!r} not found in table.")


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def _matching_pairs(
    table: Sequence[Row],
    partitions: dict[tuple, list[int]],
    config: MatchConfig,
) -> list[tuple[int, int]]:
    """Return (earlier_idx, later_idx) for every adjacent matching pair."""
    earlier_of = config.earlier_extractor or config.extractor
    later_of = config.later_extractor or config.extractor

    pairs = []
    for indices in partitions.values():
        # Single-row partitions are still extracted so bad values surface
        earlier_vals = [earlier_of(table[i]) for i in indices]
        if later_of is earlier_of:
            later_vals = earlier_vals
        else:
            later_vals = [later_of(table[i]) for i in indices]

        for pos in range(1, len(indices)):
            if config.comparator(later_vals[pos], earlier_vals[pos - 1]):
                pairs.append((indices[pos - 1], indices[pos]))
    return pairs


def _excluded(row: Row, role: Role, config: MatchConfig) -> bool:
    if not config.filters:
        return False
    value = config.filter_value(row, role)
    return any(f.excludes(value) for f in config.filters)


def _pass_hits(
    table: Sequence[Row],
    flagged: Iterable[int],
    role: Role,
    config: MatchConfig,
) -> list[Row]:
    return [
        dict(table[i])
        for i in sorted(flagged)
        if not _excluded(table[i], role, config)
    ]


def _sort_key(sort_keys: Sequence[str]) -> Callable[[Row], tuple]:
    # Missing values sort last
    def key(row: Row) -> tuple:
        return tuple((row.get(k) is None, row.get(k)) for k in sort_keys)

    return key


def find_adjacent_matches(table: Sequence[Row], config: MatchConfig) -> list[Row]:
    """
    Run the engine over a table.

    Returns new row dicts (shallow copies, no helper columns) for every row
    taking part in an adjacent duplicate pair.  The input is not modified.
    """
    if table is None:
        raise MissingParameter("table", "A table must be provided.")

    _check_columns(table, (*config.group_keys, *config.columns))

    partitions = partition_rows(table, config.group_keys)
    pairs = _matching_pairs(table, partitions, config)
    logger.debug(
        "%d partitions, %d adjacent matching pairs", len(partitions), len(pairs),
    )

    predecessor_hits = _pass_hits(
        table, (later for _, later in pairs), Role.LATER, config,
    )

    if config.direction is Direction.BIDIRECTIONAL:
        successor_hits = _pass_hits(
            table, (earlier for earlier, _ in pairs), Role.EARLIER, config,
        )
        result = successor_hits + predecessor_hits
    else:
        result = predecessor_hits

    if config.sort_keys:
        result.sort(key=_sort_key(config.sort_keys))

    logger.info("Found %d %s.", len(result), config.label)
    return result


# ---------------------------------------------------------------------------
# Removing matches
# ---------------------------------------------------------------------------


def _row_identity(row: Row) -> tuple:
    return tuple(sorted(row.items()))


def anti_join(table: Sequence[Row], matches: Iterable[Row]) -> list[Row]:
    """
    Drop every row of table whose full set of column values equals a row in
    matches.  Identical rows are all dropped together.  Order is preserved.
    """
    drop = {_row_identity(m) for m in matches}
    kept = [dict(row) for row in table if _row_identity(row) not in drop]
    logger.info("Removed %d row(s), %d remain.", len(table) - len(kept), len(kept))
    return kept
