"""
Address Dedup: Adjacent Duplicate Finders

Each finder configures the adjacency engine for one kind of repeated
measurement (same coordinates, same address, same house number, ...).

Typical use, with patient_id as the grouping variable:

    dups = get_sim_addrs(rows, "patient_id", "address", filter_blanks=True)
    cleaned = anti_join(rows, dups)

With include_context=True both rows of every matching pair are returned
(the successor pass runs as well) so the pair can be reviewed side by side.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..errors import MissingParameter
from .engine import (
    Direction,
    MatchConfig,
    Role,
    column_value,
    find_adjacent_matches,
)
from .extractors import (
    BLANK_FILTER,
    ExclusionFilter,
    coordinate_pair,
    date_value,
    first_match,
    pobox_filter,
    raw_value,
    trimmed_equal,
    values_equal,
)
from .rules import DEFAULT_RULES, ExtractionRules, compile_pattern

Rows = Sequence[dict[str, Any]]
Keys = str | Sequence[str]


def _require(value: Any, name: str, message: str) -> None:
    if value is None or value == "":
        raise MissingParameter(name, message)


def _direction(include_context: bool) -> Direction:
    return Direction.BIDIRECTIONAL if include_context else Direction.PREDECESSOR_ONLY


def _filters(
    rules: ExtractionRules,
    *,
    blanks: bool = False,
    pobox: bool = False,
) -> tuple[ExclusionFilter, ...]:
    active = []
    if blanks:
        active.append(BLANK_FILTER)
    if pobox:
        active.append(pobox_filter(rules))
    return tuple(active)


def _run_single_column(
    table: Rows,
    group_keys: Keys,
    column: str,
    extractor,
    *,
    filters: tuple[ExclusionFilter, ...] = (),
    comparator=None,
    include_context: bool,
    sort_keys: Keys | None,
    label: str = "duplicate(s)",
) -> list[dict[str, Any]]:
    config = MatchConfig(
        group_keys=group_keys,
        extractor=extractor,
        direction=_direction(include_context),
        filters=filters,
        comparator=comparator or values_equal,
        filter_value=column_value(column),
        columns=(column,),
        sort_keys=sort_keys,
        label=label,
    )
    return find_adjacent_matches(table, config)


# ---------------------------------------------------------------------------
# Finders
# ---------------------------------------------------------------------------


def get_same_coords(
    table: Rows,
    group_keys: Keys,
    lon: str | None = None,
    lat: str | None = None,
    *,
    include_context: bool = False,
    sort_keys: Keys | None = None,
) -> list[dict[str, Any]]:
    """Rows whose "lon, lat" pair repeats the adjacent row's."""
    _require(lon, "lon", "Longitude and latitude variables must be provided.")
    _require(lat, "lat", "Longitude and latitude variables must be provided.")

    config = MatchConfig(
        group_keys=group_keys,
        extractor=coordinate_pair(lon, lat),
        direction=_direction(include_context),
        columns=(lon, lat),
        sort_keys=sort_keys,
    )
    return find_adjacent_matches(table, config)


def get_same_addrs(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    filter_blanks: bool = False,
    filter_pobox: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """Exact address repeats.  Two blank addresses do count as a pair."""
    _require(addr_col, "addr_col", "Address variable must be provided.")
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        raw_value(addr_col),
        filters=_filters(rules, blanks=filter_blanks, pobox=filter_pobox),
        include_context=include_context,
        sort_keys=sort_keys,
    )


def get_sim_addrs(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    filter_blanks: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """
    Similarly written addresses: same house number and the same first few
    characters after it ("123 Main St" vs "123 Main Street").
    """
    _require(addr_col, "addr_col", "Address variable must be provided.")
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        first_match(addr_col, rules.regex("similar_address")),
        filters=_filters(rules, blanks=filter_blanks),
        include_context=include_context,
        sort_keys=sort_keys,
    )


def get_sim_text(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """Addresses whose first run of 2-4 letters is the same."""
    _require(addr_col, "addr_col", "Address variable must be provided.")
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        first_match(addr_col, rules.regex("similar_text")),
        include_context=include_context,
        sort_keys=sort_keys,
        label="text duplicate(s)",
    )


def get_adj_addrs(
    table: Rows,
    group_keys: Keys,
    first_addr: str | None = None,
    second_addr: str | None = None,
    *,
    filter_pobox: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """
    Cross-column repeats between two address columns on adjacent rows.

    A pair matches when first_addr of the earlier row equals second_addr of
    the later row.  The later row is flagged; with include_context the
    earlier row is flagged too.  The shared value is never blank, and with
    filter_pobox it must not be a PO Box.
    """
    _require(first_addr, "first_addr", "Two addresses must be provided.")
    _require(second_addr, "second_addr", "Two addresses must be provided.")
    rules = rules or DEFAULT_RULES

    def matched_value(row: dict[str, Any], role: Role) -> Any:
        # Both columns hold the same value once the pair has matched
        return row.get(second_addr) if role is Role.LATER else row.get(first_addr)

    config = MatchConfig(
        group_keys=group_keys,
        extractor=raw_value(first_addr),
        later_extractor=raw_value(second_addr),
        direction=_direction(include_context),
        filters=_filters(rules, blanks=True, pobox=filter_pobox),
        filter_value=matched_value,
        columns=(first_addr, second_addr),
        sort_keys=sort_keys,
    )
    return find_adjacent_matches(table, config)


def get_same_nums(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    filter_pobox: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """
    Addresses sharing their first run of digits (house or unit number).
    The PO Box filter looks at the full address, not just the digits.
    """
    _require(addr_col, "addr_col", "Address variable must be provided.")
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        first_match(addr_col, rules.regex("numeric_id")),
        filters=_filters(rules, pobox=filter_pobox),
        comparator=trimmed_equal,
        include_context=include_context,
        sort_keys=sort_keys,
    )


def get_sim_street_names(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    filter_pobox: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """Addresses whose first word of five or more letters is the same."""
    _require(addr_col, "addr_col", "Address variable must be provided.")
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        first_match(addr_col, rules.regex("street_name")),
        filters=_filters(rules, pobox=filter_pobox),
        include_context=include_context,
        sort_keys=sort_keys,
        label="similar street names",
    )


def get_facil_names(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    filter_pobox: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """
    Repeated facility or building names: the leading word (3+ letters) of
    an address that starts with a name rather than a number.
    """
    _require(addr_col, "addr_col", "Address variable must be provided.")
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        first_match(addr_col, rules.regex("facility_name")),
        filters=_filters(rules, pobox=filter_pobox),
        include_context=include_context,
        sort_keys=sort_keys,
        label="duplicate facility names",
    )


def get_same_dates(
    table: Rows,
    group_keys: Keys,
    date_col: str | None = None,
    *,
    include_context: bool = False,
    sort_keys: Keys | None = None,
) -> list[dict[str, Any]]:
    """Rows recorded on the same date as the adjacent row."""
    _require(date_col, "date_col", "Date variable must be provided.")

    return _run_single_column(
        table,
        group_keys,
        date_col,
        date_value(date_col),
        include_context=include_context,
        sort_keys=sort_keys,
        label="dates with more than one address",
    )


def get_precise_text(
    table: Rows,
    group_keys: Keys,
    addr_col: str | None = None,
    *,
    pattern: str | None = None,
    filter_pobox: bool = False,
    include_context: bool = False,
    sort_keys: Keys | None = None,
    rules: ExtractionRules | None = None,
) -> list[dict[str, Any]]:
    """
    Like get_sim_street_names, with a caller-supplied regular expression.
    The first match of pattern in each address is compared.
    """
    _require(addr_col, "addr_col", "Address variable must be provided.")
    _require(pattern, "pattern", "A regular expression pattern must be provided.")
    regex = compile_pattern(pattern)
    rules = rules or DEFAULT_RULES

    return _run_single_column(
        table,
        group_keys,
        addr_col,
        first_match(addr_col, regex),
        filters=_filters(rules, pobox=filter_pobox),
        include_context=include_context,
        sort_keys=sort_keys,
        label="similar text values",
    )


# Name -> finder, used by the command-line entry point
FINDERS = {
    "same-coords": get_same_coords,
    "same-addrs": get_same_addrs,
    "sim-addrs": get_sim_addrs,
    "sim-text": get_sim_text,
    "adj-addrs": get_adj_addrs,
    "same-nums": get_same_nums,
    "sim-street-names": get_sim_street_names,
    "facil-names": get_facil_names,
    "same-dates": get_same_dates,
    "precise-text": get_precise_text,
}
