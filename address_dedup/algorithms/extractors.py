"""
Address Dedup: Field Extractors, Comparators and Exclusion Filters

Extractors turn a row into the value that is compared against a neighbouring
row.  An extractor returns None when nothing comparable can be derived; None
never equals anything (see values_equal).  Regex extractors also map an empty
match to None, so two rows without an extractable fragment are not a pair.
The exact-address extractor is the only one that keeps "" as a real value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable

from ..errors import TypeMismatch
from .rules import DEFAULT_RULES, ExtractionRules

Row = dict[str, Any]
Extractor = Callable[[Row], Any]
Comparator = Callable[[Any, Any], bool]


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------


def raw_value(column: str) -> Extractor:
    """Identity extractor: the column value as stored."""

    def extract(row: Row) -> Any:
        return row[column]

    return extract


def coordinate_pair(lon: str, lat: str) -> Extractor:
    """Join longitude and latitude into one "lon, lat" string."""

    def extract(row: Row) -> str | None:
        lon_val, lat_val = row[lon], row[lat]
        if lon_val is None or lat_val is None or lon_val == "" or lat_val == "":
            return None
        return f"{lon_val}, {lat_val}"

    return extract


def first_match(column: str, regex: re.Pattern[str]) -> Extractor:
    """First regex match anywhere in the column value, or None."""

    def extract(row: Row) -> str | None:
        value = row[column]
        if value is None:
            return None
        m = regex.search(str(value))
        if m is None or m.group(0) == "":
            return None
        return m.group(0)

    return extract


def date_value(column: str) -> Extractor:
    """
    Date extractor.

    Accepts date/datetime objects and ISO-8601 strings.  Blank cells are
    absent.  Any other value raises TypeMismatch rather than being coerced.
    """

    def extract(row: Row) -> date | None:
        return parse_date(row[column], column)

    return extract


def parse_date(value: Any, column: str = "date") -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise TypeMismatch(
                f"Column {column!r} holds {value!r}, which is not an ISO-8601 date."
            ) from None
    raise TypeMismatch(
        f"Column {column!r} holds a {type(value).__name__}, expected a date."
    )


# ---------------------------------------------------------------------------
# Comparators
# ---------------------------------------------------------------------------


def values_equal(a: Any, b: Any) -> bool:
    """Plain equality; an absent value on either side never matches."""
    if a is None or b is None:
        return False
    return a == b


def trimmed_equal(a: Any, b: Any) -> bool:
    """Equality after stripping surrounding whitespace."""
    if a is None or b is None:
        return False
    return str(a).strip() == str(b).strip()


# ---------------------------------------------------------------------------
# Exclusion filters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExclusionFilter:
    """Named predicate; a candidate row is dropped when it returns True."""

    name: str
    predicate: Callable[[Any], bool]

    def excludes(self, value: Any) -> bool:
        return self.predicate(value)


def is_blank(value: Any) -> bool:
    return value == ""


def is_pobox(value: Any, rules: ExtractionRules | None = None) -> bool:
    """True when the value looks like a PO Box address (case-sensitive)."""
    if value is None:
        return False
    rules = rules or DEFAULT_RULES
    return rules.regex("pobox").search(str(value)) is not None


BLANK_FILTER = ExclusionFilter("blank", is_blank)


def pobox_filter(rules: ExtractionRules | None = None) -> ExclusionFilter:
    rules = rules or DEFAULT_RULES
    return ExclusionFilter("pobox", lambda value: is_pobox(value, rules))
