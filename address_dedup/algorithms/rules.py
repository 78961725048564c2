"""
Address Dedup: Extraction Rules

Regular expressions used to derive the comparable fragment of an address
value, plus the PO Box exclusion pattern.  Defaults live here and can be
overridden from a YAML file (see config/match_rules.yaml).

Dependencies:
    pip install pyyaml
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from ..errors import InvalidPattern


# ---------------------------------------------------------------------------
# Defaults (overridden by match_rules.yaml at runtime)
# ---------------------------------------------------------------------------

# Dots are left unescaped: "P.O" also catches "P O", "P-O" etc.
DEFAULT_POBOX_PATTERN = r"^PO BOX|^P.O. BOX|^P O BOX|^P.O.|^POBOX|^P.O|\bPO BOX\b"

# House number followed by up to six letters/spaces ("123 Main St" -> "123 Main ")
DEFAULT_SIMILAR_ADDRESS_PATTERN = r"^[0-9]+[A-Za-z\s]{1,6}"

DEFAULT_SIMILAR_TEXT_PATTERN = r"[A-Za-z]{2,4}"
DEFAULT_NUMERIC_ID_PATTERN = r"[0-9]+"
DEFAULT_STREET_NAME_PATTERN = r"\b[A-Za-z]{5,}"

# Leading word of a facility name, only when another word follows it
DEFAULT_FACILITY_NAME_PATTERN = r"^[A-Za-z]{3,}(?=\s[A-Za-z])"

def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a pattern, raising InvalidPattern instead of re.error."""
    if not isinstance(pattern, str):
        raise InvalidPattern(repr(pattern), "pattern must be a string")
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidPattern(pattern, str(exc)) from exc


@dataclass
class ExtractionRules:
    """Pattern set used by the call-site matchers."""

    pobox: str = DEFAULT_POBOX_PATTERN
    similar_address: str = DEFAULT_SIMILAR_ADDRESS_PATTERN
    similar_text: str = DEFAULT_SIMILAR_TEXT_PATTERN
    numeric_id: str = DEFAULT_NUMERIC_ID_PATTERN
    street_name: str = DEFAULT_STREET_NAME_PATTERN
    facility_name: str = DEFAULT_FACILITY_NAME_PATTERN
    _compiled: dict[str, re.Pattern[str]] = field(
        default_factory=dict, init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        for f in fields(self):
            if not f.init:
                continue
            self._compiled[f.name] = compile_pattern(getattr(self, f.name))

    def regex(self, name: str) -> re.Pattern[str]:
        """Return the compiled pattern for a rule name."""
        return self._compiled[name]

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ExtractionRules":
        """Load patterns from a YAML file; omitted keys keep their defaults."""
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        patterns = raw.get("patterns", {}) or {}
        known = {f.name for f in fields(cls) if f.init}
        kwargs = {
            name: value
            for name, value in patterns.items()
            if name in known and value is not None
        }
        return cls(**kwargs)


DEFAULT_RULES = ExtractionRules()
