"""Address Dedup: adjacency matching algorithms."""

from .engine import (
    Direction,
    MatchConfig,
    Role,
    anti_join,
    find_adjacent_matches,
    partition_rows,
)
from .extractors import (
    BLANK_FILTER,
    ExclusionFilter,
    is_blank,
    is_pobox,
    pobox_filter,
)
from .matchers import (
    FINDERS,
    get_adj_addrs,
    get_facil_names,
    get_precise_text,
    get_same_addrs,
    get_same_coords,
    get_same_dates,
    get_same_nums,
    get_sim_addrs,
    get_sim_street_names,
    get_sim_text,
)
from .rules import DEFAULT_RULES, ExtractionRules

__all__ = [
    "Direction",
    "MatchConfig",
    "Role",
    "anti_join",
    "find_adjacent_matches",
    "partition_rows",
    "BLANK_FILTER",
    "ExclusionFilter",
    "is_blank",
    "is_pobox",
    "pobox_filter",
    "FINDERS",
    "get_adj_addrs",
    "get_facil_names",
    "get_precise_text",
    "get_same_addrs",
    "get_same_coords",
    "get_same_dates",
    "get_same_nums",
    "get_sim_addrs",
    "get_sim_street_names",
    "get_sim_text",
    "DEFAULT_RULES",
    "ExtractionRules",
]
