"""Row-adjacency duplicate detection for geographic address records."""

from .algorithms import (
    ExtractionRules,
    anti_join,
    find_adjacent_matches,
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
from .errors import AddressDedupError, InvalidPattern, MissingParameter, TypeMismatch

__version__ = "0.1.0"

__all__ = [
    "ExtractionRules",
    "anti_join",
    "find_adjacent_matches",
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
    "AddressDedupError",
    "InvalidPattern",
    "MissingParameter",
    "TypeMismatch",
]
