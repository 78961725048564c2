"""Shared fixtures for the address-dedup test suite."""

from __future__ import annotations

import pytest

# ---------------------------------------------------------------------------
# Sample visit records (one row per clinic visit, ordered by patient + date)
# ---------------------------------------------------------------------------

SAMPLE_VISITS: list[dict] = [
    {"patient_id": 1, "visit_date": "2020-01-01", "address": "123 Main St"},
    {"patient_id": 1, "visit_date": "2020-02-14", "address": "123 Main Street"},
    {"patient_id": 1, "visit_date": "2020-06-30", "address": "456 Oak Ave"},
    {"patient_id": 2, "visit_date": "2021-03-03", "address": "789 Pine Rd"},
    {"patient_id": 2, "visit_date": "2021-03-03", "address": "789 Pine Rd"},
    {"patient_id": 3, "visit_date": "2019-11-11", "address": "PO BOX 42"},
    {"patient_id": 3, "visit_date": "2019-12-12", "address": "PO BOX 42"},
]


@pytest.fixture
def visits() -> list[dict]:
    """Fresh copy of the sample visits so tests can check for mutation."""
    return [dict(r) for r in SAMPLE_VISITS]
