"""Shared builders for the analytics tests."""
from __future__ import annotations

import pytest

from common.models import SessionRecord
from data_processing.sheet_schema import VARIANT_A



def make_record(name: str = "u", date: str = "2024-01-15T10:30:00Z", **sections: float) -> SessionRecord:
    full = {k: 0.0 for k in ("backSeats", "steering", "carTyres", "door", "dashboard", "frontSeat")}
    full.update({k: float(v) for k, v in sections.items()})
    return SessionRecord(
        customer_name=name,
        sections=full,
        total_time=sum(full.values()),
        session_date=date,
        session_id=f"sheets_{name}",
    )


@pytest.fixture
def schema_a():
    return VARIANT_A


@pytest.fixture
def record():
    return make_record
