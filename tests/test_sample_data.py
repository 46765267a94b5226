from datetime import datetime, timezone

from data_processing.sample_data import generate_records
from data_processing.sheet_schema import VARIANT_B

NOW = datetime(2025, 10, 18, tzinfo=timezone.utc)


def test_same_seed_same_records(schema_a):
    a = generate_records(5, schema_a, seed=1, now=NOW)
    b = generate_records(5, schema_a, seed=1, now=NOW)
    assert [r.model_dump() for r in a] == [r.model_dump() for r in b]


def test_records_follow_schema(schema_a):
    records = generate_records(3, schema_a, seed=2, now=NOW)
    assert [r.session_id for r in records] == ["session_100", "session_101", "session_102"]
    for r in records:
        assert set(r.sections) == {"backSeats", "steering", "carTyres", "door", "dashboard", "frontSeat"}
        assert all(v > 0 for v in r.sections.values())
        assert abs(r.total_time - sum(r.sections.values())) < 0.01
        assert datetime.fromisoformat(r.session_date) <= NOW


def test_variant_b_sections():
    records = generate_records(2, VARIANT_B, seed=3, now=NOW)
    assert "chargingPort" in records[0].sections
    assert "timestamp" not in records[0].sections
