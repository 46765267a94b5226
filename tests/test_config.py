import json

import pytest

from common.config import DEFAULT_SHEET_ID, ConfigError, get_settings, load_settings
from common.models import RowPolicy

ENV_VARS = [
    "GOOGLE_SHEETS_ID", "GOOGLE_SHEETS_GID", "GOOGLE_SHEETS_NAME", "SHEET_SCHEMA", "SHEET_SCHEMA_FILE",
    "ROW_POLICY", "DATA_SOURCE", "REFRESH_INTERVAL_SECONDS", "HTTP_TIMEOUT_SECONDS", "OUTPUT_DIR", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_fall_back_to_builtin_sheet(caplog):
    with caplog.at_level("WARNING"):
        s = load_settings()
    assert s.sheet_id == DEFAULT_SHEET_ID
    assert s.sheet_gid == "0"
    assert s.refresh_interval_seconds == 30
    assert s.http_timeout_seconds is None
    assert s.schema_descriptor().name == "variant_a"
    assert s.effective_row_policy() is RowPolicy.NONZERO_TOTAL
    assert "Using fallback ID" in caplog.text


def test_variant_b_defaults_to_accept_all(monkeypatch):
    monkeypatch.setenv("SHEET_SCHEMA", "variant_b")
    s = load_settings()
    assert s.schema_descriptor().min_columns == 3
    assert s.effective_row_policy() is RowPolicy.ACCEPT_ALL


def test_row_policy_override(monkeypatch):
    monkeypatch.setenv("ROW_POLICY", "ACCEPT_ALL")
    assert load_settings().effective_row_policy() is RowPolicy.ACCEPT_ALL


@pytest.mark.parametrize("name,value", [
    ("ROW_POLICY", "everything"),
    ("DATA_SOURCE", "ftp"),
    ("REFRESH_INTERVAL_SECONDS", "soon"),
    ("REFRESH_INTERVAL_SECONDS", "0"),
    ("HTTP_TIMEOUT_SECONDS", "-1"),
    ("SHEET_SCHEMA", "variant_z"),
])
def test_bad_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_schema_file(monkeypatch, tmp_path):
    path = tmp_path / "layout.json"
    path.write_text(json.dumps({
        "name": "kiosk",
        "min_columns": 2,
        "row_policy": "accept_all",
        "columns": [
            {"field": "customerName", "labels": ["Visitor"], "match": "exact", "role": "customer_name"},
            {"field": "roof", "labels": ["Roof"], "match": "exact", "role": "section", "group": "exterior"},
        ],
    }))
    monkeypatch.setenv("SHEET_SCHEMA_FILE", str(path))
    schema = load_settings().schema_descriptor()
    assert schema.name == "kiosk"
    assert [c.field for c in schema.columns] == ["customerName", "roof"]


def test_invalid_schema_file(monkeypatch, tmp_path):
    path = tmp_path / "layout.json"
    path.write_text(json.dumps({"name": "empty", "min_columns": 1, "row_policy": "accept_all", "columns": []}))
    monkeypatch.setenv("SHEET_SCHEMA_FILE", str(path))
    with pytest.raises(ConfigError):
        load_settings()


def test_get_settings_loads_once(caplog):
    get_settings.cache_clear()
    try:
        with caplog.at_level("WARNING"):
            first = get_settings()
            second = get_settings()
        assert first is second
        assert caplog.text.count("Using fallback ID") == 1
    finally:
        get_settings.cache_clear()
