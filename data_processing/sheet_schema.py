from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional

from common.models import ColumnSpec, ColumnRole, MatchMode, RowPolicy, SchemaDescriptor
from .validators import SchemaError, validate_schema, section_keys

INTERIOR = "interior"
EXTERIOR = "exterior"


def _section(field: str, label: str, display: str, group: str, color: str, match: MatchMode) -> ColumnSpec:
    return ColumnSpec(field=field, labels=[label], match=match, role=ColumnRole.SECTION,
                      display_name=display, group=group, color=color)


_C = MatchMode.CONTAINS
_E = MatchMode.EXACT

# customerID,customerName,BackSeats,Steering,CarTyres,Door,Dashboard,FrontSeat,TotalTime
VARIANT_A = SchemaDescriptor(
    name="variant_a",
    min_columns=7,
    row_policy=RowPolicy.NONZERO_TOTAL,
    columns=[
        ColumnSpec(field="customerId", labels=["customerid"], match=_C, role=ColumnRole.CUSTOMER_ID),
        ColumnSpec(field="customerName", labels=["customername"], match=_C, role=ColumnRole.CUSTOMER_NAME),
        _section("backSeats", "backseats", "Back Seats", INTERIOR, "#3b82f6", _C),
        _section("steering", "steering", "Steering", INTERIOR, "#ef4444", _C),
        _section("carTyres", "cartyres", "Car Tyres", EXTERIOR, "#10b981", _C),
        _section("door", "door", "Door", EXTERIOR, "#8b5cf6", _C),
        _section("dashboard", "dashboard", "Dashboard", INTERIOR, "#f59e0b", _C),
        _section("frontSeat", "frontseat", "Front Seat", INTERIOR, "#06b6d4", _C),
        ColumnSpec(field="totalTime", labels=["totaltime"], match=_C, role=ColumnRole.TOTAL_TIME),
    ],
)

# Form-response layout; labels (typos included) are what the sheet producer writes.
VARIANT_B = SchemaDescriptor(
    name="variant_b",
    min_columns=3,
    row_policy=RowPolicy.ACCEPT_ALL,
    columns=[
        ColumnSpec(field="timestamp", labels=["Timestamp"], match=_E, role=ColumnRole.TIMESTAMP),
        ColumnSpec(field="customerName", labels=["Customer Name"], match=_E, role=ColumnRole.CUSTOMER_NAME),
        _section("dashboard", "DashBoard", "Dashboard", INTERIOR, "#f59e0b", _E),
        _section("steering", "Sterring", "Steering", INTERIOR, "#ef4444", _E),
        _section("door", "Door", "Door", EXTERIOR, "#8b5cf6", _E),
        _section("dicky", "Dicky", "Dicky", EXTERIOR, "#ec4899", _E),
        _section("frontSeat", "Front Seat", "Front Seat", INTERIOR, "#06b6d4", _E),
        _section("backSeats", "Back Seats", "Back Seats", INTERIOR, "#3b82f6", _E),
        _section("carTyres", "Car Tyres", "Car Tyres", EXTERIOR, "#10b981", _E),
        _section("carBackSide", "Car BackSide", "Car Back Side", EXTERIOR, "#84cc16", _E),
        _section("chargingPort", "Charging Port", "Charging Port", EXTERIOR, "#f97316", _E),
        _section("frontLight", "Front & Light", "Front Light", EXTERIOR, "#6366f1", _E),
    ],
)

BUILTIN_SCHEMAS: Dict[str, SchemaDescriptor] = {
    VARIANT_A.name: VARIANT_A,
    VARIANT_B.name: VARIANT_B,
}


def get_builtin_schema(name: str) -> SchemaDescriptor:
    key = (name or "").strip().lower()
    if key not in BUILTIN_SCHEMAS:
        raise SchemaError("UNKNOWN_SCHEMA", f"unknown schema '{name}', expected one of {sorted(BUILTIN_SCHEMAS)}")
    return BUILTIN_SCHEMAS[key]


def load_schema_file(path: str | Path) -> SchemaDescriptor:
    """Read a JSON descriptor ({name, columns: [...], min_columns, row_policy}) and validate it."""
    text = Path(path).read_text(encoding="utf-8")
    return validate_schema(SchemaDescriptor.model_validate_json(text))


def display_name(schema: SchemaDescriptor, field: str) -> str:
    for col in schema.columns:
        if col.field == field:
            return col.display_name or field
    return field


def section_color(schema: SchemaDescriptor, field: str, default: str = "#8884d8") -> str:
    for col in schema.columns:
        if col.field == field and col.color:
            return col.color
    return default


def section_groups(schema: SchemaDescriptor) -> Dict[str, str]:
    """section key -> group name; ungrouped sections land in 'other'."""
    return {c.field: (c.group or "other") for c in schema.columns if c.role == ColumnRole.SECTION}


def role_field(schema: SchemaDescriptor, role: ColumnRole) -> Optional[str]:
    for col in schema.columns:
        if col.role == role:
            return col.field
    return None


__all__ = [
    "VARIANT_A", "VARIANT_B", "BUILTIN_SCHEMAS", "INTERIOR", "EXTERIOR",
    "get_builtin_schema", "load_schema_file", "display_name", "section_color",
    "section_groups", "role_field", "section_keys",
]
