from typing import List, Sequence

from common.models import ColumnRole, RowPolicy, SchemaDescriptor


class SchemaError(Exception):
    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(message)


# ===========================
# DESCRIPTOR CHECKS
# ===========================

_SINGLE_ROLES = (
    ColumnRole.CUSTOMER_ID,
    ColumnRole.CUSTOMER_NAME,
    ColumnRole.TIMESTAMP,
    ColumnRole.TOTAL_TIME,
)


def validate_schema(schema: SchemaDescriptor) -> SchemaDescriptor:
    """
    Reject descriptors the record builder cannot work with:
    no section column, duplicate field names, a column without labels,
    more than one column for a single-valued role, or min_columns < 1.
    """
    if not schema.columns:
        raise SchemaError("SCHEMA_EMPTY", f"schema '{schema.name}' has no columns")

    seen = set()
    for col in schema.columns:
        if col.field in seen:
            raise SchemaError("DUPLICATE_FIELD", f"field '{col.field}' declared twice")
        seen.add(col.field)
        if not [lbl for lbl in col.labels if lbl]:
            raise SchemaError("NO_LABELS", f"field '{col.field}' has no header labels")

    for role in _SINGLE_ROLES:
        n = sum(1 for c in schema.columns if c.role == role)
        if n > 1:
            raise SchemaError("DUPLICATE_ROLE", f"{n} columns declare role '{role.value}'")

    if not section_keys(schema):
        raise SchemaError("NO_SECTIONS", f"schema '{schema.name}' declares no section columns")

    if schema.min_columns < 1:
        raise SchemaError("BAD_MIN_COLUMNS", f"min_columns={schema.min_columns}")
    return schema


def section_keys(schema: SchemaDescriptor) -> List[str]:
    """Section keys in declaration order; this order breaks ties everywhere."""
    return [c.field for c in schema.columns if c.role == ColumnRole.SECTION]


# ===========================
# ROW RULES
# ===========================

def has_min_columns(fields: Sequence[str], min_columns: int) -> bool:
    return len(fields) >= min_columns


def accept_row(total_time: float, policy: RowPolicy) -> bool:
    if policy == RowPolicy.ACCEPT_ALL:
        return True
    return total_time > 0
