# record_builder.py
from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from common.models import ColumnRole, RowPolicy, SchemaDescriptor, SessionRecord
from .csv_reader import tokenize_line, clean_field, parse_numeric, field_at
from .header_mapper import map_header, NOT_FOUND
from .sheet_schema import role_field
from .validators import section_keys, has_min_columns, accept_row

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _role_index(column_map: Dict[str, int], schema: SchemaDescriptor, role: ColumnRole) -> int:
    field = role_field(schema, role)
    return column_map.get(field, NOT_FOUND) if field else NOT_FOUND


def build_record(
    fields: List[str],
    line_index: int,
    column_map: Dict[str, int],
    schema: SchemaDescriptor,
    fetched_at: str,
) -> SessionRecord:
    """
    One SessionRecord from a tokenized data row.
    - missing section cells read as 0, negatives clamp to 0
    - totalTime comes from the total column when mapped, else sum(sections)
    - customer id falls back to the line index
    """
    sections: Dict[str, float] = {}
    for key in section_keys(schema):
        value = parse_numeric(field_at(fields, column_map.get(key, NOT_FOUND)))
        sections[key] = max(0.0, value)

    total_idx = _role_index(column_map, schema, ColumnRole.TOTAL_TIME)
    if total_idx != NOT_FOUND:
        total_time = max(0.0, parse_numeric(field_at(fields, total_idx)))
    else:
        total_time = sum(sections.values())

    customer_id = clean_field(field_at(fields, _role_index(column_map, schema, ColumnRole.CUSTOMER_ID)))
    customer_id = customer_id or str(line_index)

    customer_name = clean_field(field_at(fields, _role_index(column_map, schema, ColumnRole.CUSTOMER_NAME)))
    customer_name = customer_name or f"User {customer_id}"

    session_date = clean_field(field_at(fields, _role_index(column_map, schema, ColumnRole.TIMESTAMP)))

    return SessionRecord(
        customer_name=customer_name,
        sections=sections,
        total_time=total_time,
        session_date=session_date or fetched_at,
        session_id=f"sheets_{customer_id}",
    )


def parse_csv_text(
    text: str,
    schema: SchemaDescriptor,
    row_policy: Optional[RowPolicy] = None,
    fetched_at: Optional[str] = None,
) -> List[SessionRecord]:
    """
    Whole CSV export -> records in source order.
    Header is line 0; blank lines and rows shorter than schema.min_columns are skipped;
    row_policy (default: the schema's) decides whether zero-total rows are kept.
    """
    lines = (text or "").split("\n")
    if len(lines) < 2:
        return []

    policy = row_policy or schema.row_policy
    stamp = fetched_at or _now_iso()
    column_map = map_header(tokenize_line(lines[0].strip()), schema)

    records: List[SessionRecord] = []
    used_ids: Set[str] = set()
    for i in range(1, len(lines)):
        line = lines[i].strip()
        if not line:
            continue

        fields = tokenize_line(line)
        if not has_min_columns(fields, schema.min_columns):
            logger.debug("line %d skipped: %d fields < %d", i, len(fields), schema.min_columns)
            continue

        rec = build_record(fields, i, column_map, schema, stamp)
        if not accept_row(rec.total_time, policy):
            continue

        if rec.session_id in used_ids:
            rec.session_id = f"{rec.session_id}_{i}"
        used_ids.add(rec.session_id)
        records.append(rec)

    logger.info("parsed %d records (schema=%s, policy=%s)", len(records), schema.name, policy.value)
    return records
