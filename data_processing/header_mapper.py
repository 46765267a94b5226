from __future__ import annotations
import logging
from typing import Dict, List, Sequence

from common.models import ColumnSpec, MatchMode, SchemaDescriptor
from .csv_reader import clean_field

logger = logging.getLogger(__name__)

NOT_FOUND = -1


def _matches(header: str, label: str, mode: MatchMode) -> bool:
    if mode == MatchMode.EXACT:
        return header == label
    return label.lower() in header.lower()


def find_column(headers: Sequence[str], col: ColumnSpec) -> int:
    """First header cell matching any of the column's labels (labels tried in order)."""
    cleaned = [clean_field(h) for h in headers]
    for label in col.labels:
        if not label:
            continue
        for i, h in enumerate(cleaned):
            if _matches(h, label, col.match):
                return i
    return NOT_FOUND


def map_header(headers: Sequence[str], schema: SchemaDescriptor) -> Dict[str, int]:
    """
    field -> column index for every column in the descriptor.
    Absent columns map to NOT_FOUND; the record builder reads them as zero/default.
    """
    mapping = {col.field: find_column(headers, col) for col in schema.columns}
    missing: List[str] = [f for f, i in mapping.items() if i == NOT_FOUND]
    logger.debug("header=%s indices=%s", list(headers), mapping)
    if missing:
        logger.info("schema %s: columns not in header: %s", schema.name, ", ".join(missing))
    return mapping
