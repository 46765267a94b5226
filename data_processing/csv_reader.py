# csv_reader.py
from __future__ import annotations
import math
from typing import List, Optional


def tokenize_line(line: str) -> List[str]:
    """
    Split one CSV line on commas outside double quotes.
    A '"' only toggles quoted mode and is kept in the value;
    callers strip quotes with clean_field / parse_numeric.
    Escaped quotes ("") are not recognised.
    """
    result: List[str] = []
    current: List[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
            current.append(ch)
        elif ch == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    result.append("".join(current).strip())
    return result


def clean_field(value: Optional[str]) -> str:
    return (value or "").replace('"', "").strip()


def parse_numeric(value: Optional[str]) -> float:
    """Quote/whitespace tolerant float parse; anything unusable becomes 0."""
    cleaned = clean_field(value)
    if not cleaned:
        return 0.0
    try:
        parsed = float(cleaned)
    except ValueError:
        return 0.0
    if math.isnan(parsed) or math.isinf(parsed):
        return 0.0
    return parsed


def field_at(fields: List[str], index: int) -> Optional[str]:
    """Value at a mapped index; -1 or out-of-range yields None."""
    if index < 0 or index >= len(fields):
        return None
    return fields[index]
