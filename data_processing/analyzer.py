from __future__ import annotations
from bisect import bisect_right
from typing import List, Dict, Any, Optional, Sequence
import pandas as pd

from common.models import (
    AggregateSnapshot,
    SchemaDescriptor,
    SectionComparison,
    SessionRecord,
    TimeSeriesPoint,
)
from .sheet_schema import display_name, section_color, section_groups
from .validators import section_keys

# -----------------------------
# Utilities
# -----------------------------

def records_to_frame(records: Sequence[SessionRecord], schema: SchemaDescriptor) -> pd.DataFrame:
    """
    One row per record: sessionId, customerName, sessionDate, totalTime and one column per section key.
    Always carries every section column, even for an empty collection.
    """
    keys = section_keys(schema)
    rows = []
    for r in records:
        row: Dict[str, Any] = {
            "sessionId": r.session_id,
            "customerName": r.customer_name,
            "sessionDate": r.session_date,
            "totalTime": float(r.total_time),
        }
        for k in keys:
            row[k] = float(r.sections.get(k, 0.0))
        rows.append(row)
    cols = ["sessionId", "customerName", "sessionDate", "totalTime", *keys]
    return pd.DataFrame(rows, columns=cols)


def average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return float(sum(values)) / len(values)


def percentile(value: float, dataset: Sequence[float]) -> float:
    """Share (0-100) of dataset elements <= value. Empty dataset is the caller's problem."""
    if not dataset:
        raise ValueError("percentile of an empty dataset is undefined")
    ordered = sorted(dataset)
    return bisect_right(ordered, value) / len(ordered) * 100


def pick_section(totals: Dict[str, float], keys: List[str], largest: bool) -> Optional[str]:
    # strict comparison keeps the first key on ties
    best: Optional[str] = None
    for k in keys:
        v = totals.get(k, 0.0)
        if best is None or (v > totals[best] if largest else v < totals[best]):
            best = k
    return best


def group_totals(records: Sequence[SessionRecord], schema: SchemaDescriptor) -> Dict[str, float]:
    """Summed time per section group (interior/exterior for the built-in schemas)."""
    out: Dict[str, float] = {}
    for key, group in section_groups(schema).items():
        out.setdefault(group, 0.0)
        out[group] += sum(float(r.sections.get(key, 0.0)) for r in records)
    return out


def record_group_totals(record: SessionRecord, schema: SchemaDescriptor) -> Dict[str, float]:
    return group_totals([record], schema)


# -----------------------------
# Public entry
# -----------------------------

def build_snapshot(records: Sequence[SessionRecord], schema: SchemaDescriptor) -> AggregateSnapshot:
    """Aggregate view of the current collection; empty input gives zero averages."""
    keys = section_keys(schema)
    df = records_to_frame(records, schema)

    if df.empty:
        totals = {k: 0.0 for k in keys}
        averages = {k: 0.0 for k in keys}
        avg_session = 0.0
    else:
        totals = {k: float(df[k].sum()) for k in keys}
        averages = {k: float(df[k].mean()) for k in keys}
        avg_session = float(df["totalTime"].mean())

    return AggregateSnapshot(
        total_users=int(len(df)),
        average_session_time=avg_session,
        section_averages=averages,
        section_totals=totals,
        most_viewed_section=pick_section(totals, keys, largest=True),
        least_viewed_section=pick_section(totals, keys, largest=False),
        group_totals=group_totals(records, schema),
    )


def section_distribution(snapshot: AggregateSnapshot, schema: SchemaDescriptor) -> List[Dict[str, Any]]:
    """Chart rows for average time per section (bar + share)."""
    keys = section_keys(schema)
    total = sum(snapshot.section_averages.get(k, 0.0) for k in keys)
    rows = []
    for k in keys:
        value = snapshot.section_averages.get(k, 0.0)
        rows.append({
            "section": k,
            "display_name": display_name(schema, k),
            "value": round(value, 1),
            "percentage": round(value / total * 100, 1) if total > 0 else 0.0,
            "color": section_color(schema, k),
        })
    return rows


def compare_to_average(
    record: SessionRecord,
    records: Sequence[SessionRecord],
    schema: SchemaDescriptor,
) -> List[SectionComparison]:
    """Per-section user time next to the average user, as the detail view shows it."""
    snapshot = build_snapshot(records, schema)
    out: List[SectionComparison] = []
    for k in section_keys(schema):
        user_time = float(record.sections.get(k, 0.0))
        avg_time = snapshot.section_averages.get(k, 0.0)
        out.append(SectionComparison(
            section=k,
            display_name=display_name(schema, k),
            user_time=user_time,
            average_time=avg_time,
            difference_pct=round((user_time - avg_time) / avg_time * 100, 0) if avg_time > 0 else None,
            share_pct=round(user_time / record.total_time * 100, 1) if record.total_time > 0 else 0.0,
        ))
    return out


def daily_timeseries(records: Sequence[SessionRecord], schema: SchemaDescriptor) -> List[TimeSeriesPoint]:
    """Sessions per calendar day of sessionDate; unparseable dates are dropped."""
    keys = section_keys(schema)
    df = records_to_frame(records, schema)
    if df.empty:
        return []

    df["ts"] = pd.to_datetime(df["sessionDate"], errors="coerce", utc=True, format="mixed")
    df = df.dropna(subset=["ts"])
    if df.empty:
        return []
    df["date"] = df["ts"].dt.strftime("%Y-%m-%d")

    points: List[TimeSeriesPoint] = []
    for day, sub in df.groupby("date", sort=True):
        points.append(TimeSeriesPoint(
            date=str(day),
            total_sessions=int(len(sub)),
            average_time=round(float(sub["totalTime"].mean()), 2),
            sections={k: round(float(sub[k].mean()), 2) for k in keys},
        ))
    return points
