import json
from typing import Callable, Dict, List, Optional, Sequence

from common.models import AggregateSnapshot, SchemaDescriptor
from .analyzer import section_distribution
from .sheet_schema import display_name

LlmFn = Callable[[List[Dict[str, str]]], Optional[str]]


def _render_section_table(rows: List[Dict]) -> str:
    """
    Markdown table of average seconds per section for the report body.
    """
    if not rows:
        return ""
    lines = ["| Section | Avg time (s) | Share |", "| --- | --- | --- |"]
    for r in rows:
        lines.append(f"| {r['display_name']} | {r['value']:.1f} | {r['percentage']:.1f}% |")
    return "\n".join(lines)


def _summary_lines(snapshot: AggregateSnapshot, schema: SchemaDescriptor) -> List[str]:
    most = display_name(schema, snapshot.most_viewed_section) if snapshot.most_viewed_section else "-"
    least = display_name(schema, snapshot.least_viewed_section) if snapshot.least_viewed_section else "-"
    return [
        f"Total users: {snapshot.total_users}",
        f"Average session time: {snapshot.average_session_time:.1f}s",
        f"Most viewed section: {most}",
        f"Least viewed section: {least}",
    ]


def build_template_report(
    snapshot: AggregateSnapshot,
    insights: Sequence[str],
    schema: SchemaDescriptor,
    sheet_name: str = "",
) -> str:
    title = f"Car viewing analytics report{f' ({sheet_name})' if sheet_name else ''}"
    parts = [title, "", *_summary_lines(snapshot, schema), "",
             _render_section_table(section_distribution(snapshot, schema))]
    if insights:
        parts += ["", "Insights:"] + [f"- {s}" for s in insights]
    return "\n".join(parts).strip()


def build_report(
    snapshot: AggregateSnapshot,
    insights: Sequence[str],
    schema: SchemaDescriptor,
    sheet_name: str = "",
    llm_fn: Optional[LlmFn] = None,
) -> str:
    """
    Narrative report over the current snapshot.
    - llm_fn given: ask the model to write it from the compact JSON below
    - no llm_fn, no data, or an empty model answer: template report
    """
    template = build_template_report(snapshot, insights, schema, sheet_name)
    if llm_fn is None or snapshot.total_users == 0:
        return template

    payload = {
        "sheet": sheet_name,
        "summary": _summary_lines(snapshot, schema),
        "sections": section_distribution(snapshot, schema),
        "group_totals": snapshot.group_totals,
        "insights": list(insights),
    }
    prompt = f"""
You write short internal reports about how visitors explore a car in an AR/VR showroom.

REQUIREMENTS:
1) Plain English, no code or JSON.
2) Structure:
   - Overview (users, average session time)
   - Section highlights (most/least viewed, interior vs exterior)
   - Recommendations
3) Under 250 words.

DATA:
{json.dumps(payload, ensure_ascii=False)}
"""
    text = llm_fn([
        {"role": "system", "content": "You are an assistant that writes concise analytics reports."},
        {"role": "user", "content": prompt},
    ])
    return text or template
