# insights.py
"""
Canned, threshold-based insight strings.

Rules are evaluated in a fixed order and fire independently of each other,
except inside an explicit if/elif chain. Same input, same output.
"""
from __future__ import annotations
from typing import List, Sequence

from common.models import AggregateSnapshot, SchemaDescriptor, SessionRecord
from .analyzer import percentile, record_group_totals, pick_section
from .sheet_schema import INTERIOR, EXTERIOR, display_name
from .validators import section_keys

STRONG_SESSIONS = 10
GROWING_SESSIONS = 5
EXCELLENT_AVG_SECONDS = 30
GOOD_AVG_SECONDS = 15
LONG_SESSION_FACTOR = 1.5
LONG_SESSION_SHARE = 0.3
DISPARITY_FACTOR = 3
GROUP_PREFERENCE_FACTOR = 1.5


def overall_insights(
    snapshot: AggregateSnapshot,
    records: Sequence[SessionRecord],
    schema: SchemaDescriptor,
) -> List[str]:
    if not records:
        return []

    insights: List[str] = []
    n = len(records)
    avg = snapshot.average_session_time
    total_time = sum(r.total_time for r in records)

    if n >= STRONG_SESSIONS:
        insights.append(f"Strong user engagement with {n} total AR/VR sessions! The platform is gaining good traction.")
    elif n >= GROWING_SESSIONS:
        insights.append(f"Growing user base with {n} sessions. Continue to monitor engagement trends.")

    if avg > EXCELLENT_AVG_SECONDS:
        insights.append(f"Excellent user engagement with {avg:.1f}s average session time, "
                        f"indicating high interest in the AR/VR experience.")
    elif avg > GOOD_AVG_SECONDS:
        insights.append(f"Good user engagement with {avg:.1f}s average session time. "
                        f"Users are spending quality time exploring.")
    else:
        insights.append(f"Quick exploration pattern with {avg:.1f}s average session time. "
                        f"Users may be efficiently finding what they need.")

    long_sessions = sum(1 for r in records if r.total_time > avg * LONG_SESSION_FACTOR)
    if long_sessions > n * LONG_SESSION_SHARE:
        insights.append(f"{round(long_sessions / n * 100)}% of users are highly engaged, "
                        f"spending significantly more time than average exploring the car.")

    most = snapshot.most_viewed_section
    least = snapshot.least_viewed_section
    most_total = snapshot.section_totals.get(most, 0.0) if most else 0.0
    least_total = snapshot.section_totals.get(least, 0.0) if least else 0.0

    if most and total_time > 0:
        insights.append(f"{display_name(schema, most)} is the most popular section, capturing "
                        f"{most_total / total_time * 100:.1f}% of total viewing time.")

    if most and least and least_total > 0 and most_total > least_total * DISPARITY_FACTOR:
        insights.append(f"Significant preference disparity: {display_name(schema, most)} receives "
                        f"{most_total / least_total:.1f}x more attention than {display_name(schema, least)}.")

    interior = snapshot.group_totals.get(INTERIOR, 0.0)
    exterior = snapshot.group_totals.get(EXTERIOR, 0.0)
    if interior > exterior * GROUP_PREFERENCE_FACTOR:
        insights.append(f"Users show strong preference for interior features, spending "
                        f"{interior / (interior + exterior) * 100:.0f}% of time on interior elements.")
    elif exterior > interior * GROUP_PREFERENCE_FACTOR:
        insights.append(f"Users are more interested in exterior features, focusing "
                        f"{exterior / (interior + exterior) * 100:.0f}% of time on external elements.")
    else:
        insights.append("Balanced interest in both interior and exterior features, "
                        "showing comprehensive car exploration behavior.")

    return insights


def user_insights(
    record: SessionRecord,
    records: Sequence[SessionRecord],
    schema: SchemaDescriptor,
) -> List[str]:
    """Insights for one user measured against everyone in the current collection."""
    insights: List[str] = []
    keys = section_keys(schema)
    sections = {k: float(record.sections.get(k, 0.0)) for k in keys}
    total = record.total_time

    totals = [r.total_time for r in records] or [total]
    rank = percentile(total, totals)
    if rank > 75:
        insights.append("This user spent significantly more time exploring the car than 75% of other users, "
                        "showing high engagement!")
    elif rank < 25:
        insights.append("This was a quick exploration session, spending less time than 75% of users. "
                        "They may have found what they needed efficiently.")

    top = pick_section(sections, keys, largest=True)
    bottom = pick_section(sections, keys, largest=False)
    top_time = sections.get(top, 0.0) if top else 0.0
    bottom_time = sections.get(bottom, 0.0) if bottom else 0.0

    if top and total > 0:
        share = top_time / total * 100
        if share > 40:
            insights.append(f"Highly focused on {display_name(schema, top)}, spending {share:.0f}% of total time "
                            f"there. This suggests strong interest in this area.")

    if top and bottom and bottom_time > 0 and top_time > bottom_time * DISPARITY_FACTOR:
        insights.append(f"Shows clear preference patterns: {display_name(schema, top)} received "
                        f"{top_time / bottom_time:.1f}x more attention than {display_name(schema, bottom)}.")

    groups = record_group_totals(record, schema)
    interior = groups.get(INTERIOR, 0.0)
    exterior = groups.get(EXTERIOR, 0.0)
    if exterior > interior:
        insights.append("Exterior-focused viewer: Spent more time examining the car's external features "
                        "than interior components.")
    elif interior > exterior * 2:
        insights.append("Interior enthusiast: Showed strong preference for exploring the car's interior "
                        "features and comfort elements.")

    if sections and total > 0:
        variation = (max(sections.values()) - min(sections.values())) / total
        if variation < 0.3:
            insights.append("Balanced exploration style: Distributed time relatively evenly across all car "
                            "sections, showing thorough examination habits.")
        elif variation > 0.6:
            insights.append("Selective explorer: Shows highly focused viewing behavior with clear "
                            "section preferences.")

    return insights
