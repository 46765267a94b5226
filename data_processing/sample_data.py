import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from common.models import SchemaDescriptor, SessionRecord
from .validators import section_keys

NAMES = [
    "Alex Thompson", "Maria Garcia", "James Wilson", "Anna Lee",
    "Kevin Martinez", "Sophie Turner", "Daniel Kim", "Rachel Green",
]

# (low, spread) seconds per section; unknown keys use DEFAULT_RANGE
SECTION_RANGES = {
    "backSeats": (5, 15),
    "steering": (8, 20),
    "carTyres": (6, 18),
    "door": (5, 25),
    "dashboard": (5, 15),
    "frontSeat": (5, 20),
    "dicky": (2, 10),
    "carBackSide": (2, 10),
    "chargingPort": (1, 5),
    "frontLight": (2, 8),
}
DEFAULT_RANGE = (2, 10)


def generate_records(
    count: int,
    schema: SchemaDescriptor,
    seed: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[SessionRecord]:
    """Demo sessions spread over the last 30 days; same seed, same records."""
    rng = random.Random(seed)
    now = now or datetime.now(timezone.utc)
    keys = section_keys(schema)

    out: List[SessionRecord] = []
    for i in range(count):
        sections = {}
        for k in keys:
            low, spread = SECTION_RANGES.get(k, DEFAULT_RANGE)
            sections[k] = round(rng.random() * spread + low, 1)
        date = now - timedelta(days=rng.randint(0, 29))
        out.append(SessionRecord(
            customer_name=f"{rng.choice(NAMES)}_{i}",
            sections=sections,
            total_time=round(sum(sections.values()), 2),
            session_date=date.isoformat(),
            session_id=f"session_{i + 100:03d}",
        ))
    return out
