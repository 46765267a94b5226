import itertools
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from .models import SessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreState:
    records: Tuple[SessionRecord, ...] = ()
    updated_at: Optional[datetime] = None
    sequence: int = 0
    error: Optional[str] = None

    def get(self, session_id: str) -> Optional[SessionRecord]:
        for rec in self.records:
            if rec.session_id == session_id:
                return rec
        return None


class RecordStore:
    """
    In-memory holder for the current session collection.

    Writers publish a whole new StoreState; readers grab `state` once and work
    on that object, so they never see a half-replaced collection. Each refresh
    takes a sequence number before fetching; a completion older than what is
    already published is dropped. The staleness check and the publish happen
    under one lock.
    """

    def __init__(self):
        self._counter = itertools.count(1)
        self._lock = threading.Lock()
        self._state = StoreState()

    @property
    def state(self) -> StoreState:
        return self._state

    @property
    def records(self) -> Tuple[SessionRecord, ...]:
        return self._state.records

    def next_sequence(self) -> int:
        with self._lock:
            return next(self._counter)

    def replace(self, records, sequence: Optional[int] = None, error: Optional[str] = None) -> bool:
        seq = sequence if sequence is not None else self.next_sequence()
        with self._lock:
            current = self._state
            if seq < current.sequence:
                logger.info("dropping stale refresh #%d (published #%d)", seq, current.sequence)
                return False
            self._state = StoreState(
                records=tuple(records),
                updated_at=datetime.now(timezone.utc),
                sequence=seq,
                error=error,
            )
            return True
