# services/poller.py
import logging
import threading
from typing import List, Optional

from common.models import SchemaDescriptor, SessionRecord
from common.session_store import RecordStore
from data_processing.sample_data import generate_records

logger = logging.getLogger(__name__)


class DemoSource:
    """Stand-in for SheetsClient when DATA_SOURCE=demo."""

    def __init__(self, schema: SchemaDescriptor, count: int = 12, seed: Optional[int] = 7):
        self.schema = schema
        self.count = count
        self.seed = seed
        self.last_error: Optional[str] = None

    def fetch_records(self) -> List[SessionRecord]:
        return generate_records(self.count, self.schema, seed=self.seed)


class SheetPoller:
    """
    Refreshes the store from `source` now and then every `interval` seconds on a daemon thread.
    refresh_once() can also be called directly (POST /refresh); overlapping refreshes
    are resolved by the store's sequence numbers.
    """

    def __init__(self, source, store: RecordStore, interval: float = 30.0):
        self.source = source
        self.store = store
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def refresh_once(self) -> int:
        seq = self.store.next_sequence()
        try:
            records = self.source.fetch_records()
            error = getattr(self.source, "last_error", None)
        except Exception as e:
            logger.exception("refresh #%d failed", seq)
            records, error = [], str(e)
        self.store.replace(records, sequence=seq, error=error)
        return len(records)

    def _run(self):
        while not self._stop.is_set():
            self.refresh_once()
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="sheet-poller", daemon=True)
        self._thread.start()
        logger.info("poller started, interval=%ss", self.interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())
