# services/sheets_client.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

import httpx

from common.config import Settings
from common.models import RowPolicy, SchemaDescriptor, SessionRecord
from data_processing.record_builder import parse_csv_text

logger = logging.getLogger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid={gid}"


class SheetsClient:
    """
    Pulls the public CSV export of one sheet tab and turns it into SessionRecords.
    No auth, no retry: a failed fetch is logged and reads as an empty collection.
    """

    def __init__(
        self,
        settings: Settings,
        schema: SchemaDescriptor,
        row_policy: Optional[RowPolicy] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.settings = settings
        self.schema = schema
        self.row_policy = row_policy or schema.row_policy
        self._transport = transport
        self.last_error: Optional[str] = None

    @property
    def export_url(self) -> str:
        return EXPORT_URL.format(sheet_id=self.settings.sheet_id, gid=self.settings.sheet_gid)

    def _client(self) -> httpx.Client:
        kwargs = {"transport": self._transport, "follow_redirects": True}
        if self.settings.http_timeout_seconds:
            kwargs["timeout"] = self.settings.http_timeout_seconds
        return httpx.Client(**kwargs)

    def fetch_csv(self) -> str:
        with self._client() as c:
            r = c.get(self.export_url)
            r.raise_for_status()
            return r.text

    def fetch_records(self) -> List[SessionRecord]:
        fetched_at = datetime.now(timezone.utc).isoformat()
        try:
            text = self.fetch_csv()
        except httpx.HTTPStatusError as e:
            self.last_error = f"HTTP error! status: {e.response.status_code}"
            logger.error("Error fetching Google Sheets data: %s", self.last_error)
            return []
        except httpx.HTTPError as e:
            self.last_error = f"{type(e).__name__}: {e}"
            logger.error("Error fetching Google Sheets data: %s", self.last_error)
            return []

        self.last_error = None
        return parse_csv_text(text, self.schema, row_policy=self.row_policy, fetched_at=fetched_at)

    def test_connection(self) -> bool:
        return len(self.fetch_records()) > 0
