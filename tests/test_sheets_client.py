import httpx

from common.config import Settings
from common.models import RowPolicy
from data_processing.sheet_schema import VARIANT_A
from services.sheets_client import SheetsClient

CSV = (
    "customerID,customerName,BackSeats,Steering,CarTyres,Door,Dashboard,FrontSeat,TotalTime\n"
    "1,Alice,2.8,3.5,8.6,7.2,10.1,11.93,44.13\n"
    "2,Zed,0,0,0,0,0,0,0\n"
)


def _client(handler, **kwargs):
    settings = Settings(sheet_id="abc123", sheet_gid="42")
    return SheetsClient(settings, VARIANT_A, transport=httpx.MockTransport(handler), **kwargs)


def test_fetch_records_parses_export():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, text=CSV)

    client = _client(handler)
    records = client.fetch_records()

    assert seen["url"] == "https://docs.google.com/spreadsheets/d/abc123/export?format=csv&gid=42"
    assert [r.customer_name for r in records] == ["Alice"]
    assert client.last_error is None


def test_row_policy_override_is_used():
    client = _client(lambda request: httpx.Response(200, text=CSV), row_policy=RowPolicy.ACCEPT_ALL)
    assert [r.customer_name for r in client.fetch_records()] == ["Alice", "Zed"]


def test_http_error_degrades_to_empty():
    client = _client(lambda request: httpx.Response(500, text="boom"))
    assert client.fetch_records() == []
    assert client.last_error == "HTTP error! status: 500"
    assert client.test_connection() is False


def test_transport_error_degrades_to_empty():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    client = _client(handler)
    assert client.fetch_records() == []
    assert "ConnectError" in client.last_error


def test_error_is_cleared_after_success():
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(503)
        return httpx.Response(200, text=CSV)

    client = _client(handler)
    assert client.fetch_records() == []
    assert client.last_error is not None
    assert len(client.fetch_records()) == 1
    assert client.last_error is None
