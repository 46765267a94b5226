import os
import httpx
from urllib.parse import quote
from typing import Optional, Dict, Any
from dotenv import load_dotenv

load_dotenv()
BASE = os.getenv("API_BASE_URL", "http://127.0.0.1:8000").rstrip("/")
REFRESH_SECONDS = float(os.getenv("REFRESH_INTERVAL_SECONDS", "30") or 30)


def _client() -> httpx.Client:
    return httpx.Client(timeout=60)


def _unwrap(r: httpx.Response) -> Dict[str, Any]:
    try:
        r.raise_for_status()
    except httpx.HTTPStatusError:
        try:
            body = r.json()
        except ValueError:
            return {"ok": False, "code": "HTTP_ERROR", "error": r.text}
        if isinstance(body, dict):
            body.setdefault("ok", False)
            body.setdefault("error", body.get("detail"))
            return body
        return {"ok": False, "code": "HTTP_ERROR", "error": str(body)}
    try:
        parsed = r.json()
    except ValueError:
        return {"ok": False, "code": "BAD_JSON", "error": r.text}
    if isinstance(parsed, dict):
        parsed.setdefault("ok", True)
    return parsed


def _get(path: str) -> Dict[str, Any]:
    try:
        with _client() as c:
            return _unwrap(c.get(f"{BASE}{path}"))
    except httpx.HTTPError as e:
        return {"ok": False, "code": "BACKEND_UNREACHABLE", "error": str(e)}


def _post(path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    try:
        with _client() as c:
            return _unwrap(c.post(f"{BASE}{path}", json=json or {}))
    except httpx.HTTPError as e:
        return {"ok": False, "code": "BACKEND_UNREACHABLE", "error": str(e)}


def sessions() -> Dict[str, Any]:
    return _get("/sessions")

def session_detail(session_id: str) -> Dict[str, Any]:
    return _get(f"/sessions/{quote(session_id, safe='')}")

def summary() -> Dict[str, Any]:
    return _get("/summary")

def insights() -> Dict[str, Any]:
    return _get("/insights")

def timeseries() -> Dict[str, Any]:
    return _get("/timeseries")

def refresh() -> Dict[str, Any]:
    return _post("/refresh")

def report(use_llm: bool = True) -> Dict[str, Any]:
    return _post("/report", json={"use_llm": use_llm})

def export(use_llm: bool = False) -> Dict[str, Any]:
    return _post("/export", json={"use_llm": use_llm})

def health() -> Dict[str, Any]:
    return _get("/health")

def static_url(path: str) -> str:
    return BASE + path if path.startswith("/") else path
