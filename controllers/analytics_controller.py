from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Any, Dict, Optional

from common.config import get_settings
from common.session_store import RecordStore
from data_processing.analyzer import (
    build_snapshot,
    compare_to_average,
    daily_timeseries,
    percentile,
    section_distribution,
)
from data_processing.exporter import save_report_excel
from data_processing.insights import overall_insights, user_insights
from data_processing.planner import build_report
from services.llm_client import call_llm_text, llm_available
from services.poller import DemoSource, SheetPoller
from services.sheets_client import SheetsClient

router = APIRouter()

settings = get_settings()
schema = settings.schema_descriptor()
row_policy = settings.effective_row_policy()
store = RecordStore()

if settings.data_source == "demo":
    source = DemoSource(schema, count=settings.demo_count)
else:
    source = SheetsClient(settings, schema, row_policy=row_policy)

poller = SheetPoller(source, store, interval=settings.refresh_interval_seconds)


def _dump(obj) -> Any:
    return obj.model_dump(by_alias=True)


def _meta() -> Dict[str, Any]:
    st = store.state
    return {
        "sheet_name": settings.sheet_name,
        "schema": schema.name,
        "row_policy": row_policy.value,
        "last_updated": st.updated_at.isoformat() if st.updated_at else None,
        "refresh_interval_seconds": settings.refresh_interval_seconds,
        "count": len(st.records),
        "error": st.error,
    }


@router.get("/sessions")
def list_sessions() -> Dict[str, Any]:
    records = store.records
    return {"ok": True, "code": "SESSIONS_OK", "data": {"sessions": [_dump(r) for r in records], **_meta()}}


@router.get("/sessions/{session_id:path}")
def session_detail(session_id: str) -> Dict[str, Any]:
    state = store.state
    records = state.records
    rec = state.get(session_id)
    if rec is None:
        raise HTTPException(status_code=404, detail="Session ID not found.")

    return {
        "ok": True,
        "code": "SESSION_OK",
        "data": {
            "session": _dump(rec),
            "percentile": percentile(rec.total_time, [r.total_time for r in records]),
            "comparison": [_dump(c) for c in compare_to_average(rec, records, schema)],
            "insights": user_insights(rec, records, schema),
        },
    }


@router.get("/summary")
def summary() -> Dict[str, Any]:
    snapshot = build_snapshot(store.records, schema)
    return {
        "ok": True,
        "code": "SUMMARY_OK",
        "data": {
            "snapshot": _dump(snapshot),
            "chart": section_distribution(snapshot, schema),
            **_meta(),
        },
    }


@router.get("/insights")
def insights() -> Dict[str, Any]:
    records = store.records
    snapshot = build_snapshot(records, schema)
    return {"ok": True, "code": "INSIGHTS_OK", "data": {"insights": overall_insights(snapshot, records, schema)}}


@router.get("/timeseries")
def timeseries() -> Dict[str, Any]:
    points = [_dump(p) for p in daily_timeseries(store.records, schema)]
    return {"ok": True, "code": "TIMESERIES_OK", "data": {"points": points}}


@router.get("/schema")
def active_schema() -> Dict[str, Any]:
    data = {"schema": schema.model_dump(mode="json"), "row_policy": row_policy.value}
    return {"ok": True, "code": "SCHEMA_OK", "data": data}


@router.post("/refresh")
def refresh() -> Dict[str, Any]:
    count = poller.refresh_once()
    return {"ok": True, "code": "REFRESH_OK", "data": {"count": count, **_meta()}}


class ReportIn(BaseModel):
    use_llm: bool = True
    filename_prefix: Optional[str] = None


def _report_text(use_llm: bool):
    records = store.records
    snapshot = build_snapshot(records, schema)
    found = overall_insights(snapshot, records, schema)
    llm_fn = call_llm_text if (use_llm and llm_available()) else None
    text = build_report(snapshot, found, schema, sheet_name=settings.sheet_name, llm_fn=llm_fn)
    return records, snapshot, found, text


@router.post("/report")
def report(payload: ReportIn) -> Dict[str, Any]:
    _, _, _, text = _report_text(payload.use_llm)
    return {"ok": True, "code": "REPORT_OK", "data": {"report": text}}


@router.post("/export")
def export(payload: ReportIn) -> Dict[str, Any]:
    records, snapshot, found, text = _report_text(payload.use_llm)
    saved = save_report_excel(
        records, snapshot, found, schema,
        report_text=text,
        filename_prefix=payload.filename_prefix,
        output_dir=settings.output_dir,
    )
    return {"ok": True, "code": "EXPORT_OK", "data": {"export": saved}}
