# -*- coding: utf-8 -*-
"""
exporter.py
- Writes an Excel workbook into OUTPUT_DIR (default ./output).
- Returns {path, filename, url} so the dashboard can offer a download (/static/<filename>).
- Sheets: Sessions (one row per record), Summary (per-section stats), Insights, Report (optional text).
"""
from __future__ import annotations
import os, time
from pathlib import Path
from typing import Dict, Optional, Any, Sequence

import pandas as pd

from common.models import AggregateSnapshot, SchemaDescriptor, SessionRecord
from .analyzer import records_to_frame, section_distribution
from .sheet_schema import display_name
from .validators import section_keys

MIME_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _output_dir(output_dir: Optional[str] = None) -> str:
    d = output_dir or os.getenv("OUTPUT_DIR", os.path.join(os.getcwd(), "output"))
    Path(d).mkdir(parents=True, exist_ok=True)
    return d


def _sessions_sheet(records: Sequence[SessionRecord], schema: SchemaDescriptor) -> pd.DataFrame:
    df = records_to_frame(records, schema)
    rename = {k: display_name(schema, k) for k in section_keys(schema)}
    rename.update({"sessionId": "Session ID", "customerName": "Customer", "sessionDate": "Session Date",
                   "totalTime": "Total Time (s)"})
    return df.rename(columns=rename)


def _summary_sheet(snapshot: AggregateSnapshot, schema: SchemaDescriptor) -> pd.DataFrame:
    rows = []
    for r in section_distribution(snapshot, schema):
        rows.append({
            "Section": r["display_name"],
            "Average (s)": r["value"],
            "Total (s)": round(snapshot.section_totals.get(r["section"], 0.0), 2),
            "Share (%)": r["percentage"],
        })
    return pd.DataFrame(rows, columns=["Section", "Average (s)", "Total (s)", "Share (%)"])


def save_report_excel(
    records: Sequence[SessionRecord],
    snapshot: AggregateSnapshot,
    insights: Sequence[str],
    schema: SchemaDescriptor,
    report_text: Optional[str] = None,
    filename_prefix: Optional[str] = None,
    output_dir: Optional[str] = None,
) -> Dict[str, Any]:
    """
    return:
      { "path": <path>, "filename": <basename>, "url": "/static/<filename>", "mime": MIME_XLSX }
    """
    out_dir = _output_dir(output_dir)
    ts = time.strftime("%Y%m%d_%H%M%S")
    base = f"{filename_prefix.strip()}_" if filename_prefix else ""
    filename = f"{base}car_analytics_{ts}.xlsx"
    path = os.path.join(out_dir, filename)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        _sessions_sheet(records, schema).to_excel(writer, sheet_name="Sessions", index=False)
        _summary_sheet(snapshot, schema).to_excel(writer, sheet_name="Summary", index=False)
        pd.DataFrame({"Insight": list(insights)}).to_excel(writer, sheet_name="Insights", index=False)
        if report_text:
            ws = writer.book.create_sheet("Report")
            for i, line in enumerate(report_text.splitlines(), start=1):
                ws.cell(row=i, column=1).value = line

    return {"path": path, "filename": filename, "url": f"/static/{filename}", "mime": MIME_XLSX}

