from typing import Dict, List, Any


def fmt_seconds(v, digits: int = 1) -> str:
    try:
        return f"{float(v):.{digits}f}s"
    except (TypeError, ValueError):
        return "-"


def fmt_diff(v) -> str:
    if v is None:
        return "n/a"
    return f"{v:+.0f}%"


def display_names(chart_rows: List[Dict[str, Any]]) -> Dict[str, str]:
    return {r["section"]: r["display_name"] for r in chart_rows}
