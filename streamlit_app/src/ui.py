import streamlit as st
import pandas as pd
from typing import List, Dict, Any

from .utils import fmt_seconds, fmt_diff


def sessions_to_df(sessions: List[Dict[str, Any]], names: Dict[str, str]) -> pd.DataFrame:
    rows = []
    for s in sessions:
        row = {"Customer": s.get("customerName", ""), "Total Time (s)": round(float(s.get("totalTime", 0)), 1)}
        for key, label in names.items():
            row[label] = round(float((s.get("sections") or {}).get(key, 0)), 1)
        rows.append(row)
    return pd.DataFrame(rows)


def chart_df(chart_rows: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(chart_rows)
    if df.empty:
        return df
    return df.set_index("display_name")[["value"]].rename(columns={"value": "Average time (s)"})


def comparison_to_df(comparison: List[Dict[str, Any]]) -> pd.DataFrame:
    rows = []
    for c in comparison:
        rows.append({
            "Section": c["displayName"],
            "User (s)": round(c["userTime"], 1),
            "Average user (s)": round(c["averageTime"], 1),
            "Difference": fmt_diff(c.get("differencePct")),
            "Share of session": f"{c['sharePct']:.1f}%",
        })
    return pd.DataFrame(rows)


def render_key_stats(snapshot: Dict[str, Any], names: Dict[str, str], connected: bool):
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Total Users", snapshot.get("totalUsers", 0), help="Active AR/VR sessions")
    with c2:
        st.metric("Average Session Time", fmt_seconds(snapshot.get("averageSessionTime", 0)))
    with c3:
        most = snapshot.get("mostViewedSection")
        avg = (snapshot.get("sectionAverages") or {}).get(most, 0)
        st.metric("Most Viewed", names.get(most, most or "-"), f"{avg:.1f}s average", delta_color="off")
    with c4:
        st.metric("Data Source", "Connected" if connected else "No Data")


def render_insights(items: List[str], title: str):
    if not items:
        return
    st.markdown(f"**{title}**")
    for text in items:
        st.info(text)


def render_user_detail(detail: Dict[str, Any]):
    sess = detail.get("session") or {}
    st.markdown(f"### {sess.get('customerName', '')}")
    d1, d2, d3 = st.columns(3)
    with d1:
        st.metric("Total Time", fmt_seconds(sess.get("totalTime", 0)))
    with d2:
        st.metric("Percentile", f"{detail.get('percentile', 0):.0f}")
    with d3:
        st.caption(f"Session: {sess.get('sessionId', '')}")
        st.caption(f"Date: {sess.get('sessionDate', '')}")

    comp = comparison_to_df(detail.get("comparison") or [])
    if not comp.empty:
        st.bar_chart(comp.set_index("Section")[["User (s)", "Average user (s)"]])
        st.dataframe(comp, use_container_width=True, hide_index=True)

    render_insights(detail.get("insights") or [], "User insights")
