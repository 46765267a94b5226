# streamlit_app/app.py
import streamlit as st
import pandas as pd
from src.state import init_state
from src import api
from src.ui import (
    chart_df,
    render_insights,
    render_key_stats,
    render_user_detail,
    sessions_to_df,
)
from src.utils import display_names

st.set_page_config(page_title="Car Analytics Dashboard", layout="wide")
init_state()


st.title("Car Analytics Dashboard")
st.caption("Real-time viewing analytics from AR/VR car sessions")

b1, b2, _ = st.columns([1, 1, 4])
with b1:
    if st.button("Refresh now"):
        r = api.refresh()
        if not r.get("ok"):
            st.error(f"{r.get('code')} - {r.get('error')}")
with b2:
    if st.button("Test /health"):
        st.json(api.health())


def render_selected():
    sid = st.session_state.get("selected_session") or ""
    if not sid:
        return
    with st.expander("User analytics", expanded=True):
        r = api.session_detail(sid)
        if r.get("ok"):
            render_user_detail(r.get("data") or {})
        else:
            st.error(f"{r.get('code')} - {r.get('error')}")


@st.fragment(run_every=api.REFRESH_SECONDS)
def live_panel():
    summ = api.summary()
    if not summ.get("ok"):
        st.error(f"{summ.get('code')} - {summ.get('error')}")
        return
    data = summ.get("data") or {}
    snapshot = data.get("snapshot") or {}
    chart_rows = data.get("chart") or []
    names = display_names(chart_rows)

    st.caption(
        f"Sheet: **{data.get('sheet_name')}** | Last Updated: **{data.get('last_updated') or '-'}** "
        f"| Auto-refresh: every {int(api.REFRESH_SECONDS)}s"
    )
    if data.get("error"):
        st.warning(f"Last fetch failed: {data['error']}")

    render_key_stats(snapshot, names, connected=data.get("count", 0) > 0)

    st.markdown("---")
    left, right = st.columns(2)
    cdf = chart_df(chart_rows)
    with left:
        st.markdown("**Average Time by Car Section**")
        if not cdf.empty:
            st.bar_chart(cdf)
    with right:
        st.markdown("**Viewing Time Distribution**")
        if chart_rows:
            st.dataframe(
                pd.DataFrame(chart_rows)[["display_name", "value", "percentage"]]
                .rename(columns={"display_name": "Section", "value": "Avg (s)", "percentage": "Share (%)"}),
                use_container_width=True, hide_index=True,
            )

    ins = api.insights()
    render_insights((ins.get("data") or {}).get("insights") or [], "Overall Insights")

    ts = api.timeseries()
    points = (ts.get("data") or {}).get("points") or []
    if len(points) > 1:
        st.markdown("**Sessions per day**")
        st.line_chart(pd.DataFrame(points).set_index("date")[["totalSessions", "averageTime"]])

    st.markdown("---")
    sess = api.sessions()
    sessions = (sess.get("data") or {}).get("sessions") or []
    st.subheader(f"User Sessions ({len(sessions)} total)")
    if sessions:
        st.dataframe(sessions_to_df(sessions, names), use_container_width=True, hide_index=True)
        options = {f"{s['customerName']} ({s['sessionId']})": s["sessionId"] for s in sessions}
        picked = st.selectbox("View detailed analytics for", [""] + list(options.keys()), key="picked_user")
        st.session_state.selected_session = options.get(picked, "")
        render_selected()
    else:
        st.info("No sessions yet.")


live_panel()

st.markdown("---")


st.subheader("Report & Export")
e1, e2 = st.columns([1, 1])
with e1:
    use_llm = st.checkbox("Use LLM narrative (needs OPENAI_API_KEY on the backend)", value=False)
    if st.button("Build report"):
        r = api.report(use_llm=use_llm)
        st.session_state.report_text = (r.get("data") or {}).get("report", "") if r.get("ok") else ""
        if not r.get("ok"):
            st.error(f"{r.get('code')} - {r.get('error')}")
with e2:
    if st.button("Export Excel"):
        r = api.export(use_llm=False)
        st.session_state.last_export = (r.get("data") or {}).get("export") or {}
        if not r.get("ok"):
            st.error(f"{r.get('code')} - {r.get('error')}")
    exp = st.session_state.get("last_export") or {}
    if exp.get("url"):
        st.markdown(f"- [{exp.get('filename')}]({api.static_url(exp['url'])})")

if st.session_state.get("report_text"):
    st.markdown(st.session_state.report_text)
