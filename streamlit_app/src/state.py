# streamlit_app/src/state.py
import streamlit as st


def init_state():
    for k, v in {
        "selected_session": "",
        "last_export": {},
        "report_text": "",
    }.items():
        if k not in st.session_state:
            st.session_state[k] = v
