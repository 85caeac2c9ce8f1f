# app.py

import streamlit as st

from ui.state import ensure_state
from ui.pages.report_page import render_report_page

st.set_page_config(
    page_title="COVID-19 country indicators",
    layout="wide",
)

ensure_state()
render_report_page()
