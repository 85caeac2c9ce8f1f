from __future__ import annotations

import pandas as pd
import streamlit as st

from infrastructure.report.views import display_labels


def render_table(df: pd.DataFrame, value_label: str | None = None) -> None:
    if df is None or len(df) == 0:
        st.info("No data to display.")
        return
    st.dataframe(display_labels(df, value_label).style.format(na_rep="", precision=2), width='stretch', hide_index=True)
