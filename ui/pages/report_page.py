from __future__ import annotations

import pandas as pd
import streamlit as st

from core.config import CFG
from domain.entities import Axis, Metric, TransformOptions
from infrastructure.analysis.spectral import dominant_periods
from infrastructure.report.figures import CHART_BUILDERS
from infrastructure.report.views import axis_table, latest_table, summary_table
from ui.components.charts import render_chart
from ui.components.spectrum import render_spectrum
from ui.components.tables import render_table
from ui.state import load_report_data


def _controls(frame: pd.DataFrame) -> dict:
    sb = st.sidebar
    sb.markdown("### View")

    countries = sorted(frame["country"].unique().tolist())
    selected = sb.multiselect("Countries", countries, default=countries)

    metric = sb.selectbox("Metric", list(Metric), index=list(Metric).index(Metric.DAILY_CONFIRMED),
                          format_func=lambda m: m.label)
    axis = sb.selectbox("X axis", list(Axis), format_func=lambda a: a.label)
    kind = sb.radio("Chart", list(CHART_BUILDERS), horizontal=True)

    sb.markdown("**Transforms** (applied in this order)")
    options = TransformOptions(
        per_population=sb.checkbox("Per million inhabitants"),
        rolling=sb.checkbox(f"{CFG.rolling_window}-day rolling average"),
        percentage=sb.checkbox("% change vs previous day"),
    )

    days = sb.number_input("Latest days in table", min_value=1, max_value=60, value=int(CFG.latest_days))

    sb.markdown("---")
    if sb.button("Reload data", width='stretch'):
        load_report_data()
        st.rerun()

    return {
        "countries": selected,
        "metric": metric,
        "axis": axis,
        "kind": kind,
        "options": options,
        "days": int(days),
    }


def render_report_page() -> None:
    frame: pd.DataFrame = st.session_state["frame"]
    meta = st.session_state["meta"]

    st.title("COVID-19 by country")
    st.markdown(
        f"""
**Source:** {meta["source"]}  
**Period:** {meta["date_range_start"]} to {meta["date_range_end"]}  
**Countries:** {", ".join(meta["countries"])}
"""
    )

    c = _controls(frame)
    if not c["countries"]:
        st.info("Select at least one country.")
        return

    view = frame[frame["country"].isin(c["countries"])]
    metric: Metric = c["metric"]
    axis: Axis = c["axis"]
    options: TransformOptions = c["options"]
    value_label = options.describe(metric)

    st.subheader("Latest totals")
    render_table(summary_table(view))

    st.subheader(value_label)
    render_chart(view, metric, options, axis, kind=c["kind"])

    st.subheader(f"Last {c['days']} days")
    render_table(latest_table(view, metric, options, days=c["days"]), value_label=value_label)

    if axis.is_counter:
        st.subheader(f"{value_label} by {axis.label.lower()}")
        render_table(axis_table(view, metric, options, axis))

    st.subheader("Reporting cycle")
    spectrum_country = st.selectbox("Spectrum for", c["countries"])
    t1, t2 = st.tabs(["Daily confirmed", "Daily deaths"])
    for tab, cycle_metric in ((t1, Metric.DAILY_CONFIRMED), (t2, Metric.DAILY_DEATHS)):
        with tab:
            render_table(dominant_periods(view, cycle_metric))
            render_spectrum(view, cycle_metric, spectrum_country)
