from __future__ import annotations

import pandas as pd
import streamlit as st

from domain.entities import Axis, Metric, TransformOptions
from infrastructure.report.figures import CHART_BUILDERS
from infrastructure.report.views import metric_series


def render_chart(
    frame: pd.DataFrame,
    metric: Metric,
    options: TransformOptions,
    axis: Axis,
    kind: str = "Line",
) -> None:
    series = metric_series(frame, metric, options, axis)
    if series.empty:
        st.info("No defined values for this view.")
        return
    fig = CHART_BUILDERS[kind](series, metric, options, axis)
    st.plotly_chart(fig, config={"responsive": True})
