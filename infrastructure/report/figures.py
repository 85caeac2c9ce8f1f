from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from domain.entities import Axis, Metric, TransformOptions


def _labels(metric: Metric, options: TransformOptions, axis: Axis) -> dict[str, str]:
    return {"x": axis.label, "value": options.describe(metric), "country": "Country"}


def _style(fig: go.Figure) -> go.Figure:
    fig.update_layout(
        template="plotly_white",
        margin=dict(l=70, r=25, t=60, b=40),
        title_x=0.02,
        hovermode="x unified",
    )
    return fig


def bar_chart(series: pd.DataFrame, metric: Metric, options: TransformOptions, axis: Axis) -> go.Figure:
    fig = px.bar(
        series,
        x="x",
        y="value",
        color="country",
        barmode="group",
        title=options.describe(metric),
        labels=_labels(metric, options, axis),
        color_discrete_sequence=px.colors.qualitative.Safe,
    )
    return _style(fig)


def line_chart(series: pd.DataFrame, metric: Metric, options: TransformOptions, axis: Axis) -> go.Figure:
    fig = px.line(
        series.sort_values(["country", "x"]),
        x="x",
        y="value",
        color="country",
        title=options.describe(metric),
        labels=_labels(metric, options, axis),
        color_discrete_sequence=px.colors.qualitative.Safe,
    )
    return _style(fig)


def faceted_line_chart(
    series: pd.DataFrame,
    metric: Metric,
    options: TransformOptions,
    axis: Axis,
    wrap: int = 3,
) -> go.Figure:
    fig = px.line(
        series.sort_values(["country", "x"]),
        x="x",
        y="value",
        color="country",
        facet_col="country",
        facet_col_wrap=wrap,
        title=options.describe(metric),
        labels=_labels(metric, options, axis),
        color_discrete_sequence=px.colors.qualitative.Safe,
    )
    fig.for_each_annotation(lambda a: a.update(text=a.text.split("=")[-1]))
    fig.update_yaxes(matches=None)
    fig.update_layout(showlegend=False)
    return _style(fig)


CHART_BUILDERS = {
    "Line": line_chart,
    "Bar": bar_chart,
    "Faceted line": faceted_line_chart,
}
