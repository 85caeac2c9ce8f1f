"""
Report views over the derived frame: long metric series, latest-N ranking,
counter-axis pivot and the latest totals summary.

Shared by the Streamlit page and the static HTML report.
"""
from __future__ import annotations

import pandas as pd

from core.config import CFG, DAYS_SINCE_DEATHS, DAYS_SINCE_LOCKDOWN, ReportConfig
from domain.entities import Axis, Metric, TransformOptions
from infrastructure.analysis.derivations import per_population, transform_metric

COL_LABELS = {
    "date": "Date",
    "rank": "#",
    "country": "Country",
    "confirmed": "Confirmed",
    "deaths": "Deaths",
    "recovered": "Recovered",
    "active": "Active",
    "confirmed_per_million": "Confirmed / 1M",
    "deaths_per_million": "Deaths / 1M",
    "recovered_per_million": "Recovered / 1M",
    "case_fatality_pct": "Case fatality, %",
    DAYS_SINCE_LOCKDOWN: "Days since lockdown",
    DAYS_SINCE_DEATHS: "Days since 50th death",
    "period": "Dominant period, days",
}


def metric_series(
    frame: pd.DataFrame,
    metric: Metric,
    options: TransformOptions,
    axis: Axis,
    cfg: ReportConfig = CFG,
    drop_missing: bool = True,
) -> pd.DataFrame:
    """
    Long table (country, x, value) for one metric on the chosen axis.

    Counter axes keep only days where the counter is positive.
    """
    values = transform_metric(frame, metric, options, cfg)
    out = pd.DataFrame(
        {
            "country": frame["country"],
            "x": frame[axis.column],
            "value": values,
        }
    )
    if axis.is_counter:
        out = out[out["x"] > 0]
    if drop_missing:
        out = out.dropna(subset=["value"])
    return out.reset_index(drop=True)


def latest_table(
    frame: pd.DataFrame,
    metric: Metric,
    options: TransformOptions,
    days: int = 7,
    cfg: ReportConfig = CFG,
) -> pd.DataFrame:
    """Last `days` dates, countries ranked by value within each date (undefined last)."""
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")
    series = metric_series(frame, metric, options, Axis.DATE, cfg, drop_missing=False)
    last_dates = sorted(series["x"].unique())[-days:]

    tmp = series[series["x"].isin(last_dates)]
    tmp = tmp.sort_values(["x", "value"], ascending=[False, False], na_position="last")
    tmp = tmp.rename(columns={"x": "date"}).reset_index(drop=True)
    tmp.insert(1, "rank", tmp.groupby("date").cumcount() + 1)
    tmp["date"] = pd.to_datetime(tmp["date"]).dt.strftime("%Y-%m-%d")
    return tmp[["date", "rank", "country", "value"]]


def axis_table(
    frame: pd.DataFrame,
    metric: Metric,
    options: TransformOptions,
    axis: Axis,
    cfg: ReportConfig = CFG,
) -> pd.DataFrame:
    """
    Metric values pivoted to one row per axis value and one column per country.

    For counter axes only days with a positive counter are kept. Columns are
    ordered by each country's peak value, highest first.
    """
    series = metric_series(frame, metric, options, axis, cfg)
    if series.empty:
        return pd.DataFrame()

    table = series.pivot(index="x", columns="country", values="value").sort_index()
    order = table.max().sort_values(ascending=False).index
    table = table[order]
    table.index.name = axis.column
    table.columns.name = None
    return table.reset_index()


def summary_table(frame: pd.DataFrame, cfg: ReportConfig = CFG) -> pd.DataFrame:
    latest = frame.sort_values("date").groupby("country").tail(1)
    confirmed = latest["confirmed"].astype(float)

    out = pd.DataFrame(
        {
            "country": latest["country"],
            "date": latest["date"].dt.strftime("%Y-%m-%d"),
            "confirmed": latest["confirmed"],
            "deaths": latest["deaths"],
            "recovered": latest["recovered"],
            "active": latest["active"],
            "confirmed_per_million": per_population(latest["confirmed"], latest["population"], cfg.summary_precision),
            "deaths_per_million": per_population(latest["deaths"], latest["population"], cfg.summary_precision),
            "case_fatality_pct": (latest["deaths"] / confirmed.where(confirmed > 0) * 100).round(cfg.summary_precision),
            DAYS_SINCE_LOCKDOWN: latest[DAYS_SINCE_LOCKDOWN],
            DAYS_SINCE_DEATHS: latest[DAYS_SINCE_DEATHS],
        }
    )
    return out.sort_values("confirmed_per_million", ascending=False).reset_index(drop=True)


def display_labels(df: pd.DataFrame, value_label: str | None = None) -> pd.DataFrame:
    labels = dict(COL_LABELS)
    if value_label:
        labels["value"] = value_label
    labels.update({a.column: a.label for a in Axis})
    return df.rename(columns=labels)
