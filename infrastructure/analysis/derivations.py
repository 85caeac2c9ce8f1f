"""
Per-country indicators over a daily, date-ordered series.

Every function works group-wise on the `country` column, so nothing leaks
across a country boundary. Undefined values (first day, zero denominators,
short rolling windows) are NaN and are never raised as errors.
"""
from __future__ import annotations

import logging
from typing import Callable, Tuple

import pandas as pd

from core.config import CFG, COUNTERS, DAYS_SINCE_DEATHS, DAYS_SINCE_LOCKDOWN, ReportConfig
from domain.entities import Metric, TransformOptions
from infrastructure.data.preprocessing import ensure_daily_order

logger = logging.getLogger(__name__)


def daily_delta(series: pd.Series, groups: pd.Series) -> pd.Series:
    return series.groupby(groups).diff()


def percentage_change(series: pd.Series, groups: pd.Series) -> pd.Series:
    """round((cur - prev) / prev, 2) * 100, NaN when prev is 0 or missing."""
    series = series.astype(float)
    prev = series.groupby(groups).shift(1)
    prev = prev.where(prev != 0)
    return ((series - prev) / prev).round(2) * 100


def rolling_average(series: pd.Series, groups: pd.Series, window: int = 7) -> pd.Series:
    """Trailing mean of the last `window` values; NaN until a full window exists."""
    return series.astype(float).groupby(groups).transform(
        lambda s: s.rolling(window, min_periods=window).mean()
    )


def per_population(series: pd.Series, population: pd.Series, precision: int | None = None) -> pd.Series:
    """Count per million inhabitants; rounded only when `precision` is given."""
    out = series.astype(float) / population
    return out if precision is None else out.round(precision)


def reference_counter(flag: pd.Series, groups: pd.Series) -> pd.Series:
    """Days counted from the first day `flag` holds (inclusive); 0 before, never resets."""
    started = flag.fillna(False).astype(int).groupby(groups).cummax()
    return started.groupby(groups).cumsum()


# ---- Toggle pipeline ----

TransformStep = Callable[[pd.Series, pd.DataFrame, ReportConfig], pd.Series]


def _step_per_population(series: pd.Series, frame: pd.DataFrame, cfg: ReportConfig) -> pd.Series:
    # unrounded; rounding is left to the stored columns and table output
    return per_population(series, frame["population"])


def _step_rolling(series: pd.Series, frame: pd.DataFrame, cfg: ReportConfig) -> pd.Series:
    return rolling_average(series, frame["country"], cfg.rolling_window)


def _step_percentage(series: pd.Series, frame: pd.DataFrame, cfg: ReportConfig) -> pd.Series:
    return percentage_change(series, frame["country"])


# Order matters: each step sees the output of the previous one.
TRANSFORM_PIPELINE: Tuple[Tuple[str, TransformStep], ...] = (
    ("per_population", _step_per_population),
    ("rolling", _step_rolling),
    ("percentage", _step_percentage),
)


def transform_metric(
    frame: pd.DataFrame,
    metric: Metric,
    options: TransformOptions,
    cfg: ReportConfig = CFG,
) -> pd.Series:
    """
    Apply the requested toggles to one metric of a derived frame.

    Steps run in the fixed order per-population -> rolling -> percentage, so
    e.g. rolling + percentage is the % change of the rolling average.
    """
    series = frame[metric.column].astype(float)
    for name, step in TRANSFORM_PIPELINE:
        if getattr(options, name):
            series = step(series, frame, cfg)
    return series


def derive_indicators(df: pd.DataFrame, cfg: ReportConfig = CFG) -> pd.DataFrame:
    """
    Attach the standard derived columns to an enriched frame
    (country, date, confirmed, deaths, recovered, population, lockdown_date).
    """
    df = ensure_daily_order(df)
    groups = df["country"]

    df["active"] = df["confirmed"] - df["deaths"] - df["recovered"]

    for c in COUNTERS:
        df[f"daily_{c}"] = daily_delta(df[c], groups)
        df[f"pct_{c}"] = percentage_change(df[c], groups)
        df[f"rolling_daily_{c}"] = rolling_average(df[f"daily_{c}"], groups, cfg.rolling_window)
        df[f"{c}_per_million"] = per_population(df[c], df["population"], cfg.per_population_precision)

    df[DAYS_SINCE_LOCKDOWN] = reference_counter(df["date"] >= df["lockdown_date"], groups)
    df[DAYS_SINCE_DEATHS] = reference_counter(df["deaths"] >= cfg.death_threshold, groups)

    logger.info(f"Derived indicators for {groups.nunique()} countries, {len(df)} rows")
    return df
