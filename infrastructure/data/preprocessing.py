from __future__ import annotations

import logging
from typing import Any, Dict, List

import pandas as pd

from core.config import COUNTERS
from core.errors import DatasetValidationError
from domain.entities import ReferenceData

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("date",) + COUNTERS


def reshape_timeseries(
    payload: Dict[str, List[Dict[str, Any]]],
    countries: list[str] | None = None,
) -> pd.DataFrame:
    """
    Flatten {country: [{date, confirmed, deaths, recovered}, ...]} into one
    row per (country, date).

    Only type coercion happens here; ordering is checked by ensure_daily_order.
    """
    if not isinstance(payload, dict):
        raise DatasetValidationError("Payload is not a mapping of country -> records.")

    wanted = set(countries) if countries is not None else None
    frames: list[pd.DataFrame] = []
    for country, records in payload.items():
        if wanted is not None and country not in wanted:
            continue
        if not records:
            continue

        part = pd.DataFrame.from_records(records)
        missing = [c for c in RECORD_FIELDS if c not in part.columns]
        if missing:
            raise DatasetValidationError(
                message=f"Records for `{country}` are missing fields",
                missing_fields=missing,
            )
        part = part[list(RECORD_FIELDS)]
        part.insert(0, "country", country)
        frames.append(part)

    if not frames:
        return pd.DataFrame(columns=["country", *RECORD_FIELDS])

    df = pd.concat(frames, ignore_index=True)
    df["date"] = pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")

    bad_dates = int(df["date"].isna().sum())
    if bad_dates:
        logger.warning(f"Dropping {bad_dates} rows with unparseable dates")
        df = df.dropna(subset=["date"])

    for c in COUNTERS:
        df[c] = pd.to_numeric(df[c], errors="coerce")
        if df[c].isna().any():
            logger.warning(f"Column `{c}` has missing values after coercion")
        else:
            df[c] = df[c].astype("int64")

    logger.info(f"Reshaped {len(df)} rows for {df['country'].nunique()} countries")
    return df.reset_index(drop=True)


def enrich_with_reference(df: pd.DataFrame, reference: ReferenceData) -> pd.DataFrame:
    """Inner-join population and lockdown date; countries without reference data are dropped."""
    ref = pd.DataFrame(
        {
            "country": [c.country for c in reference.countries],
            "population": [float(c.population) for c in reference.countries],
            "lockdown_date": pd.to_datetime([c.lockdown_date for c in reference.countries]),
        }
    )

    present = set(df["country"].unique())
    absent = [c for c in reference.names() if c not in present]
    if absent:
        logger.warning(f"No time series for reference countries: {', '.join(absent)}")

    out = df.merge(ref, on="country", how="inner")
    return out


def ensure_daily_order(df: pd.DataFrame) -> pd.DataFrame:
    """
    Sort by (country, date) and reject duplicated or missing days.

    Cumulative counters are only meaningful over a gapless daily series.
    """
    df = df.sort_values(["country", "date"]).reset_index(drop=True)

    dup = df.duplicated(subset=["country", "date"])
    if dup.any():
        bad = sorted(df.loc[dup, "country"].unique())
        raise DatasetValidationError(f"Duplicate dates for: {', '.join(bad)}")

    step = df.groupby("country")["date"].diff().dropna()
    gaps = step != pd.Timedelta(days=1)
    if gaps.any():
        bad = sorted(df.loc[step[gaps].index, "country"].unique())
        raise DatasetValidationError(f"Daily series has gaps for: {', '.join(bad)}")

    return df
