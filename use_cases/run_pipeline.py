from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd

from core.config import ReportConfig
from core.errors import DatasetValidationError
from domain.entities import ReferenceData
from infrastructure.analysis.derivations import derive_indicators
from infrastructure.data.fetcher import fetch_timeseries
from infrastructure.data.preprocessing import enrich_with_reference, reshape_timeseries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunPipelineInput:
    reference: ReferenceData
    payload: Dict[str, Any] | None = None  # skip the download when given


@dataclass(frozen=True)
class RunPipelineOutput:
    meta: Dict[str, Any]
    frame: pd.DataFrame


def run_pipeline_uc(cfg: ReportConfig, inp: RunPipelineInput) -> RunPipelineOutput:
    payload = inp.payload if inp.payload is not None else fetch_timeseries(cfg)

    df = reshape_timeseries(payload, countries=inp.reference.names())
    df = enrich_with_reference(df, inp.reference)
    if df.empty:
        raise DatasetValidationError("No time series for any of the selected countries.")
    df = derive_indicators(df, cfg)

    meta = {
        "source": cfg.data_url,
        "rows_count": int(len(df)),
        "countries": sorted(df["country"].unique().tolist()),
        "date_range_start": pd.to_datetime(df["date"].min()).date().isoformat(),
        "date_range_end": pd.to_datetime(df["date"].max()).date().isoformat(),
    }

    logger.info(f"Pipeline done: {meta['rows_count']} rows, {meta['date_range_start']}..{meta['date_range_end']}")
    return RunPipelineOutput(meta=meta, frame=df)
