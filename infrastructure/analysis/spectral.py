"""
Dominant periodicity of a daily series (e.g. the weekly reporting cycle).

Periodogram -> spectral peaks -> lowest peak frequency above a cutoff.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from scipy import signal

from core.config import CFG, ReportConfig
from domain.entities import Metric

logger = logging.getLogger(__name__)

MIN_PEAKS = 3


def power_spectrum(
    series: pd.Series | np.ndarray,
    peak_height: float = 0.1,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Periodogram of a series with missing values set to 0, plus the indices of
    local maxima higher than `peak_height` times the strongest bin.
    """
    values = np.nan_to_num(np.asarray(series, dtype=np.float64), nan=0.0)
    if len(values) < 3:
        empty = np.array([], dtype=np.float64)
        return empty, empty, np.array([], dtype=int)

    freqs, psd = signal.periodogram(values)
    top = float(psd.max())
    if not np.isfinite(top) or top <= 0:
        return freqs, psd, np.array([], dtype=int)

    peaks_idx, _ = signal.find_peaks(psd, height=peak_height * top)
    return freqs, psd, peaks_idx


def estimate_period(
    series: pd.Series | np.ndarray,
    min_frequency: float = 0.1,
    peak_height: float = 0.1,
) -> Optional[float]:
    """
    Period (in samples) of the lowest-frequency spectral peak above
    `min_frequency` cycles/sample, rounded to 2 decimals.

    Returns None when the spectrum has fewer than MIN_PEAKS peaks or none
    above the cutoff.
    """
    freqs, _, peaks_idx = power_spectrum(series, peak_height)
    if len(peaks_idx) < MIN_PEAKS:
        return None

    peak_freqs = np.sort(freqs[peaks_idx])
    above = peak_freqs[peak_freqs > min_frequency]
    if len(above) == 0:
        return None

    return round(float(1.0 / above[0]), 2)


def dominant_periods(
    frame: pd.DataFrame,
    metric: Metric,
    cfg: ReportConfig = CFG,
) -> pd.DataFrame:
    rows = []
    for country, part in frame.groupby("country", sort=False):
        period = estimate_period(
            part.sort_values("date")[metric.column],
            min_frequency=cfg.spectral_min_frequency,
            peak_height=cfg.spectral_peak_height,
        )
        rows.append({"country": country, "period": period})
        logger.debug(f"{metric.column} period for {country}: {period}")

    return pd.DataFrame(rows, columns=["country", "period"])
