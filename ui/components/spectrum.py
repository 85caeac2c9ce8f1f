from __future__ import annotations

import matplotlib.pyplot as plt
import pandas as pd
import streamlit as st

from core.config import CFG
from domain.entities import Metric
from infrastructure.analysis.spectral import estimate_period, power_spectrum


def spectrum_figure(series: pd.Series, title: str):
    freqs, psd, peaks_idx = power_spectrum(series, CFG.spectral_peak_height)

    fig, ax = plt.subplots(figsize=(10, 3.5))
    ax.plot(freqs, psd, label="Spectral density")
    if len(peaks_idx) > 0:
        ax.scatter(freqs[peaks_idx], psd[peaks_idx], color="tab:red", zorder=3, label="Peaks")
    ax.axvline(CFG.spectral_min_frequency, color="gray", linestyle="--", linewidth=1, label="Cutoff")

    ax.set_title(title)
    ax.set_xlabel("Frequency (cycles / day)")
    ax.set_ylabel("Power")
    ax.legend()
    ax.grid(True)
    fig.tight_layout()
    return fig


def render_spectrum(frame: pd.DataFrame, metric: Metric, country: str) -> None:
    part = frame[frame["country"] == country].sort_values("date")
    if part.empty:
        st.info("No data for this country.")
        return

    series = part[metric.column]
    period = estimate_period(series, CFG.spectral_min_frequency, CFG.spectral_peak_height)
    fig = spectrum_figure(series, f"{metric.label}: {country}")
    st.pyplot(fig)
    plt.close(fig)

    if period is None:
        st.markdown("Dominant period: **undefined** (too few spectral peaks above the cutoff).")
    else:
        st.markdown(f"Dominant period: **{period:.2f} days**")
