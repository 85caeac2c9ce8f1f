from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReportConfig:
    # ---- Source ----
    data_url: str = "https://pomber.github.io/covid19/timeseries.json"
    request_timeout: float = 30.0

    # ---- Derivations ----
    rolling_window: int = 7
    death_threshold: int = 50
    per_population_precision: int = 2
    summary_precision: int = 1

    # ---- Spectral peaks ----
    spectral_min_frequency: float = 0.1
    spectral_peak_height: float = 0.1  # fraction of the max spectral power

    # ---- Output ----
    latest_days: int = 7
    output_path: str = "covid_report.html"


CFG = ReportConfig()

COUNTERS = ("confirmed", "deaths", "recovered")

DAYS_SINCE_LOCKDOWN = "days_since_lockdown"
DAYS_SINCE_DEATHS = "days_since_50_deaths"
