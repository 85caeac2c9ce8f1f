from __future__ import annotations

from datetime import date, timedelta

import pandas as pd
import pytest

from domain.entities import CountryReference, ReferenceData
from infrastructure.analysis.derivations import derive_indicators
from infrastructure.data.preprocessing import enrich_with_reference, reshape_timeseries


def make_records(start: date, confirmed, deaths=None, recovered=None) -> list[dict]:
    n = len(confirmed)
    deaths = deaths if deaths is not None else [0] * n
    recovered = recovered if recovered is not None else [0] * n
    return [
        {
            "date": (start + timedelta(days=i)).isoformat(),
            "confirmed": confirmed[i],
            "deaths": deaths[i],
            "recovered": recovered[i],
        }
        for i in range(n)
    ]


START = date(2020, 3, 1)

ALPHA_CONFIRMED = [0, 10, 20, 40, 80, 160, 320, 640, 1280, 2560]
ALPHA_DEATHS = [0, 0, 0, 5, 20, 50, 60, 70, 80, 90]
ALPHA_RECOVERED = [0, 0, 0, 0, 0, 10, 20, 30, 40, 50]
BETA_CONFIRMED = [0, 10, 20, 30, 40, 50, 60, 70, 80, 90]


@pytest.fixture
def reference() -> ReferenceData:
    return ReferenceData(
        (
            CountryReference("Alpha", 2.0, date(2020, 3, 3)),
            CountryReference("Beta", 10.0, date(2020, 3, 5)),
        )
    )


@pytest.fixture
def payload() -> dict:
    return {
        "Alpha": make_records(START, ALPHA_CONFIRMED, ALPHA_DEATHS, ALPHA_RECOVERED),
        "Beta": make_records(START, BETA_CONFIRMED),
        "Gamma": make_records(START, [1, 2, 3]),
    }


@pytest.fixture
def enriched(payload, reference) -> pd.DataFrame:
    return enrich_with_reference(reshape_timeseries(payload), reference)


@pytest.fixture
def derived(enriched) -> pd.DataFrame:
    return derive_indicators(enriched)
