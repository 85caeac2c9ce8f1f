"""Derived indicators: deltas, % change, rolling means, rates and counters."""

import math
from datetime import date

import numpy as np
import pandas as pd
import pytest

from core.config import DAYS_SINCE_DEATHS, DAYS_SINCE_LOCKDOWN
from domain.entities import CountryReference, Metric, ReferenceData, TransformOptions
from infrastructure.analysis.derivations import (
    derive_indicators,
    percentage_change,
    per_population,
    rolling_average,
    transform_metric,
)
from infrastructure.data.preprocessing import enrich_with_reference, reshape_timeseries
from tests.conftest import START, make_records


def _one_country(values) -> tuple[pd.Series, pd.Series]:
    series = pd.Series(values, dtype=float)
    return series, pd.Series(["A"] * len(values))


class TestDailyDelta:
    """First day undefined, then raw[t] - raw[t-1]."""

    def test_one_fewer_defined_value_per_country(self, derived):
        for c in ("confirmed", "deaths", "recovered"):
            sizes = derived.groupby("country")[c].size()
            defined = derived.groupby("country")[f"daily_{c}"].count()
            assert (defined == sizes - 1).all()

    def test_step_series(self, reference):
        payload = {"Alpha": make_records(START, [100] * 7 + [200])}
        df = derive_indicators(enrich_with_reference(reshape_timeseries(payload), reference))

        daily = df["daily_confirmed"].tolist()
        assert math.isnan(daily[0])
        assert daily[1:] == [0, 0, 0, 0, 0, 0, 100]
        assert df["rolling_daily_confirmed"].iloc[:7].isna().all()
        assert df["rolling_daily_confirmed"].iloc[7] == pytest.approx(14.29, abs=0.01)


class TestPercentageChange:
    """round((cur - prev) / prev, 2) * 100."""

    def test_known_values(self):
        series, groups = _one_country([10, 20, 15])
        out = percentage_change(series, groups)

        assert math.isnan(out.iloc[0])
        assert out.iloc[1] == pytest.approx(100.0)
        assert out.iloc[2] == pytest.approx(-25.0)

    def test_zero_previous_is_missing_not_error(self):
        series, groups = _one_country([0, 0, 5, 10])
        out = percentage_change(series, groups)

        assert out.iloc[:3].isna().all()
        assert out.iloc[3] == pytest.approx(100.0)
        assert not np.isinf(out).any()

    def test_does_not_cross_countries(self):
        series = pd.Series([10.0, 20.0, 40.0, 80.0])
        groups = pd.Series(["A", "A", "B", "B"])
        out = percentage_change(series, groups)

        assert math.isnan(out.iloc[2])
        assert out.iloc[3] == pytest.approx(100.0)


class TestRollingAverage:
    """Trailing 7-day mean per country."""

    def test_constant_series(self):
        series, groups = _one_country([5.0] * 12)
        out = rolling_average(series, groups, window=7)

        assert out.iloc[:6].isna().all()
        assert (out.iloc[6:] == 5.0).all()

    def test_window_does_not_cross_countries(self):
        series = pd.Series([1.0] * 10)
        groups = pd.Series(["A"] * 5 + ["B"] * 5)

        assert rolling_average(series, groups, window=7).isna().all()


class TestPerPopulation:
    """Counts per million inhabitants."""

    def test_round_trip(self):
        raw = pd.Series([0, 89, 1234567, 98765])
        population = pd.Series([2.0, 3.7, 60.36, 11.46])
        out = per_population(raw, population, precision=2)

        assert np.allclose(out * population, raw, atol=0.005 * population.max())

    def test_precision(self):
        out = per_population(pd.Series([100]), pd.Series([3.0]), precision=1)
        assert out.iloc[0] == 33.3

    def test_derived_columns(self, derived):
        alpha = derived[derived["country"] == "Alpha"]
        assert alpha["confirmed_per_million"].iloc[-1] == pytest.approx(1280.0)


class TestCounters:
    """Days since lockdown / since 50th death."""

    def test_days_since_lockdown_counts_rows_on_or_after(self, derived):
        for _, part in derived.groupby("country"):
            expected = (part["date"] >= part["lockdown_date"]).astype(int).cumsum()
            assert part[DAYS_SINCE_LOCKDOWN].tolist() == expected.tolist()
            assert part[DAYS_SINCE_LOCKDOWN].is_monotonic_increasing

    def test_days_since_lockdown_values(self, derived):
        alpha = derived[derived["country"] == "Alpha"]
        assert alpha[DAYS_SINCE_LOCKDOWN].tolist() == [0, 0, 1, 2, 3, 4, 5, 6, 7, 8]

    def test_days_since_50_deaths(self, derived):
        alpha = derived[derived["country"] == "Alpha"]
        beta = derived[derived["country"] == "Beta"]

        assert alpha[DAYS_SINCE_DEATHS].tolist() == [0, 0, 0, 0, 0, 1, 2, 3, 4, 5]
        assert (beta[DAYS_SINCE_DEATHS] == 0).all()

    def test_counter_keeps_running_after_a_correction(self, reference):
        deaths = [10, 49, 50, 60, 55, 70]
        payload = {"Alpha": make_records(START, [100] * 6, deaths=deaths)}
        df = derive_indicators(enrich_with_reference(reshape_timeseries(payload), reference))

        assert df[DAYS_SINCE_DEATHS].tolist() == [0, 0, 1, 2, 3, 4]


class TestDeriveIndicators:
    """Whole-frame derivation."""

    def test_unsorted_input_gives_same_result(self, enriched, derived):
        shuffled = enriched.sample(frac=1.0, random_state=1)
        again = derive_indicators(shuffled)

        pd.testing.assert_frame_equal(again, derived)

    def test_active_cases(self, derived):
        alpha = derived[derived["country"] == "Alpha"]
        assert alpha["active"].iloc[-1] == 2560 - 90 - 50


class TestTransformPipeline:
    """Toggles compose as per-population -> rolling -> percentage."""

    def test_no_toggles_returns_metric(self, derived):
        out = transform_metric(derived, Metric.CONFIRMED, TransformOptions())
        assert out.tolist() == derived["confirmed"].astype(float).tolist()

    def test_percentage_of_rolling_average(self, derived):
        options = TransformOptions(rolling=True, percentage=True)
        out = transform_metric(derived, Metric.DAILY_CONFIRMED, options)

        groups = derived["country"]
        expected = percentage_change(rolling_average(derived["daily_confirmed"], groups, 7), groups)
        pd.testing.assert_series_equal(out, expected, check_names=False)

    def test_all_toggles_in_order(self, derived):
        options = TransformOptions(per_population=True, rolling=True, percentage=True)
        out = transform_metric(derived, Metric.CONFIRMED, options)

        groups = derived["country"]
        step = per_population(derived["confirmed"], derived["population"])
        step = rolling_average(step, groups, 7)
        expected = percentage_change(step, groups)
        pd.testing.assert_series_equal(out, expected, check_names=False)

    def test_per_population_only(self, derived):
        out = transform_metric(derived, Metric.DEATHS, TransformOptions(per_population=True))
        expected = derived["deaths"] / derived["population"]
        pd.testing.assert_series_equal(out, expected, check_names=False)

    def test_per_population_is_not_rounded_before_later_steps(self):
        """Small daily counts over a large population keep their % change."""
        payload = {"Alpha": make_records(START, [0] * 7, deaths=[0, 1, 2, 3, 4, 5, 7])}
        reference = ReferenceData(countries=(CountryReference("Alpha", 328.24, date(2020, 3, 3)),))
        frame = derive_indicators(enrich_with_reference(reshape_timeseries(payload), reference))

        raw = transform_metric(frame, Metric.DAILY_DEATHS, TransformOptions(percentage=True))
        scaled = transform_metric(frame, Metric.DAILY_DEATHS, TransformOptions(per_population=True, percentage=True))

        assert raw.tolist()[2:] == [0.0, 0.0, 0.0, 0.0, 100.0]
        pd.testing.assert_series_equal(scaled, raw, check_names=False)
