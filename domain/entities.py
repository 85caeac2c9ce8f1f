from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from core.config import DAYS_SINCE_DEATHS, DAYS_SINCE_LOCKDOWN


@dataclass(frozen=True)
class CountryReference:
    country: str
    population: float  # millions
    lockdown_date: date


@dataclass(frozen=True)
class ReferenceData:
    countries: Tuple[CountryReference, ...]

    def names(self) -> list[str]:
        return [c.country for c in self.countries]

    def get(self, country: str) -> Optional[CountryReference]:
        for c in self.countries:
            if c.country == country:
                return c
        return None

    def subset(self, names: list[str]) -> ReferenceData:
        wanted = set(names)
        return ReferenceData(tuple(c for c in self.countries if c.country in wanted))


class Metric(Enum):
    CONFIRMED = ("confirmed", "Confirmed cases")
    DEATHS = ("deaths", "Deaths")
    RECOVERED = ("recovered", "Recovered")
    ACTIVE = ("active", "Active cases")
    DAILY_CONFIRMED = ("daily_confirmed", "Daily confirmed cases")
    DAILY_DEATHS = ("daily_deaths", "Daily deaths")
    DAILY_RECOVERED = ("daily_recovered", "Daily recovered")

    def __init__(self, column: str, label: str) -> None:
        self.column = column
        self.label = label


class Axis(Enum):
    DATE = ("date", "Date")
    DAYS_SINCE_LOCKDOWN = (DAYS_SINCE_LOCKDOWN, "Days since lockdown")
    DAYS_SINCE_50_DEATHS = (DAYS_SINCE_DEATHS, "Days since 50th death")

    def __init__(self, column: str, label: str) -> None:
        self.column = column
        self.label = label

    @property
    def is_counter(self) -> bool:
        return self is not Axis.DATE


@dataclass(frozen=True)
class TransformOptions:
    per_population: bool = False
    rolling: bool = False
    percentage: bool = False

    def describe(self, metric: Metric) -> str:
        label = metric.label
        if self.per_population:
            label += " per million"
        if self.rolling:
            label += " (7-day avg)"
        if self.percentage:
            label += ", % change"
        return label
