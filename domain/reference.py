from __future__ import annotations

from datetime import date

from domain.entities import CountryReference, ReferenceData


# Population in millions; lockdown = first national stay-at-home order.
DEFAULT_REFERENCE = ReferenceData(
    countries=(
        CountryReference("Italy", 60.36, date(2020, 3, 9)),
        CountryReference("Spain", 46.94, date(2020, 3, 14)),
        CountryReference("France", 66.99, date(2020, 3, 17)),
        CountryReference("Germany", 83.02, date(2020, 3, 22)),
        CountryReference("United Kingdom", 66.65, date(2020, 3, 23)),
        CountryReference("Belgium", 11.46, date(2020, 3, 18)),
        CountryReference("US", 328.24, date(2020, 3, 22)),
    )
)
