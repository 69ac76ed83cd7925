"""Contribution period derivation from birth date, enrollment start and retirement age."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class PeriodData:
    current_age: int
    total_months: int
    retire_year: int
    retire_month: int
    start_year: int
    start_month: int

    @property
    def start_index(self) -> int:
        return self.start_year * 12 + self.start_month

    @property
    def retire_index(self) -> int:
        return self.retire_year * 12 + self.retire_month


def age_on(birth_date: date, today: date) -> int:
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def calculate_period(
    birth_date: date,
    start_year: int,
    start_month: int,
    retire_age: int,
    *,
    today: date | None = None,
    current_age: int | None = None,
) -> PeriodData:
    """Retirement happens in the birth month of the year ``retire_age`` is reached."""
    if current_age is None:
        current_age = age_on(birth_date, today or date.today())

    retire_year = birth_date.year + retire_age
    retire_month = birth_date.month
    total_months = max(0, (retire_year * 12 + retire_month) - (start_year * 12 + start_month))

    return PeriodData(
        current_age=current_age,
        total_months=total_months,
        retire_year=retire_year,
        retire_month=retire_month,
        start_year=start_year,
        start_month=start_month,
    )
