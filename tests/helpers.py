import copy
import json
from datetime import date
from pathlib import Path

from kpension.schema import (
    ClaimTiming,
    Credits,
    Dependents,
    ExclusionPeriod,
    HistoricalSweepIncome,
    HybridIncome,
    NationalPensionRequest,
)

TODAY = date(2026, 10, 19)


def write_request(tmp_path: Path, data: dict, filename: str = "request.json") -> Path:
    path = tmp_path / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def clone_request(data: dict) -> dict:
    return copy.deepcopy(data)


def national_request(
    *,
    birth_date: date = date(1980, 3, 15),
    start_year: int = 2006,
    start_month: int = 1,
    retire_age: int = 60,
    monthly_income: float = 4_000_000,
    income_history: HistoricalSweepIncome | HybridIncome | None = None,
    wage_growth_rate: float = 0.03,
    exclusions: list[ExclusionPeriod] | None = None,
    credits: Credits | None = None,
    dependents: Dependents | None = None,
    claim: ClaimTiming | None = None,
    post_retire_income: float = 0.0,
) -> NationalPensionRequest:
    return NationalPensionRequest(
        birth_date=birth_date,
        start_year=start_year,
        start_month=start_month,
        retire_age=retire_age,
        monthly_income=monthly_income,
        income_history=income_history or HistoricalSweepIncome(initial_salary=2_000_000),
        wage_growth_rate=wage_growth_rate,
        exclusions=exclusions or [],
        credits=credits or Credits(),
        dependents=dependents or Dependents(),
        claim=claim or ClaimTiming(),
        post_retire_income=post_retire_income,
    )


def retired_hybrid_request(paid_months: int, average_monthly_income: float = 2_500_000, **overrides) -> NationalPensionRequest:
    """Retired in 2020-05, so the whole history is settled and nothing is projected."""
    return national_request(
        birth_date=date(1960, 5, 1),
        start_year=2000,
        income_history=HybridIncome(paid_months=paid_months, average_monthly_income=average_monthly_income),
        **overrides,
    )
