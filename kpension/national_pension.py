"""Year-by-month national pension projection engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
import logging
import math

from .period import PeriodData
from .policy import PolicyConstants
from .schema import ClaimTiming, Credits, Dependents, ExclusionPeriod, HybridIncome, NationalPensionRequest
from .tax import progressive_amount

logger = logging.getLogger(__name__)


class MonthStatus(Enum):
    CONTRIBUTING = "contributing"
    EXCLUDED_UNPAID = "excluded_unpaid"
    EXCLUDED_WITH_ARREARS = "excluded_with_arrears"


@dataclass(slots=True)
class YearAccrual:
    year: int
    monthly_income: float
    revalued_income: float
    replacement_rate: float
    paid_months: int = 0
    arrears_months: int = 0
    revalued_total: float = 0.0


@dataclass(slots=True)
class ProjectionResult:
    mode: str
    monthly: int
    yearly: int
    average_indexed_income: int
    total_paid_months: int
    total_credited_months: int
    credit_monthly: int
    arrears_cost: int
    arrears_months: int
    earnings_test_reduction: int
    dependent_add_on: int
    future_premium: int
    insufficient_history: bool = False
    years: list[YearAccrual] = field(default_factory=list)


@dataclass(slots=True)
class _Accumulator:
    total_revalued_income: float = 0.0
    total_paid_months: int = 0
    arrears_cost: float = 0.0
    arrears_months: int = 0
    future_premium: float = 0.0
    years: list[YearAccrual] = field(default_factory=list)

    def close_year(self, accrual: YearAccrual) -> None:
        if accrual.paid_months <= 0:
            return
        self.total_revalued_income += accrual.revalued_total
        self.total_paid_months += accrual.paid_months
        self.years.append(accrual)
        logger.debug(
            "year %d: %d paid months (%d arrears), revalued income %.0f",
            accrual.year,
            accrual.paid_months,
            accrual.arrears_months,
            accrual.revalued_income,
        )


def classify_month(month_index: int, exclusions: list[ExclusionPeriod]) -> MonthStatus:
    """First matching exclusion period wins, in list order."""
    for period in exclusions:
        if period.covers(month_index):
            if period.is_arrears:
                return MonthStatus.EXCLUDED_WITH_ARREARS
            return MonthStatus.EXCLUDED_UNPAID
    return MonthStatus.CONTRIBUTING


def _eligible_months(year: int, period: PeriodData, system_start_year: int) -> list[int]:
    if year < system_start_year:
        return []
    return [month for month in range(1, 13) if period.start_index <= year * 12 + month < period.retire_index]


def estimated_monthly_income(
    year: int,
    *,
    effective_start_year: int,
    current_year: int,
    retire_year: int,
    current_income: float,
    wage_growth_rate: float,
    initial_salary: float | None = None,
) -> float:
    if year <= current_year:
        if initial_salary is None or current_year == effective_start_year:
            return current_income
        progress = (year - effective_start_year) / (current_year - effective_start_year)
        return initial_salary + (current_income - initial_salary) * progress

    peak_year = retire_year - 5
    if year > peak_year:
        years_to_peak = max(0, max(current_year, peak_year) - current_year)
        return current_income * (1.0 + wage_growth_rate) ** years_to_peak
    return current_income * (1.0 + wage_growth_rate) ** (year - current_year)


def _clamp_income(income: float, policy: PolicyConstants) -> float:
    return min(policy.income_cap_monthly, max(policy.income_floor_monthly, income))


def _accrue_arrears(acc: _Accumulator, accrual: YearAccrual, current_income: float, policy: PolicyConstants) -> None:
    base = min(current_income, policy.income_cap_monthly)
    accrual.paid_months += 1
    accrual.arrears_months += 1
    accrual.revalued_total += base
    acc.arrears_cost += base * policy.premium_rate(max(accrual.year, policy.base_year))
    acc.arrears_months += 1


def _new_accrual(year: int, monthly_income: float, policy: PolicyConstants) -> YearAccrual:
    return YearAccrual(
        year=year,
        monthly_income=monthly_income,
        revalued_income=monthly_income * policy.revaluation_factor(year),
        replacement_rate=policy.replacement_rate(year),
    )


def _sweep_accrual(
    request: NationalPensionRequest,
    period: PeriodData,
    policy: PolicyConstants,
    current_year: int,
) -> _Accumulator:
    acc = _Accumulator()
    effective_start_year = max(period.start_year, policy.system_start_year)
    initial_salary = request.income_history.initial_salary

    for year in range(effective_start_year, period.retire_year + 1):
        monthly_income = _clamp_income(
            estimated_monthly_income(
                year,
                effective_start_year=effective_start_year,
                current_year=current_year,
                retire_year=period.retire_year,
                current_income=request.monthly_income,
                wage_growth_rate=request.wage_growth_rate,
                initial_salary=initial_salary,
            ),
            policy,
        )
        accrual = _new_accrual(year, monthly_income, policy)
        premium_rate = policy.premium_rate(year)

        for month in _eligible_months(year, period, policy.system_start_year):
            status = classify_month(year * 12 + month, request.exclusions)
            if status is MonthStatus.EXCLUDED_UNPAID:
                continue
            if status is MonthStatus.EXCLUDED_WITH_ARREARS:
                _accrue_arrears(acc, accrual, request.monthly_income, policy)
                continue
            accrual.paid_months += 1
            accrual.revalued_total += accrual.revalued_income
            if year >= current_year:
                acc.future_premium += monthly_income * premium_rate

        acc.close_year(accrual)
    return acc


def _hybrid_accrual(
    request: NationalPensionRequest,
    period: PeriodData,
    policy: PolicyConstants,
    today: date,
) -> _Accumulator:
    history = request.income_history
    acc = _Accumulator(
        total_revalued_income=history.average_monthly_income * history.paid_months,
        total_paid_months=history.paid_months,
    )
    effective_start_year = max(period.start_year, policy.system_start_year)
    today_index = today.year * 12 + today.month

    for year in range(effective_start_year, period.retire_year + 1):
        monthly_income = _clamp_income(
            estimated_monthly_income(
                year,
                effective_start_year=effective_start_year,
                current_year=today.year,
                retire_year=period.retire_year,
                current_income=request.monthly_income,
                wage_growth_rate=request.wage_growth_rate,
            ),
            policy,
        )
        accrual = _new_accrual(year, monthly_income, policy)
        premium_rate = policy.premium_rate(year)

        for month in _eligible_months(year, period, policy.system_start_year):
            month_index = year * 12 + month
            status = classify_month(month_index, request.exclusions)
            if status is MonthStatus.EXCLUDED_UNPAID:
                continue
            if status is MonthStatus.EXCLUDED_WITH_ARREARS:
                _accrue_arrears(acc, accrual, request.monthly_income, policy)
                continue
            # Settled months are already inside the statement aggregate.
            if month_index <= today_index:
                continue
            accrual.paid_months += 1
            accrual.revalued_total += accrual.revalued_income
            acc.future_premium += monthly_income * premium_rate

        acc.close_year(accrual)
    return acc


def _base_benefit_yearly(acc: _Accumulator, b_value: float, hybrid: bool, policy: PolicyConstants) -> float:
    half = (policy.a_value + b_value) / 2.0
    if hybrid:
        return half * policy.replacement_rate_flat * (acc.total_paid_months / policy.full_career_months) * 12.0

    total = 0.0
    for accrual in acc.years:
        total += half * accrual.replacement_rate * (accrual.paid_months / policy.full_career_months) * 12.0
    return total


def credited_months(credits: Credits, policy: PolicyConstants) -> int:
    months = 0
    if credits.military:
        months += policy.credit_months["military"]
    if credits.child_count >= 1:
        months += policy.credit_months["first_child"]
    if credits.child_count >= 2:
        months += policy.credit_months["second_child"]
    if credits.child_count >= 3:
        months += policy.credit_months["third_child_plus"] * (credits.child_count - 2)
    return months


def dependent_add_on(dependents: Dependents, policy: PolicyConstants) -> float:
    total = 0.0
    if dependents.spouse:
        total += policy.dependent_add_on["spouse"]
    total += policy.dependent_add_on["child_or_parent"] * dependents.per_person_count
    return total


def apply_claim_timing(yearly: float, add_on: float, claim: ClaimTiming, policy: PolicyConstants) -> float:
    """Early reduction scales the add-on too; the deferral bonus does not."""
    if claim.early_years > 0:
        return yearly * (1.0 - claim.early_years * policy.early_rate_per_year)
    if claim.defer_years > 0:
        return (yearly - add_on) * (1.0 + claim.defer_years * policy.defer_rate_per_year) + add_on
    return yearly


def earnings_test_reduction(post_retire_income: float, monthly_benefit: float, policy: PolicyConstants) -> float:
    if post_retire_income <= policy.earnings_test_limit_monthly:
        return 0.0
    excess = post_retire_income - policy.earnings_test_limit_monthly
    reduction = progressive_amount(excess, policy.earnings_test_brackets)
    return min(reduction, max(0.0, monthly_benefit) * policy.earnings_test_max_share)


def _whole(value: float) -> int:
    return max(0, math.floor(value))


def project(
    request: NationalPensionRequest,
    period: PeriodData,
    policy: PolicyConstants,
    *,
    today: date,
) -> ProjectionResult:
    """Project the monthly old-age pension for ``request``.

    Sweep mode walks every contribution year from enrollment and applies each
    year's own replacement rate. Hybrid mode trusts the caller's settled
    aggregate for the past, projects forward from the month after ``today``,
    and applies the flat base-year replacement rate to the whole career.
    """
    hybrid = isinstance(request.income_history, HybridIncome)
    if hybrid:
        acc = _hybrid_accrual(request, period, policy, today)
    else:
        acc = _sweep_accrual(request, period, policy, today.year)

    b_value = acc.total_revalued_income / acc.total_paid_months if acc.total_paid_months > 0 else 0.0
    yearly = _base_benefit_yearly(acc, b_value, hybrid, policy)

    credit_months = credited_months(request.credits, policy)
    credit_yearly = (
        policy.a_value * policy.replacement_rate_flat * (credit_months / policy.full_career_months) * 12.0
    )
    yearly += credit_yearly

    add_on = dependent_add_on(request.dependents, policy)
    yearly += add_on
    yearly = apply_claim_timing(yearly, add_on, request.claim, policy)

    reduction = earnings_test_reduction(request.post_retire_income, yearly / 12.0, policy)
    yearly -= reduction * 12.0

    mode = request.income_history.mode
    if acc.total_paid_months < policy.min_paid_months and credit_months == 0:
        logger.info(
            "Insufficient contribution history: %d paid months, no credits",
            acc.total_paid_months,
        )
        return ProjectionResult(
            mode=mode,
            monthly=0,
            yearly=0,
            average_indexed_income=0,
            total_paid_months=acc.total_paid_months,
            total_credited_months=0,
            credit_monthly=0,
            arrears_cost=0,
            arrears_months=0,
            earnings_test_reduction=0,
            dependent_add_on=0,
            future_premium=0,
            insufficient_history=True,
            years=acc.years,
        )

    return ProjectionResult(
        mode=mode,
        monthly=_whole(yearly / 12.0),
        yearly=_whole(yearly),
        average_indexed_income=_whole(b_value),
        total_paid_months=acc.total_paid_months,
        total_credited_months=credit_months,
        credit_monthly=_whole(credit_yearly / 12.0),
        arrears_cost=_whole(acc.arrears_cost),
        arrears_months=acc.arrears_months,
        earnings_test_reduction=_whole(reduction),
        dependent_add_on=_whole(add_on),
        future_premium=_whole(acc.future_premium),
        years=acc.years,
    )
