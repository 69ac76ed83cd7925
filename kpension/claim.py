"""Claim summary around a projection: tax, future value and arrears buy-back return."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
import logging
import math

from .inflation import future_value
from .national_pension import ProjectionResult, project
from .period import PeriodData, calculate_period
from .policy import PolicyConstants, default_policy
from .schema import NationalPensionRequest
from .tax import compute_pension_income_tax

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ClaimSummary:
    receipt_age: int
    claim_start_year: int
    years_until_receipt: int
    period_years: int
    period_months: int
    annual_tax: int
    monthly_tax: float
    monthly_after_tax: float
    future_monthly: int
    future_monthly_after_tax: int
    arrears_monthly_increase: int
    arrears_breakeven_months: int | None


@dataclass(slots=True)
class NationalPensionOutcome:
    period: PeriodData
    projection: ProjectionResult
    summary: ClaimSummary | None


def _without_arrears(request: NationalPensionRequest) -> NationalPensionRequest:
    return replace(request, exclusions=[replace(period, is_arrears=False) for period in request.exclusions])


def summarize_claim(
    request: NationalPensionRequest,
    period: PeriodData,
    projection: ProjectionResult,
    policy: PolicyConstants,
    *,
    today: date,
) -> ClaimSummary:
    receipt_age = policy.normal_claim_age(request.birth_date.year) + request.claim.offset_years
    years_until_receipt = max(0, receipt_age - period.current_age)

    annual_tax = compute_pension_income_tax(projection.yearly, policy)
    monthly_tax = annual_tax / 12.0

    arrears_increase = 0
    breakeven = None
    if projection.arrears_months > 0:
        baseline = project(_without_arrears(request), period, policy, today=today)
        arrears_increase = projection.monthly - baseline.monthly
        if arrears_increase > 0:
            breakeven = math.ceil(projection.arrears_cost / arrears_increase)
        logger.debug("arrears buy-back: +%d/month for %d", arrears_increase, projection.arrears_cost)

    future_monthly = future_value(projection.monthly, years_until_receipt, policy.inflation_rate)
    future_tax = future_value(monthly_tax, years_until_receipt, policy.inflation_rate)

    return ClaimSummary(
        receipt_age=receipt_age,
        claim_start_year=request.birth_date.year + receipt_age,
        years_until_receipt=years_until_receipt,
        period_years=projection.total_paid_months // 12,
        period_months=projection.total_paid_months % 12,
        annual_tax=annual_tax,
        monthly_tax=monthly_tax,
        monthly_after_tax=projection.monthly - monthly_tax,
        future_monthly=future_monthly,
        future_monthly_after_tax=future_monthly - future_tax,
        arrears_monthly_increase=arrears_increase,
        arrears_breakeven_months=breakeven,
    )


def project_national_pension(
    request: NationalPensionRequest,
    policy: PolicyConstants | None = None,
    *,
    today: date | None = None,
) -> NationalPensionOutcome:
    """Run period derivation, projection and claim summary for one request.

    The summary is None when the contribution history is insufficient.
    """
    policy = policy or default_policy()
    today = today or date.today()
    period = calculate_period(
        request.birth_date,
        request.start_year,
        request.start_month,
        request.retire_age,
        today=today,
    )
    projection = project(request, period, policy, today=today)
    if projection.insufficient_history:
        return NationalPensionOutcome(period=period, projection=projection, summary=None)
    summary = summarize_claim(request, period, projection, policy, today=today)
    return NationalPensionOutcome(period=period, projection=projection, summary=summary)
