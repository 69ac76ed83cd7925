"""Semantic and cross-field validation for requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .national_pension import credited_months
from .period import calculate_period
from .policy import PolicyConstants
from .schema import MeansTestInputs, NationalPensionRequest, Request, ShortfallInputs

HOUSEHOLD_TYPES = {"single", "couple"}


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _check_enum(result: ValidationResult, path: str, value: str, allowed: Iterable[str]) -> None:
    allowed_set = set(allowed)
    if value not in allowed_set:
        expected = ", ".join(sorted(allowed_set))
        result.errors.append(f"{path}: '{value}' is not valid; expected one of [{expected}]")


def _check_month(result: ValidationResult, path: str, value: int) -> None:
    if not 1 <= value <= 12:
        result.errors.append(f"{path}: must be between 1 and 12")


def _check_non_negative(result: ValidationResult, path: str, value: float) -> None:
    if value < 0:
        result.errors.append(f"{path}: must be >= 0")


def _check_at_most(result: ValidationResult, path: str, value: float, limit: float) -> None:
    if value > limit:
        result.errors.append(f"{path}: must be <= {limit:g}")


def _validate_national(result: ValidationResult, item: NationalPensionRequest, policy: PolicyConstants) -> None:
    base = "national_pension"
    _check_month(result, f"{base}.start_month", item.start_month)
    _check_non_negative(result, f"{base}.retire_age", item.retire_age)
    _check_non_negative(result, f"{base}.monthly_income", item.monthly_income)
    _check_non_negative(result, f"{base}.post_retire_income", item.post_retire_income)
    _check_non_negative(result, f"{base}.credits.child_count", item.credits.child_count)
    _check_non_negative(result, f"{base}.dependents.children", item.dependents.children)
    _check_non_negative(result, f"{base}.dependents.parents", item.dependents.parents)
    _check_non_negative(result, f"{base}.claim.early_years", item.claim.early_years)
    _check_non_negative(result, f"{base}.claim.defer_years", item.claim.defer_years)
    _check_at_most(result, f"{base}.claim.early_years", item.claim.early_years, policy.max_early_years)
    _check_at_most(result, f"{base}.claim.defer_years", item.claim.defer_years, policy.max_defer_years)

    history = item.income_history
    if history.mode == "sweep":
        _check_non_negative(result, f"{base}.income_history.initial_salary", history.initial_salary)
    else:
        _check_non_negative(result, f"{base}.income_history.paid_months", history.paid_months)
        _check_non_negative(
            result, f"{base}.income_history.average_monthly_income", history.average_monthly_income
        )

    if item.start_year < policy.system_start_year:
        result.warnings.append(
            f"{base}.start_year: enrollment before {policy.system_start_year} is counted from {policy.system_start_year}"
        )
    if item.monthly_income > policy.income_cap_monthly:
        result.warnings.append(
            f"{base}.monthly_income: above the income cap {policy.income_cap_monthly:,.0f}; contributions are capped"
        )

    period = calculate_period(item.birth_date, item.start_year, item.start_month, item.retire_age, current_age=0)
    if period.retire_index <= period.start_index:
        result.warnings.append(f"{base}.start_year/{base}.retire_age: enrollment starts after retirement; no months accrue")
    if period.start_index < item.birth_date.year * 12 + item.birth_date.month:
        result.errors.append(f"{base}.start_year/{base}.start_month: enrollment starts before birth")

    for idx, period_item in enumerate(item.exclusions):
        path = f"{base}.exclusions[{idx}]"
        _check_month(result, f"{path}.start_month", period_item.start_month)
        _check_month(result, f"{path}.end_month", period_item.end_month)
        if period_item.start_index > period_item.end_index:
            result.errors.append(f"{path}.start_year/{path}.end_year: start must be <= end")
        for prior_idx, prior in enumerate(item.exclusions[:idx]):
            if period_item.start_index <= prior.end_index and prior.start_index <= period_item.end_index:
                result.warnings.append(
                    f"{path}: overlaps exclusions[{prior_idx}]; the earlier period decides overlapping months"
                )

    if history.mode == "hybrid" and history.paid_months < policy.min_paid_months and credited_months(item.credits, policy) == 0:
        result.warnings.append(
            f"{base}.income_history.paid_months: fewer than {policy.min_paid_months} settled months; "
            "benefit depends on future contributions"
        )


def _validate_basic(result: ValidationResult, item: MeansTestInputs, policy: PolicyConstants) -> None:
    base = "basic_pension"
    _check_enum(result, f"{base}.household", item.household, HOUSEHOLD_TYPES)
    _check_enum(result, f"{base}.region", item.region, policy.region_property_deductions)
    for name in (
        "earned_income",
        "spouse_earned_income",
        "pension_income",
        "other_income",
        "general_property",
        "financial_property",
        "debt",
        "luxury_asset_value",
    ):
        _check_non_negative(result, f"{base}.{name}", getattr(item, name))
    if item.spouse_working and not item.is_couple:
        result.warnings.append(f"{base}.spouse_working: ignored for single households")
    if item.luxury_asset_value >= policy.basic_pension["luxury_threshold"]:
        result.warnings.append(f"{base}.luxury_asset_value: at or above the threshold; the full value counts as income")


def _validate_shortfall(result: ValidationResult, item: ShortfallInputs) -> None:
    base = "shortfall"
    _check_non_negative(result, f"{base}.current_age", item.current_age)
    if item.current_age >= item.retire_age:
        result.errors.append(f"{base}.current_age/{base}.retire_age: current_age must be < retire_age")
    if item.retire_age >= item.death_age:
        result.errors.append(f"{base}.retire_age/{base}.death_age: retire_age must be < death_age")
    for name in ("target_monthly", "expected_pension", "current_assets", "monthly_saving"):
        _check_non_negative(result, f"{base}.{name}", getattr(item, name))
    for name in ("return_rate", "safe_return_rate", "inflation_rate"):
        rate = getattr(item, name)
        if rate is not None and rate <= -1:
            result.errors.append(f"{base}.{name}: must be > -1")


def validate_request(request: Request, policy: PolicyConstants) -> ValidationResult:
    result = ValidationResult()
    if request.national_pension is not None:
        _validate_national(result, request.national_pension, policy)
    if request.basic_pension is not None:
        _validate_basic(result, request.basic_pension, policy)
    if request.shortfall is not None:
        _validate_shortfall(result, request.shortfall)
    return result
