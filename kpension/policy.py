"""Immutable policy constants table with JSON override loading."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from functools import lru_cache
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from . import policy_data
from .schema import SchemaError, _expect_dict, _expect_list

logger = logging.getLogger(__name__)

Brackets = tuple[tuple[float | None, float], ...]
TaxBrackets = tuple[tuple[float | None, float, float], ...]


@dataclass(frozen=True, slots=True)
class PolicyConstants:
    base_year: int
    system_start_year: int
    a_value: float
    income_cap_monthly: float
    income_floor_monthly: float
    revaluation_factors: Mapping[int, float]
    legacy_premium_rate: float
    premium_rates: Mapping[int, float]
    replacement_rate_bands: tuple[tuple[int, float], ...]
    replacement_glide_start_year: int
    replacement_glide_start_rate: float
    replacement_glide_step: float
    replacement_rate_flat: float
    full_career_months: int
    min_paid_months: int
    credit_months: Mapping[str, int]
    dependent_add_on: Mapping[str, float]
    early_rate_per_year: float
    defer_rate_per_year: float
    max_early_years: int
    max_defer_years: int
    earnings_test_limit_monthly: float
    earnings_test_brackets: Brackets
    earnings_test_max_share: float
    pension_deduction_brackets: Brackets
    max_pension_deduction: float
    basic_personal_deduction: float
    income_tax_brackets: TaxBrackets
    local_surtax_multiplier: float
    basic_pension: Mapping[str, float]
    region_property_deductions: Mapping[str, float]
    inflation_rate: float
    investment_return_rate: float
    claim_age_by_birth_year: tuple[tuple[int, int], ...]
    final_claim_age: int

    def revaluation_factor(self, year: int) -> float:
        factor = self.revaluation_factors.get(year)
        if factor is None:
            logger.debug("No revaluation factor for %d; using 1.0", year)
            return 1.0
        return factor

    def premium_rate(self, year: int) -> float:
        if year < self.base_year:
            return self.legacy_premium_rate
        rate = self.premium_rates.get(year)
        if rate is not None:
            return rate
        if not self.premium_rates:
            return self.legacy_premium_rate
        final_year = max(self.premium_rates)
        logger.debug("No premium rate for %d; using final scheduled rate from %d", year, final_year)
        return self.premium_rates[final_year]

    def replacement_rate(self, year: int) -> float:
        for first_year_not_covered, rate in self.replacement_rate_bands:
            if year < first_year_not_covered:
                return rate
        if year < self.base_year:
            return self.replacement_glide_start_rate - (year - self.replacement_glide_start_year) * self.replacement_glide_step
        return self.replacement_rate_flat

    def normal_claim_age(self, birth_year: int) -> int:
        for last_birth_year, age in self.claim_age_by_birth_year:
            if birth_year <= last_birth_year:
                return age
        return self.final_claim_age

    def region_deduction(self, region: str) -> float:
        try:
            return self.region_property_deductions[region]
        except KeyError:
            expected = ", ".join(sorted(self.region_property_deductions))
            raise ValueError(f"unsupported region '{region}'; expected one of [{expected}]") from None


def _frozen_map(data: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(data))


def _brackets(rows: list[Any], path: str, width: int) -> tuple[tuple[Any, ...], ...]:
    parsed = []
    for idx, row in enumerate(_expect_list(rows, path)):
        items = _expect_list(row, f"{path}[{idx}]")
        if len(items) != width:
            raise SchemaError(f"{path}[{idx}]: expected {width} values")
        upper = None if items[0] is None else float(items[0])
        parsed.append((upper, *(float(value) for value in items[1:])))
    if not parsed or parsed[-1][0] is not None:
        raise SchemaError(f"{path}: last bracket must have a null upper bound")
    return tuple(parsed)


def _pairs(rows: Any, path: str, cast: type) -> tuple[tuple[int, Any], ...]:
    parsed = []
    for idx, row in enumerate(_expect_list(rows, path)):
        items = _expect_list(row, f"{path}[{idx}]")
        if len(items) != 2:
            raise SchemaError(f"{path}[{idx}]: expected 2 values")
        parsed.append((int(items[0]), cast(items[1])))
    return tuple(sorted(parsed))


def _year_map(data: Any, path: str) -> Mapping[int, float]:
    raw = _expect_dict(data, path)
    try:
        return _frozen_map({int(year): float(value) for year, value in raw.items()})
    except (TypeError, ValueError) as exc:
        raise SchemaError(f"{path}: expected year -> number mapping") from exc


def _builtin_fields() -> dict[str, Any]:
    return {
        "base_year": policy_data.BASE_POLICY_YEAR,
        "system_start_year": policy_data.SYSTEM_START_YEAR,
        "a_value": policy_data.A_VALUE,
        "income_cap_monthly": policy_data.INCOME_CAP_MONTHLY,
        "income_floor_monthly": policy_data.INCOME_FLOOR_MONTHLY,
        "revaluation_factors": _frozen_map(policy_data.REVALUATION_FACTORS),
        "legacy_premium_rate": policy_data.LEGACY_PREMIUM_RATE,
        "premium_rates": _frozen_map(policy_data.PREMIUM_RATES),
        "replacement_rate_bands": tuple(policy_data.REPLACEMENT_RATE_BANDS),
        "replacement_glide_start_year": policy_data.REPLACEMENT_GLIDE_START_YEAR,
        "replacement_glide_start_rate": policy_data.REPLACEMENT_GLIDE_START_RATE,
        "replacement_glide_step": policy_data.REPLACEMENT_GLIDE_STEP,
        "replacement_rate_flat": policy_data.REPLACEMENT_RATE,
        "full_career_months": policy_data.FULL_CAREER_MONTHS,
        "min_paid_months": policy_data.MIN_PAID_MONTHS,
        "credit_months": _frozen_map(policy_data.CREDIT_MONTHS),
        "dependent_add_on": _frozen_map(policy_data.DEPENDENT_ADD_ON),
        "early_rate_per_year": policy_data.EARLY_RATE_PER_YEAR,
        "defer_rate_per_year": policy_data.DEFER_RATE_PER_YEAR,
        "max_early_years": policy_data.MAX_EARLY_YEARS,
        "max_defer_years": policy_data.MAX_DEFER_YEARS,
        "earnings_test_limit_monthly": policy_data.EARNINGS_TEST_LIMIT_MONTHLY,
        "earnings_test_brackets": tuple(policy_data.EARNINGS_TEST_BRACKETS),
        "earnings_test_max_share": policy_data.EARNINGS_TEST_MAX_SHARE,
        "pension_deduction_brackets": tuple(policy_data.PENSION_DEDUCTION_BRACKETS),
        "max_pension_deduction": policy_data.MAX_PENSION_DEDUCTION,
        "basic_personal_deduction": policy_data.BASIC_PERSONAL_DEDUCTION,
        "income_tax_brackets": tuple(policy_data.INCOME_TAX_BRACKETS),
        "local_surtax_multiplier": policy_data.LOCAL_SURTAX_MULTIPLIER,
        "basic_pension": _frozen_map(policy_data.BASIC_PENSION),
        "region_property_deductions": _frozen_map(policy_data.REGION_PROPERTY_DEDUCTIONS),
        "inflation_rate": policy_data.INFLATION_RATE,
        "investment_return_rate": policy_data.INVESTMENT_RETURN_RATE,
        "claim_age_by_birth_year": tuple(policy_data.CLAIM_AGE_BY_BIRTH_YEAR),
        "final_claim_age": policy_data.FINAL_CLAIM_AGE,
    }


@lru_cache(maxsize=1)
def default_policy() -> PolicyConstants:
    """Return the built-in 2026 policy table."""
    return PolicyConstants(**_builtin_fields())


_YEAR_MAPS = {"revaluation_factors", "premium_rates"}
_NAMED_MAPS = {"credit_months", "dependent_add_on", "basic_pension", "region_property_deductions"}
_BRACKETS = {"earnings_test_brackets": 2, "pension_deduction_brackets": 2, "income_tax_brackets": 3}
_PAIRS = {"replacement_rate_bands": float, "claim_age_by_birth_year": int}
_INTS = {
    "base_year",
    "system_start_year",
    "replacement_glide_start_year",
    "full_career_months",
    "min_paid_months",
    "max_early_years",
    "max_defer_years",
    "final_claim_age",
}


def policy_from_dict(data: dict[str, Any], base: PolicyConstants | None = None, path: str = "policy") -> PolicyConstants:
    """Overlay a policy document on ``base`` (the built-in table by default)."""
    base = base or default_policy()
    known = {f.name for f in fields(PolicyConstants)}
    overrides: dict[str, Any] = {}
    for key, value in _expect_dict(data, path).items():
        key_path = f"{path}.{key}"
        if key not in known:
            raise SchemaError(f"{key_path}: unknown policy field")
        if key in _YEAR_MAPS:
            overrides[key] = _year_map(value, key_path)
        elif key in _NAMED_MAPS:
            merged = dict(getattr(base, key))
            for name, amount in _expect_dict(value, key_path).items():
                if isinstance(amount, bool) or not isinstance(amount, (int, float)):
                    raise SchemaError(f"{key_path}.{name}: expected number")
                merged[name] = amount
            overrides[key] = _frozen_map(merged)
        elif key in _BRACKETS:
            overrides[key] = _brackets(value, key_path, _BRACKETS[key])
        elif key in _PAIRS:
            overrides[key] = _pairs(value, key_path, _PAIRS[key])
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaError(f"{key_path}: expected number")
        else:
            overrides[key] = int(value) if key in _INTS else float(value)
    return replace(base, **overrides)


def load_policy(path: str | Path) -> PolicyConstants:
    """Load a policy override document from JSON."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("policy: root must be a JSON object")
    return policy_from_dict(raw)
