"""Pension income tax: progressive deduction, basic deduction and bracket tax."""

from __future__ import annotations

from dataclasses import dataclass
import math

from .policy import PolicyConstants


@dataclass(slots=True)
class PensionTaxResult:
    gross: float
    pension_deduction: float
    pension_income: float
    taxable_base: float
    national_tax: float
    total_tax: int


def progressive_amount(amount: float, brackets: tuple[tuple[float | None, float], ...]) -> float:
    """Sum ``amount`` sliced over (upper_bound, marginal_rate) brackets; None means infinity."""
    if amount <= 0:
        return 0.0

    remaining = amount
    lower = 0.0
    total = 0.0
    for upper, rate in brackets:
        if remaining <= 0:
            break
        if upper is None:
            portion = remaining
        else:
            span = max(0.0, upper - lower)
            portion = min(remaining, span)
        total += portion * rate
        remaining -= portion
        if upper is None:
            break
        lower = upper
    return max(0.0, total)


def pension_income_deduction(annual_pension: float, policy: PolicyConstants) -> float:
    deduction = progressive_amount(annual_pension, policy.pension_deduction_brackets)
    return min(deduction, policy.max_pension_deduction)


def bracket_tax(taxable_base: float, policy: PolicyConstants) -> float:
    if taxable_base <= 0:
        return 0.0
    for upper, rate, progressive_deduction in policy.income_tax_brackets:
        if upper is None or taxable_base <= upper:
            return taxable_base * rate - progressive_deduction
    return 0.0


def compute_pension_tax(annual_pension: float, policy: PolicyConstants) -> PensionTaxResult:
    gross = max(0.0, annual_pension)
    deduction = pension_income_deduction(gross, policy)
    pension_income = gross - deduction
    taxable_base = pension_income - policy.basic_personal_deduction
    national_tax = bracket_tax(taxable_base, policy)
    return PensionTaxResult(
        gross=gross,
        pension_deduction=deduction,
        pension_income=pension_income,
        taxable_base=max(0.0, taxable_base),
        national_tax=national_tax,
        total_tax=max(0, math.floor(national_tax * policy.local_surtax_multiplier)),
    )


def compute_pension_income_tax(annual_pension: float, policy: PolicyConstants) -> int:
    """Annual tax including local surtax, floored to whole won."""
    return compute_pension_tax(annual_pension, policy).total_tax
