"""Basic pension means test: recognized income, eligibility and estimated payment."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math

from .policy import PolicyConstants
from .schema import MeansTestInputs

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IncomeBreakdown:
    income: int
    property: int
    luxury: int


@dataclass(slots=True)
class MeansTestResult:
    recognized_income: int
    threshold: int
    is_eligible: bool
    estimated_monthly: int
    breakdown: IncomeBreakdown


def earned_income_evaluation(income: float, policy: PolicyConstants) -> float:
    deduction = policy.basic_pension["earned_income_deduction"]
    return max(0.0, income - deduction) * policy.basic_pension["earned_income_share"]


def property_income(inputs: MeansTestInputs, policy: PolicyConstants) -> float:
    """Monthly income equivalent of net assets after regional and financial deductions."""
    general = max(0.0, inputs.general_property - policy.region_deduction(inputs.region))
    financial = max(0.0, inputs.financial_property - policy.basic_pension["financial_deduction"])
    net = max(0.0, general + financial - inputs.debt)
    return net * (policy.basic_pension["annual_conversion_rate"] / 12.0)


def luxury_income(value: float, policy: PolicyConstants) -> float:
    # At or above the threshold the whole value counts as monthly income.
    threshold = policy.basic_pension["luxury_threshold"]
    if value >= threshold:
        logger.warning("Luxury asset value %.0f meets threshold %.0f; counting in full", value, threshold)
        return value
    return 0.0


def selection_threshold(inputs: MeansTestInputs, policy: PolicyConstants) -> float:
    if inputs.is_couple:
        return policy.basic_pension["limit_couple"]
    return policy.basic_pension["limit_single"]


def base_benefit(inputs: MeansTestInputs, policy: PolicyConstants) -> float:
    full = policy.basic_pension["full_amount"]
    if inputs.is_couple:
        return full * 2 * (1.0 - policy.basic_pension["couple_reduction"])
    return full


def evaluate_basic_pension(inputs: MeansTestInputs, policy: PolicyConstants) -> MeansTestResult:
    earned = earned_income_evaluation(inputs.earned_income, policy)
    if inputs.is_couple and inputs.spouse_working:
        earned += earned_income_evaluation(inputs.spouse_earned_income, policy)
    income_eval = earned + inputs.pension_income + inputs.other_income

    property_eval = property_income(inputs, policy)
    luxury_eval = luxury_income(inputs.luxury_asset_value, policy)
    recognized = income_eval + property_eval + luxury_eval

    threshold = selection_threshold(inputs, policy)
    is_eligible = recognized <= threshold

    estimated = 0.0
    if is_eligible:
        estimated = base_benefit(inputs, policy)
        # Income-reversal offset: recognized income plus benefit may not pass the threshold.
        excess = recognized + estimated - threshold
        if excess > 0:
            minimum = round(policy.basic_pension["full_amount"] * policy.basic_pension["minimum_share"])
            estimated = max(estimated - excess, minimum)

    logger.info(
        "Basic pension: recognized income %.0f vs threshold %.0f -> %s",
        recognized,
        threshold,
        "eligible" if is_eligible else "not eligible",
    )
    return MeansTestResult(
        recognized_income=round(recognized),
        threshold=round(threshold),
        is_eligible=is_eligible,
        estimated_monthly=math.floor(estimated / 10) * 10,
        breakdown=IncomeBreakdown(
            income=round(income_eval),
            property=round(property_eval),
            luxury=round(luxury_eval),
        ),
    )
