"""Retirement savings shortfall: required nest egg versus projected assets."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from .inflation import inflation_factor
from .policy import PolicyConstants, default_policy
from .schema import ShortfallInputs

logger = logging.getLogger(__name__)

RATE_TOLERANCE = 1e-6


class InvalidAgeOrderError(ValueError):
    """Raised when ages are not strictly ordered current < retire < death."""


@dataclass(slots=True)
class TrajectoryPoint:
    age: int
    prepared: float
    on_track: float


@dataclass(slots=True)
class ShortfallResult:
    years_to_retire: int
    years_in_retirement: int
    inflation_factor: float
    required_monthly_at_retirement: float
    required_nest_egg: float
    prepared_at_retirement: float
    shortfall: float
    additional_monthly_saving: float
    trajectory: list[TrajectoryPoint] = field(default_factory=list)

    @property
    def is_on_track(self) -> bool:
        return self.shortfall <= 0


def check_age_order(current_age: int, retire_age: int, death_age: int) -> None:
    if current_age >= retire_age:
        raise InvalidAgeOrderError(f"current_age ({current_age}) must be less than retire_age ({retire_age})")
    if retire_age >= death_age:
        raise InvalidAgeOrderError(f"retire_age ({retire_age}) must be less than death_age ({death_age})")


def annuity_due_present_value(payment: float, monthly_rate: float, months: int) -> float:
    if abs(monthly_rate) < RATE_TOLERANCE:
        return payment * months
    return payment * ((1.0 - (1.0 + monthly_rate) ** -months) / monthly_rate) * (1.0 + monthly_rate)


def annuity_future_value(payment: float, monthly_rate: float, months: int) -> float:
    if abs(monthly_rate) < RATE_TOLERANCE:
        return payment * months
    return payment * (((1.0 + monthly_rate) ** months - 1.0) / monthly_rate)


def annuity_payment_for_future_value(target: float, monthly_rate: float, months: int) -> float:
    if months <= 0 or target <= 0:
        return 0.0
    if abs(monthly_rate) < RATE_TOLERANCE:
        return target / months
    return target * monthly_rate / ((1.0 + monthly_rate) ** months - 1.0)


def _prepared(current_assets: float, monthly_saving: float, monthly_rate: float, months: int) -> float:
    return current_assets * (1.0 + monthly_rate) ** months + annuity_future_value(monthly_saving, monthly_rate, months)


def compute_shortfall(inputs: ShortfallInputs, policy: PolicyConstants | None = None) -> ShortfallResult:
    """Rates the request leaves unset fall back to the policy assumptions."""
    policy = policy or default_policy()
    inflation_rate = policy.inflation_rate if inputs.inflation_rate is None else inputs.inflation_rate
    return_rate = policy.investment_return_rate if inputs.return_rate is None else inputs.return_rate
    check_age_order(inputs.current_age, inputs.retire_age, inputs.death_age)

    years_to_retire = inputs.retire_age - inputs.current_age
    years_in_retirement = inputs.death_age - inputs.retire_age

    factor = inflation_factor(years_to_retire, inflation_rate)
    required_monthly = max(0.0, inputs.target_monthly - inputs.expected_pension) * factor

    real_rate = (1.0 + inputs.safe_return_rate) / (1.0 + inflation_rate) - 1.0
    nest_egg = annuity_due_present_value(required_monthly, real_rate / 12.0, years_in_retirement * 12)

    pre_rate = return_rate / 12.0
    months_to_retire = years_to_retire * 12
    prepared = _prepared(inputs.current_assets, inputs.monthly_saving, pre_rate, months_to_retire)

    shortfall = nest_egg - prepared
    additional = annuity_payment_for_future_value(shortfall, pre_rate, months_to_retire)
    logger.debug("nest egg %.0f, prepared %.0f, shortfall %.0f", nest_egg, prepared, shortfall)

    on_track_saving = inputs.monthly_saving + additional
    trajectory = [
        TrajectoryPoint(
            age=inputs.current_age + offset,
            prepared=_prepared(inputs.current_assets, inputs.monthly_saving, pre_rate, offset * 12),
            on_track=_prepared(inputs.current_assets, on_track_saving, pre_rate, offset * 12),
        )
        for offset in range(years_to_retire + 1)
    ]

    return ShortfallResult(
        years_to_retire=years_to_retire,
        years_in_retirement=years_in_retirement,
        inflation_factor=factor,
        required_monthly_at_retirement=required_monthly,
        required_nest_egg=nest_egg,
        prepared_at_retirement=prepared,
        shortfall=shortfall,
        additional_monthly_saving=additional,
        trajectory=trajectory,
    )
