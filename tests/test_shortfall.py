import pytest

from kpension.policy import default_policy, policy_from_dict
from kpension.schema import ShortfallInputs
from kpension.shortfall import (
    InvalidAgeOrderError,
    annuity_due_present_value,
    annuity_future_value,
    annuity_payment_for_future_value,
    compute_shortfall,
)


def _inputs(**overrides):
    values = dict(
        current_age=30,
        retire_age=60,
        death_age=90,
        target_monthly=1_000_000,
        expected_pension=0,
        current_assets=0,
        monthly_saving=500_000,
        return_rate=0.0,
        safe_return_rate=0.0,
        inflation_rate=0.0,
    )
    values.update(overrides)
    return ShortfallInputs(**values)


def test_zero_rates_reduce_to_simple_sums():
    result = compute_shortfall(_inputs())

    assert result.years_to_retire == 30
    assert result.years_in_retirement == 30
    assert result.inflation_factor == 1.0
    assert result.required_nest_egg == pytest.approx(360_000_000)
    assert result.prepared_at_retirement == pytest.approx(180_000_000)
    assert result.shortfall == pytest.approx(180_000_000)
    assert result.additional_monthly_saving == pytest.approx(500_000)
    assert result.is_on_track is False


def test_expected_pension_reduces_requirement():
    result = compute_shortfall(_inputs(expected_pension=400_000))
    assert result.required_monthly_at_retirement == pytest.approx(600_000)


def test_pension_above_target_needs_nothing():
    result = compute_shortfall(_inputs(expected_pension=2_000_000))

    assert result.required_monthly_at_retirement == 0
    assert result.required_nest_egg == 0
    assert result.additional_monthly_saving == 0
    assert result.is_on_track is True


def test_surplus_requires_no_additional_saving():
    result = compute_shortfall(_inputs(current_assets=1_000_000_000, return_rate=0.05))

    assert result.shortfall < 0
    assert result.additional_monthly_saving == 0
    assert result.is_on_track is True


def test_inflation_raises_required_monthly():
    result = compute_shortfall(_inputs(inflation_rate=0.025, safe_return_rate=0.025))

    assert result.inflation_factor == pytest.approx(1.025**30)
    assert result.required_monthly_at_retirement == pytest.approx(1_000_000 * 1.025**30)
    # Equal safe return and inflation leaves a zero real rate.
    assert result.required_nest_egg == pytest.approx(result.required_monthly_at_retirement * 360)


@pytest.mark.parametrize(
    ("current_age", "retire_age", "death_age"),
    [(60, 60, 90), (61, 60, 90), (45, 90, 90), (45, 91, 90)],
)
def test_age_order_is_enforced(current_age, retire_age, death_age):
    with pytest.raises(InvalidAgeOrderError):
        compute_shortfall(_inputs(current_age=current_age, retire_age=retire_age, death_age=death_age))


def test_trajectory_runs_from_today_to_retirement():
    result = compute_shortfall(
        _inputs(current_age=45, retire_age=60, current_assets=10_000_000, return_rate=0.05)
    )

    assert [point.age for point in result.trajectory] == list(range(45, 61))
    assert result.trajectory[0].prepared == pytest.approx(10_000_000)
    assert result.trajectory[0].on_track == pytest.approx(10_000_000)
    assert result.trajectory[-1].prepared == pytest.approx(result.prepared_at_retirement)
    assert result.trajectory[-1].on_track == pytest.approx(result.required_nest_egg)


def test_annuity_helpers():
    assert annuity_due_present_value(100, 0.01, 12) == pytest.approx(1136.7628, rel=1e-6)
    assert annuity_future_value(100, 0.0, 12) == 1200
    assert annuity_future_value(100, 0.01, 12) == pytest.approx(100 * (1.01**12 - 1) / 0.01)
    assert annuity_payment_for_future_value(1200, 0.0, 12) == pytest.approx(100)
    assert annuity_payment_for_future_value(1_000, 0.01, 0) == 0.0
    assert annuity_payment_for_future_value(-1_000, 0.01, 12) == 0.0


def test_sample_shortfall(sample_request_dict):
    result = compute_shortfall(ShortfallInputs.from_dict(sample_request_dict["shortfall"]))

    assert result.years_to_retire == 15
    assert result.years_in_retirement == 30
    assert result.required_monthly_at_retirement == pytest.approx(1_800_000 * 1.025**15)
    assert result.required_nest_egg > 0
    assert result.prepared_at_retirement > 100_000_000


def test_unset_rates_follow_policy_assumptions():
    inputs = _inputs(current_age=45, retire_age=60, return_rate=None, inflation_rate=None)

    builtin = compute_shortfall(inputs, default_policy())
    overridden = compute_shortfall(inputs, policy_from_dict({"inflation_rate": 0.05, "investment_return_rate": 0.0}))

    assert builtin.inflation_factor == pytest.approx(1.025**15)
    assert overridden.inflation_factor == pytest.approx(1.05**15)
    # Zero return leaves plain saving: 500,000 for 180 months.
    assert overridden.prepared_at_retirement == pytest.approx(90_000_000)


def test_explicit_rates_win_over_policy():
    inputs = _inputs(current_age=45, retire_age=60, inflation_rate=0.01)
    result = compute_shortfall(inputs, policy_from_dict({"inflation_rate": 0.05}))

    assert result.inflation_factor == pytest.approx(1.01**15)
