import pytest

from kpension.basic_pension import base_benefit, earned_income_evaluation, evaluate_basic_pension
from kpension.policy import default_policy
from kpension.schema import MeansTestInputs

POLICY = default_policy()


def test_earned_income_deduction_and_share():
    assert earned_income_evaluation(2_000_000, POLICY) == pytest.approx(574_000)
    assert earned_income_evaluation(1_000_000, POLICY) == 0.0


def test_couple_base_benefit_is_reduced():
    assert base_benefit(MeansTestInputs(household="couple"), POLICY) == pytest.approx(559_520)
    assert base_benefit(MeansTestInputs(), POLICY) == pytest.approx(349_700)


def test_single_without_income_gets_full_amount():
    result = evaluate_basic_pension(MeansTestInputs(), POLICY)

    assert result.is_eligible is True
    assert result.recognized_income == 0
    assert result.threshold == 2_470_000
    assert result.estimated_monthly == 349_700


def test_income_reversal_offset_trims_benefit():
    result = evaluate_basic_pension(MeansTestInputs(pension_income=2_200_000), POLICY)

    assert result.is_eligible is True
    assert result.estimated_monthly == 270_000


def test_offset_never_goes_below_minimum_share():
    result = evaluate_basic_pension(MeansTestInputs(pension_income=2_450_000), POLICY)

    assert result.is_eligible is True
    assert result.estimated_monthly == 34_970


def test_ineligible_household_gets_nothing():
    result = evaluate_basic_pension(MeansTestInputs(pension_income=2_470_001), POLICY)

    assert result.is_eligible is False
    assert result.estimated_monthly == 0


def test_property_income_after_regional_deduction():
    result = evaluate_basic_pension(MeansTestInputs(region="metro", general_property=205_000_000), POLICY)

    # 70M above the metro deduction at 4% a year.
    assert result.breakdown.property == 233_333
    assert result.recognized_income == 233_333


def test_debt_offsets_property_but_not_below_zero():
    result = evaluate_basic_pension(
        MeansTestInputs(region="rural", general_property=80_000_000, debt=50_000_000),
        POLICY,
    )
    assert result.breakdown.property == 0


def test_spouse_income_counts_only_for_working_couple():
    working = evaluate_basic_pension(
        MeansTestInputs(household="couple", spouse_working=True, spouse_earned_income=2_000_000),
        POLICY,
    )
    idle = evaluate_basic_pension(
        MeansTestInputs(household="couple", spouse_working=False, spouse_earned_income=2_000_000),
        POLICY,
    )

    assert working.breakdown.income == 574_000
    assert idle.breakdown.income == 0


def test_luxury_threshold_is_a_cliff():
    below = evaluate_basic_pension(MeansTestInputs(luxury_asset_value=39_999_999), POLICY)
    at = evaluate_basic_pension(MeansTestInputs(luxury_asset_value=40_000_000), POLICY)

    assert below.breakdown.luxury == 0
    assert below.is_eligible is True
    assert at.breakdown.luxury == 40_000_000
    assert at.is_eligible is False


def test_sample_couple_is_eligible_for_full_couple_amount(sample_request_dict):
    inputs = MeansTestInputs.from_dict(sample_request_dict["basic_pension"])
    result = evaluate_basic_pension(inputs, POLICY)

    assert result.breakdown.income == 824_000
    assert result.breakdown.property == 216_667
    assert result.is_eligible is True
    assert result.estimated_monthly == 559_520


def test_estimates_are_whole_tens_of_won():
    for pension_income in (0, 1_000_000, 2_123_456, 2_333_333, 2_469_999):
        result = evaluate_basic_pension(MeansTestInputs(pension_income=pension_income), POLICY)
        assert result.estimated_monthly % 10 == 0
