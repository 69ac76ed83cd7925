import json
from datetime import date

import pytest

from kpension.schema import (
    ClaimTiming,
    HistoricalSweepIncome,
    HybridIncome,
    Request,
    SchemaError,
    load_request,
)
from tests.helpers import clone_request, write_request


def test_load_sample_request(sample_request_path):
    request = load_request(sample_request_path)

    national = request.national_pension
    assert national.birth_date == date(1980, 3, 15)
    assert isinstance(national.income_history, HistoricalSweepIncome)
    assert national.income_history.initial_salary == 2_000_000
    assert len(national.exclusions) == 2
    assert national.exclusions[0].is_arrears is True
    assert national.credits.child_count == 2
    assert national.dependents.per_person_count == 1
    assert national.claim == ClaimTiming()

    assert request.basic_pension.is_couple is True
    assert request.shortfall.death_age == 90


def test_hybrid_income_history(sample_request_dict):
    data = clone_request(sample_request_dict)
    data["national_pension"]["income_history"] = {"mode": "hybrid", "paid_months": 180, "average_monthly_income": 2_800_000}

    history = Request.from_dict(data).national_pension.income_history

    assert isinstance(history, HybridIncome)
    assert history.mode == "hybrid"
    assert history.paid_months == 180


def test_unknown_income_mode_is_rejected(sample_request_dict):
    data = clone_request(sample_request_dict)
    data["national_pension"]["income_history"] = {"mode": "guess"}

    with pytest.raises(SchemaError, match=r"national_pension\.income_history\.mode"):
        Request.from_dict(data)


def test_missing_required_field_reports_path(sample_request_dict):
    data = clone_request(sample_request_dict)
    del data["national_pension"]["birth_date"]

    with pytest.raises(SchemaError, match=r"national_pension\.birth_date: missing required field"):
        Request.from_dict(data)


def test_bad_date_is_rejected(sample_request_dict):
    data = clone_request(sample_request_dict)
    data["national_pension"]["birth_date"] = "1980/03/15"

    with pytest.raises(SchemaError, match="YYYY-MM-DD"):
        Request.from_dict(data)


def test_fractional_month_is_rejected(sample_request_dict):
    data = clone_request(sample_request_dict)
    data["national_pension"]["start_month"] = 1.5

    with pytest.raises(SchemaError, match=r"national_pension\.start_month: expected integer"):
        Request.from_dict(data)


def test_early_and_deferred_claim_together_is_rejected(sample_request_dict):
    data = clone_request(sample_request_dict)
    data["national_pension"]["claim"] = {"early_years": 1, "defer_years": 2}

    with pytest.raises(SchemaError, match="mutually exclusive"):
        Request.from_dict(data)


def test_claim_timing_setters_keep_one_side_zero():
    claim = ClaimTiming(early_years=3)
    claim.defer_years = 2
    assert claim.early_years == 0
    assert claim.defer_years == 2
    assert claim.offset_years == 2

    claim.early_years = 1
    assert claim.defer_years == 0
    assert claim.offset_years == -1

    with pytest.raises(ValueError):
        ClaimTiming(early_years=1, defer_years=1)


def test_request_needs_at_least_one_section():
    with pytest.raises(SchemaError, match="at least one of"):
        Request.from_dict({})


def test_sections_are_independent(sample_request_dict):
    request = Request.from_dict({"shortfall": sample_request_dict["shortfall"]})

    assert request.national_pension is None
    assert request.basic_pension is None
    assert request.shortfall.current_age == 45


def test_root_must_be_object(tmp_path):
    path = tmp_path / "request.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(SchemaError, match="root must be a JSON object"):
        load_request(path)


def test_load_request_round_trips_written_file(tmp_path, sample_request_dict):
    path = write_request(tmp_path, sample_request_dict)
    assert load_request(path).basic_pension.region == "city"


@pytest.mark.parametrize("field", ["household", "region"])
def test_means_test_enums_must_be_strings(sample_request_dict, field):
    data = clone_request(sample_request_dict)
    data["basic_pension"][field] = ["metro"]

    with pytest.raises(SchemaError, match=rf"basic_pension\.{field}: expected string"):
        Request.from_dict(data)


def test_omitted_shortfall_rates_stay_unset(sample_request_dict):
    data = clone_request(sample_request_dict)
    del data["shortfall"]["return_rate"]
    del data["shortfall"]["inflation_rate"]

    shortfall = Request.from_dict(data).shortfall

    assert shortfall.return_rate is None
    assert shortfall.inflation_rate is None
    assert shortfall.safe_return_rate == 0.03


def test_claim_timing_keeps_negative_values():
    claim = ClaimTiming(early_years=-3)

    assert claim.early_years == -3
    assert claim.offset_years == 0
