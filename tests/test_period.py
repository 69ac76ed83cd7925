from datetime import date

from kpension.period import age_on, calculate_period
from tests.helpers import TODAY


def test_calculate_period_for_sample_member():
    period = calculate_period(date(1980, 3, 15), 2006, 1, 60, today=TODAY)

    assert period.current_age == 46
    assert period.retire_year == 2040
    assert period.retire_month == 3
    assert period.total_months == 410
    assert period.retire_index - period.start_index == 410


def test_age_turns_over_on_birthday():
    birth = date(1980, 3, 15)
    assert age_on(birth, date(2026, 3, 14)) == 45
    assert age_on(birth, date(2026, 3, 15)) == 46


def test_start_after_retirement_has_no_months():
    period = calculate_period(date(1980, 3, 15), 2045, 1, 60, today=TODAY)
    assert period.total_months == 0


def test_explicit_current_age_wins_over_today():
    period = calculate_period(date(1980, 3, 15), 2006, 1, 60, today=TODAY, current_age=50)
    assert period.current_age == 50
