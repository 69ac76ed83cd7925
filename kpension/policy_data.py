"""National pension, basic pension and pension-tax reference data (2026 regime)."""

from __future__ import annotations

from typing import Final

BASE_POLICY_YEAR: Final[int] = 2026
SYSTEM_START_YEAR: Final[int] = 1988

# National average monthly income (A-value) for the base year.
A_VALUE: Final[float] = 3_193_511.0

INCOME_CAP_MONTHLY: Final[float] = 6_170_000.0
INCOME_FLOOR_MONTHLY: Final[float] = 390_000.0

# Revaluation factors convert a year's nominal monthly income into base-year terms.
REVALUATION_FACTORS: Final[dict[int, float]] = {
    1988: 7.64,
    1989: 7.24,
    1990: 6.78,
    1991: 6.18,
    1992: 5.82,
    1993: 5.56,
    1994: 5.23,
    1995: 4.96,
    1996: 4.72,
    1997: 4.51,
    1998: 4.19,
    1999: 4.16,
    2000: 3.97,
    2001: 3.82,
    2002: 3.65,
    2003: 3.51,
    2004: 3.39,
    2005: 3.28,
    2006: 3.19,
    2007: 3.10,
    2008: 3.01,
    2009: 2.91,
    2010: 2.82,
    2011: 2.74,
    2012: 2.63,
    2013: 2.57,
    2014: 2.54,
    2015: 2.52,
    2016: 2.50,
    2017: 2.45,
    2018: 2.41,
    2019: 2.37,
    2020: 2.36,
    2021: 2.35,
    2022: 2.29,
    2023: 2.17,
    2024: 2.05,
    2025: 1.025,
    2026: 1.0,
}

# Contribution rate schedule: +0.5%p per year from 2026 until 13%.
LEGACY_PREMIUM_RATE: Final[float] = 0.09
PREMIUM_RATES: Final[dict[int, float]] = {
    2025: 0.09,
    2026: 0.095,
    2027: 0.10,
    2028: 0.105,
    2029: 0.11,
    2030: 0.115,
    2031: 0.12,
    2032: 0.125,
    2033: 0.13,
}

# Replacement rate bands are (first_year_not_covered, rate).
REPLACEMENT_RATE_BANDS: Final[list[tuple[int, float]]] = [
    (1999, 0.70),
    (2008, 0.60),
]
REPLACEMENT_GLIDE_START_YEAR: Final[int] = 2008
REPLACEMENT_GLIDE_START_RATE: Final[float] = 0.50
REPLACEMENT_GLIDE_STEP: Final[float] = 0.005
REPLACEMENT_RATE: Final[float] = 0.42

FULL_CAREER_MONTHS: Final[int] = 480
MIN_PAID_MONTHS: Final[int] = 120

CREDIT_MONTHS: Final[dict[str, int]] = {
    "military": 12,
    "first_child": 12,
    "second_child": 12,
    "third_child_plus": 18,
}

# Annual dependent add-ons.
DEPENDENT_ADD_ON: Final[dict[str, float]] = {
    "spouse": 306_000.0,
    "child_or_parent": 203_000.0,
}

EARLY_RATE_PER_YEAR: Final[float] = 0.06
DEFER_RATE_PER_YEAR: Final[float] = 0.072
MAX_EARLY_YEARS: Final[int] = 5
MAX_DEFER_YEARS: Final[int] = 5

# Earnings test: monthly limit, then (upper_bound_of_excess, marginal_rate).
EARNINGS_TEST_LIMIT_MONTHLY: Final[float] = 5_090_000.0
EARNINGS_TEST_BRACKETS: Final[list[tuple[float | None, float]]] = [
    (1_000_000.0, 0.05),
    (2_000_000.0, 0.10),
    (3_000_000.0, 0.15),
    (4_000_000.0, 0.20),
    (None, 0.25),
]
EARNINGS_TEST_MAX_SHARE: Final[float] = 0.5

# Pension income deduction is progressive: (upper_bound, marginal_share).
PENSION_DEDUCTION_BRACKETS: Final[list[tuple[float | None, float]]] = [
    (3_500_000.0, 1.0),
    (7_000_000.0, 0.4),
    (14_000_000.0, 0.2),
    (None, 0.1),
]
MAX_PENSION_DEDUCTION: Final[float] = 9_000_000.0
BASIC_PERSONAL_DEDUCTION: Final[float] = 1_500_000.0

# Income tax brackets are (upper_bound, rate, progressive_deduction).
INCOME_TAX_BRACKETS: Final[list[tuple[float | None, float, float]]] = [
    (14_000_000.0, 0.06, 0.0),
    (50_000_000.0, 0.15, 1_260_000.0),
    (88_000_000.0, 0.24, 5_760_000.0),
    (None, 0.35, 15_440_000.0),
]
LOCAL_SURTAX_MULTIPLIER: Final[float] = 1.1

BASIC_PENSION: Final[dict[str, float]] = {
    "limit_single": 2_470_000.0,
    "limit_couple": 3_952_000.0,
    "full_amount": 349_700.0,
    "couple_reduction": 0.2,
    "minimum_share": 0.1,
    "earned_income_deduction": 1_180_000.0,
    "earned_income_share": 0.7,
    "financial_deduction": 20_000_000.0,
    "annual_conversion_rate": 0.04,
    "luxury_threshold": 40_000_000.0,
}

REGION_PROPERTY_DEDUCTIONS: Final[dict[str, float]] = {
    "metro": 135_000_000.0,
    "city": 85_000_000.0,
    "rural": 72_500_000.0,
}

INFLATION_RATE: Final[float] = 0.025
INVESTMENT_RETURN_RATE: Final[float] = 0.05

# Normal claiming age by birth cohort: (last_birth_year, age). Later cohorts claim at 65.
CLAIM_AGE_BY_BIRTH_YEAR: Final[list[tuple[int, int]]] = [
    (1952, 60),
    (1956, 61),
    (1960, 62),
    (1964, 63),
    (1968, 64),
]
FINAL_CLAIM_AGE: Final[int] = 65
