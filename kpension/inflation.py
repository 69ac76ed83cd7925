"""Future-value projection at a fixed inflation rate."""

from __future__ import annotations

import math


def future_value(amount: float, years: int, inflation_rate: float) -> int:
    return math.floor(amount * (1.0 + inflation_rate) ** years)


def inflation_factor(years: float, inflation_rate: float) -> float:
    return (1.0 + inflation_rate) ** years
