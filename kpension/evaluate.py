"""Run every pipeline present in a request."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .basic_pension import MeansTestResult, evaluate_basic_pension
from .claim import NationalPensionOutcome, project_national_pension
from .policy import PolicyConstants
from .schema import Request
from .shortfall import ShortfallResult, compute_shortfall


@dataclass(slots=True)
class RequestResult:
    today: date
    national_pension: NationalPensionOutcome | None = None
    basic_pension: MeansTestResult | None = None
    shortfall: ShortfallResult | None = None


def evaluate_request(request: Request, policy: PolicyConstants, *, today: date) -> RequestResult:
    """The three pipelines share no state; each runs only when its section is present."""
    result = RequestResult(today=today)
    if request.national_pension is not None:
        result.national_pension = project_national_pension(request.national_pension, policy, today=today)
    if request.basic_pension is not None:
        result.basic_pension = evaluate_basic_pension(request.basic_pension, policy)
    if request.shortfall is not None:
        result.shortfall = compute_shortfall(request.shortfall, policy)
    return result
