"""Request schema dataclasses and JSON loading."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
import json
from pathlib import Path
from typing import Any, ClassVar, Union


class SchemaError(ValueError):
    """Raised when raw JSON cannot be parsed into schema objects."""


def _expect_dict(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise SchemaError(f"{path}: expected object")
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise SchemaError(f"{path}: expected array")
    return value


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if key not in data:
        raise SchemaError(f"{path}.{key}: missing required field")
    return data[key]


def _optional(data: dict[str, Any], key: str, default: Any = None) -> Any:
    return data.get(key, default)


def _number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SchemaError(f"{path}: expected number")
    return float(value)


def _integer(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise SchemaError(f"{path}: expected integer")
    return int(value)


def _optional_number(data: dict[str, Any], key: str, path: str) -> float | None:
    value = _optional(data, key)
    if value is None:
        return None
    return _number(value, f"{path}.{key}")


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise SchemaError(f"{path}: expected string")
    return value


def _parse_date(value: Any, path: str) -> date:
    if not isinstance(value, str):
        raise SchemaError(f"{path}: expected YYYY-MM-DD string")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise SchemaError(f"{path}: '{value}' is not a valid YYYY-MM-DD date") from exc


@dataclass(slots=True)
class ExclusionPeriod:
    """A month range without contributions, optionally bought back as arrears."""

    start_year: int
    start_month: int
    end_year: int
    end_month: int
    is_arrears: bool = False

    @property
    def start_index(self) -> int:
        return self.start_year * 12 + self.start_month

    @property
    def end_index(self) -> int:
        return self.end_year * 12 + self.end_month

    def covers(self, month_index: int) -> bool:
        return self.start_index <= month_index <= self.end_index

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "ExclusionPeriod":
        return cls(
            start_year=_integer(_require(data, "start_year", path), f"{path}.start_year"),
            start_month=_integer(_require(data, "start_month", path), f"{path}.start_month"),
            end_year=_integer(_require(data, "end_year", path), f"{path}.end_year"),
            end_month=_integer(_require(data, "end_month", path), f"{path}.end_month"),
            is_arrears=bool(_optional(data, "is_arrears", False)),
        )


@dataclass(slots=True)
class HistoricalSweepIncome:
    """Past income interpolated linearly from ``initial_salary`` up to today's income."""

    mode: ClassVar[str] = "sweep"
    initial_salary: float

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "HistoricalSweepIncome":
        return cls(initial_salary=_number(_require(data, "initial_salary", path), f"{path}.initial_salary"))


@dataclass(slots=True)
class HybridIncome:
    """Settled history from an official statement; only the future is projected."""

    mode: ClassVar[str] = "hybrid"
    paid_months: int
    average_monthly_income: float

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str) -> "HybridIncome":
        return cls(
            paid_months=_integer(_require(data, "paid_months", path), f"{path}.paid_months"),
            average_monthly_income=_number(
                _require(data, "average_monthly_income", path), f"{path}.average_monthly_income"
            ),
        )


IncomeHistory = Union[HistoricalSweepIncome, HybridIncome]

INCOME_HISTORY_MODES: dict[str, type] = {
    HistoricalSweepIncome.mode: HistoricalSweepIncome,
    HybridIncome.mode: HybridIncome,
}


def income_history_from_dict(data: dict[str, Any], path: str) -> IncomeHistory:
    mode = _require(data, "mode", path)
    kind = INCOME_HISTORY_MODES.get(mode)
    if kind is None:
        expected = ", ".join(sorted(INCOME_HISTORY_MODES))
        raise SchemaError(f"{path}.mode: '{mode}' is not valid; expected one of [{expected}]")
    return kind.from_dict(data, path)


class ClaimTiming:
    """Early or deferred claiming. At most one of the two can be positive."""

    __slots__ = ("_early_years", "_defer_years")

    def __init__(self, early_years: int = 0, defer_years: int = 0) -> None:
        if early_years > 0 and defer_years > 0:
            raise ValueError("early_years and defer_years are mutually exclusive")
        # Negative values are kept so validation can report them.
        self._early_years = int(early_years)
        self._defer_years = int(defer_years)

    @property
    def early_years(self) -> int:
        return self._early_years

    @early_years.setter
    def early_years(self, value: int) -> None:
        self._early_years = int(value)
        if self._early_years > 0:
            self._defer_years = 0

    @property
    def defer_years(self) -> int:
        return self._defer_years

    @defer_years.setter
    def defer_years(self, value: int) -> None:
        self._defer_years = int(value)
        if self._defer_years > 0:
            self._early_years = 0

    @property
    def offset_years(self) -> int:
        return max(0, self._defer_years) - max(0, self._early_years)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClaimTiming):
            return NotImplemented
        return (self._early_years, self._defer_years) == (other._early_years, other._defer_years)

    def __repr__(self) -> str:
        return f"ClaimTiming(early_years={self._early_years}, defer_years={self._defer_years})"

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "claim") -> "ClaimTiming":
        early = _integer(_optional(data, "early_years", 0), f"{path}.early_years")
        defer = _integer(_optional(data, "defer_years", 0), f"{path}.defer_years")
        if early > 0 and defer > 0:
            raise SchemaError(f"{path}: early_years and defer_years are mutually exclusive")
        return cls(early_years=early, defer_years=defer)


@dataclass(slots=True)
class Credits:
    military: bool = False
    child_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "credits") -> "Credits":
        return cls(
            military=bool(_optional(data, "military", False)),
            child_count=_integer(_optional(data, "child_count", 0), f"{path}.child_count"),
        )


@dataclass(slots=True)
class Dependents:
    spouse: bool = False
    children: int = 0
    parents: int = 0

    @property
    def per_person_count(self) -> int:
        return self.children + self.parents

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "dependents") -> "Dependents":
        return cls(
            spouse=bool(_optional(data, "spouse", False)),
            children=_integer(_optional(data, "children", 0), f"{path}.children"),
            parents=_integer(_optional(data, "parents", 0), f"{path}.parents"),
        )


@dataclass(slots=True)
class NationalPensionRequest:
    birth_date: date
    start_year: int
    start_month: int
    retire_age: int
    monthly_income: float
    income_history: IncomeHistory
    wage_growth_rate: float = 0.0
    exclusions: list[ExclusionPeriod] = field(default_factory=list)
    credits: Credits = field(default_factory=Credits)
    dependents: Dependents = field(default_factory=Dependents)
    claim: ClaimTiming = field(default_factory=ClaimTiming)
    post_retire_income: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "national_pension") -> "NationalPensionRequest":
        history_raw = _expect_dict(_require(data, "income_history", path), f"{path}.income_history")
        return cls(
            birth_date=_parse_date(_require(data, "birth_date", path), f"{path}.birth_date"),
            start_year=_integer(_require(data, "start_year", path), f"{path}.start_year"),
            start_month=_integer(_require(data, "start_month", path), f"{path}.start_month"),
            retire_age=_integer(_require(data, "retire_age", path), f"{path}.retire_age"),
            monthly_income=_number(_require(data, "monthly_income", path), f"{path}.monthly_income"),
            income_history=income_history_from_dict(history_raw, f"{path}.income_history"),
            wage_growth_rate=_number(_optional(data, "wage_growth_rate", 0.0), f"{path}.wage_growth_rate"),
            exclusions=[
                ExclusionPeriod.from_dict(_expect_dict(item, f"{path}.exclusions[{idx}]"), f"{path}.exclusions[{idx}]")
                for idx, item in enumerate(_expect_list(_optional(data, "exclusions", []), f"{path}.exclusions"))
            ],
            credits=Credits.from_dict(_expect_dict(_optional(data, "credits", {}), f"{path}.credits"), f"{path}.credits"),
            dependents=Dependents.from_dict(
                _expect_dict(_optional(data, "dependents", {}), f"{path}.dependents"), f"{path}.dependents"
            ),
            claim=ClaimTiming.from_dict(_expect_dict(_optional(data, "claim", {}), f"{path}.claim"), f"{path}.claim"),
            post_retire_income=_number(_optional(data, "post_retire_income", 0.0), f"{path}.post_retire_income"),
        )


@dataclass(slots=True)
class MeansTestInputs:
    household: str = "single"
    spouse_working: bool = False
    region: str = "metro"
    earned_income: float = 0.0
    spouse_earned_income: float = 0.0
    pension_income: float = 0.0
    other_income: float = 0.0
    general_property: float = 0.0
    financial_property: float = 0.0
    debt: float = 0.0
    luxury_asset_value: float = 0.0

    @property
    def is_couple(self) -> bool:
        return self.household == "couple"

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "basic_pension") -> "MeansTestInputs":
        def amount(key: str) -> float:
            return _number(_optional(data, key, 0.0), f"{path}.{key}")

        return cls(
            household=_string(_optional(data, "household", "single"), f"{path}.household"),
            spouse_working=bool(_optional(data, "spouse_working", False)),
            region=_string(_optional(data, "region", "metro"), f"{path}.region"),
            earned_income=amount("earned_income"),
            spouse_earned_income=amount("spouse_earned_income"),
            pension_income=amount("pension_income"),
            other_income=amount("other_income"),
            general_property=amount("general_property"),
            financial_property=amount("financial_property"),
            debt=amount("debt"),
            luxury_asset_value=amount("luxury_asset_value"),
        )


@dataclass(slots=True)
class ShortfallInputs:
    current_age: int
    retire_age: int
    death_age: int
    target_monthly: float
    expected_pension: float = 0.0
    current_assets: float = 0.0
    monthly_saving: float = 0.0
    # Unset rates come from the policy table.
    return_rate: float | None = None
    safe_return_rate: float = 0.03
    inflation_rate: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str = "shortfall") -> "ShortfallInputs":
        return cls(
            current_age=_integer(_require(data, "current_age", path), f"{path}.current_age"),
            retire_age=_integer(_require(data, "retire_age", path), f"{path}.retire_age"),
            death_age=_integer(_require(data, "death_age", path), f"{path}.death_age"),
            target_monthly=_number(_require(data, "target_monthly", path), f"{path}.target_monthly"),
            expected_pension=_number(_optional(data, "expected_pension", 0.0), f"{path}.expected_pension"),
            current_assets=_number(_optional(data, "current_assets", 0.0), f"{path}.current_assets"),
            monthly_saving=_number(_optional(data, "monthly_saving", 0.0), f"{path}.monthly_saving"),
            return_rate=_optional_number(data, "return_rate", path),
            safe_return_rate=_number(_optional(data, "safe_return_rate", 0.03), f"{path}.safe_return_rate"),
            inflation_rate=_optional_number(data, "inflation_rate", path),
        )


@dataclass(slots=True)
class Request:
    national_pension: NationalPensionRequest | None = None
    basic_pension: MeansTestInputs | None = None
    shortfall: ShortfallInputs | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Request":
        national_raw = _optional(data, "national_pension")
        basic_raw = _optional(data, "basic_pension")
        shortfall_raw = _optional(data, "shortfall")
        if national_raw is None and basic_raw is None and shortfall_raw is None:
            raise SchemaError("request: expected at least one of national_pension, basic_pension, shortfall")
        return cls(
            national_pension=(
                NationalPensionRequest.from_dict(_expect_dict(national_raw, "national_pension"))
                if national_raw is not None
                else None
            ),
            basic_pension=(
                MeansTestInputs.from_dict(_expect_dict(basic_raw, "basic_pension")) if basic_raw is not None else None
            ),
            shortfall=(
                ShortfallInputs.from_dict(_expect_dict(shortfall_raw, "shortfall")) if shortfall_raw is not None else None
            ),
        )


def load_request(path: str | Path) -> Request:
    """Load request JSON into strongly-typed dataclasses."""
    source = Path(path)
    raw = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SchemaError("request: root must be a JSON object")
    return Request.from_dict(raw)
