"""JSON report payloads and plain-text summaries."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
import hashlib
import json
from pathlib import Path

from .evaluate import RequestResult


def _won(value: float) -> str:
    return f"₩{value:,.0f}"


def build_report_payload(result: RequestResult) -> dict[str, object]:
    payload: dict[str, object] = {"today": result.today.isoformat()}
    if result.national_pension is not None:
        payload["national_pension"] = asdict(result.national_pension)
    if result.basic_pension is not None:
        payload["basic_pension"] = asdict(result.basic_pension)
    if result.shortfall is not None:
        shortfall = asdict(result.shortfall)
        shortfall["is_on_track"] = result.shortfall.is_on_track
        payload["shortfall"] = shortfall
    return payload


def render_report(result: RequestResult, request_path: str | Path) -> str:
    payload = build_report_payload(result)
    payload["request_hash"] = hashlib.sha256(Path(request_path).read_bytes()).hexdigest()[:12]
    payload["generated"] = datetime.now(UTC).isoformat(timespec="seconds")
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_report(path: str | Path, content: str) -> None:
    Path(path).write_text(content, encoding="utf-8")


def summary_lines(result: RequestResult) -> list[str]:
    lines: list[str] = []

    outcome = result.national_pension
    if outcome is not None:
        projection = outcome.projection
        if projection.insufficient_history:
            lines.append(
                f"National pension: insufficient history ({projection.total_paid_months} paid months, minimum 120)"
            )
        else:
            lines.append(f"National pension ({projection.mode}): {_won(projection.monthly)}/month, {_won(projection.yearly)}/year")
            lines.append(
                f"  Paid months: {projection.total_paid_months}, credited months: {projection.total_credited_months}, "
                f"B-value: {_won(projection.average_indexed_income)}"
            )
            summary = outcome.summary
            if summary is not None:
                lines.append(
                    f"  Claim at {summary.receipt_age} ({summary.claim_start_year}): "
                    f"{_won(summary.monthly_after_tax)}/month after tax, "
                    f"{_won(summary.future_monthly)}/month in future value"
                )
                if projection.arrears_months:
                    breakeven = summary.arrears_breakeven_months
                    lines.append(
                        f"  Arrears: {projection.arrears_months} months for {_won(projection.arrears_cost)}, "
                        f"+{_won(summary.arrears_monthly_increase)}/month"
                        + (f", break-even after {breakeven} months" if breakeven is not None else "")
                    )

    basic = result.basic_pension
    if basic is not None:
        verdict = "eligible" if basic.is_eligible else "not eligible"
        lines.append(
            f"Basic pension: {verdict} (recognized {_won(basic.recognized_income)} vs threshold {_won(basic.threshold)}), "
            f"{_won(basic.estimated_monthly)}/month"
        )

    shortfall = result.shortfall
    if shortfall is not None:
        lines.append(
            f"Retirement savings: need {_won(shortfall.required_nest_egg)}, "
            f"prepared {_won(shortfall.prepared_at_retirement)}"
        )
        if shortfall.is_on_track:
            lines.append("  On track; no additional saving needed")
        else:
            lines.append(
                f"  Shortfall {_won(shortfall.shortfall)}; save {_won(shortfall.additional_monthly_saving)} more per month"
            )
    return lines
