"""CLI entry point for kpension."""

from __future__ import annotations

import argparse
from datetime import date, datetime
import logging
from pathlib import Path
import sys

from .evaluate import evaluate_request
from .policy import default_policy, load_policy
from .report import render_report, summary_lines, write_report
from .schema import SchemaError, load_request
from .shortfall import InvalidAgeOrderError
from .validate import validate_request


def _parse_today(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a valid YYYY-MM-DD date") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Korean public pension estimator")
    parser.add_argument("request", help="Path to request JSON file")
    parser.add_argument("-o", "--output", default="report.json", help="Output JSON path")
    parser.add_argument("--policy", help="Policy override JSON file (default: built-in 2026 table)")
    parser.add_argument("--today", type=_parse_today, help="Evaluation date as YYYY-MM-DD (default: today)")
    parser.add_argument("--validate", action="store_true", help="Validate JSON only")
    parser.add_argument("--summary", action="store_true", help="Print text summary to stdout")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser


def _print_validation(errors: list[str], warnings: list[str]) -> None:
    for warning in warnings:
        print(f"WARNING: {warning}")
    for error in errors:
        print(f"ERROR: {error}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        policy = load_policy(args.policy) if args.policy else default_policy()
        request = load_request(args.request)
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load request: {exc}", file=sys.stderr)
        return 2

    validation = validate_request(request, policy)
    _print_validation(validation.errors, validation.warnings)
    if not validation.is_valid:
        return 1

    if args.validate:
        print("Request is valid.")
        return 0

    try:
        result = evaluate_request(request, policy, today=args.today or date.today())
    except InvalidAgeOrderError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    write_report(args.output, render_report(result, args.request))
    if args.summary:
        for line in summary_lines(result):
            print(line)
    print(f"Wrote report to {Path(args.output)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
