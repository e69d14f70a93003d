"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from typing import Any, Mapping, Sequence

from .year_config import (
    INSURANCE_CATEGORIES,
    ConfigurationError,
    DeductionConfig,
    InsuranceConfig,
    InsuranceRates,
    TaxBracket,
    YearConfiguration,
    YearWarning,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rate_set(scope: str, rates: InsuranceRates) -> list[str]:
    errors: list[str] = []

    declared = set(rates.rates)
    expected = set(INSURANCE_CATEGORIES)
    missing = sorted(expected - declared)
    unexpected = sorted(declared - expected)
    if missing:
        errors.append(_format_scope(scope, f"missing insurance categories: {missing}"))
    if unexpected:
        errors.append(_format_scope(scope, f"unknown insurance categories: {unexpected}"))

    for category, value in rates.rates.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope(
                    scope,
                    f"{category} contribution rate {value} must be between 0 and 1",
                )
            )

    if rates.total > 1:
        errors.append(_format_scope(scope, "combined contribution rate exceeds 100%"))

    return errors


def _validate_insurance(insurance: InsuranceConfig) -> list[str]:
    errors: list[str] = []

    if insurance.monthly_cap <= 0:
        errors.append(_format_scope("insurance", "monthly cap must be positive"))

    errors.extend(_validate_rate_set("insurance.employee", insurance.employee))
    errors.extend(_validate_rate_set("insurance.employer", insurance.employer))
    return errors


def _validate_deductions(deductions: DeductionConfig) -> list[str]:
    errors: list[str] = []

    if deductions.personal < 0:
        errors.append(_format_scope("deductions", "personal deduction must be non-negative"))
    if deductions.dependent < 0:
        errors.append(
            _format_scope("deductions", "dependent deduction must be non-negative")
        )
    return errors


def _validate_brackets(brackets: Sequence[TaxBracket]) -> list[str]:
    errors: list[str] = []

    if not brackets:
        errors.append(_format_scope("tax_brackets", "no brackets defined"))
        return errors

    rates = [bracket.rate for bracket in brackets]
    if rates != sorted(rates):
        errors.append(_format_scope("tax_brackets", "bracket rates should be non-decreasing"))

    for index, bracket in enumerate(brackets[:-1]):
        if bracket.is_open:
            errors.append(
                _format_scope("tax_brackets", f"bracket {index} is open-ended but not last")
            )

    if not brackets[-1].is_open:
        errors.append(_format_scope("tax_brackets", "final bracket must be open-ended"))

    return errors


_DEFAULT_CHOICES = {
    "salary_mode": {"gross", "net"},
    "period": {"monthly", "annual"},
}


def _validate_defaults(meta: Mapping[str, Any]) -> list[str]:
    """Check ``meta.defaults``, which pre-fills the calculator form."""

    defaults = meta.get("defaults")
    if defaults is None:
        return []
    if not isinstance(defaults, Mapping):
        return [_format_scope("meta.defaults", "must be a mapping")]

    errors: list[str] = []
    for key, choices in _DEFAULT_CHOICES.items():
        value = defaults.get(key)
        if value is not None and value not in choices:
            errors.append(
                _format_scope("meta.defaults", f"{key} must be one of {sorted(choices)}")
            )

    for key in ("income", "dependents"):
        value = defaults.get(key)
        if value is not None and (not isinstance(value, (int, float)) or value < 0):
            errors.append(_format_scope("meta.defaults", f"{key} must be a non-negative number"))

    return errors


def _validate_warnings(warnings: Sequence[YearWarning]) -> list[str]:
    errors: list[str] = []

    duplicates = [
        value for value, count in Counter(entry.id for entry in warnings).items() if count > 1
    ]
    if duplicates:
        errors.append(
            _format_scope("warnings", f"duplicate warning identifiers: {sorted(duplicates)}")
        )

    for entry in warnings:
        if entry.documentation_url and not entry.documentation_url.startswith(
            ("http://", "https://")
        ):
            errors.append(
                _format_scope(
                    f"warnings.{entry.id}", "documentation URL must be absolute"
                )
            )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of human readable issues found in ``config``."""

    errors: list[str] = []

    errors.extend(_validate_deductions(config.deductions))
    errors.extend(_validate_insurance(config.insurance))
    errors.extend(_validate_brackets(config.brackets))
    errors.extend(_validate_warnings(config.warnings))
    errors.extend(_validate_defaults(config.meta))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
