"""Orchestrate request validation, engine runs and response serialisation.

The calculation service ties together the request models, the year-based
configuration and the translation layer so that :class:`TaxEngine` can stay a
set of pure numeric functions. Profiling hooks and rounding live here to give
routes a single ``calculate_salary`` entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from vietpit.backend.app.localization import Translator, get_translator
from vietpit.backend.app.models import (
    CalculationInputs,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    SalaryMode,
    format_validation_error,
)
from vietpit.backend.config.year_config import (
    INSURANCE_CATEGORIES,
    YearConfiguration,
    default_year,
    load_year_configuration,
)

from .calculators import (
    MONTHS_PER_YEAR,
    contribution_split,
    format_percentage,
    project_net_from_gross,
    round_currency,
    round_rate,
    to_monthly,
)
from .tax_engine import TaxEngine

_LOGGER = logging.getLogger(__name__)

_PROFILE_ENV = "VIETPIT_PROFILE_CALCULATIONS"


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv(_PROFILE_ENV, "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _parse_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _to_inputs(request: CalculationRequest) -> CalculationInputs:
    return CalculationInputs(
        salary_mode=request.salary_mode,
        period=request.period,
        income=request.income,
        dependents=request.dependents,
        insurance_enabled=request.insurance_enabled,
    )


def _log_solver_residual(
    inputs: CalculationInputs, result: CalculationResult, config: YearConfiguration
) -> None:
    if not _LOGGER.isEnabledFor(logging.DEBUG):
        return

    target = to_monthly(inputs.income, inputs.period)
    achieved = project_net_from_gross(
        result.gross_monthly, inputs.dependents, inputs.insurance_enabled, config
    ).net_monthly
    _LOGGER.debug(
        "net→gross solved %.2f for target %.2f (residual %.6f)",
        result.gross_monthly,
        target,
        target - achieved,
    )


def _build_insurance_section(
    result: CalculationResult,
    inputs: CalculationInputs,
    config: YearConfiguration,
    translator: Translator,
) -> dict[str, Any]:
    employee_split = contribution_split(result.insurance_base, config.insurance.employee)
    employer_split = contribution_split(result.insurance_base, config.insurance.employer)

    categories = [
        *INSURANCE_CATEGORIES,
        *sorted((set(employee_split) | set(employer_split)) - set(INSURANCE_CATEGORIES)),
    ]

    section: dict[str, Any] = {
        "enabled": inputs.insurance_enabled,
        "base": round_currency(result.insurance_base),
        "cap": round_currency(config.insurance.monthly_cap),
        "cap_applied": result.insurance_cap_applied,
        "employee_total": round_currency(result.employee_insurance),
        "employer_total": round_currency(result.employer_insurance),
        "categories": [
            {
                "category": category,
                "label": translator(f"insurance.{category}"),
                "employee_rate": round_rate(config.insurance.employee.rate_for(category)),
                "employer_rate": round_rate(config.insurance.employer.rate_for(category)),
                "employee_amount": round_currency(employee_split.get(category, 0.0)),
                "employer_amount": round_currency(employer_split.get(category, 0.0)),
            }
            for category in categories
        ],
    }
    if result.insurance_cap_applied:
        section["notice"] = translator("insurance.cap_applied")
    return section


def serialise_result(
    result: CalculationResult,
    inputs: CalculationInputs,
    config: YearConfiguration,
    translator: Translator,
) -> dict[str, Any]:
    """Round and label ``result`` into the public response structure."""

    summary = {
        "gross_monthly": round_currency(result.gross_monthly),
        "net_monthly": round_currency(result.net_monthly),
        "total_tax": round_currency(result.total_tax),
        "taxable_income": round_currency(result.taxable_income),
        "effective_tax_rate": round_rate(result.effective_tax_rate),
        "total_labor_cost": round_currency(result.total_labor_cost),
        "gross_annual": round_currency(result.gross_monthly * MONTHS_PER_YEAR),
        "net_annual": round_currency(result.net_monthly * MONTHS_PER_YEAR),
        "labels": {
            "gross_monthly": translator("summary.gross_monthly"),
            "net_monthly": translator("summary.net_monthly"),
            "total_tax": translator("summary.total_tax"),
            "taxable_income": translator("summary.taxable_income"),
            "effective_tax_rate": translator("summary.effective_tax_rate"),
            "total_labor_cost": translator("summary.total_labor_cost"),
        },
    }

    deductions = {
        "personal": round_currency(result.personal_deduction),
        "dependents": round_currency(result.dependent_deduction),
        "insurance": round_currency(result.employee_insurance),
        "total": round_currency(result.total_deductions),
        "label": translator("deductions.total"),
    }

    breakdown = [
        {
            "rate": round_rate(line.rate),
            "rate_label": format_percentage(line.rate),
            "taxable": round_currency(line.taxable),
            "tax": round_currency(line.tax),
        }
        for line in result.breakdown
    ]

    meta = {
        "year": config.year,
        "locale": translator.locale,
        "salary_mode": inputs.salary_mode,
        "period": inputs.period,
        "input_income": inputs.income,
        "dependents": inputs.dependents,
    }

    response_model = CalculationResponse.model_validate(
        {
            "summary": summary,
            "insurance": _build_insurance_section(result, inputs, config, translator),
            "deductions": deductions,
            "breakdown": breakdown,
            "meta": meta,
        }
    )
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_salary(
    payload: Mapping[str, Any] | CalculationRequest,
) -> dict[str, Any]:
    """Compute the salary and PIT breakdown for the provided payload."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("parse_request", timings):
        request_model = _parse_request(payload)

    year = request_model.year if request_model.year is not None else default_year()
    config = load_year_configuration(year)
    engine = TaxEngine(config)
    inputs = _to_inputs(request_model)

    with _profile_section("compute_result", timings):
        result = engine.compute_result(inputs)

    if inputs.salary_mode == SalaryMode.NET:
        _log_solver_residual(inputs, result, config)

    translator = get_translator(request_model.locale)

    with _profile_section("serialise", timings):
        response = serialise_result(result, inputs, config, translator)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_salary timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return response


__all__ = ["calculate_salary", "serialise_result"]
