"""Expose configuration metadata consumed by the decoupled front-end.

These endpoints bridge the YAML-backed year configuration and the browser
form so that deduction amounts, insurance rates and the bracket table are not
duplicated on the client.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from vietpit.backend.app.localization import get_translator
from vietpit.backend.config.year_config import (
    INSURANCE_CATEGORIES,
    InsuranceRates,
    TaxBracket,
    YearConfiguration,
    available_years,
    default_year,
    load_year_configuration,
    thaw,
)
from vietpit.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    return {
        "version": get_project_version(),
        "supported_years": list(available_years()),
        "default_year": default_year(),
    }


def _serialise_bracket(bracket: TaxBracket, lower: float) -> dict[str, Any]:
    # JSON has no infinity; the open bracket reports null width/upper.
    upper = None if bracket.is_open else lower + bracket.width
    return {
        "lower": lower,
        "upper": upper,
        "width": None if bracket.is_open else bracket.width,
        "rate": bracket.rate,
    }


def _serialise_brackets(config: YearConfiguration) -> list[dict[str, Any]]:
    serialised: list[dict[str, Any]] = []
    lower = 0.0
    for bracket in config.brackets:
        serialised.append(_serialise_bracket(bracket, lower))
        if not bracket.is_open:
            lower += bracket.width
    return serialised


def _serialise_rates(rates: InsuranceRates) -> dict[str, Any]:
    return {"rates": dict(rates.rates), "total": rates.total}


def _serialise_year(config: YearConfiguration, locale: str | None = None) -> dict[str, Any]:
    translator = get_translator(locale)
    return {
        "year": config.year,
        "meta": thaw(config.meta),
        "deductions": {
            "personal": config.deductions.personal,
            "dependent": config.deductions.dependent,
        },
        "insurance": {
            "monthly_cap": config.insurance.monthly_cap,
            "categories": [
                {"id": category, "label": translator(f"insurance.{category}")}
                for category in INSURANCE_CATEGORIES
            ],
            "employee": _serialise_rates(config.insurance.employee),
            "employer": _serialise_rates(config.insurance.employer),
        },
        "brackets": _serialise_brackets(config),
        "warnings": [
            {
                "id": warning.id,
                "severity": warning.severity,
                "message": translator(warning.message_key),
                **(
                    {"documentation_url": warning.documentation_url}
                    if warning.documentation_url
                    else {}
                ),
            }
            for warning in config.warnings
        ],
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their deduction, insurance and bracket data."""

    locale = request.args.get("locale")
    years = [
        _serialise_year(load_year_configuration(year), locale) for year in available_years()
    ]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>")
def get_year(year: int) -> tuple[Any, int]:
    """Return the configuration for a single year."""

    config = load_year_configuration(year)
    return jsonify(_serialise_year(config, request.args.get("locale"))), 200
