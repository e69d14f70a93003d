"""REST endpoints for salary and PIT calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from vietpit.backend.services import (
    build_calculation_response,
    calculate_salary,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Run a gross→net or net→gross calculation for the submitted JSON payload."""

    payload = parse_calculation_payload(request)
    result = calculate_salary(payload)

    return build_calculation_response(result)
