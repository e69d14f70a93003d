"""HTTP-facing helpers wrapping the calculation service."""

from vietpit.backend.app.services.calculation_service import calculate_salary

from .request_parser import parse_calculation_payload, resolve_request_locale
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "calculate_salary",
    "parse_calculation_payload",
    "resolve_request_locale",
]
