"""Helpers shaping calculation results into HTTP responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from flask import Response, jsonify

ResponseTuple = Tuple[Response, int]


def build_calculation_response(payload: Mapping[str, Any]) -> ResponseTuple:
    """Return ``payload`` as JSON, advertising the locale its labels use."""

    response = jsonify(payload)
    locale = payload.get("meta", {}).get("locale")
    if locale:
        response.headers["Content-Language"] = locale
    response.vary.add("Accept-Language")
    return response, 200
