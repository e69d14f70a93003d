"""Turn Flask requests into payloads for :func:`calculate_salary`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from vietpit.backend.app.localization import negotiate_locale, normalise_locale


def resolve_request_locale(req: Request, explicit: Any = None) -> str | None:
    """Pick a locale from ``explicit``, then ``?locale=``, then Accept-Language."""

    if isinstance(explicit, str) and explicit.strip():
        return normalise_locale(explicit)

    locale_param = req.args.get("locale")
    if locale_param:
        return normalise_locale(locale_param)

    return negotiate_locale(req.accept_languages.values())


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract the JSON object body of ``req`` with its locale resolved.

    Field validation is left to the calculation service; this only guarantees
    a mapping so that the service can report field-level errors.
    """

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    locale = resolve_request_locale(req, payload.get("locale"))
    if locale is not None:
        payload["locale"] = locale
    return payload


__all__ = ["parse_calculation_payload", "resolve_request_locale"]
