"""Serve translation catalogues to the browser form."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from vietpit.backend.app.localization import load_translations
from vietpit.backend.services import resolve_request_locale

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


def _catalogue_response(locale: str | None):
    payload = load_translations(locale)
    response = jsonify(payload)
    response.headers["Content-Language"] = payload["locale"]
    return response


@blueprint.get("/")
def get_default_translations():
    """Return the catalogue negotiated from ``?locale=`` or Accept-Language."""

    response = _catalogue_response(resolve_request_locale(request))
    response.vary.add("Accept-Language")
    return response, 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    return _catalogue_response(locale), 200
