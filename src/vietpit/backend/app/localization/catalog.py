"""Translation catalogue helpers backed by shared JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Iterable, Mapping

_BASE_LOCALE = "en"
_TRANSLATIONS_PACKAGE = "vietpit.translations"


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)


@dataclass(frozen=True)
class Catalogue:
    """Backend and frontend messages for one locale."""

    locale: str
    backend: Mapping[str, str]
    frontend: Mapping[str, Any]


@cache
def available_locales() -> tuple[str, ...]:
    """Return the locales with a published catalogue, sorted."""

    root = resources.files(_TRANSLATIONS_PACKAGE)
    locales = sorted(
        entry.name.removesuffix(".json")
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(locales) or (_BASE_LOCALE,)


@cache
def _load_catalogue(locale: str) -> Catalogue:
    resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        return Catalogue(locale=locale, backend={}, frontend={})

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    backend = payload.get("backend") or {}
    frontend = payload.get("frontend") or {}
    return Catalogue(
        locale=locale,
        backend={str(key): str(value) for key, value in backend.items()},
        frontend=dict(frontend),
    )


def normalise_locale(locale: str | None) -> str:
    """Map a locale hint such as ``vi-VN`` onto a supported catalogue key."""

    if not locale:
        return _BASE_LOCALE

    normalized = locale.strip().lower().replace("_", "-").split("-")[0]
    return normalized if normalized in available_locales() else _BASE_LOCALE


def negotiate_locale(candidates: Iterable[str]) -> str | None:
    """Return the first supported locale among ``candidates``, if any.

    ``candidates`` is expected in preference order, as produced by iterating
    ``request.accept_languages.values()``. Region subtags are ignored.
    """

    supported = available_locales()
    for candidate in candidates:
        primary = candidate.strip().lower().replace("_", "-").split("-")[0]
        if primary in supported:
            return primary
    return None


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    normalized = normalise_locale(locale)
    catalogue = _load_catalogue(normalized)
    fallback = _load_catalogue(_BASE_LOCALE)

    return Translator(
        locale=catalogue.locale,
        _messages=catalogue.backend,
        _fallback=fallback.backend,
    )


def load_translations(locale: str | None = None) -> dict[str, Any]:
    """Expose combined backend/frontend translations for API consumers."""

    normalized = normalise_locale(locale)
    catalogue = _load_catalogue(normalized)
    fallback = _load_catalogue(_BASE_LOCALE)

    return {
        "locale": normalized,
        "available_locales": list(available_locales()),
        "backend": dict(catalogue.backend),
        "frontend": dict(catalogue.frontend),
        "fallback": {
            "locale": _BASE_LOCALE,
            "backend": dict(fallback.backend),
            "frontend": dict(fallback.frontend),
        },
    }


__all__ = [
    "Catalogue",
    "Translator",
    "available_locales",
    "get_translator",
    "load_translations",
    "negotiate_locale",
    "normalise_locale",
]
