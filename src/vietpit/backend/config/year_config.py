"""Locate, parse and cache the per-year tax configuration files.

Each supported year is declared in ``data/manifest.yaml`` and described by a
YAML document validated against :mod:`vietpit.backend.config.schema`. Years
marked ``preview`` in the manifest can be loaded explicitly but are never
chosen as the default year.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    INSURANCE_CATEGORIES,
    ConfigurationError,
    DeductionConfig,
    InsuranceConfig,
    InsuranceRates,
    TaxBracket,
    TaxYearManifest,
    TaxYearManifestEntry,
    YearConfiguration,
    YearWarning,
    thaw,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"

_LOGGER = logging.getLogger(__name__)


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as error:
        raise ConfigurationError(f"{path.name} is not valid YAML: {error}") from error

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path.name} must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    try:
        return TaxYearManifest.model_validate(_read_mapping(MANIFEST_FILE))
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    return load_manifest().years


def _manifest_entry(year: int) -> TaxYearManifestEntry:
    try:
        return load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Configuration for year {year} not declared in manifest") from exc


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Return the validated configuration for ``year``.

    Raises :class:`FileNotFoundError` when the year is not declared or its file
    is missing, and :class:`ConfigurationError` when the file does not satisfy
    the schema.
    """

    entry = _manifest_entry(year)
    config_file = CONFIG_DIRECTORY / entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for year {year} missing: {config_file.name}"
        )

    raw_config = _read_mapping(config_file)
    declared_year = raw_config.setdefault("year", year)
    if declared_year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {declared_year}"
        )

    try:
        configuration = YearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed for {year}: {error}") from error

    if entry.is_preview:
        _LOGGER.warning("Loaded preview tax configuration for %s; figures may change", year)
    else:
        _LOGGER.info("Loaded tax configuration for %s from %s", year, config_file.name)
    return configuration


def available_years() -> Sequence[int]:
    """Return every tax year declared in the manifest, ascending."""

    return load_manifest().supported_years


def default_year() -> int:
    """Return the most recent ``active`` year, ignoring preview entries."""

    active = [entry.year for entry in manifest_entries() if not entry.is_preview]
    if not active:
        raise ConfigurationError("No active tax years are declared in the configuration manifest")
    return max(active)


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "DeductionConfig",
    "INSURANCE_CATEGORIES",
    "InsuranceConfig",
    "InsuranceRates",
    "MANIFEST_FILE",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "YearConfiguration",
    "YearWarning",
    "available_years",
    "default_year",
    "load_manifest",
    "load_year_configuration",
    "manifest_entries",
    "thaw",
]
