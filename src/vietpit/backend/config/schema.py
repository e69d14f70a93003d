"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

INSURANCE_CATEGORIES: tuple[str, ...] = ("BHXH", "BHYT", "BHTN")


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


def freeze(value: Any) -> Any:
    """Return a read-only copy of ``value`` with nested mappings and lists frozen.

    Loaded configurations are cached and shared between requests, so their
    containers must not be editable in place.
    """

    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`, producing JSON-serialisable dicts and lists."""

    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class TaxBracket(ImmutableModel):
    """A progressive bracket expressed as the width of income it covers.

    ``width`` is not a cumulative ceiling: each bracket taxes the next
    ``width`` VND of income. The final bracket is open-ended and carries an
    infinite width.
    """

    width: float = math.inf
    rate: float

    @field_validator("width", mode="before")
    @classmethod
    def _coerce_open_width(cls, value: Any) -> Any:
        if value is None:
            return math.inf
        return value

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Tax rates must be between 0 and 1")
        if math.isnan(self.width) or self.width <= 0:
            raise ConfigurationError("Bracket widths must be positive values")
        return self

    @property
    def is_open(self) -> bool:
        return math.isinf(self.width)


class InsuranceRates(ImmutableModel):
    """Contribution fractions keyed by insurance category (BHXH/BHYT/BHTN)."""

    rates: Mapping[str, float]

    @model_validator(mode="before")
    @classmethod
    def _wrap_mapping(cls, data: Any) -> Mapping[str, Any]:
        if isinstance(data, Mapping) and "rates" not in data:
            return {"rates": data}
        return data

    @field_validator("rates", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Mapping[str, float]:
        if isinstance(value, Mapping):
            return {str(key).upper(): float(rate) for key, rate in value.items()}
        raise ConfigurationError("Insurance rates must be provided as a mapping")

    @field_validator("rates", mode="after")
    @classmethod
    def _freeze_rates(cls, value: Mapping[str, float]) -> Mapping[str, float]:
        return freeze(value)

    @model_validator(mode="after")
    def _validate_rates(self) -> InsuranceRates:
        if not self.rates:
            raise ConfigurationError("At least one insurance rate must be defined")
        for category, rate in self.rates.items():
            if not 0 <= rate <= 1:
                raise ConfigurationError(
                    f"Insurance rate for {category} must be between 0 and 1"
                )
        return self

    @computed_field
    @property
    def total(self) -> float:
        return sum(self.rates.values())

    def rate_for(self, category: str) -> float:
        return self.rates.get(category.upper(), 0.0)


class InsuranceConfig(ImmutableModel):
    """Statutory insurance settings: the salary ceiling and both rate sets."""

    monthly_cap: float
    employee: InsuranceRates
    employer: InsuranceRates

    @model_validator(mode="after")
    def _validate_cap(self) -> InsuranceConfig:
        if self.monthly_cap <= 0:
            raise ConfigurationError("Insurance salary cap must be a positive value")
        return self


class DeductionConfig(ImmutableModel):
    """Monthly family-circumstance deductions."""

    personal: float
    dependent: float

    @model_validator(mode="after")
    def _validate_amounts(self) -> DeductionConfig:
        if self.personal < 0 or self.dependent < 0:
            raise ConfigurationError("Deduction amounts must be non-negative")
        return self


class YearWarning(ImmutableModel):
    """Structured warning surfaced for a configured tax year."""

    id: str
    message_key: str
    severity: str = "info"
    documentation_url: str | None = None

    @model_validator(mode="after")
    def _validate_severity(self) -> Self:
        if self.severity not in {"info", "warning", "error"}:
            raise ConfigurationError("Warning 'severity' must be one of: info, warning, error")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    deductions: DeductionConfig
    insurance: InsuranceConfig
    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    warnings: Sequence[YearWarning] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("deductions", "insurance"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        if prepared.get("warnings") is None:
            prepared["warnings"] = []

        return prepared

    @field_validator("brackets", mode="before")
    @classmethod
    def _coerce_brackets(cls, value: Any) -> Sequence[Any]:
        if isinstance(value, Iterable) and not isinstance(value, (str, Mapping)):
            return tuple(value)
        raise ConfigurationError("'tax_brackets' must be a list of bracket definitions")

    @field_validator("meta", "brackets", "warnings", mode="after")
    @classmethod
    def _freeze_sections(cls, value: Any) -> Any:
        return freeze(value)

    @model_validator(mode="after")
    def _validate_year(self) -> YearConfiguration:
        self._validate_bracket_sequence(self.brackets)
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        for bracket in brackets[:-1]:
            if bracket.is_open:
                raise ConfigurationError("Only the final tax bracket may be open-ended")
        if not brackets[-1].is_open:
            raise ConfigurationError("Final tax bracket must have an open width")


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: Literal["active", "preview"] = "active"
    notes_url: str | None = None

    @property
    def is_preview(self) -> bool:
        return self.status == "preview"

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @field_validator("years", mode="after")
    @classmethod
    def _freeze_years(
        cls, value: Sequence[TaxYearManifestEntry]
    ) -> tuple[TaxYearManifestEntry, ...]:
        return tuple(value)

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "ConfigurationError",
    "DeductionConfig",
    "INSURANCE_CATEGORIES",
    "ImmutableModel",
    "InsuranceConfig",
    "InsuranceRates",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
    "YearWarning",
    "freeze",
    "thaw",
]
