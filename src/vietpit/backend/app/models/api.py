"""Pydantic models describing the public API surface."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

__all__ = [
    "SalaryMode",
    "Period",
    "CalculationRequest",
    "SummaryLabels",
    "Summary",
    "InsuranceCategoryEntry",
    "InsuranceSummary",
    "DeductionSummary",
    "BreakdownEntry",
    "ResponseMeta",
    "CalculationResponse",
    "format_validation_error",
]


class SalaryMode(str, Enum):
    """Direction of the salary conversion."""

    GROSS = "gross"
    NET = "net"


class Period(str, Enum):
    """Period the supplied income amount covers."""

    MONTHLY = "monthly"
    ANNUAL = "annual"


class CalculationRequest(BaseModel):
    """Raw calculation inputs supplied by a client."""

    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=2000, le=2100)
    locale: str | None = None
    salary_mode: SalaryMode = SalaryMode.GROSS
    period: Period = Period.MONTHLY
    income: float = Field(..., ge=0, allow_inf_nan=False)
    dependents: int = Field(default=0, ge=0)
    insurance_enabled: bool = True

    @field_validator("salary_mode", "period", mode="before")
    @classmethod
    def _normalise_choice(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SummaryLabels(BaseModel):
    """Localised labels for the headline figures."""

    model_config = ConfigDict(extra="forbid")

    gross_monthly: str
    net_monthly: str
    total_tax: str
    taxable_income: str
    effective_tax_rate: str
    total_labor_cost: str


class Summary(BaseModel):
    """Headline figures for a monthly salary."""

    model_config = ConfigDict(extra="forbid")

    gross_monthly: float
    net_monthly: float
    total_tax: float
    taxable_income: float
    effective_tax_rate: float
    total_labor_cost: float
    gross_annual: float
    net_annual: float
    labels: SummaryLabels


class InsuranceCategoryEntry(BaseModel):
    """Employee and employer contributions for a single insurance category."""

    model_config = ConfigDict(extra="forbid")

    category: str
    label: str
    employee_rate: float
    employer_rate: float
    employee_amount: float
    employer_amount: float


class InsuranceSummary(BaseModel):
    """Insurance base and contributions."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool
    base: float
    cap: float
    cap_applied: bool
    employee_total: float
    employer_total: float
    categories: list[InsuranceCategoryEntry] = Field(default_factory=list)
    notice: str | None = None


class DeductionSummary(BaseModel):
    """Deductions subtracted before the bracket schedule applies."""

    model_config = ConfigDict(extra="forbid")

    personal: float
    dependents: float
    insurance: float
    total: float
    label: str


class BreakdownEntry(BaseModel):
    """Income taxed within one bracket and the tax owed on it."""

    model_config = ConfigDict(extra="forbid")

    rate: float
    rate_label: str
    taxable: float
    tax: float


class ResponseMeta(BaseModel):
    """Metadata describing how the calculation was produced."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str
    salary_mode: SalaryMode
    period: Period
    input_income: float
    dependents: int


class CalculationResponse(BaseModel):
    """Full response returned by the calculation endpoint."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    insurance: InsuranceSummary
    deductions: DeductionSummary
    breakdown: list[BreakdownEntry] = Field(default_factory=list)
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Collapse a pydantic validation error into a single readable message."""

    messages: list[str] = []
    for entry in error.errors():
        location = ".".join(str(part) for part in entry.get("loc", ()) if part != "__root__")
        message = entry.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request payload"
