"""Typed request/response models shared across the calculation services.

Client payloads are validated by the Pydantic models in :mod:`.api`; the
engine itself works on the frozen :class:`CalculationInputs` model and hands
back lightweight dataclasses that carry unrounded VND amounts. Rounding only
happens when a result is serialised for a response.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from .api import (
    BreakdownEntry,
    CalculationRequest,
    CalculationResponse,
    DeductionSummary,
    InsuranceCategoryEntry,
    InsuranceSummary,
    Period,
    ResponseMeta,
    SalaryMode,
    Summary,
    SummaryLabels,
    format_validation_error,
)

__all__ = [
    "CalculationInputs",
    "CalculationResult",
    "TaxBreakdownLine",
    "BreakdownEntry",
    "CalculationRequest",
    "CalculationResponse",
    "DeductionSummary",
    "InsuranceCategoryEntry",
    "InsuranceSummary",
    "Period",
    "ResponseMeta",
    "SalaryMode",
    "Summary",
    "SummaryLabels",
    "format_validation_error",
]


class CalculationInputs(BaseModel):
    """Normalised inputs for a single engine run.

    Amounts are expected to be finite and non-negative and ``dependents`` a
    non-negative integer; the engine does not re-check these.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    salary_mode: SalaryMode = SalaryMode.GROSS
    period: Period = Period.MONTHLY
    income: float
    dependents: int = Field(default=0, ge=0)
    insurance_enabled: bool = True


@dataclass(frozen=True)
class TaxBreakdownLine:
    """Income taxed within one bracket."""

    rate: float
    taxable: float
    tax: float


@dataclass(frozen=True)
class CalculationResult:
    """Monthly salary breakdown derived from :class:`CalculationInputs`."""

    gross_monthly: float
    insurance_base: float
    employee_insurance: float
    employer_insurance: float
    personal_deduction: float
    dependent_deduction: float
    total_deductions: float
    taxable_income: float
    total_tax: float
    net_monthly: float
    effective_tax_rate: float
    total_labor_cost: float
    insurance_cap_applied: bool = False
    breakdown: tuple[TaxBreakdownLine, ...] = field(default_factory=tuple)
