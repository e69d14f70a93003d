"""Gross/net salary conversion for employment income."""

from __future__ import annotations

from dataclasses import dataclass

from vietpit.backend.app.models import TaxBreakdownLine
from vietpit.backend.config.year_config import YearConfiguration

from .insurance import clamp_insurance_base, contribution
from .progressive import calculate_progressive_tax

SOLVER_ITERATIONS = 20


@dataclass(frozen=True)
class SalaryProjection:
    """Employee-side figures derived from a known monthly gross salary."""

    gross_monthly: float
    insurance_base: float
    employee_insurance: float
    personal_deduction: float
    dependent_deduction: float
    total_deductions: float
    taxable_income: float
    breakdown: tuple[TaxBreakdownLine, ...]
    total_tax: float

    @property
    def net_monthly(self) -> float:
        return self.gross_monthly - self.employee_insurance - self.total_tax


def project_net_from_gross(
    gross_monthly: float,
    dependents: int,
    insurance_enabled: bool,
    config: YearConfiguration,
) -> SalaryProjection:
    """Apply insurance, family deductions and the bracket schedule to a gross salary."""

    insurance_base = clamp_insurance_base(gross_monthly, insurance_enabled, config.insurance)
    employee_insurance = contribution(insurance_base, config.insurance.employee)

    personal_deduction = config.deductions.personal
    dependent_deduction = dependents * config.deductions.dependent
    total_deductions = personal_deduction + dependent_deduction + employee_insurance
    taxable_income = max(0.0, gross_monthly - total_deductions)

    breakdown, total_tax = calculate_progressive_tax(taxable_income, config.brackets)

    return SalaryProjection(
        gross_monthly=gross_monthly,
        insurance_base=insurance_base,
        employee_insurance=employee_insurance,
        personal_deduction=personal_deduction,
        dependent_deduction=dependent_deduction,
        total_deductions=total_deductions,
        taxable_income=taxable_income,
        breakdown=tuple(breakdown),
        total_tax=total_tax,
    )


def solve_gross_from_net(
    target_net: float,
    dependents: int,
    insurance_enabled: bool,
    config: YearConfiguration,
    iterations: int = SOLVER_ITERATIONS,
) -> float:
    """Find the monthly gross salary that yields ``target_net`` take-home pay.

    The forward projection is piecewise linear (insurance cap, bracket
    edges) with a slope just under one, so the guess is corrected by the
    net residual a fixed number of times, starting from ``target_net``.
    There is no convergence test; the loop always runs ``iterations`` times.
    The result is clamped to be non-negative.
    """

    gross = target_net
    for _ in range(iterations):
        net = project_net_from_gross(gross, dependents, insurance_enabled, config).net_monthly
        gross += target_net - net

    return max(0.0, gross)


__all__ = [
    "SOLVER_ITERATIONS",
    "SalaryProjection",
    "project_net_from_gross",
    "solve_gross_from_net",
]
