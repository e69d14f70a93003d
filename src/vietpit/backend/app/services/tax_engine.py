"""Salary tax engine bound to a single year's configuration."""

from __future__ import annotations

from dataclasses import dataclass

from vietpit.backend.app.models import (
    CalculationInputs,
    CalculationResult,
    Period,
    SalaryMode,
    TaxBreakdownLine,
)
from vietpit.backend.config.year_config import YearConfiguration, load_year_configuration

from .calculators import (
    calculate_progressive_tax,
    clamp_insurance_base,
    contribution,
    project_net_from_gross,
    solve_gross_from_net,
    to_monthly,
)


@dataclass(frozen=True)
class TaxEngine:
    """Pure PIT calculations over an immutable :class:`YearConfiguration`.

    Every method is a deterministic function of its arguments and the
    captured configuration, so a single engine can be shared freely.
    """

    config: YearConfiguration

    @classmethod
    def for_year(cls, year: int) -> TaxEngine:
        return cls(load_year_configuration(year))

    def to_monthly(self, amount: float, period: Period) -> float:
        return to_monthly(amount, period)

    def clamp_insurance_base(self, gross_monthly: float, insurance_enabled: bool) -> float:
        return clamp_insurance_base(gross_monthly, insurance_enabled, self.config.insurance)

    def calculate_tax(self, taxable_income: float) -> tuple[list[TaxBreakdownLine], float]:
        return calculate_progressive_tax(taxable_income, self.config.brackets)

    def solve_gross_from_net(
        self, target_net: float, dependents: int, insurance_enabled: bool
    ) -> float:
        return solve_gross_from_net(target_net, dependents, insurance_enabled, self.config)

    def resolve_gross_monthly(self, inputs: CalculationInputs) -> float:
        """Monthly gross salary implied by ``inputs``.

        The income is first normalised to a monthly figure; in net mode that
        monthly take-home amount is then inverted to a gross salary.
        """

        monthly = self.to_monthly(inputs.income, inputs.period)
        if inputs.salary_mode == SalaryMode.NET:
            return self.solve_gross_from_net(
                monthly, inputs.dependents, inputs.insurance_enabled
            )
        return monthly

    def compute_result(self, inputs: CalculationInputs) -> CalculationResult:
        """Produce the full monthly breakdown for ``inputs``."""

        gross_monthly = self.resolve_gross_monthly(inputs)
        projection = project_net_from_gross(
            gross_monthly, inputs.dependents, inputs.insurance_enabled, self.config
        )

        employer_insurance = contribution(
            projection.insurance_base, self.config.insurance.employer
        )
        effective_tax_rate = projection.total_tax / gross_monthly if gross_monthly else 0.0

        return CalculationResult(
            gross_monthly=gross_monthly,
            insurance_base=projection.insurance_base,
            employee_insurance=projection.employee_insurance,
            employer_insurance=employer_insurance,
            personal_deduction=projection.personal_deduction,
            dependent_deduction=projection.dependent_deduction,
            total_deductions=projection.total_deductions,
            taxable_income=projection.taxable_income,
            total_tax=projection.total_tax,
            net_monthly=projection.net_monthly,
            effective_tax_rate=effective_tax_rate,
            total_labor_cost=gross_monthly + employer_insurance,
            insurance_cap_applied=(
                inputs.insurance_enabled and projection.insurance_base < gross_monthly
            ),
            breakdown=projection.breakdown,
        )


__all__ = ["TaxEngine"]
