"""Domain-specific calculation helpers."""

from .insurance import clamp_insurance_base, contribution, contribution_split
from .progressive import calculate_progressive_tax
from .salary import (
    SOLVER_ITERATIONS,
    SalaryProjection,
    project_net_from_gross,
    solve_gross_from_net,
)
from .utils import (
    MONTHS_PER_YEAR,
    format_percentage,
    round_currency,
    round_rate,
    to_monthly,
)

__all__ = [
    "MONTHS_PER_YEAR",
    "SOLVER_ITERATIONS",
    "SalaryProjection",
    "calculate_progressive_tax",
    "clamp_insurance_base",
    "contribution",
    "contribution_split",
    "format_percentage",
    "project_net_from_gross",
    "round_currency",
    "round_rate",
    "solve_gross_from_net",
    "to_monthly",
]
