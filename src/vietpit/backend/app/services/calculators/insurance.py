"""Compulsory insurance (BHXH/BHYT/BHTN) helpers."""

from __future__ import annotations

from vietpit.backend.config.year_config import InsuranceConfig, InsuranceRates


def clamp_insurance_base(
    gross_monthly: float, insurance_enabled: bool, insurance: InsuranceConfig
) -> float:
    """Return the salary subject to contributions, capped at the ceiling."""

    if not insurance_enabled:
        return 0.0
    return min(gross_monthly, insurance.monthly_cap)


def contribution(insurance_base: float, rates: InsuranceRates) -> float:
    """Total contribution owed on ``insurance_base`` for a rate set."""

    return insurance_base * rates.total


def contribution_split(insurance_base: float, rates: InsuranceRates) -> dict[str, float]:
    return {category: insurance_base * rate for category, rate in rates.rates.items()}
