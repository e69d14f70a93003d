"""Utility helpers for calculator modules."""

from __future__ import annotations

from vietpit.backend.app.models import Period

MONTHS_PER_YEAR = 12


def to_monthly(amount: float, period: Period) -> float:
    """Express ``amount`` as a monthly figure.

    Annual amounts are spread evenly over twelve months. No bounds checking is
    applied, so negative inputs pass straight through.
    """

    if period == Period.ANNUAL:
        return amount / MONTHS_PER_YEAR
    return amount


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def round_currency(value: float) -> float:
    """Round monetary amounts to whole dong."""

    return float(round(value))


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return round(value, 4)
