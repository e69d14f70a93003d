"""Progressive bracket walker producing a per-bracket breakdown."""

from __future__ import annotations

from collections.abc import Sequence

from vietpit.backend.app.models import TaxBreakdownLine
from vietpit.backend.config.year_config import TaxBracket


def calculate_progressive_tax(
    taxable_income: float, brackets: Sequence[TaxBracket]
) -> tuple[list[TaxBreakdownLine], float]:
    """Tax ``taxable_income`` across ``brackets`` in ascending order.

    Each bracket consumes at most its ``width`` of the remaining income. The
    final bracket is open-ended, so for non-negative input the emitted lines
    always add up to ``taxable_income``. Zero or negative input yields an
    empty breakdown.
    """

    breakdown: list[TaxBreakdownLine] = []
    remaining = taxable_income
    total = 0.0

    for bracket in brackets:
        if remaining <= 0:
            break

        applied = min(bracket.width, remaining)
        tax = applied * bracket.rate
        breakdown.append(TaxBreakdownLine(rate=bracket.rate, taxable=applied, tax=tax))
        total += tax
        remaining -= applied

    return breakdown, total
