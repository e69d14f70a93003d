"""Unit coverage for the progressive bracket walker."""

from __future__ import annotations

import math

import pytest

from vietpit.backend.app.services.calculators import calculate_progressive_tax
from vietpit.backend.config.year_config import TaxBracket, YearConfiguration


def test_zero_taxable_income_produces_empty_breakdown(config: YearConfiguration) -> None:
    breakdown, total = calculate_progressive_tax(0, config.brackets)

    assert breakdown == []
    assert total == 0


def test_negative_taxable_income_produces_empty_breakdown(config: YearConfiguration) -> None:
    breakdown, total = calculate_progressive_tax(-1_000_000, config.brackets)

    assert breakdown == []
    assert total == 0


def test_income_within_second_bracket(config: YearConfiguration) -> None:
    breakdown, total = calculate_progressive_tax(6_900_000, config.brackets)

    assert [(line.rate, line.taxable, line.tax) for line in breakdown] == [
        (0.05, 5_000_000, pytest.approx(250_000)),
        (0.10, 1_900_000, pytest.approx(190_000)),
    ]
    assert total == pytest.approx(440_000)


def test_income_spanning_four_brackets(config: YearConfiguration) -> None:
    breakdown, total = calculate_progressive_tax(30_200_000, config.brackets)

    assert [line.taxable for line in breakdown] == [
        5_000_000,
        5_000_000,
        8_000_000,
        12_200_000,
    ]
    assert [line.rate for line in breakdown] == [0.05, 0.10, 0.15, 0.20]
    assert total == pytest.approx(4_390_000)


def test_income_on_bracket_edge_does_not_open_next_bracket(
    config: YearConfiguration,
) -> None:
    breakdown, _ = calculate_progressive_tax(10_000_000, config.brackets)

    assert len(breakdown) == 2
    assert breakdown[-1].taxable == 5_000_000


def test_top_bracket_absorbs_remaining_income(config: YearConfiguration) -> None:
    breakdown, total = calculate_progressive_tax(200_000_000, config.brackets)

    assert len(breakdown) == len(config.brackets)
    assert breakdown[-1].rate == 0.35
    assert breakdown[-1].taxable == 200_000_000 - 80_000_000
    expected = (
        250_000 + 500_000 + 1_200_000 + 2_800_000 + 5_000_000 + 8_400_000
        + 120_000_000 * 0.35
    )
    assert total == pytest.approx(expected)


@pytest.mark.parametrize(
    "taxable_income",
    [1, 4_999_999, 5_000_000, 17_999_999.5, 32_000_000, 52_000_000, 80_000_001, 1e10],
)
def test_breakdown_accounts_for_every_dong(
    config: YearConfiguration, taxable_income: float
) -> None:
    breakdown, total = calculate_progressive_tax(taxable_income, config.brackets)

    assert math.fsum(line.taxable for line in breakdown) == pytest.approx(
        taxable_income, rel=1e-12
    )
    assert total == pytest.approx(math.fsum(line.tax for line in breakdown))
    assert total == pytest.approx(math.fsum(line.taxable * line.rate for line in breakdown))


def test_breakdown_lines_are_immutable(config: YearConfiguration) -> None:
    breakdown, _ = calculate_progressive_tax(1_000_000, config.brackets)

    with pytest.raises(AttributeError):
        breakdown[0].tax = 0  # type: ignore[misc]


def test_custom_schedule_is_honoured() -> None:
    brackets = [TaxBracket(width=100, rate=0.1), TaxBracket(width=None, rate=0.5)]

    breakdown, total = calculate_progressive_tax(300, brackets)

    assert [(line.taxable, line.tax) for line in breakdown] == [(100, 10), (200, 100)]
    assert total == 110
