"""Unit coverage for the net→gross solver."""

from __future__ import annotations

import pytest

from vietpit.backend.app.services.calculators import (
    SOLVER_ITERATIONS,
    project_net_from_gross,
    solve_gross_from_net,
)
from vietpit.backend.config.year_config import YearConfiguration


@pytest.mark.parametrize("insurance_enabled", [True, False])
@pytest.mark.parametrize("dependents", [0, 1, 3])
@pytest.mark.parametrize(
    "target_net",
    [0, 1_000_000, 8_950_000, 17_460_000, 30_000_000, 45_000_000, 100_000_000, 250_000_000],
)
def test_round_trip_lands_within_one_dong(
    config: YearConfiguration, target_net: float, dependents: int, insurance_enabled: bool
) -> None:
    gross = solve_gross_from_net(target_net, dependents, insurance_enabled, config)
    net = project_net_from_gross(gross, dependents, insurance_enabled, config).net_monthly

    assert net == pytest.approx(target_net, abs=1)


def test_zero_target_yields_zero_gross(config: YearConfiguration) -> None:
    assert solve_gross_from_net(0, 0, True, config) == 0


def test_result_is_clamped_to_non_negative(config: YearConfiguration) -> None:
    assert solve_gross_from_net(-5_000_000, 0, True, config) >= 0


def test_target_below_personal_deduction_needs_only_insurance_gross_up(
    config: YearConfiguration,
) -> None:
    gross = solve_gross_from_net(8_950_000, 0, True, config)

    assert gross == pytest.approx(10_000_000, abs=1)


def test_solver_runs_a_fixed_number_of_iterations(
    config: YearConfiguration, monkeypatch: pytest.MonkeyPatch
) -> None:
    from vietpit.backend.app.services.calculators import salary

    calls: list[float] = []
    original = salary.project_net_from_gross

    def _counting(gross, dependents, insurance_enabled, cfg):
        calls.append(gross)
        return original(gross, dependents, insurance_enabled, cfg)

    monkeypatch.setattr(salary, "project_net_from_gross", _counting)

    salary.solve_gross_from_net(17_460_000, 0, True, config)

    assert len(calls) == SOLVER_ITERATIONS == 20
