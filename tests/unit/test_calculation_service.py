"""Unit tests for the calculation service."""
from __future__ import annotations

import logging

import pytest

from vietpit.backend.app.localization import get_translator
from vietpit.backend.app.models import (
    CalculationInputs,
    CalculationRequest,
    CalculationResponse,
    Period,
    SalaryMode,
)
from vietpit.backend.app.services.calculation_service import (
    calculate_salary,
    serialise_result,
)
from vietpit.backend.app.services.tax_engine import TaxEngine
from vietpit.backend.config.year_config import YearConfiguration, default_year


def test_calculate_salary_defaults_to_latest_year() -> None:
    result = calculate_salary({"income": 20_000_000})

    assert result["meta"]["year"] == default_year()
    assert result["meta"]["salary_mode"] == "gross"
    assert result["meta"]["period"] == "monthly"
    assert result["meta"]["locale"] == "en"


def test_calculate_salary_accepts_request_models() -> None:
    request = CalculationRequest(year=2024, income=20_000_000, dependents=1)

    result = calculate_salary(request)

    assert result["deductions"]["dependents"] == 4_400_000
    assert result["meta"]["dependents"] == 1


def test_calculate_salary_output_matches_response_schema() -> None:
    result = calculate_salary({"year": 2024, "income": 45_000_000, "dependents": 1})

    CalculationResponse.model_validate(result)


def test_calculate_salary_localises_labels() -> None:
    result = calculate_salary({"income": 20_000_000, "locale": "vi"})

    assert result["meta"]["locale"] == "vi"
    assert result["summary"]["labels"]["net_monthly"] == "Thực lĩnh"
    assert result["summary"]["labels"]["taxable_income"] == "Thu nhập chịu thuế"


def test_calculate_salary_labels_breakdown_rates() -> None:
    result = calculate_salary({"income": 50_000_000, "insurance_enabled": False})

    assert [line["rate_label"] for line in result["breakdown"]] == [
        "5%",
        "10%",
        "15%",
        "20%",
        "25%",
    ]


def test_insurance_section_splits_categories() -> None:
    result = calculate_salary({"income": 20_000_000})

    categories = {entry["category"]: entry for entry in result["insurance"]["categories"]}
    assert list(categories) == ["BHXH", "BHYT", "BHTN"]
    assert categories["BHXH"]["employee_amount"] == 1_600_000
    assert categories["BHXH"]["employer_amount"] == 3_500_000
    assert categories["BHYT"]["employee_amount"] == 300_000
    assert categories["BHYT"]["employer_amount"] == 600_000
    assert categories["BHTN"]["employee_amount"] == 200_000
    assert categories["BHTN"]["employer_amount"] == 200_000
    assert "notice" not in result["insurance"]


def test_insurance_notice_when_cap_applies() -> None:
    result = calculate_salary({"income": 80_000_000, "locale": "vi"})

    assert result["insurance"]["cap_applied"] is True
    assert result["insurance"]["base"] == 36_000_000
    assert result["insurance"]["notice"] == "Áp dụng trần bảo hiểm"


def test_disabled_insurance_reports_zero_contributions() -> None:
    result = calculate_salary({"income": 80_000_000, "insurance_enabled": False})

    insurance = result["insurance"]
    assert insurance["enabled"] is False
    assert insurance["cap_applied"] is False
    assert insurance["employee_total"] == 0
    assert insurance["employer_total"] == 0


@pytest.mark.parametrize(
    ("payload", "fragment"),
    [
        ({"income": -1}, "income"),
        ({"income": 10_000_000, "dependents": -1}, "dependents"),
        ({"income": 10_000_000, "dependents": 1.5}, "dependents"),
        ({"income": 10_000_000, "salary_mode": "both"}, "salary_mode"),
        ({"income": 10_000_000, "period": "weekly"}, "period"),
        ({"income": 10_000_000, "bonus": 1}, "bonus"),
        ({"dependents": 1}, "income"),
    ],
)
def test_calculate_salary_rejects_invalid_payloads(payload: dict, fragment: str) -> None:
    with pytest.raises(ValueError, match=fragment):
        calculate_salary(payload)


def test_calculate_salary_rejects_non_mapping_payload() -> None:
    with pytest.raises(ValueError, match="mapping"):
        calculate_salary(["income", 1])  # type: ignore[arg-type]


def test_calculate_salary_unknown_year_raises_file_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        calculate_salary({"year": 2099, "income": 1})


def test_choice_fields_are_case_insensitive() -> None:
    result = calculate_salary(
        {"income": 17_460_000, "salary_mode": " NET ", "period": "Monthly"}
    )

    assert result["meta"]["salary_mode"] == "net"
    assert result["summary"]["gross_monthly"] == 20_000_000


def test_serialise_result_rounds_to_whole_dong(config: YearConfiguration) -> None:
    inputs = CalculationInputs(income=12_345_678.9)
    result = TaxEngine(config).compute_result(inputs)

    payload = serialise_result(result, inputs, config, get_translator("en"))

    assert payload["summary"]["gross_monthly"] == 12_345_679
    assert payload["meta"]["input_income"] == pytest.approx(12_345_678.9)
    assert float(payload["deductions"]["insurance"]).is_integer()


def test_profiling_logs_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("VIETPIT_PROFILE_CALCULATIONS", "1")

    with caplog.at_level(
        logging.DEBUG, logger="vietpit.backend.app.services.calculation_service"
    ):
        calculate_salary(
            {"income": 30_000_000, "salary_mode": SalaryMode.NET.value, "period": Period.MONTHLY.value}
        )

    messages = [record.getMessage() for record in caplog.records]
    assert any("calculate_salary timings" in message for message in messages)
    assert any("residual" in message for message in messages)


def test_dependent_deduction_scales_without_upper_bound() -> None:
    result = calculate_salary({"income": 200_000_000, "dependents": 25})

    # 36M capped base * 10.5% = 3.78M employee insurance.
    assert result["deductions"]["dependents"] == 110_000_000
    assert result["deductions"]["total"] == 124_780_000
    assert result["summary"]["taxable_income"] == 75_220_000
