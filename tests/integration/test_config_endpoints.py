"""Integration coverage for configuration metadata endpoints."""

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

from vietpit.backend.config import year_config
from vietpit.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload == {
        "version": get_project_version(),
        "supported_years": list(year_config.available_years()),
        "default_year": year_config.default_year(),
    }


def test_list_years_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    years = payload["years"]
    assert [entry["year"] for entry in years] == list(year_config.available_years())
    assert payload["default_year"] == year_config.default_year()

    current_year = next(entry for entry in years if entry["year"] == 2024)
    assert current_year["meta"]["currency"] == "VND"
    assert current_year["meta"]["defaults"]["salary_mode"] == "gross"
    assert isinstance(current_year["meta"]["legal_basis"], list)
    assert current_year["deductions"] == {"personal": 11_000_000, "dependent": 4_400_000}

    insurance = current_year["insurance"]
    assert insurance["monthly_cap"] == 36_000_000
    assert [category["id"] for category in insurance["categories"]] == ["BHXH", "BHYT", "BHTN"]
    assert insurance["employee"]["rates"]["BHXH"] == pytest.approx(0.08)
    assert insurance["employee"]["total"] == pytest.approx(0.105)
    assert insurance["employer"]["total"] == pytest.approx(0.215)


def test_year_endpoint_serialises_brackets(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2024")

    assert response.status_code == HTTPStatus.OK
    brackets = response.get_json()["brackets"]

    assert len(brackets) == 7
    assert brackets[0] == {"lower": 0, "upper": 5_000_000, "width": 5_000_000, "rate": 0.05}
    assert brackets[2]["lower"] == 10_000_000
    assert brackets[2]["upper"] == 18_000_000
    assert brackets[-1]["lower"] == 80_000_000
    assert brackets[-1]["upper"] is None
    assert brackets[-1]["width"] is None
    assert brackets[-1]["rate"] == pytest.approx(0.35)


def test_year_endpoint_localises_labels(client: FlaskClient) -> None:
    english = client.get("/api/v1/config/2024").get_json()
    vietnamese = client.get("/api/v1/config/2024?locale=vi").get_json()

    assert english["warnings"][0]["id"] == "insurance_cap_base_salary"
    assert english["warnings"][0]["message"] != vietnamese["warnings"][0]["message"]
    assert "warnings." not in vietnamese["warnings"][0]["message"]


def test_unknown_year_returns_not_found(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2099")

    assert response.status_code == HTTPStatus.NOT_FOUND
    payload = response.get_json()
    assert payload["error"] == "not_found"
