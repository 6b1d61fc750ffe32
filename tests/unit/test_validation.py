from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest

from enrollment.models import Acknowledgment, IncomeBand, USState
from enrollment.schemas import ShareholderApplicationCreate
from enrollment.services.validation import ApplicationValidationError, validate_application


def _errors_for(payload: Any) -> dict[str, str]:
    with pytest.raises(ApplicationValidationError) as excinfo:
        validate_application(payload)
    return {error.field: error.message for error in excinfo.value.errors}


def test_valid_payload_is_accepted(valid_payload: dict[str, Any]) -> None:
    application = validate_application(valid_payload)

    assert application.first_name == "Jane"
    assert application.state is USState.OR
    assert application.investment_amount == Decimal("5000")
    assert set(application.acknowledgments) == set(Acknowledgment)


def test_snake_case_keys_are_accepted(valid_payload: dict[str, Any]) -> None:
    application = ShareholderApplicationCreate.model_validate(valid_payload)
    snake = application.model_dump(mode="json")

    assert validate_application(snake) == application


def test_validated_application_is_returned_unchanged(valid_payload: dict[str, Any]) -> None:
    application = validate_application(valid_payload)
    assert validate_application(application) is application


def test_missing_field_is_named(valid_payload: dict[str, Any]) -> None:
    del valid_payload["ssn"]
    assert "ssn" in _errors_for(valid_payload)


def test_every_failing_field_is_reported(valid_payload: dict[str, Any]) -> None:
    valid_payload["ssn"] = "123456789"
    valid_payload["phoneNumber"] = "555-123-4567"
    valid_payload["investmentAmount"] = "500"

    errors = _errors_for(valid_payload)

    assert errors["ssn"] == "SSN must be formatted as XXX-XX-XXXX"
    assert errors["phoneNumber"] == "Phone number must be formatted as (XXX) XXX-XXXX"
    assert errors["investmentAmount"] == "Minimum investment amount is $1,000"


def test_minimum_investment_boundary(valid_payload: dict[str, Any]) -> None:
    valid_payload["investmentAmount"] = "1000"
    assert validate_application(valid_payload).investment_amount == Decimal("1000")

    valid_payload["investmentAmount"] = "999.99"
    assert "investmentAmount" in _errors_for(valid_payload)


@pytest.mark.parametrize(
    "acknowledgments",
    [
        [],
        ["accredited", "disclosure", "understanding"],
        ["accredited", "accredited", "disclosure", "understanding"],
    ],
)
def test_all_four_acknowledgments_required(valid_payload: dict[str, Any], acknowledgments: list[str]) -> None:
    valid_payload["acknowledgments"] = acknowledgments
    assert _errors_for(valid_payload)["acknowledgments"] == "All acknowledgments must be accepted"


def test_unknown_acknowledgment_is_rejected(valid_payload: dict[str, Any]) -> None:
    valid_payload["acknowledgments"].append("marketing")
    assert any(field.startswith("acknowledgments") for field in _errors_for(valid_payload))


def test_duplicate_tags_are_collapsed(valid_payload: dict[str, Any]) -> None:
    valid_payload["acknowledgments"] = ["tax", "accredited", "tax", "disclosure", "understanding"]
    valid_payload["businessBackground"] = ["sawmill", "sawmill"]

    application = validate_application(valid_payload)

    assert [tag.value for tag in application.acknowledgments] == ["tax", "accredited", "disclosure", "understanding"]
    assert [tag.value for tag in application.business_background or []] == ["sawmill"]


def test_empty_expected_income_means_unset(valid_payload: dict[str, Any]) -> None:
    valid_payload["expectedIncome"] = ""
    assert validate_application(valid_payload).expected_income is None

    valid_payload["expectedIncome"] = "over500k"
    assert validate_application(valid_payload).expected_income is IncomeBand.OVER_500K


def test_unknown_enumerations_are_rejected(valid_payload: dict[str, Any]) -> None:
    valid_payload["shareClass"] = "platinum"
    valid_payload["state"] = "XX"
    valid_payload["businessBackground"] = ["mining"]

    errors = _errors_for(valid_payload)

    assert "shareClass" in errors
    assert "state" in errors
    assert "businessBackground.0" in errors


def test_blank_text_fields_are_rejected(valid_payload: dict[str, Any]) -> None:
    valid_payload["firstName"] = "   "
    valid_payload["electronicSignature"] = ""

    errors = _errors_for(valid_payload)

    assert errors["firstName"] == "Field must not be blank"
    assert errors["electronicSignature"] == "Field must not be blank"


def test_future_birth_date_and_bad_email_are_rejected(valid_payload: dict[str, Any]) -> None:
    valid_payload["dateOfBirth"] = "2999-01-01"
    valid_payload["emailAddress"] = "not-an-email"

    errors = _errors_for(valid_payload)

    assert "dateOfBirth" in errors
    assert "emailAddress" in errors


@pytest.mark.parametrize("payload", [None, [], "application", 42])
def test_non_object_payload_is_rejected(payload: Any) -> None:
    assert "payload" in _errors_for(payload)


def test_server_assigned_fields_are_ignored(valid_payload: dict[str, Any]) -> None:
    valid_payload.update({"id": 99, "submittedAt": "2020-01-01T00:00:00", "status": "approved"})

    dumped = validate_application(valid_payload).model_dump()

    assert "id" not in dumped
    assert "status" not in dumped


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("ssn", "123-45-6789\n"),
        ("ssn", " 123-45-6789"),
        ("ssn", "١٢٣-٤٥-٦٧٨٩"),
        ("phoneNumber", "(555) 123-4567\n"),
        ("phoneNumber", "(555) 123-4567 ext 9"),
    ],
)
def test_formatted_identifiers_must_match_exactly(valid_payload: dict[str, Any], field: str, value: str) -> None:
    valid_payload[field] = value
    assert field in _errors_for(valid_payload)
