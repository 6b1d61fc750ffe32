"""Pydantic schemas for shareholder applications.

``ShareholderApplicationCreate`` is the single definition of an acceptable
application. The API handler and :class:`enrollment.client.EnrollmentClient`
both validate through it, so the two ends of the submission boundary cannot
drift apart. JSON payloads use camelCase keys; Python attributes are
snake_case.
"""
from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PastDate, field_validator
from pydantic.alias_generators import to_camel

from enrollment.models.application import (
    REQUIRED_ACKNOWLEDGMENTS,
    Acknowledgment,
    ApplicationStatus,
    BusinessBackground,
    IncomeBand,
    IndustryExperience,
    InvestmentObjective,
    PaymentMethod,
    RiskTolerance,
    ShareClass,
    TimeHorizon,
    USState,
)

MINIMUM_INVESTMENT = Decimal("1000")

_SSN_PATTERN = re.compile(r"\d{3}-\d{2}-\d{4}", re.ASCII)
_PHONE_PATTERN = re.compile(r"\(\d{3}\) \d{3}-\d{4}", re.ASCII)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShareholderApplicationBase(CamelModel):
    first_name: str = Field(..., max_length=255)
    last_name: str = Field(..., max_length=255)
    date_of_birth: PastDate
    ssn: str

    street_address: str = Field(..., max_length=255)
    city: str = Field(..., max_length=128)
    state: USState
    zip_code: str = Field(..., max_length=10)
    phone_number: str
    email_address: EmailStr

    investment_amount: Decimal = Field(..., max_digits=14, decimal_places=2)
    share_class: ShareClass
    payment_method: PaymentMethod
    expected_income: IncomeBand | None = None

    industry_experience: IndustryExperience
    business_background: list[BusinessBackground] | None = None

    investment_objective: InvestmentObjective
    risk_tolerance: RiskTolerance
    time_horizon: TimeHorizon

    acknowledgments: list[Acknowledgment]
    electronic_signature: str = Field(..., max_length=255)

    @field_validator(
        "first_name",
        "last_name",
        "street_address",
        "city",
        "zip_code",
        "electronic_signature",
    )
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Field must not be blank")
        return value.strip()

    @field_validator("ssn")
    @classmethod
    def _check_ssn_format(cls, value: str) -> str:
        if not _SSN_PATTERN.fullmatch(value):
            raise ValueError("SSN must be formatted as XXX-XX-XXXX")
        return value

    @field_validator("phone_number")
    @classmethod
    def _check_phone_format(cls, value: str) -> str:
        if not _PHONE_PATTERN.fullmatch(value):
            raise ValueError("Phone number must be formatted as (XXX) XXX-XXXX")
        return value

    @field_validator("investment_amount")
    @classmethod
    def _check_minimum_investment(cls, value: Decimal) -> Decimal:
        if value < MINIMUM_INVESTMENT:
            raise ValueError(f"Minimum investment amount is ${MINIMUM_INVESTMENT:,.0f}")
        return value

    @field_validator("expected_income", mode="before")
    @classmethod
    def _empty_income_is_unset(cls, value: Any) -> Any:
        # Unselected dropdowns arrive as "".
        if value == "":
            return None
        return value

    @field_validator("business_background", "acknowledgments")
    @classmethod
    def _collapse_duplicates(cls, value: list | None) -> list | None:
        if value is None:
            return None
        return list(dict.fromkeys(value))


class ShareholderApplicationCreate(ShareholderApplicationBase):
    """Candidate application accepted for storage.

    ``id``, ``submittedAt`` and ``status`` are server-assigned; if a caller
    sends them they are ignored.
    """

    @field_validator("acknowledgments")
    @classmethod
    def _require_all_acknowledgments(cls, value: list[Acknowledgment]) -> list[Acknowledgment]:
        if set(value) != REQUIRED_ACKNOWLEDGMENTS:
            raise ValueError("All acknowledgments must be accepted")
        return value


class ShareholderApplicationRead(ShareholderApplicationBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submitted_at: datetime
    status: ApplicationStatus


class SubmissionResponse(CamelModel):
    success: bool = True
    application_id: int
    message: str = "Application submitted successfully"


class FieldErrorRead(CamelModel):
    field: str
    message: str
    type: str


class ErrorResponse(CamelModel):
    success: bool = False
    message: str
    errors: list[FieldErrorRead] | None = None


__all__ = [
    "ErrorResponse",
    "FieldErrorRead",
    "MINIMUM_INVESTMENT",
    "ShareholderApplicationBase",
    "ShareholderApplicationCreate",
    "ShareholderApplicationRead",
    "SubmissionResponse",
]
