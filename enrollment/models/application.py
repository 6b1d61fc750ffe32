"""Shareholder application ORM model and its choice sets."""
from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import JSON, Date, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from enrollment.models.base import Base, value_enum


class ShareClass(str, enum.Enum):
    COMMON = "common"
    PREFERRED = "preferred"
    PREMIUM = "premium"


class PaymentMethod(str, enum.Enum):
    WIRE = "wire"
    CHECK = "check"
    ACH = "ach"


class IncomeBand(str, enum.Enum):
    UNDER_50K = "under50k"
    FROM_50K_TO_100K = "50k-100k"
    FROM_100K_TO_250K = "100k-250k"
    FROM_250K_TO_500K = "250k-500k"
    OVER_500K = "over500k"


class IndustryExperience(str, enum.Enum):
    NONE = "none"
    LIMITED = "limited"
    MODERATE = "moderate"
    EXTENSIVE = "extensive"


class BusinessBackground(str, enum.Enum):
    FORESTRY = "forestry"
    SAWMILL = "sawmill"
    CONSTRUCTION = "construction"
    WOODWORKING = "woodworking"
    REAL_ESTATE = "real-estate"
    OTHER = "other"


class InvestmentObjective(str, enum.Enum):
    INCOME = "income"
    GROWTH = "growth"
    BALANCED = "balanced"
    SPECULATION = "speculation"


class RiskTolerance(str, enum.Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class TimeHorizon(str, enum.Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class Acknowledgment(str, enum.Enum):
    ACCREDITED = "accredited"
    DISCLOSURE = "disclosure"
    UNDERSTANDING = "understanding"
    TAX = "tax"


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class USState(str, enum.Enum):
    AL = "AL"
    AK = "AK"
    AZ = "AZ"
    AR = "AR"
    CA = "CA"
    CO = "CO"
    CT = "CT"
    DE = "DE"
    FL = "FL"
    GA = "GA"
    HI = "HI"
    ID = "ID"
    IL = "IL"
    IN = "IN"
    IA = "IA"
    KS = "KS"
    KY = "KY"
    LA = "LA"
    ME = "ME"
    MD = "MD"
    MA = "MA"
    MI = "MI"
    MN = "MN"
    MS = "MS"
    MO = "MO"
    MT = "MT"
    NE = "NE"
    NV = "NV"
    NH = "NH"
    NJ = "NJ"
    NM = "NM"
    NY = "NY"
    NC = "NC"
    ND = "ND"
    OH = "OH"
    OK = "OK"
    OR = "OR"
    PA = "PA"
    RI = "RI"
    SC = "SC"
    SD = "SD"
    TN = "TN"
    TX = "TX"
    UT = "UT"
    VT = "VT"
    VA = "VA"
    WA = "WA"
    WV = "WV"
    WI = "WI"
    WY = "WY"


REQUIRED_ACKNOWLEDGMENTS: frozenset[Acknowledgment] = frozenset(Acknowledgment)


class ShareholderApplication(Base):
    """A submitted shareholder enrollment application."""

    __tablename__ = "shareholder_applications"
    # AUTOINCREMENT keeps SQLite from reusing identifiers.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    ssn: Mapped[str] = mapped_column(String(11), nullable=False)

    street_address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(10), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(14), nullable=False)
    email_address: Mapped[str] = mapped_column(String(320), nullable=False)

    investment_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    share_class: Mapped[ShareClass] = mapped_column(value_enum(ShareClass, name="share_class"), nullable=False)
    payment_method: Mapped[PaymentMethod] = mapped_column(
        value_enum(PaymentMethod, name="payment_method"), nullable=False
    )
    expected_income: Mapped[IncomeBand | None] = mapped_column(value_enum(IncomeBand, name="income_band"))

    industry_experience: Mapped[IndustryExperience] = mapped_column(
        value_enum(IndustryExperience, name="industry_experience"), nullable=False
    )
    business_background: Mapped[list[str] | None] = mapped_column(JSON)

    investment_objective: Mapped[InvestmentObjective] = mapped_column(
        value_enum(InvestmentObjective, name="investment_objective"), nullable=False
    )
    risk_tolerance: Mapped[RiskTolerance] = mapped_column(
        value_enum(RiskTolerance, name="risk_tolerance"), nullable=False
    )
    time_horizon: Mapped[TimeHorizon] = mapped_column(value_enum(TimeHorizon, name="time_horizon"), nullable=False)

    acknowledgments: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    electronic_signature: Mapped[str] = mapped_column(String(255), nullable=False)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    status: Mapped[ApplicationStatus] = mapped_column(
        value_enum(ApplicationStatus, name="application_status"),
        nullable=False,
        default=ApplicationStatus.PENDING,
        server_default=ApplicationStatus.PENDING.value,
    )


__all__ = [
    "Acknowledgment",
    "ApplicationStatus",
    "BusinessBackground",
    "IncomeBand",
    "IndustryExperience",
    "InvestmentObjective",
    "PaymentMethod",
    "REQUIRED_ACKNOWLEDGMENTS",
    "RiskTolerance",
    "ShareClass",
    "ShareholderApplication",
    "TimeHorizon",
    "USState",
]
