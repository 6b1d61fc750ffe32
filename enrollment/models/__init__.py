"""ORM models package."""
from .application import (
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
    ShareholderApplication,
    TimeHorizon,
    USState,
)
from .base import Base, TimestampMixin
from .user import User

__all__ = [
    "Acknowledgment",
    "ApplicationStatus",
    "Base",
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
    "TimestampMixin",
    "USState",
    "User",
]
