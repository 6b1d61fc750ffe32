"""Pydantic schemas package."""

from .application import (
    MINIMUM_INVESTMENT,
    ErrorResponse,
    FieldErrorRead,
    ShareholderApplicationBase,
    ShareholderApplicationCreate,
    ShareholderApplicationRead,
    SubmissionResponse,
)
from .user import UserCreate

__all__ = [
    "ErrorResponse",
    "FieldErrorRead",
    "MINIMUM_INVESTMENT",
    "ShareholderApplicationBase",
    "ShareholderApplicationCreate",
    "ShareholderApplicationRead",
    "SubmissionResponse",
    "UserCreate",
]
