"""Masking rules for the personal data collected by the enrollment form."""
from __future__ import annotations

from collections.abc import Callable
from typing import Any


def mask_ssn(ssn: str) -> str:
    return f"***-**-{ssn[-4:]}"


def mask_phone(phone: str) -> str:
    return f"(***) ***-{phone[-4:]}"


def mask_email(email: str) -> str:
    name, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{name[:1]}***@{domain}"


def _redact(_value: Any) -> str:
    return "***"


# Keys are matched case-insensitively with separators removed, so ``dateOfBirth``
# and ``date_of_birth`` share one rule.
_MASKERS: dict[str, Callable[[str], str]] = {
    "ssn": mask_ssn,
    "phonenumber": mask_phone,
    "emailaddress": mask_email,
    "dateofbirth": _redact,
    "streetaddress": _redact,
    "electronicsignature": _redact,
    "password": _redact,
}


def _normalise_key(key: Any) -> str:
    return str(key).replace("_", "").replace("-", "").lower()


def mask_personal_data(value: Any) -> Any:
    """Return a copy of ``value`` with every personal field masked.

    Dictionaries and lists are walked recursively; non-string values under a
    sensitive key are replaced outright.
    """

    if isinstance(value, dict):
        masked: dict[Any, Any] = {}
        for key, item in value.items():
            masker = _MASKERS.get(_normalise_key(key))
            if masker is None:
                masked[key] = mask_personal_data(item)
            elif isinstance(item, str) and item:
                masked[key] = masker(item)
            else:
                masked[key] = "***"
        return masked
    if isinstance(value, list):
        return [mask_personal_data(item) for item in value]
    return value


__all__ = ["mask_email", "mask_personal_data", "mask_phone", "mask_ssn"]
