"""Shared validation entry point for shareholder applications."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from typing import Any

from pydantic import ValidationError

from enrollment.schemas.application import ShareholderApplicationCreate


@dataclass(slots=True, frozen=True)
class FieldError:
    """One failing field and a human readable reason."""

    field: str
    message: str
    type: str = "value_error"

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class ApplicationValidationError(ValueError):
    """Raised when a candidate application fails schema validation."""

    def __init__(self, errors: Iterable[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("Validation error")

    @property
    def fields(self) -> list[str]:
        return [error.field for error in self.errors]

    def to_list(self) -> list[dict[str, str]]:
        return [error.to_dict() for error in self.errors]


def _field_errors(exc: ValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "payload"
        message = error["msg"]
        if error["type"] == "value_error":
            # Drop pydantic's "Value error, " prefix from our own messages.
            message = str(error.get("ctx", {}).get("error", message))
        errors.append(FieldError(field=location, message=message, type=error["type"]))
    return errors


def validate_application(candidate: Any) -> ShareholderApplicationCreate:
    """Validate ``candidate`` and return the accepted application.

    Every failing field is reported, not only the first one. The function has
    no side effects.
    """

    if isinstance(candidate, ShareholderApplicationCreate):
        return candidate
    try:
        return ShareholderApplicationCreate.model_validate(candidate)
    except ValidationError as exc:
        raise ApplicationValidationError(_field_errors(exc)) from exc


__all__ = ["ApplicationValidationError", "FieldError", "validate_application"]
