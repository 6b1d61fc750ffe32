"""Submission handler: the boundary between untrusted payloads and storage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from enrollment.models import ShareholderApplication
from enrollment.obs import APPLICATION_VALIDATION_FAILURES_COUNTER, APPLICATIONS_SUBMITTED_COUNTER
from enrollment.services.storage import ApplicationGateway, PersistenceError
from enrollment.services.validation import ApplicationValidationError, validate_application

logger = logging.getLogger(__name__)


class SubmissionError(RuntimeError):
    """Base exception for submission handler errors."""


class SubmissionFailedError(SubmissionError):
    """Raised when a validated application could not be stored."""


@dataclass(slots=True, frozen=True)
class SubmissionResult:
    """Return value of a successful submission."""

    application: ShareholderApplication

    @property
    def application_id(self) -> int:
        return self.application.id


class SubmissionHandler:
    """Validates a raw payload and stores it through the injected gateway.

    The handler keeps no state between calls. Submissions are not
    deduplicated: sending the same payload twice stores two applications.
    """

    def __init__(self, gateway: ApplicationGateway) -> None:
        self._gateway = gateway

    def submit(self, payload: Any) -> SubmissionResult:
        try:
            validated = validate_application(payload)
        except ApplicationValidationError as exc:
            APPLICATION_VALIDATION_FAILURES_COUNTER.inc()
            logger.info("shareholder application rejected", extra={"fields": exc.fields})
            raise

        try:
            application = self._gateway.create_application(validated)
        except Exception as exc:
            # Any gateway failure, typed or not, surfaces as the same opaque error.
            logger.exception(
                "failed to store shareholder application",
                extra={"persistence_error": isinstance(exc, PersistenceError)},
            )
            raise SubmissionFailedError("Internal server error") from exc

        APPLICATIONS_SUBMITTED_COUNTER.labels(share_class=validated.share_class.value).inc()
        logger.info(
            "new shareholder application submitted",
            extra={"application_id": application.id, "share_class": validated.share_class.value},
        )
        return SubmissionResult(application=application)


__all__ = [
    "ApplicationValidationError",
    "SubmissionError",
    "SubmissionFailedError",
    "SubmissionHandler",
    "SubmissionResult",
]
