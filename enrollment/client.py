"""HTTP client for the enrollment API.

Payloads are checked with the same :func:`validate_application` the server
runs, so an invalid application is rejected before any request is sent.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from enrollment.schemas.application import ShareholderApplicationRead
from enrollment.services.validation import (
    ApplicationValidationError,
    FieldError,
    validate_application,
)


class EnrollmentClientError(RuntimeError):
    """Raised when the enrollment API cannot be reached or fails."""


@dataclass(slots=True, frozen=True)
class SubmissionReceipt:
    application_id: int
    message: str


class EnrollmentClient:
    """Synchronous wrapper around the enrollment HTTP API."""

    def __init__(self, base_url: str, *, client: httpx.Client | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client()
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EnrollmentClient":  # pragma: no cover - convenience
        return self

    def __exit__(self, *_args: object) -> None:  # pragma: no cover - convenience
        self.close()

    def _request(self, method: str, path: str, *, timeout: float | None, **kwargs: Any) -> tuple[httpx.Response, Any]:
        try:
            response = self._client.request(method, f"{self._base_url}{path}", timeout=timeout, **kwargs)
        except httpx.HTTPError as exc:
            raise EnrollmentClientError(f"Request to {path} failed") from exc
        try:
            body = response.json()
        except ValueError as exc:
            raise EnrollmentClientError(f"Invalid response from {path}") from exc
        return response, body

    def submit(self, payload: Any, *, timeout: float | None = 5.0) -> SubmissionReceipt:
        application = validate_application(payload)
        response, body = self._request(
            "POST",
            "/api/shareholder-application",
            json=application.model_dump(mode="json", by_alias=True),
            timeout=timeout,
        )
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise ApplicationValidationError(
                FieldError(
                    field=error.get("field", "payload"),
                    message=error.get("message", ""),
                    type=error.get("type", "value_error"),
                )
                for error in body.get("errors", [])
            )
        if response.is_error:
            raise EnrollmentClientError(body.get("message", "Submission failed"))
        return SubmissionReceipt(application_id=int(body["applicationId"]), message=body["message"])

    def list_applications(self, *, timeout: float | None = 5.0) -> list[ShareholderApplicationRead]:
        response, body = self._request("GET", "/api/shareholder-applications", timeout=timeout)
        if response.is_error:
            raise EnrollmentClientError(body.get("message", "Failed to fetch applications"))
        return [ShareholderApplicationRead.model_validate(item) for item in body]


__all__ = ["EnrollmentClient", "EnrollmentClientError", "SubmissionReceipt"]
