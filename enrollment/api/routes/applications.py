"""Shareholder application submission and listing endpoints."""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from enrollment.api.deps import get_gateway, get_notifier, get_submission_handler
from enrollment.schemas import ErrorResponse, ShareholderApplicationRead, SubmissionResponse
from enrollment.services.notifications import ApplicationNotifier
from enrollment.services.storage import ApplicationGateway
from enrollment.services.submission import (
    ApplicationValidationError,
    SubmissionError,
    SubmissionHandler,
)
from enrollment.services.validation import FieldError

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _internal_error(message: str = "Internal server error") -> JSONResponse:
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(message=message))


async def read_json_payload(request: Request) -> Any:
    """Parse the raw request body; an empty body is an empty application."""

    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ApplicationValidationError(
            [FieldError(field="payload", message="Request body must be valid JSON", type="json_invalid")]
        ) from exc


async def application_validation_error_handler(
    request: Request, exc: ApplicationValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(message="Validation error", errors=exc.to_list()),
    )


def register_exception_handlers(application: FastAPI) -> None:
    application.add_exception_handler(ApplicationValidationError, application_validation_error_handler)


@router.post(
    "/shareholder-application",
    response_model=SubmissionResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def submit_application(
    background_tasks: BackgroundTasks,
    payload: Any = Depends(read_json_payload),
    handler: SubmissionHandler = Depends(get_submission_handler),
    notifier: ApplicationNotifier = Depends(get_notifier),
) -> SubmissionResponse | JSONResponse:
    """Validate and store an application, then notify operator and applicant.

    Validation failures propagate to :func:`application_validation_error_handler`.
    """

    try:
        result = handler.submit(payload)
        application = ShareholderApplicationRead.model_validate(result.application)
    except ApplicationValidationError:
        raise
    except SubmissionError:
        return _internal_error()
    except Exception:
        logger.exception("unexpected failure while submitting shareholder application")
        return _internal_error()

    # Runs after the response is sent; its outcome never reaches the caller.
    background_tasks.add_task(notifier.notify_submission, application)
    return SubmissionResponse(application_id=result.application_id)


@router.get("/shareholder-applications", response_model=list[ShareholderApplicationRead])
def list_applications(
    gateway: ApplicationGateway = Depends(get_gateway),
) -> list[ShareholderApplicationRead] | JSONResponse:
    try:
        return [ShareholderApplicationRead.model_validate(item) for item in gateway.list_applications()]
    except Exception:
        logger.exception("failed to fetch shareholder applications")
        return _internal_error("Failed to fetch applications")


@router.get("/shareholder-applications/{application_id}", response_model=ShareholderApplicationRead)
def get_application(
    application_id: int,
    gateway: ApplicationGateway = Depends(get_gateway),
) -> ShareholderApplicationRead:
    try:
        application = gateway.get_application(application_id)
        record = None if application is None else ShareholderApplicationRead.model_validate(application)
    except Exception as exc:
        logger.exception("failed to fetch shareholder application")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch application",
        ) from exc
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return record


__all__ = [
    "application_validation_error_handler",
    "get_application",
    "list_applications",
    "read_json_payload",
    "register_exception_handlers",
    "router",
    "submit_application",
]
