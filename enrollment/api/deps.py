"""Common dependencies for API routes."""
from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from enrollment.core.config import get_settings
from enrollment.db.session import SessionLocal
from enrollment.services.notifications import ApplicationNotifier
from enrollment.services.storage import ApplicationGateway, DatabaseGateway
from enrollment.services.submission import SubmissionHandler


def get_db_session() -> Iterator[Session]:
    """Yield a database session for FastAPI dependencies."""

    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def get_gateway(session: Session = Depends(get_db_session)) -> ApplicationGateway:
    return DatabaseGateway(session)


def get_submission_handler(gateway: ApplicationGateway = Depends(get_gateway)) -> SubmissionHandler:
    return SubmissionHandler(gateway)


@lru_cache
def get_notifier() -> ApplicationNotifier:
    """Process-wide notifier; its Kafka producer is created once on first use."""
    return ApplicationNotifier(settings=get_settings())


__all__ = ["get_db_session", "get_gateway", "get_notifier", "get_submission_handler"]
