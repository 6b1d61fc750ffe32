"""Persistence gateway for shareholder applications and user accounts."""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from enrollment.core.security import hash_password
from enrollment.models import ShareholderApplication, User
from enrollment.schemas.application import ShareholderApplicationCreate
from enrollment.schemas.user import UserCreate


class PersistenceError(RuntimeError):
    """Raised when the record store cannot complete an operation."""


class DuplicateUserError(PersistenceError):
    """Raised when a username is already taken."""


class ApplicationGateway(Protocol):
    """Repository interface; the only component allowed to touch storage."""

    def create_application(self, payload: ShareholderApplicationCreate) -> ShareholderApplication:
        """Insert one application and return it with its generated identifier."""

    def get_application(self, application_id: int) -> ShareholderApplication | None:
        """Return the application or ``None`` when absent."""

    def list_applications(self) -> list[ShareholderApplication]:
        """Return every stored application in insertion order."""

    def get_user(self, user_id: int) -> User | None:
        """Return the user or ``None`` when absent."""

    def get_user_by_username(self, username: str) -> User | None:
        """Return the user with ``username`` or ``None``."""

    def create_user(self, payload: UserCreate) -> User:
        """Insert one user account."""


def _application_values(payload: ShareholderApplicationCreate) -> dict[str, Any]:
    values = payload.model_dump()
    values["state"] = payload.state.value
    values["acknowledgments"] = [tag.value for tag in payload.acknowledgments]
    if payload.business_background is not None:
        values["business_background"] = [tag.value for tag in payload.business_background]
    return values


class DatabaseGateway:
    """SQLAlchemy implementation of :class:`ApplicationGateway`.

    Each operation touches a single row and commits on its own; concurrency
    control is left to the database.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @contextmanager
    def _storage_errors(self, message: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PersistenceError(message) from exc

    def create_application(self, payload: ShareholderApplicationCreate) -> ShareholderApplication:
        application = ShareholderApplication(**_application_values(payload))
        with self._storage_errors("Failed to store shareholder application"):
            self._session.add(application)
            self._session.commit()
            self._session.refresh(application)
        return application

    def get_application(self, application_id: int) -> ShareholderApplication | None:
        with self._storage_errors("Failed to load shareholder application"):
            return self._session.get(ShareholderApplication, application_id)

    def list_applications(self) -> list[ShareholderApplication]:
        statement = select(ShareholderApplication).order_by(ShareholderApplication.id)
        with self._storage_errors("Failed to list shareholder applications"):
            return list(self._session.scalars(statement).all())

    def get_user(self, user_id: int) -> User | None:
        with self._storage_errors("Failed to load user"):
            return self._session.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        statement = select(User).where(User.username == username)
        with self._storage_errors("Failed to load user"):
            return self._session.scalars(statement).one_or_none()

    def create_user(self, payload: UserCreate) -> User:
        user = User(username=payload.username, password=hash_password(payload.password))
        self._session.add(user)
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            raise DuplicateUserError(f"Username '{payload.username}' is already taken") from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise PersistenceError("Failed to store user") from exc
        self._session.refresh(user)
        return user


__all__ = [
    "ApplicationGateway",
    "DatabaseGateway",
    "DuplicateUserError",
    "PersistenceError",
]
