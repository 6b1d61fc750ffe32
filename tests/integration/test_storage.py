from __future__ import annotations

from decimal import Decimal
from typing import Any

import pytest
from sqlalchemy.orm import Session

from enrollment.core.security import verify_password
from enrollment.models import ApplicationStatus, ShareClass
from enrollment.schemas import ShareholderApplicationCreate, ShareholderApplicationRead
from enrollment.schemas.user import UserCreate
from enrollment.services.storage import DatabaseGateway, DuplicateUserError


def test_create_application_assigns_identifier_and_defaults(
    db_session: Session, valid_payload: dict[str, Any]
) -> None:
    gateway = DatabaseGateway(db_session)

    application = gateway.create_application(ShareholderApplicationCreate.model_validate(valid_payload))

    assert application.id is not None
    assert application.status is ApplicationStatus.PENDING
    assert application.submitted_at is not None
    assert application.share_class is ShareClass.COMMON
    assert application.investment_amount == Decimal("5000")
    assert application.acknowledgments == ["accredited", "disclosure", "understanding", "tax"]


def test_get_and_list_applications(db_session: Session, valid_payload: dict[str, Any]) -> None:
    gateway = DatabaseGateway(db_session)
    payload = ShareholderApplicationCreate.model_validate(valid_payload)
    first = gateway.create_application(payload)
    second = gateway.create_application(payload)

    assert gateway.get_application(second.id) is second
    assert gateway.get_application(second.id + 100) is None
    assert [item.id for item in gateway.list_applications()] == [first.id, second.id]

    read = ShareholderApplicationRead.model_validate(gateway.get_application(first.id))
    assert read.model_dump(exclude={"id", "submitted_at", "status"}) == payload.model_dump()


def test_identifiers_are_not_reused_after_delete(db_session: Session, valid_payload: dict[str, Any]) -> None:
    gateway = DatabaseGateway(db_session)
    payload = ShareholderApplicationCreate.model_validate(valid_payload)
    first = gateway.create_application(payload)
    first_id = first.id
    db_session.delete(first)
    db_session.commit()

    assert gateway.create_application(payload).id > first_id


def test_create_user_hashes_password(db_session: Session) -> None:
    gateway = DatabaseGateway(db_session)

    user = gateway.create_user(UserCreate(username="operator", password="s3cret"))

    assert user.id is not None
    assert user.password != "s3cret"
    assert verify_password("s3cret", user.password)
    assert gateway.get_user(user.id) is user
    assert gateway.get_user_by_username("operator") is user
    assert gateway.get_user_by_username("nobody") is None


def test_duplicate_username_is_rejected(db_session: Session) -> None:
    gateway = DatabaseGateway(db_session)
    gateway.create_user(UserCreate(username="operator", password="one"))

    with pytest.raises(DuplicateUserError):
        gateway.create_user(UserCreate(username="operator", password="two"))

    assert gateway.get_user_by_username("operator") is not None
