from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from enrollment.models import User
from scripts.seed_demo_data import DEMO_USERNAME, seed


def test_seed_is_idempotent(db_session: Session) -> None:
    seed(db_session, password="changeme")
    seed(db_session, password="changeme")

    count = db_session.scalar(select(func.count()).select_from(User).where(User.username == DEMO_USERNAME))
    assert count == 1
