"""Seed an operator account for local development."""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy.orm import Session

from enrollment.db.session import SessionLocal, engine
from enrollment.models import Base
from enrollment.schemas.user import UserCreate
from enrollment.services.storage import DatabaseGateway

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_USERNAME = "operator"


def seed(session: Session, *, password: str) -> None:
    """Create the demo operator unless it already exists."""

    gateway = DatabaseGateway(session)
    if gateway.get_user_by_username(DEMO_USERNAME) is not None:
        logger.info("User %s already exists", DEMO_USERNAME)
        return
    user = gateway.create_user(UserCreate(username=DEMO_USERNAME, password=password))
    logger.info("Added user %s (id=%s)", user.username, user.id)


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed(session, password=os.environ.get("DEMO_OPERATOR_PASSWORD", "changeme"))


if __name__ == "__main__":
    main()
