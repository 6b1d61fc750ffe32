from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from io import BytesIO
from pathlib import Path
from types import SimpleNamespace
from typing import Any

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_suite.db")
os.environ.setdefault("ENABLE_TRACING", "false")

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from enrollment.api.deps import get_db_session, get_notifier
from enrollment.main import app
from enrollment.models import Base
from enrollment.obs import AuditMiddleware
from enrollment.schemas import ShareholderApplicationRead


class InMemoryS3Client:
    """Simple in-memory S3 stub used by the audit middleware during tests."""

    exceptions = SimpleNamespace(NoSuchKey=type("NoSuchKey", (Exception,), {}))

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, bytes]] = {}

    def head_bucket(self, *, Bucket: str) -> None:
        if Bucket not in self._buckets:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadBucket")

    def create_bucket(self, *, Bucket: str, **_: object) -> None:
        self._buckets.setdefault(Bucket, {})

    def get_object(self, *, Bucket: str, Key: str) -> dict[str, BytesIO]:
        bucket = self._buckets.get(Bucket, {})
        if Key not in bucket:
            raise self.exceptions.NoSuchKey()
        return {"Body": BytesIO(bucket[Key])}

    def put_object(self, *, Bucket: str, Key: str, Body: bytes, **_: object) -> dict[str, str]:
        self._buckets.setdefault(Bucket, {})[Key] = Body
        return {"ETag": "in-memory"}

    @property
    def buckets(self) -> dict[str, dict[str, bytes]]:
        return self._buckets


class RecordingNotifier:
    """Stands in for :class:`ApplicationNotifier` and remembers what it was asked to send."""

    def __init__(self) -> None:
        self.notified: list[ShareholderApplicationRead] = []

    def notify_submission(self, application: ShareholderApplicationRead) -> None:
        self.notified.append(application)


DATABASE_URL = "sqlite+pysqlite:///:memory:"


engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(autouse=True)
def audit_s3_client(monkeypatch: pytest.MonkeyPatch) -> Iterator[InMemoryS3Client]:
    client = InMemoryS3Client()

    def _client_factory(*args: object, **kwargs: object) -> InMemoryS3Client:
        return client

    monkeypatch.setattr("enrollment.obs.audit.boto3.client", _client_factory)
    stack = getattr(app, "middleware_stack", None)
    middleware = getattr(stack, "app", None)
    while middleware is not None and hasattr(middleware, "app"):
        if isinstance(middleware, AuditMiddleware):
            middleware._sink._client = None
            middleware._sink._bucket_ready = False
        middleware = getattr(middleware, "app", None)
    yield client


@pytest.fixture()
def db_session() -> Iterator[Session]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def client(
    db_session: Session,
    notifier: RecordingNotifier,
    audit_s3_client: InMemoryS3Client,
) -> Iterator[TestClient]:
    def override_get_db() -> Iterator[Session]:
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db_session] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db_session, None)
    app.dependency_overrides.pop(get_notifier, None)


@pytest.fixture()
def valid_payload() -> dict[str, Any]:
    return {
        "firstName": "Jane",
        "lastName": "Doe",
        "dateOfBirth": "1985-04-12",
        "ssn": "123-45-6789",
        "streetAddress": "100 Mill Road",
        "city": "Eugene",
        "state": "OR",
        "zipCode": "97401",
        "phoneNumber": "(555) 123-4567",
        "emailAddress": "jane.doe@example.com",
        "investmentAmount": "5000",
        "shareClass": "common",
        "paymentMethod": "wire",
        "expectedIncome": "100k-250k",
        "industryExperience": "moderate",
        "businessBackground": ["forestry", "woodworking"],
        "investmentObjective": "growth",
        "riskTolerance": "moderate",
        "timeHorizon": "long",
        "acknowledgments": ["accredited", "disclosure", "understanding", "tax"],
        "electronicSignature": "Jane Doe",
    }
