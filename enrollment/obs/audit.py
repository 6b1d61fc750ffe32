"""Request audit trail for the enrollment API.

Each request produces one :class:`AuditLogRecord`. The record is written to the
``audit`` logger and appended to a daily JSON-lines object in S3. Request
bodies pass through :func:`mask_personal_data` first, so SSNs, contact details
and signatures are never stored in clear text.
"""
from __future__ import annotations

import json
import logging
import random
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError  # type: ignore[import-untyped]
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from enrollment.core.config import Settings
from enrollment.core.masking import mask_personal_data


@dataclass(slots=True)
class AuditLogRecord:
    timestamp: str
    request_id: str
    method: str
    path: str
    status: int
    duration_ms: float
    ip_address: str | None
    query: dict[str, Any]
    body: Any

    def to_json(self) -> str:
        payload = asdict(self)
        payload["duration_ms"] = round(self.duration_ms, 2)
        return json.dumps(payload, default=str)


def _decode_body(body: bytes) -> Any:
    if not body:
        return None
    try:
        return mask_personal_data(json.loads(body))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "<binary>"


class S3AuditSink:
    """Appends audit records to ``<prefix>/YYYY/MM/DD/audit.log`` in the audit bucket."""

    def __init__(self, settings: Settings, client_factory: Callable[[], Any] | None = None) -> None:
        self._settings = settings
        self._client_factory = client_factory or self._default_client_factory
        self._client: Any | None = None
        self._bucket_ready = False

    def _default_client_factory(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._settings.aws_region,
            endpoint_url=self._settings.s3_endpoint_url,
        )

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def _ensure_bucket(self, client: Any) -> None:
        if self._bucket_ready:
            return
        bucket = self._settings.audit_log_bucket
        try:
            client.head_bucket(Bucket=bucket)
        except ClientError:
            params: dict[str, Any] = {"Bucket": bucket}
            if self._settings.aws_region != "us-east-1" and self._settings.s3_endpoint_url is None:
                params["CreateBucketConfiguration"] = {"LocationConstraint": self._settings.aws_region}
            client.create_bucket(**params)
        self._bucket_ready = True

    def sampled(self) -> bool:
        rate = self._settings.audit_log_sample_rate
        if rate <= 0:
            return False
        return rate >= 1 or random.random() <= rate

    def object_key(self, now: datetime | None = None) -> str:
        now = now or datetime.now(timezone.utc)
        return f"{self._settings.audit_log_prefix.rstrip('/')}/{now:%Y/%m/%d}/audit.log"

    def write(self, record: AuditLogRecord) -> None:
        client = self._get_client()
        self._ensure_bucket(client)
        bucket = self._settings.audit_log_bucket
        key = self.object_key()
        try:
            existing = client.get_object(Bucket=bucket, Key=key)["Body"].read()
        except client.exceptions.NoSuchKey:  # type: ignore[attr-defined]
            existing = b""
        client.put_object(
            Bucket=bucket,
            Key=key,
            Body=existing + record.to_json().encode("utf-8") + b"\n",
            ContentType="application/json",
        )


class AuditMiddleware(BaseHTTPMiddleware):
    """Records every request with a masked body and tags the response with ``X-Request-ID``."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        settings: Settings,
        logger: logging.Logger | None = None,
        sink: S3AuditSink | None = None,
    ) -> None:
        super().__init__(app)
        self._logger = logger or logging.getLogger("audit")
        self._sink = sink or S3AuditSink(settings)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Any]) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        # Starlette lets the body be read once; replay it for the route handler.
        body = await request.body()
        _replay_body(request, body)

        response = await call_next(request)

        record = AuditLogRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=(time.perf_counter() - started) * 1000,
            ip_address=request.client.host if request.client else None,
            query=mask_personal_data(dict(request.query_params.multi_items())),
            body=_decode_body(body),
        )
        self._logger.info(record.to_json())
        if self._sink.sampled():
            try:
                self._sink.write(record)
            except (BotoCoreError, ClientError) as exc:
                self._logger.error("failed to persist audit record", extra={"error": str(exc)})

        response.headers["X-Request-ID"] = request_id
        return response


def _replay_body(request: Request, body: bytes) -> None:
    consumed = False

    async def receive() -> dict[str, Any]:
        nonlocal consumed
        if consumed:
            return {"type": "http.request", "body": b"", "more_body": False}
        consumed = True
        return {"type": "http.request", "body": body, "more_body": False}

    request._receive = receive  # type: ignore[attr-defined]


__all__ = ["AuditLogRecord", "AuditMiddleware", "S3AuditSink"]
