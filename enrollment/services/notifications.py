"""Best-effort email notifications for submitted applications.

Two messages go out per stored application: a full summary to the operator
mailbox and a confirmation letter to the applicant. Delivery never affects the
submission result; failures are logged and counted in
``shareholder_notifications_total``.
"""
from __future__ import annotations

import enum
import json
import logging
from collections.abc import Callable, Iterable
from typing import Protocol

import httpx
from kafka import KafkaConsumer, KafkaProducer
from pydantic import BaseModel, Field, ValidationError

from enrollment.core.config import Settings, get_settings
from enrollment.core.masking import mask_ssn
from enrollment.obs import (
    NOTIFICATIONS_COUNTER,
    kafka_trace_headers,
    span_from_traceparent,
    traceparent_from_kafka_headers,
)
from enrollment.schemas.application import ShareholderApplicationRead

logger = logging.getLogger(__name__)


class NotificationError(RuntimeError):
    """Raised when a notification cannot be handed to its transport."""


class NotificationKind(str, enum.Enum):
    OPERATOR = "operator"
    APPLICANT = "applicant"


class NotificationMessage(BaseModel):
    """A single outbound email, serializable for the notification topic."""

    kind: NotificationKind
    application_id: int
    recipient: str
    subject: str
    body: str
    fields: dict[str, str] = Field(default_factory=dict)


def _format_amount(application: ShareholderApplicationRead) -> str:
    return f"${application.investment_amount:,.2f}"


def _full_name(application: ShareholderApplicationRead) -> str:
    return f"{application.first_name} {application.last_name}"


def render_application_summary(application: ShareholderApplicationRead) -> str:
    """Plain-text summary of an application for the operator mailbox."""

    lines = [
        "NEW SHAREHOLDER APPLICATION RECEIVED",
        "",
        "Application Details:",
        f"- ID: {application.id}",
        f"- Submitted: {application.submitted_at:%Y-%m-%d %H:%M:%S}",
        f"- Status: {application.status.value}",
        "",
        "Personal Information:",
        f"- Name: {_full_name(application)}",
        f"- Date of Birth: {application.date_of_birth.isoformat()}",
        f"- SSN: {mask_ssn(application.ssn)}",
        "",
        "Contact Information:",
        f"- Address: {application.street_address}, {application.city}, "
        f"{application.state.value} {application.zip_code}",
        f"- Phone: {application.phone_number}",
        f"- Email: {application.email_address}",
        "",
        "Investment Details:",
        f"- Amount: {_format_amount(application)}",
        f"- Share Class: {application.share_class.value}",
        f"- Payment Method: {application.payment_method.value}",
    ]
    if application.expected_income is not None:
        lines.append(f"- Expected Income: {application.expected_income.value}")
    lines += [
        "",
        "Experience:",
        f"- Industry Experience: {application.industry_experience.value}",
    ]
    if application.business_background:
        tags = ", ".join(tag.value for tag in application.business_background)
        lines.append(f"- Business Background: {tags}")
    lines += [
        "",
        "Investment Profile:",
        f"- Objective: {application.investment_objective.value}",
        f"- Risk Tolerance: {application.risk_tolerance.value}",
        f"- Time Horizon: {application.time_horizon.value}",
        "",
        "Compliance:",
        f"- Electronic Signature: {application.electronic_signature}",
        f"- Acknowledgments: {', '.join(tag.value for tag in application.acknowledgments)}",
        "",
        "Please review this application and contact the applicant within 2-3 business days.",
    ]
    return "\n".join(lines)


def build_operator_message(application: ShareholderApplicationRead, settings: Settings) -> NotificationMessage:
    return NotificationMessage(
        kind=NotificationKind.OPERATOR,
        application_id=application.id,
        recipient=settings.operator_email,
        subject=f"New Shareholder Application - {_full_name(application)}",
        body=render_application_summary(application),
        fields={
            "Applicant_Name": _full_name(application),
            "Investment_Amount": _format_amount(application),
            "Applicant_Email": application.email_address,
            "Application_ID": str(application.id),
        },
    )


def build_applicant_message(application: ShareholderApplicationRead, settings: Settings) -> NotificationMessage:
    company = settings.company_name
    body = f"""Dear {_full_name(application)},

Thank you for your interest in becoming a shareholder with {company}. We have successfully received your membership enrollment application.

Application Summary:
- Application ID: {application.id}
- Investment Amount: {_format_amount(application)}
- Share Class: {application.share_class.value}

What happens next?
- Our team will review your application within 2-3 business days
- We may contact you for additional documentation or clarification
- You will receive notification of our decision via email
- If approved, we'll guide you through the investment process

Best regards,
{company}
Shareholder Relations Team"""
    return NotificationMessage(
        kind=NotificationKind.APPLICANT,
        application_id=application.id,
        recipient=application.email_address,
        subject=f"Application Received - {company} Shareholder Enrollment",
        body=body,
        fields={"Application_ID": str(application.id)},
    )


class NotificationSender(Protocol):
    """Protocol describing an email delivery transport."""

    def send(self, message: NotificationMessage) -> None:
        """Deliver the message or raise :class:`NotificationError`."""


class HTTPNotificationSender:
    """Posts messages to a FormSubmit-style email relay."""

    def __init__(
        self,
        *,
        endpoint: str,
        timeout_seconds: float,
        client: httpx.Client | None = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout_seconds
        self._client = client

    def send(self, message: NotificationMessage) -> None:
        form = {
            "_subject": message.subject,
            "_template": "box",
            "_captcha": "false",
            "message": message.body,
            **message.fields,
        }
        post = self._client.post if self._client is not None else httpx.post
        try:
            response = post(
                f"{self._endpoint}/{message.recipient}",
                data=form,
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise NotificationError(f"Failed to deliver {message.kind.value} notification") from exc


def deliver(messages: Iterable[NotificationMessage], sender: NotificationSender) -> int:
    """Send each message independently and return how many were delivered."""

    delivered = 0
    for message in messages:
        try:
            sender.send(message)
        except Exception as exc:
            # Delivery is best effort; one failed message must not stop the rest.
            NOTIFICATIONS_COUNTER.labels(kind=message.kind.value, outcome="failed").inc()
            logger.warning(
                "notification delivery failed",
                extra={"application_id": message.application_id, "kind": message.kind.value, "error": str(exc)},
            )
            continue
        NOTIFICATIONS_COUNTER.labels(kind=message.kind.value, outcome="delivered").inc()
        delivered += 1
    return delivered


class NotificationPublisher:
    """Publishes notification messages to Kafka for the notification worker."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        producer_factory: Callable[[], KafkaProducer] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._producer_factory = producer_factory or self._default_factory
        self._producer: KafkaProducer | None = None

    def _default_factory(self) -> KafkaProducer:
        return KafkaProducer(
            bootstrap_servers=self._settings.kafka_bootstrap_servers.split(","),
            value_serializer=lambda value: json.dumps(value).encode("utf-8"),
        )

    def publish(self, message: NotificationMessage) -> None:
        try:
            if self._producer is None:
                self._producer = self._producer_factory()
            self._producer.send(
                self._settings.notification_topic,
                value=message.model_dump(mode="json"),
                headers=kafka_trace_headers(),
            )
            self._producer.flush()
        except Exception as exc:
            # Covers producer construction as well as send and flush.
            raise NotificationError("Failed to publish notification") from exc
        logger.debug(
            "published notification",
            extra={"application_id": message.application_id, "kind": message.kind.value},
        )


class NotificationConsumer:
    """Consumes queued notification messages and delivers them."""

    def __init__(
        self,
        *,
        sender: NotificationSender,
        settings: Settings | None = None,
        consumer_factory: Callable[[], KafkaConsumer] | None = None,
    ) -> None:
        self._sender = sender
        self._settings = settings or get_settings()
        self._consumer_factory = consumer_factory or self._default_factory
        self._consumer: KafkaConsumer | None = None

    def _default_factory(self) -> KafkaConsumer:
        return KafkaConsumer(
            self._settings.notification_topic,
            bootstrap_servers=self._settings.kafka_bootstrap_servers.split(","),
            value_deserializer=lambda data: json.loads(data.decode("utf-8")),
            auto_offset_reset="earliest",
            enable_auto_commit=False,
            group_id=self._settings.notification_consumer_group,
        )

    def _get_consumer(self) -> KafkaConsumer:
        if self._consumer is None:
            self._consumer = self._consumer_factory()
        return self._consumer

    def poll_once(self) -> int:
        """Deliver one batch of queued messages; returns the number delivered.

        Offsets are committed whether or not delivery succeeded: notifications
        are never retried.
        """

        consumer = self._get_consumer()
        records = consumer.poll(timeout_ms=1000)
        if not records:
            return 0

        delivered = 0
        for partition_records in records.values():
            for record in partition_records:
                try:
                    message = NotificationMessage.model_validate(record.value)
                except ValidationError:
                    logger.exception("discarding malformed notification record")
                    continue
                traceparent = traceparent_from_kafka_headers(getattr(record, "headers", None))
                with span_from_traceparent(
                    "notification.deliver",
                    traceparent,
                    application_id=message.application_id,
                    kind=message.kind.value,
                ):
                    delivered += deliver([message], self._sender)
        consumer.commit()
        return delivered


class ApplicationNotifier:
    """Fans a stored application out to its operator and applicant notifications."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        sender: NotificationSender | None = None,
        publisher: NotificationPublisher | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._sender = sender or HTTPNotificationSender(
            endpoint=self._settings.notification_endpoint,
            timeout_seconds=self._settings.notification_timeout_seconds,
        )
        self._publisher = publisher

    def _get_publisher(self) -> NotificationPublisher:
        if self._publisher is None:
            self._publisher = NotificationPublisher(settings=self._settings)
        return self._publisher

    def build_messages(self, application: ShareholderApplicationRead) -> list[NotificationMessage]:
        return [
            build_operator_message(application, self._settings),
            build_applicant_message(application, self._settings),
        ]

    def notify_submission(self, application: ShareholderApplicationRead) -> None:
        """Send or enqueue both notifications; never raises ``NotificationError``."""

        messages = self.build_messages(application)
        if self._settings.notification_transport == "kafka":
            for message in messages:
                try:
                    self._get_publisher().publish(message)
                except NotificationError as exc:
                    NOTIFICATIONS_COUNTER.labels(kind=message.kind.value, outcome="failed").inc()
                    logger.warning(
                        "notification publish failed",
                        extra={"application_id": message.application_id, "error": str(exc)},
                    )
            return
        deliver(messages, self._sender)


__all__ = [
    "ApplicationNotifier",
    "HTTPNotificationSender",
    "NotificationConsumer",
    "NotificationError",
    "NotificationKind",
    "NotificationMessage",
    "NotificationPublisher",
    "NotificationSender",
    "build_applicant_message",
    "build_operator_message",
    "deliver",
    "mask_ssn",
    "render_application_summary",
]
