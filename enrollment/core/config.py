"""Configuration management for the shareholder enrollment service."""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NotificationTransport = Literal["background", "kafka"]


class Settings(BaseSettings):
    app_name: str = Field(default="Shareholder Enrollment")
    version: str = Field(default="0.1.0")
    docs_url: str | None = Field(default="/docs")
    redoc_url: str | None = Field(default="/redoc")
    openapi_url: str = Field(default="/openapi.json")

    database_url: str = Field(default="postgresql+psycopg://enrollment:enrollment@db:5432/enrollment")

    aws_region: str = Field(default="us-east-1")
    s3_endpoint_url: str | None = Field(default=None)
    audit_log_bucket: str = Field(default="enrollment-audit-logs")
    audit_log_prefix: str = Field(default="audit/records")
    audit_log_sample_rate: float = Field(default=1.0)

    enable_metrics: bool = Field(default=True)
    enable_tracing: bool = Field(default=True)
    otel_exporter_endpoint: str | None = Field(default=None)

    company_name: str = Field(default="J ECO INVESTMENT LLC")
    operator_email: str = Field(default="shareholders@example.com")
    notification_transport: NotificationTransport = Field(default="background")
    notification_endpoint: str = Field(default="https://formsubmit.co/ajax")
    notification_timeout_seconds: float = Field(default=5.0)

    kafka_bootstrap_servers: str = Field(default="kafka:9092")
    notification_topic: str = Field(default="shareholder-notifications")
    notification_consumer_group: str = Field(default="notification-worker")
    notification_worker_poll_interval_seconds: float = Field(default=1.0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()


__all__ = ["NotificationTransport", "Settings", "get_settings"]
