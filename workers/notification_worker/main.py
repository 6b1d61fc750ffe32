"""Worker delivering queued application notifications from Kafka."""

from __future__ import annotations

import asyncio
import logging

from enrollment.core.config import Settings, get_settings
from enrollment.core.logging import configure_logging
from enrollment.services.notifications import HTTPNotificationSender, NotificationConsumer
from enrollment.workers.observability import configure_worker, worker_span

logger = logging.getLogger(__name__)


class NotificationWorker:
    """Polls the notification topic and hands messages to the email relay."""

    def __init__(self, consumer: NotificationConsumer | None = None, *, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()
        self._consumer = consumer or NotificationConsumer(
            sender=HTTPNotificationSender(
                endpoint=self._settings.notification_endpoint,
                timeout_seconds=self._settings.notification_timeout_seconds,
            ),
            settings=self._settings,
        )

    async def poll_once(self) -> int:
        with worker_span("notification_worker.poll"):
            delivered = await asyncio.to_thread(self._consumer.poll_once)
        if delivered:
            logger.info("delivered notifications", extra={"count": delivered})
        return delivered

    async def run_forever(self) -> None:
        logger.info("notification worker started")
        while True:
            delivered = await self.poll_once()
            if not delivered:
                await asyncio.sleep(self._settings.notification_worker_poll_interval_seconds)


async def run() -> None:
    configure_worker("notification-worker")
    worker = NotificationWorker()
    await worker.run_forever()


def main() -> None:
    configure_logging()
    try:
        asyncio.run(run())
    except KeyboardInterrupt:  # pragma: no cover - signal handling for CLI
        logger.info("notification worker stopped")


if __name__ == "__main__":
    main()
