from __future__ import annotations

import asyncio

from enrollment.core.config import Settings
from workers.notification_worker.main import NotificationWorker


class StubConsumer:
    def __init__(self, batches: list[int]) -> None:
        self._batches = list(batches)
        self.polls = 0

    def poll_once(self) -> int:
        self.polls += 1
        return self._batches.pop(0) if self._batches else 0


def test_poll_once_reports_delivered_count() -> None:
    consumer = StubConsumer([2])
    worker = NotificationWorker(consumer, settings=Settings(enable_tracing=False))  # type: ignore[arg-type]

    delivered = asyncio.run(worker.poll_once())

    assert delivered == 2
    assert consumer.polls == 1


def test_poll_once_with_empty_topic() -> None:
    consumer = StubConsumer([])
    worker = NotificationWorker(consumer, settings=Settings(enable_tracing=False))  # type: ignore[arg-type]

    assert asyncio.run(worker.poll_once()) == 0
