"""Notification sink port - share/unshare mail queue."""

from typing import Protocol

from sharegrant.application.dto.notification_event import NotificationEvent


class NotificationSink(Protocol):
    """Port for enqueueing notification events (at-least-once)."""

    async def enqueue(self, event: NotificationEvent) -> None: ...
