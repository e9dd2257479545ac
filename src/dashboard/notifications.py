"""User-facing notifications (toasts) raised by the dashboard."""

import itertools
import logging
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import Field

from src.shared.schemas import BaseSchema


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class Notification(BaseSchema):
    id: int
    level: NotificationLevel
    title: str
    message: str
    retryable: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Collects notifications until the user dismisses them."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)
        self._items: list[Notification] = []
        self._ids = itertools.count(1)

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    def notify(
        self, level: NotificationLevel, title: str, message: str, retryable: bool = False
    ) -> Notification:
        notification = Notification(
            id=next(self._ids), level=level, title=title, message=message, retryable=retryable
        )
        self._items.append(notification)
        self.logger.debug("Notification [%s] %s: %s", level.value, title, message)
        return notification

    def success(self, title: str, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, title, message)

    def info(self, title: str, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, title, message)

    def error(self, title: str, message: str, retryable: bool = False) -> Notification:
        return self.notify(NotificationLevel.ERROR, title, message, retryable=retryable)

    def dismiss(self, notification_id: int) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def clear(self) -> None:
        self._items.clear()
