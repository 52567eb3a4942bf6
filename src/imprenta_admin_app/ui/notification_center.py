from __future__ import annotations

import itertools
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from imprenta_client_sdk import ErrorCategory


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    id: int
    level: NotificationLevel
    message: str
    expires_at: float
    category: ErrorCategory | None = None
    details: str | None = None


@dataclass
class NotificationCenter:
    """Dismissible, non-blocking messages that expire on their own."""

    ttl_seconds: float = 5.0
    clock: Callable[[], float] = time.monotonic
    _items: list[Notification] = field(default_factory=list)
    _ids: Any = field(default_factory=lambda: itertools.count(1))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def push(
        self,
        level: NotificationLevel,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: str | None = None,
    ) -> Notification:
        with self._lock:
            item = Notification(
                id=next(self._ids),
                level=level,
                message=message,
                expires_at=self.clock() + self.ttl_seconds,
                category=category,
                details=details,
            )
            self._items.append(item)
            return item

    def success(self, message: str) -> Notification:
        return self.push(NotificationLevel.SUCCESS, message)

    def error(self, message: str, *, category: ErrorCategory | None = None, details: str | None = None) -> Notification:
        return self.push(NotificationLevel.ERROR, message, category=category, details=details)

    def dismiss(self, notification_id: int) -> bool:
        with self._lock:
            before = len(self._items)
            self._items = [item for item in self._items if item.id != notification_id]
            return len(self._items) != before

    def active(self) -> list[Notification]:
        now = self.clock()
        with self._lock:
            self._items = [item for item in self._items if item.expires_at > now]
            return list(self._items)

    def render(self) -> dict[str, Any]:
        items = self.active()
        return {
            "count": len(items),
            "messages": [
                {"id": item.id, "level": item.level.value, "message": item.message} for item in items
            ],
        }

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
