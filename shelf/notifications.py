# shelf/notifications.py
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

from .config import settings
from .utils.log import get_logger


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class UndoAction:
    """Single-shot action attached to a notification.

    It can be invoked once, and only while its notification is alive.
    """

    def __init__(self, label: str, callback: Callable[[], Awaitable[Any]],
                 expires_at: float, clock: Callable[[], float]):
        self.label = label
        self.callback = callback
        self.expires_at = expires_at
        self.clock = clock
        self.used = False

    @property
    def available(self) -> bool:
        return not self.used and self.clock() < self.expires_at

    def expire(self) -> None:
        self.expires_at = min(self.expires_at, self.clock())

    async def __call__(self) -> Optional[Any]:
        """Run the callback, or return None when the window has closed"""
        if not self.available:
            return None
        self.used = True
        return await self.callback()


@dataclass
class Notification:
    id: str
    message: str
    level: NotificationLevel
    created_at: float
    expires_at: float
    action: Optional[UndoAction] = None

    def is_alive(self, now: float) -> bool:
        return now < self.expires_at


class Notifier:
    """Transient user notifications that expire after a fixed lifetime."""

    def __init__(self, ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.ttl = settings.notification_ttl if ttl is None else ttl
        self.clock = clock
        self._notifications: List[Notification] = []
        self._listeners: List[Callable[[Notification], None]] = []
        self.logger = get_logger(self.__class__.__name__)

    def subscribe(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def show(self, message: str, level: NotificationLevel = NotificationLevel.INFO,
             action_label: Optional[str] = None,
             action: Optional[Callable[[], Awaitable[Any]]] = None) -> Notification:
        now = self.clock()
        expires_at = now + self.ttl
        undo = UndoAction(action_label or "Undo", action, expires_at, self.clock) if action else None
        notification = Notification(
            id=uuid.uuid4().hex[:7],
            message=message,
            level=NotificationLevel(level),
            created_at=now,
            expires_at=expires_at,
            action=undo,
        )
        self._notifications.append(notification)

        if notification.level is NotificationLevel.ERROR:
            self.logger.error(message)
        elif notification.level is NotificationLevel.WARNING:
            self.logger.warning(message)
        else:
            self.logger.info(message)

        for listener in self._listeners:
            listener(notification)
        return notification

    def success(self, message: str, **kwargs) -> Notification:
        return self.show(message, NotificationLevel.SUCCESS, **kwargs)

    def error(self, message: str, **kwargs) -> Notification:
        return self.show(message, NotificationLevel.ERROR, **kwargs)

    def warning(self, message: str, **kwargs) -> Notification:
        return self.show(message, NotificationLevel.WARNING, **kwargs)

    def active(self) -> List[Notification]:
        """Notifications still on screen; expired ones are dropped"""
        now = self.clock()
        self._notifications = [n for n in self._notifications if n.is_alive(now)]
        return list(self._notifications)

    def dismiss(self, notification_id: str) -> None:
        for notification in self._notifications:
            if notification.id == notification_id:
                notification.expires_at = self.clock()
                if notification.action:
                    notification.action.expire()
        self._notifications = [n for n in self._notifications if n.id != notification_id]
