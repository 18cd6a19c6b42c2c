"""Transient, non-blocking notifications (toasts) produced by pipeline operations."""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    code: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["level"] = self.level.value
        return data


class Notifier:
    """Queue of notifications for one interaction; drained by whatever renders them."""

    def __init__(self):
        self._pending: List[Notification] = []

    def success(self, message: str) -> None:
        self._pending.append(Notification(NotificationLevel.SUCCESS, message))

    def error(self, message: str, code: Optional[str] = None) -> None:
        self._pending.append(Notification(NotificationLevel.ERROR, message, code))

    @property
    def pending(self) -> List[Notification]:
        return list(self._pending)

    def drain(self) -> List[Notification]:
        pending, self._pending = self._pending, []
        return pending
