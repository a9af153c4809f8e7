from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import NOTIFICATION_CATEGORY
from ..core.enums import NotificationSeverity


@dataclass(frozen=True)
class Notification:
    user_id: int
    title: str
    message: str
    severity: NotificationSeverity = NotificationSeverity.INFO
    category: str = NOTIFICATION_CATEGORY
