from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import NotificationSeverity
from .model import Notification
from .repository import NotificationGateway

logger = logging.getLogger(__name__)


class NotificationService:
    """Fire-and-forget notifications: a failed send is logged, never raised."""

    def __init__(self, gateway: NotificationGateway):
        self._gateway = gateway

    def notify(
        self,
        *,
        user_id: Optional[int],
        title: str,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.INFO,
    ) -> bool:
        if user_id is None:
            logger.info("[notify] no user to notify for %r", title)
            return False
        try:
            self._gateway.send(Notification(user_id=int(user_id), title=title, message=message, severity=severity))
            return True
        except Exception as exc:
            logger.warning("[notify] failed to notify user %s (%s): %s", user_id, title, exc)
            return False
