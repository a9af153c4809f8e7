from __future__ import annotations

from typing import Protocol

from .model import Notification


class NotificationGateway(Protocol):
    def send(self, notification: Notification) -> None:
        raise NotImplementedError
