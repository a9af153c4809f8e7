from __future__ import annotations

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import Notification
from .repository import NotificationGateway


class MySQLNotificationGateway(NotificationGateway):
    """Writes notifications to the inbox table the dispatcher polls."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def send(self, notification: Notification) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, message, severity, category)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(notification.user_id),
                    notification.title,
                    notification.message,
                    notification.severity.value,
                    notification.category,
                ),
            )
