from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import RawPunch
from .repository import DeviceBufferRepository


class MySQLDeviceBufferRepository(DeviceBufferRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_pending(self, device_id: str) -> Sequence[RawPunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, punch_time, punch_type
                FROM biometric_buffer
                WHERE device_id=%s
                ORDER BY punch_time, id
                """,
                (device_id,),
            )
            return [
                RawPunch(user_id=str(r["user_id"]), timestamp=r["punch_time"], type=r.get("punch_type"))
                for r in fetchall(cur)
            ]

    def clear(self, device_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM biometric_buffer WHERE device_id=%s", (device_id,))
            return int(cur.rowcount or 0)
