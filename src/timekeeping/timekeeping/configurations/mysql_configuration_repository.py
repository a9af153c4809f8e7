from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceConfiguration
from .repository import AttendanceConfigurationRepository


class MySQLAttendanceConfigurationRepository(AttendanceConfigurationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_organization(self, organization_id: Optional[int]) -> Optional[AttendanceConfiguration]:
        with db_cursor(self._conn_factory) as (_, cur):
            if organization_id is None:
                cur.execute("SELECT * FROM attendance_configurations WHERE organization_id IS NULL LIMIT 1")
            else:
                cur.execute(
                    "SELECT * FROM attendance_configurations WHERE organization_id=%s LIMIT 1",
                    (int(organization_id),),
                )
            r = fetchone(cur)
            if not r:
                return None
            return AttendanceConfiguration.from_mapping(r)
