from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from ..core.enums import HolidayType, ScheduleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchone, format_mysql_time
from .model import Holiday, Schedule
from .repository import ScheduleRepository

_SELECT = """
    SELECT s.id, s.employee_id, s.schedule_date, s.start_time, s.end_time, s.break_minutes,
           s.rest_day, s.cutoff_id, s.status,
           h.id AS holiday_id, h.name AS holiday_name, h.holiday_type
    FROM schedules s
    LEFT JOIN holidays h ON h.id = s.holiday_id
"""


def _time_text(value: Any) -> str:
    # Keep raw strings untouched so bad data surfaces when the window is parsed.
    if isinstance(value, str):
        return value
    return format_mysql_time(value) or ""


def _to_schedule(r: Dict[str, Any]) -> Schedule:
    holiday = None
    if r.get("holiday_id") is not None:
        holiday = Holiday(
            holiday_id=int(r["holiday_id"]),
            name=str(r.get("holiday_name") or ""),
            holiday_type=HolidayType(r["holiday_type"]),
        )
    return Schedule(
        schedule_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["schedule_date"],
        start_time=_time_text(r["start_time"]),
        end_time=_time_text(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        rest_day=as_bool(r.get("rest_day")),
        holiday=holiday,
        cutoff_id=int(r["cutoff_id"]) if r.get("cutoff_id") is not None else None,
        status=ScheduleStatus(r.get("status") or ScheduleStatus.ACTIVE.value),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.employee_id=%s AND s.schedule_date=%s", (int(employee_id), work_date))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE s.id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None
