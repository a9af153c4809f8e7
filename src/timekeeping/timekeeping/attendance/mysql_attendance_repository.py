from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import DayType, PunchDirection, PunchMethod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Attendance, AttendancePunch, format_statuses, parse_statuses
from .repository import AttendancePunchRepository, AttendanceRepository

_COLUMNS = """
    id, employee_id, schedule_id, work_date, time_in, time_out, statuses, day_type,
    is_processed, processed_by, processed_at
"""


def _to_attendance(r: Dict[str, Any]) -> Attendance:
    return Attendance(
        attendance_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        schedule_id=int(r["schedule_id"]),
        work_date=r["work_date"],
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        statuses=parse_statuses(r.get("statuses")),
        day_type=DayType(r.get("day_type") or DayType.REGULAR_DAY.value),
        is_processed=as_bool(r.get("is_processed")),
        processed_by=int(r["processed_by"]) if r.get("processed_by") is not None else None,
        processed_at=r.get("processed_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def get_for_schedule(self, schedule_id: int) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendances WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_attendance(r) if r else None

    def create(self, attendance: Attendance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendances(employee_id, schedule_id, work_date, time_in, time_out, statuses, day_type)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    attendance.employee_id,
                    attendance.schedule_id,
                    attendance.work_date,
                    attendance.time_in,
                    attendance.time_out,
                    format_statuses(attendance.statuses),
                    attendance.day_type.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, attendance: Attendance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendances
                SET time_in=%s, time_out=%s, statuses=%s, day_type=%s
                WHERE id=%s
                """,
                (
                    attendance.time_in,
                    attendance.time_out,
                    format_statuses(attendance.statuses),
                    attendance.day_type.value,
                    attendance.attendance_id,
                ),
            )

    def mark_processed(self, attendance_id: int, *, processed_by: int, processed_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendances SET is_processed=1, processed_by=%s, processed_at=%s WHERE id=%s",
                (processed_by, processed_at, int(attendance_id)),
            )

    def list_unprocessed_for_date(self, work_date: date) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendances WHERE work_date=%s AND is_processed=0 ORDER BY id",
                (work_date,),
            )
            return [_to_attendance(r) for r in fetchall(cur)]

    def list_processed_ids_for_cutoff(self, cutoff_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.id
                FROM attendances a
                JOIN schedules s ON s.id = a.schedule_id
                WHERE s.cutoff_id=%s AND a.is_processed=1
                ORDER BY a.id
                """,
                (int(cutoff_id),),
            )
            return [int(r["id"]) for r in fetchall(cur)]


class MySQLAttendancePunchRepository(AttendancePunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, punch: AttendancePunch) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_punches(attendance_id, punch_time, method, direction, device_id, employee_number, raw_type)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    punch.attendance_id,
                    punch.punch_time,
                    punch.method.value,
                    punch.direction.value,
                    punch.device_id,
                    punch.employee_number,
                    punch.raw_type,
                ),
            )
            return int(cur.lastrowid)

    def list_for_attendance(self, attendance_id: int) -> Sequence[AttendancePunch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, attendance_id, punch_time, method, direction, device_id, employee_number, raw_type
                FROM attendance_punches
                WHERE attendance_id=%s
                ORDER BY punch_time, id
                """,
                (int(attendance_id),),
            )
            return [
                AttendancePunch(
                    punch_id=int(r["id"]),
                    attendance_id=int(r["attendance_id"]),
                    punch_time=r["punch_time"],
                    method=PunchMethod(r["method"]),
                    direction=PunchDirection(r["direction"]),
                    device_id=r.get("device_id"),
                    employee_number=str(r["employee_number"]),
                    raw_type=r.get("raw_type"),
                )
                for r in fetchall(cur)
            ]
