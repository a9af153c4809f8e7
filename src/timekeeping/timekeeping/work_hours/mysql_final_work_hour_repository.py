from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Optional

from ..core.enums import DayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_float, db_cursor, fetchone
from .model import FinalWorkHour
from .repository import FinalWorkHourRepository

_HOUR_FIELDS = tuple(f.name for f in fields(FinalWorkHour) if f.type == "float")
_KEEP_ON_OVERWRITE = {"attendance_id", "created_by", "is_approved", "approved_by", "approved_at"}
_COLUMNS = tuple(f.name for f in fields(FinalWorkHour) if f.name != "final_work_hour_id")
_UPDATE_COLUMNS = tuple(c for c in _COLUMNS if c not in _KEEP_ON_OVERWRITE)

_UPSERT = (
    f"INSERT INTO final_work_hours({', '.join(_COLUMNS)}) "
    f"VALUES({', '.join(['%s'] * len(_COLUMNS))}) "
    f"ON DUPLICATE KEY UPDATE {', '.join(f'{c}=VALUES({c})' for c in _UPDATE_COLUMNS)}"
)


def _db_value(value: Any) -> Any:
    if isinstance(value, DayType):
        return value.value
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def _to_record(r: Dict[str, Any]) -> FinalWorkHour:
    values: Dict[str, Any] = {c: r.get(c) for c in _COLUMNS}
    for name in _HOUR_FIELDS:
        values[name] = as_float(values[name])
    values["day_type"] = DayType(values["day_type"])
    values["is_approved"] = as_bool(values["is_approved"])
    values["is_processed"] = as_bool(values["is_processed"])
    record = FinalWorkHour(final_work_hour_id=int(r["id"]), **values)
    # Rows written by older jobs may carry zero totals; derive them on read.
    if record.total_hours == 0:
        record = record.with_derived_totals()
    return record


class MySQLFinalWorkHourRepository(FinalWorkHourRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_attendance(self, attendance_id: int) -> Optional[FinalWorkHour]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id, {', '.join(_COLUMNS)} FROM final_work_hours WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: FinalWorkHour) -> FinalWorkHour:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT, tuple(_db_value(getattr(record, c)) for c in _COLUMNS))
            cur.execute(
                f"SELECT id, {', '.join(_COLUMNS)} FROM final_work_hours WHERE attendance_id=%s",
                (record.attendance_id,),
            )
            return _to_record(fetchone(cur))
