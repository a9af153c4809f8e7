from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from ..core.enums import AttendanceStatus, DayType, PunchDirection, PunchMethod


def parse_statuses(value: Optional[str]) -> Tuple[AttendanceStatus, ...]:
    """Decode the comma separated status column, keeping order and dropping repeats."""
    out: list[AttendanceStatus] = []
    for part in (value or "").split(","):
        part = part.strip()
        if part and AttendanceStatus(part) not in out:
            out.append(AttendanceStatus(part))
    return tuple(out)


def format_statuses(statuses: Iterable[AttendanceStatus]) -> str:
    return ",".join(s.value for s in statuses)


@dataclass(frozen=True)
class Attendance:
    """Daily record for one employee and one schedule.

    `statuses` is an ordered set: `with_status` appends only tags not yet present.
    """

    attendance_id: Optional[int]
    employee_id: int
    schedule_id: int
    work_date: date
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    statuses: Tuple[AttendanceStatus, ...] = ()
    day_type: DayType = DayType.REGULAR_DAY
    is_processed: bool = False
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None

    def has_status(self, status: AttendanceStatus) -> bool:
        return status in self.statuses

    def with_status(self, *statuses: AttendanceStatus) -> "Attendance":
        merged = list(self.statuses)
        for status in statuses:
            if status not in merged:
                merged.append(status)
        return replace(self, statuses=tuple(merged))

    def without_status(self, *statuses: AttendanceStatus) -> "Attendance":
        return replace(self, statuses=tuple(s for s in self.statuses if s not in statuses))


@dataclass(frozen=True)
class AttendancePunch:
    """Append-only audit row for one raw device punch."""

    attendance_id: int
    punch_time: datetime
    direction: PunchDirection
    employee_number: str
    method: PunchMethod = PunchMethod.BIOMETRIC
    device_id: Optional[str] = None
    raw_type: Optional[str] = None
    punch_id: Optional[int] = None
