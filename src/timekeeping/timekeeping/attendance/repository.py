from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import Attendance, AttendancePunch


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def get_for_schedule(self, schedule_id: int) -> Optional[Attendance]:
        raise NotImplementedError

    def create(self, attendance: Attendance) -> int:
        raise NotImplementedError

    def update(self, attendance: Attendance) -> None:
        """Overwrite times, statuses and day type of an existing attendance."""

        raise NotImplementedError

    def mark_processed(self, attendance_id: int, *, processed_by: int, processed_at: datetime) -> None:
        raise NotImplementedError

    def list_unprocessed_for_date(self, work_date: date) -> Sequence[Attendance]:
        raise NotImplementedError

    def list_processed_ids_for_cutoff(self, cutoff_id: int) -> Sequence[int]:
        raise NotImplementedError


class AttendancePunchRepository(Protocol):
    def add(self, punch: AttendancePunch) -> int:
        raise NotImplementedError

    def list_for_attendance(self, attendance_id: int) -> Sequence[AttendancePunch]:
        raise NotImplementedError
