from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence, Tuple

from ...attendance.model import Attendance
from ...common.datetime_utils import hours_between, night_overlap_hours, round_hours
from ...configurations.model import AttendanceConfiguration
from ...core.enums import AttendanceStatus, RequestStatus, WorkTimeType
from ...schedules.service import classify_day, schedule_window
from ...work_time.model import WorkTimeRequest
from ..model import CATEGORY_FIELDS, FinalWorkHour
from .base import CalculationInput, WorkHourCalculator


def find_approved(
    requests: Sequence[WorkTimeRequest], request_type: WorkTimeType, *, management_only: bool = False
) -> Optional[WorkTimeRequest]:
    """Latest approved request of a type that carries a duration."""
    matches = [
        r
        for r in requests
        if r.request_type == request_type
        and r.status == RequestStatus.APPROVED
        and r.duration is not None
        and (r.management_requested or not management_only)
    ]
    return max(matches, key=lambda r: r.request_id or 0) if matches else None


class StandardWorkHourCalculator(WorkHourCalculator):
    """Effective times from punches + approvals, elapsed hours into one day-type bucket."""

    def calculate(self, data: CalculationInput) -> FinalWorkHour:
        attendance = data.attendance
        schedule = data.schedule
        shift_start, shift_end = schedule_window(schedule)
        day_type = classify_day(schedule)
        break_hours = max(schedule.break_minutes, 0) / 60

        base = dict(
            attendance_id=int(attendance.attendance_id),
            employee_id=attendance.employee_id,
            work_date=attendance.work_date,
            day_type=day_type,
            cutoff_id=schedule.cutoff_id,
            organization_id=data.employee.organization_id,
            branch_id=data.employee.branch_id,
            department_id=data.employee.department_id,
            user_id=data.employee.user_id,
            batch_id=data.batch_id,
            processed_by=data.processed_by,
            processed_at=data.processed_at,
            created_by=data.processed_by,
        )

        if attendance.has_status(AttendanceStatus.ABSENT):
            absent = round_hours(max(hours_between(shift_start, shift_end) - break_hours, 0.0))
            return FinalWorkHour(absent_hours=absent, **base).with_derived_totals()

        approvals = data.approved_requests
        time_in, no_time_in_hours = self._derive_time_in(attendance, shift_start, data.config, approvals)
        time_out, over_time_out, no_time_out_hours = self._derive_time_out(
            attendance, shift_end, data.config, approvals
        )

        # Missing punches fall back to the shift edge moved in by the deduction.
        effective_in = time_in or shift_start + timedelta(hours=no_time_in_hours)
        effective_out = time_out or shift_end - timedelta(hours=no_time_out_hours)

        regular = round_hours(max(hours_between(effective_in, effective_out) - break_hours, 0.0))
        overtime = hours_between(effective_out, over_time_out)

        night_end = max(effective_out, over_time_out) if over_time_out else effective_out
        night = night_overlap_hours(effective_in, night_end)
        overtime_night = night_overlap_hours(effective_out, over_time_out)

        tardiness = 0.0
        if (
            attendance.has_status(AttendanceStatus.LATE)
            and time_in is not None
            and find_approved(approvals, WorkTimeType.LATE) is None
        ):
            tardiness = hours_between(shift_start, time_in)

        undertime = 0.0
        if (
            attendance.has_status(AttendanceStatus.UNDER_TIME)
            and time_out is not None
            and find_approved(approvals, WorkTimeType.UNDER_TIME) is None
        ):
            undertime = hours_between(time_out, shift_end)

        regular_field, overtime_field = CATEGORY_FIELDS[day_type]
        record = FinalWorkHour(
            time_in=time_in,
            time_out=time_out,
            over_time_out=over_time_out,
            no_time_in_hours=no_time_in_hours,
            no_time_out_hours=no_time_out_hours,
            tardiness_hours=tardiness,
            undertime_hours=undertime,
            night_differential_hours=night,
            overtime_night_differential_hours=overtime_night,
            **{regular_field: regular, overtime_field: overtime},
            **base,
        )
        return record.with_derived_totals()

    def _derive_time_in(
        self,
        attendance: Attendance,
        shift_start: datetime,
        config: AttendanceConfiguration,
        approvals: Sequence[WorkTimeRequest],
    ) -> Tuple[Optional[datetime], float]:
        punched = attendance.time_in
        if punched is None:
            minutes = config.no_time_in_deduction_minutes if config.no_time_in_deduction else 0
            return None, round_hours(minutes / 60)

        if punched < shift_start:
            if config.allow_early_time:
                early = find_approved(approvals, WorkTimeType.EARLY, management_only=True)
                if early:
                    return shift_start - timedelta(minutes=early.duration), 0.0
            return shift_start, 0.0

        if punched > shift_start:
            late = find_approved(approvals, WorkTimeType.LATE)
            if late:
                return shift_start + timedelta(minutes=late.duration), 0.0
        return punched, 0.0

    def _derive_time_out(
        self,
        attendance: Attendance,
        shift_end: datetime,
        config: AttendanceConfiguration,
        approvals: Sequence[WorkTimeRequest],
    ) -> Tuple[Optional[datetime], Optional[datetime], float]:
        punched = attendance.time_out
        if punched is None:
            minutes = config.no_time_out_deduction_minutes if config.no_time_out_deduction else 0
            return None, None, round_hours(minutes / 60)

        if punched > shift_end:
            overtime = find_approved(approvals, WorkTimeType.OVERTIME)
            if overtime:
                return shift_end, shift_end + timedelta(minutes=overtime.duration), 0.0
            return shift_end, None, 0.0

        if punched < shift_end:
            under_time = find_approved(approvals, WorkTimeType.UNDER_TIME)
            if under_time:
                return shift_end - timedelta(minutes=under_time.duration), None, 0.0
        return punched, None, 0.0
