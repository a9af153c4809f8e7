from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

from ...common.datetime_utils import minutes_between
from ...core.enums import AttendanceStatus, NotificationSeverity, PunchDirection, WorkTimeType
from .base import Deviation, Notice, PunchContext, PunchDecision, PunchStrategy


_CLEARABLE = (
    (AttendanceStatus.UNDER_TIME, WorkTimeType.UNDER_TIME),
    (AttendanceStatus.OVERTIME, WorkTimeType.OVERTIME),
    (AttendanceStatus.NO_CHECKED_OUT, WorkTimeType.NO_CHECKED_OUT),
)


class CheckOutStrategy(PunchStrategy):
    """The latest check-out punch of the day wins.

    UNDER_TIME/OVERTIME are re-derived from each check-out so repeated
    punches never pile up contradictory tags.
    """

    direction = PunchDirection.CHECK_OUT

    def apply(self, ctx: PunchContext) -> PunchDecision:
        before = ctx.attendance
        config = ctx.config
        attendance = before.without_status(
            AttendanceStatus.UNDER_TIME, AttendanceStatus.OVERTIME, AttendanceStatus.NO_CHECKED_OUT
        )
        deviations = []
        notices = []

        if attendance.time_in is None:
            attendance = attendance.with_status(AttendanceStatus.NO_CHECKED_IN)
            deviations.append(Deviation(WorkTimeType.NO_CHECKED_IN))
            if not before.has_status(AttendanceStatus.NO_CHECKED_IN):
                notices.append(
                    Notice("No check-in", "We have no check-in for your shift today.", NotificationSeverity.WARNING)
                )

        under_before = ctx.shift_end - timedelta(minutes=config.under_time_threshold_minutes)
        overtime_after = ctx.shift_end + timedelta(minutes=config.overtime_threshold_minutes)
        if ctx.punch_time < under_before:
            minutes = config.under_time_request_minutes(minutes_between(ctx.punch_time, ctx.shift_end))
            attendance = attendance.with_status(AttendanceStatus.UNDER_TIME)
            deviations.append(Deviation(WorkTimeType.UNDER_TIME, minutes))
            if not before.has_status(AttendanceStatus.UNDER_TIME):
                notices.append(
                    Notice(
                        "Under time",
                        f"You checked out at {ctx.punch_time:%H:%M}, {minutes} minute(s) before your shift ends.",
                        NotificationSeverity.WARNING,
                    )
                )
        elif ctx.punch_time > overtime_after:
            minutes = config.overtime_request_minutes(minutes_between(ctx.shift_end, ctx.punch_time))
            attendance = attendance.with_status(AttendanceStatus.OVERTIME)
            deviations.append(Deviation(WorkTimeType.OVERTIME, minutes))
            if not before.has_status(AttendanceStatus.OVERTIME):
                notices.append(
                    Notice("Overtime", f"You checked out at {ctx.punch_time:%H:%M}, {minutes} minute(s) after your shift.")
                )

        if before.time_out is None:
            attendance = attendance.with_status(AttendanceStatus.CHECKED_OUT)
        attendance = replace(attendance, time_out=ctx.punch_time)
        cleared = tuple(
            request_type
            for status, request_type in _CLEARABLE
            if before.has_status(status) and not attendance.has_status(status)
        )

        return PunchDecision(
            attendance=attendance,
            direction=self.direction,
            deviations=tuple(deviations),
            notices=tuple(notices),
            cleared=cleared,
        )
