from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

from ...common.datetime_utils import minutes_between
from ...core.enums import AttendanceStatus, NotificationSeverity, PunchDirection, WorkTimeType
from .base import Deviation, Notice, PunchContext, PunchDecision, PunchStrategy


class CheckInStrategy(PunchStrategy):
    direction = PunchDirection.CHECK_IN

    def apply(self, ctx: PunchContext) -> PunchDecision:
        attendance = ctx.attendance
        if attendance.time_in is not None:
            return PunchDecision(
                attendance=attendance,
                direction=self.direction,
                notices=(Notice("Already checked in", f"You already checked in at {attendance.time_in:%H:%M}."),),
                changed=False,
            )

        attendance = replace(attendance, time_in=ctx.punch_time).with_status(AttendanceStatus.CHECKED_IN)

        late_after = ctx.shift_start + timedelta(minutes=ctx.config.grace_period_minutes)
        if ctx.punch_time <= late_after:
            return PunchDecision(attendance=attendance, direction=self.direction)

        minutes_late = ctx.config.late_request_minutes(minutes_between(late_after, ctx.punch_time))
        return PunchDecision(
            attendance=attendance.with_status(AttendanceStatus.LATE),
            direction=self.direction,
            deviations=(Deviation(WorkTimeType.LATE, minutes_late),),
            notices=(
                Notice(
                    "Late check-in",
                    f"You checked in at {ctx.punch_time:%H:%M}, {minutes_late} minute(s) late.",
                    NotificationSeverity.WARNING,
                ),
            ),
        )
