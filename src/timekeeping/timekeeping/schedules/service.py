from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

from ..common.datetime_utils import midpoint, shift_window
from ..core.constants import DEFAULT_OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES
from ..core.enums import DayType, HolidayType
from ..core.exceptions import DataInvariantError
from .model import Schedule
from .repository import ScheduleRepository


def schedule_window(schedule: Schedule) -> Tuple[datetime, datetime]:
    return shift_window(schedule.work_date, schedule.start_time, schedule.end_time)


def classify_day(schedule: Schedule) -> DayType:
    """Day type from the rest-day flag and the linked holiday, most specific first."""
    holiday_type = schedule.holiday.holiday_type if schedule.holiday else None
    regular_holiday = holiday_type == HolidayType.REGULAR
    special_holiday = holiday_type in (HolidayType.SPECIAL_WORKING, HolidayType.SPECIAL_NON_WORKING)

    if schedule.rest_day and regular_holiday:
        return DayType.REGULAR_HOLIDAY_REST_DAY
    if schedule.rest_day and special_holiday:
        return DayType.SPECIAL_HOLIDAY_REST_DAY
    if schedule.rest_day:
        return DayType.REST_DAY
    if regular_holiday:
        return DayType.REGULAR_HOLIDAY
    if special_holiday:
        return DayType.SPECIAL_HOLIDAY
    return DayType.REGULAR_DAY


class ScheduleLookupService:
    """Use case: find the schedule a punch belongs to."""

    def __init__(
        self,
        schedules: ScheduleRepository,
        *,
        overnight_checkout_allowance: timedelta = timedelta(minutes=DEFAULT_OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES),
    ):
        self._schedules = schedules
        self._allowance = overnight_checkout_allowance

    def for_punch(self, *, employee_id: int, at: datetime) -> Optional[Schedule]:
        today = self._schedules.get_for_employee_and_date(employee_id=employee_id, work_date=at.date())
        # After midnight, a punch may still belong to yesterday's overnight shift.
        previous = self._schedules.get_for_employee_and_date(employee_id=employee_id, work_date=at.date() - timedelta(days=1))
        if previous and self._closes_overnight_shift(previous, today, at):
            return previous
        return today

    def _closes_overnight_shift(self, previous: Schedule, today: Optional[Schedule], at: datetime) -> bool:
        try:
            start, end = schedule_window(previous)
        except DataInvariantError:
            return False
        if end.date() <= previous.work_date or not start <= at <= end + self._allowance:
            return False
        # Past the end, a punch closer to today's shift start is today's check-in.
        if today is None or at <= end:
            return True
        try:
            return at < midpoint(end, schedule_window(today)[0])
        except DataInvariantError:
            return True
