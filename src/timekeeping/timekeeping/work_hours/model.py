from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import round_hours
from ..core.enums import DayType
from ..core.exceptions import DataInvariantError

REGULAR_FIELDS = ("regular_day_hours", "rest_day_hours", "special_holiday_hours", "regular_holiday_hours")
OVERTIME_FIELDS = (
    "overtime_regular_day_hours",
    "overtime_rest_day_hours",
    "overtime_special_holiday_hours",
    "overtime_regular_holiday_hours",
)

# Day type -> (regular field, overtime field); rest-day holidays land in the holiday pair.
CATEGORY_FIELDS = {
    DayType.REGULAR_DAY: ("regular_day_hours", "overtime_regular_day_hours"),
    DayType.REST_DAY: ("rest_day_hours", "overtime_rest_day_hours"),
    DayType.SPECIAL_HOLIDAY: ("special_holiday_hours", "overtime_special_holiday_hours"),
    DayType.SPECIAL_HOLIDAY_REST_DAY: ("special_holiday_hours", "overtime_special_holiday_hours"),
    DayType.REGULAR_HOLIDAY: ("regular_holiday_hours", "overtime_regular_holiday_hours"),
    DayType.REGULAR_HOLIDAY_REST_DAY: ("regular_holiday_hours", "overtime_regular_holiday_hours"),
}


@dataclass(frozen=True)
class FinalWorkHour:
    """Payroll-ready hour breakdown of one attendance (one row per attendance)."""

    attendance_id: int
    employee_id: int
    work_date: date
    day_type: DayType
    cutoff_id: Optional[int] = None
    organization_id: Optional[int] = None
    branch_id: Optional[int] = None
    department_id: Optional[int] = None
    user_id: Optional[int] = None

    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    over_time_out: Optional[datetime] = None

    no_time_in_hours: float = 0.0
    no_time_out_hours: float = 0.0
    absent_hours: float = 0.0
    tardiness_hours: float = 0.0
    undertime_hours: float = 0.0

    regular_day_hours: float = 0.0
    rest_day_hours: float = 0.0
    special_holiday_hours: float = 0.0
    regular_holiday_hours: float = 0.0
    overtime_regular_day_hours: float = 0.0
    overtime_rest_day_hours: float = 0.0
    overtime_special_holiday_hours: float = 0.0
    overtime_regular_holiday_hours: float = 0.0
    night_differential_hours: float = 0.0
    overtime_night_differential_hours: float = 0.0

    total_regular_hours: float = 0.0
    total_overtime_hours: float = 0.0
    total_hours: float = 0.0

    batch_id: Optional[str] = None
    is_approved: bool = False
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    is_processed: bool = True
    processed_by: Optional[int] = None
    processed_at: Optional[datetime] = None

    final_work_hour_id: Optional[int] = None
    created_by: Optional[int] = None

    def derived_totals(self) -> Tuple[float, float, float]:
        regular = round_hours(sum(getattr(self, f) for f in REGULAR_FIELDS))
        overtime = round_hours(sum(getattr(self, f) for f in OVERTIME_FIELDS))
        return regular, overtime, round_hours(regular + overtime)

    def with_derived_totals(self) -> "FinalWorkHour":
        regular, overtime, total = self.derived_totals()
        return replace(self, total_regular_hours=regular, total_overtime_hours=overtime, total_hours=total)

    def verify_totals(self) -> None:
        expected = self.derived_totals()
        actual = (self.total_regular_hours, self.total_overtime_hours, self.total_hours)
        if tuple(round_hours(v) for v in actual) != expected:
            raise DataInvariantError(
                f"Totals of attendance {self.attendance_id} are inconsistent: "
                f"stored {actual}, categories give {expected}"
            )
