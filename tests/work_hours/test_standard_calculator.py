from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.attendance.model import Attendance
from src.timekeeping.timekeeping.configurations.model import AttendanceConfiguration
from src.timekeeping.timekeeping.core.enums import AttendanceStatus, DayType, HolidayType, RequestStatus, WorkTimeType
from src.timekeeping.timekeeping.core.exceptions import DataInvariantError
from src.timekeeping.timekeeping.employees.model import Employee
from src.timekeeping.timekeeping.schedules.model import Holiday, Schedule
from src.timekeeping.timekeeping.work_hours.calculator.base import CalculationInput
from src.timekeeping.timekeeping.work_hours.calculator.standard_calculator import StandardWorkHourCalculator
from src.timekeeping.timekeeping.work_hours.model import OVERTIME_FIELDS, REGULAR_FIELDS
from src.timekeeping.timekeeping.work_time.model import WorkTimeRequest

WORK_DATE = date(2025, 1, 6)
EMPLOYEE = Employee(employee_id=1, employee_number="1001", full_name="Ana Cruz", user_id=501, organization_id=10)


def at(hour, minute=0, day=6):
    return datetime(2025, 1, day, hour, minute)


def schedule(start="09:00:00", end="17:00:00", **kw):
    return Schedule(schedule_id=1, employee_id=1, work_date=WORK_DATE, start_time=start, end_time=end, **kw)


def attendance(time_in=None, time_out=None, *statuses):
    return Attendance(
        attendance_id=1, employee_id=1, schedule_id=1, work_date=WORK_DATE,
        time_in=time_in, time_out=time_out, statuses=tuple(statuses),
    )


def approved(request_type, duration, request_id=1, management=False):
    return WorkTimeRequest(
        request_id=request_id,
        employee_id=1,
        work_date=WORK_DATE,
        request_type=request_type,
        status=RequestStatus.APPROVED,
        attendance_id=1,
        duration=duration,
        management_requested=management,
    )


def calculate(att, sched=None, requests=(), config=None):
    data = CalculationInput(
        attendance=att,
        schedule=sched or schedule(),
        employee=EMPLOYEE,
        config=config or AttendanceConfiguration(),
        approved_requests=list(requests),
        batch_id="batch-1",
        processed_by=7,
        processed_at=datetime(2025, 1, 7, 0, 30),
    )
    return StandardWorkHourCalculator().calculate(data)


def test_full_regular_shift():
    record = calculate(attendance(at(9), at(17)))

    assert record.day_type == DayType.REGULAR_DAY
    assert record.regular_day_hours == 8.0
    assert (record.total_regular_hours, record.total_overtime_hours, record.total_hours) == (8.0, 0.0, 8.0)
    assert record.batch_id == "batch-1"
    assert record.created_by == 7


def test_break_minutes_are_deducted():
    record = calculate(attendance(at(9), at(17)), schedule(break_minutes=60))

    assert record.regular_day_hours == 7.0


def test_approved_late_moves_time_in_by_its_duration():
    record = calculate(
        attendance(at(9, 15), at(17), AttendanceStatus.LATE),
        requests=[approved(WorkTimeType.LATE, 10)],
    )

    assert record.time_in == at(9, 10)
    assert record.no_time_in_hours == 0.0
    assert record.tardiness_hours == 0.0
    assert record.regular_day_hours == 7.83


def test_approved_late_time_in_is_shift_start_plus_duration_not_the_punch():
    record = calculate(
        attendance(at(9, 20), at(17), AttendanceStatus.LATE),
        requests=[approved(WorkTimeType.LATE, 15)],
    )

    assert record.time_in == at(9, 15)


def test_unapproved_late_keeps_punch_and_records_tardiness():
    record = calculate(attendance(at(9, 15), at(17), AttendanceStatus.LATE))

    assert record.time_in == at(9, 15)
    assert record.tardiness_hours == 0.25
    assert record.regular_day_hours == 7.75


def test_unapproved_overtime_is_clamped_to_shift_end():
    record = calculate(attendance(at(9), at(18, 30), AttendanceStatus.OVERTIME))

    assert record.time_out == at(17)
    assert record.over_time_out is None
    assert record.total_overtime_hours == 0.0


def test_approved_overtime_extends_over_time_out():
    record = calculate(
        attendance(at(9), at(18, 30), AttendanceStatus.OVERTIME),
        requests=[approved(WorkTimeType.OVERTIME, 60)],
    )

    assert record.time_out == at(17)
    assert record.over_time_out == at(18)
    assert record.overtime_regular_day_hours == 1.0
    assert record.total_hours == 9.0


def test_latest_approval_of_a_type_wins():
    record = calculate(
        attendance(at(9), at(19), AttendanceStatus.OVERTIME),
        requests=[approved(WorkTimeType.OVERTIME, 30, request_id=1), approved(WorkTimeType.OVERTIME, 90, request_id=2)],
    )

    assert record.over_time_out == at(18, 30)


def test_approved_under_time_sets_time_out_from_shift_end():
    record = calculate(
        attendance(at(9), at(16), AttendanceStatus.UNDER_TIME),
        requests=[approved(WorkTimeType.UNDER_TIME, 30)],
    )

    assert record.time_out == at(16, 30)
    assert record.undertime_hours == 0.0
    assert record.regular_day_hours == 7.5


def test_unapproved_under_time_records_undertime_hours():
    record = calculate(attendance(at(9), at(16, 30), AttendanceStatus.UNDER_TIME))

    assert record.time_out == at(16, 30)
    assert record.undertime_hours == 0.5


def test_missing_time_in_applies_the_deduction():
    record = calculate(attendance(None, at(17), AttendanceStatus.NO_CHECKED_IN))

    assert record.time_in is None
    assert record.no_time_in_hours == 1.0
    assert record.regular_day_hours == 7.0


def test_missing_time_in_without_deduction():
    config = AttendanceConfiguration(no_time_in_deduction=False)

    record = calculate(attendance(None, at(17)), config=config)

    assert record.no_time_in_hours == 0.0
    assert record.regular_day_hours == 8.0


def test_missing_time_out_applies_the_deduction():
    record = calculate(attendance(at(9), None, AttendanceStatus.NO_CHECKED_OUT))

    assert record.time_out is None
    assert record.no_time_out_hours == 1.0
    assert record.regular_day_hours == 7.0


def test_early_punch_is_clamped_when_early_time_not_allowed():
    record = calculate(
        attendance(at(8), at(17)),
        requests=[approved(WorkTimeType.EARLY, 60, management=True)],
    )

    assert record.time_in == at(9)
    assert record.regular_day_hours == 8.0


def test_early_time_needs_an_approved_management_request():
    config = AttendanceConfiguration(allow_early_time=True)

    employee_request = calculate(attendance(at(8), at(17)), requests=[approved(WorkTimeType.EARLY, 30)], config=config)
    manager_request = calculate(
        attendance(at(8), at(17)), requests=[approved(WorkTimeType.EARLY, 30, management=True)], config=config
    )

    assert employee_request.time_in == at(9)
    assert manager_request.time_in == at(8, 30)
    assert manager_request.regular_day_hours == 8.5


def test_absent_records_only_absent_hours():
    record = calculate(attendance(None, None, AttendanceStatus.ABSENT), schedule(break_minutes=60))

    assert record.absent_hours == 7.0
    assert record.total_hours == 0.0
    assert record.no_time_in_hours == 0.0


def test_night_differential_counts_hours_after_ten_pm():
    record = calculate(attendance(at(20), at(23)), schedule("20:00:00", "23:00:00"))

    assert record.night_differential_hours == 1.0


def test_overnight_shift_is_all_night_differential():
    record = calculate(attendance(at(22), at(6, day=7)), schedule("22:00:00", "06:00:00"))

    assert record.regular_day_hours == 8.0
    assert record.night_differential_hours == 8.0


def test_overtime_night_differential_is_part_of_night_differential():
    record = calculate(
        attendance(at(18), at(23, 30), AttendanceStatus.OVERTIME),
        schedule("18:00:00", "22:00:00"),
        requests=[approved(WorkTimeType.OVERTIME, 90)],
    )

    assert record.over_time_out == at(23, 30)
    assert record.overtime_regular_day_hours == 1.5
    assert record.night_differential_hours == 1.5
    assert record.overtime_night_differential_hours == 1.5


@pytest.mark.parametrize(
    "rest_day, holiday_type, day_type, regular_field, overtime_field",
    [
        (False, None, DayType.REGULAR_DAY, "regular_day_hours", "overtime_regular_day_hours"),
        (True, None, DayType.REST_DAY, "rest_day_hours", "overtime_rest_day_hours"),
        (False, HolidayType.SPECIAL_NON_WORKING, DayType.SPECIAL_HOLIDAY, "special_holiday_hours", "overtime_special_holiday_hours"),
        (True, HolidayType.SPECIAL_WORKING, DayType.SPECIAL_HOLIDAY_REST_DAY, "special_holiday_hours", "overtime_special_holiday_hours"),
        (False, HolidayType.REGULAR, DayType.REGULAR_HOLIDAY, "regular_holiday_hours", "overtime_regular_holiday_hours"),
        (True, HolidayType.REGULAR, DayType.REGULAR_HOLIDAY_REST_DAY, "regular_holiday_hours", "overtime_regular_holiday_hours"),
    ],
)
def test_hours_land_in_exactly_one_category(rest_day, holiday_type, day_type, regular_field, overtime_field):
    holiday = Holiday(holiday_id=1, name="Holiday", holiday_type=holiday_type) if holiday_type else None

    record = calculate(
        attendance(at(9), at(18), AttendanceStatus.OVERTIME),
        schedule(rest_day=rest_day, holiday=holiday),
        requests=[approved(WorkTimeType.OVERTIME, 60)],
    )

    assert record.day_type == day_type
    assert getattr(record, regular_field) == 8.0
    assert getattr(record, overtime_field) == 1.0
    assert sum(getattr(record, f) for f in REGULAR_FIELDS) == 8.0
    assert sum(getattr(record, f) for f in OVERTIME_FIELDS) == 1.0
    record.verify_totals()


def test_unparseable_shift_time_raises():
    with pytest.raises(DataInvariantError):
        calculate(attendance(at(9), at(17)), schedule(start="nine o'clock"))


def test_calculation_is_deterministic():
    att = attendance(at(9, 15), at(18, 40), AttendanceStatus.LATE, AttendanceStatus.OVERTIME)
    requests = [approved(WorkTimeType.LATE, 10, 1), approved(WorkTimeType.OVERTIME, 60, 2)]

    first = calculate(att, requests=requests)
    second = calculate(replace(att), requests=list(requests))

    assert first == second
    first.verify_totals()
