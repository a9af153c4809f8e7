from dataclasses import asdict
from datetime import date
from decimal import Decimal

from src.timekeeping.timekeeping.core.enums import DayType
from src.timekeeping.timekeeping.work_hours.model import FinalWorkHour
from src.timekeeping.timekeeping.work_hours.mysql_final_work_hour_repository import _to_record


def db_row(**columns):
    """A dict row shaped like what a dictionary cursor returns for final_work_hours."""
    record = FinalWorkHour(attendance_id=3, employee_id=1, work_date=date(2025, 1, 6), day_type=DayType.REGULAR_DAY)
    row = asdict(record)
    row.pop("final_work_hour_id")
    row.update(id=11, day_type="REGULAR_DAY", is_approved=0, is_processed=1)
    row.update(columns)
    return row


def test_zero_totals_are_derived_from_the_category_columns_on_read():
    row = db_row(
        regular_day_hours=Decimal("7.83"),
        rest_day_hours=Decimal("0.50"),
        overtime_regular_day_hours=Decimal("1.25"),
        total_regular_hours=Decimal("0.00"),
        total_overtime_hours=Decimal("0.00"),
        total_hours=Decimal("0.00"),
    )

    record = _to_record(row)

    assert record.final_work_hour_id == 11
    assert record.total_regular_hours == 8.33
    assert record.total_overtime_hours == 1.25
    assert record.total_hours == 9.58
    record.verify_totals()


def test_stored_totals_are_kept_when_present():
    row = db_row(regular_day_hours=Decimal("8.00"), total_regular_hours=Decimal("8.00"), total_hours=Decimal("8.00"))

    record = _to_record(row)

    assert record.total_regular_hours == 8.0
    assert record.total_hours == 8.0


def test_row_flags_and_day_type_are_mapped_to_python_values():
    record = _to_record(db_row(day_type="REST_DAY", is_approved=1, is_processed=0))

    assert record.day_type == DayType.REST_DAY
    assert record.is_approved is True
    assert record.is_processed is False
