from __future__ import annotations

from datetime import date

import pytest

from src.timekeeping.timekeeping.biometrics.model import RawPunch
from src.timekeeping.timekeeping.configurations.model import AttendanceConfiguration
from src.timekeeping.timekeeping.core.enums import (
    AttendanceStatus,
    DayType,
    HolidayType,
    JobStatus,
    PunchDirection,
    RequestStatus,
    ScheduleStatus,
    WorkTimeType,
)
from src.timekeeping.timekeeping.core.exceptions import ConflictError
from src.timekeeping.timekeeping.schedules.model import Holiday
from tests.fakes import WORK_DATE, at, build_world


def punch(hour, minute=0, user_id="1001", day=WORK_DATE, type=None):
    return RawPunch(user_id=user_id, timestamp=at(hour, minute, day), type=type)


def ingest(world, *punches):
    return world.container.attendance_service.ingest_attendance_batch("DEV-1", list(punches))


def only_attendance(world):
    (attendance,) = world.attendance.items.values()
    return attendance


def requests_of(world, request_type):
    return [r for r in world.requests.items.values() if r.request_type == request_type]


def test_late_check_in_tags_late_and_raises_request_past_grace(world):
    summary = ingest(world, punch(9, 15))

    attendance = only_attendance(world)
    assert summary.processed == 1
    assert attendance.time_in == at(9, 15)
    assert attendance.statuses == (AttendanceStatus.CHECKED_IN, AttendanceStatus.LATE)
    (late,) = requests_of(world, WorkTimeType.LATE)
    assert late.duration == 10
    assert late.status == RequestStatus.PENDING
    assert late.attendance_id == attendance.attendance_id
    assert "Late check-in" in world.notifications.titles()


def test_check_in_within_grace_is_not_late(world):
    ingest(world, punch(9, 5))

    attendance = only_attendance(world)
    assert attendance.statuses == (AttendanceStatus.CHECKED_IN,)
    assert world.requests.items == {}


def test_late_minutes_round_up_when_configured(world):
    world.configurations.items[10] = AttendanceConfiguration(organization_id=10, round_up_late=True, round_up_late_minutes=15)

    ingest(world, punch(9, 17))

    (late,) = requests_of(world, WorkTimeType.LATE)
    assert late.duration == 15


def test_check_out_without_check_in_flags_no_checked_in(world):
    ingest(world, punch(17, 0))

    attendance = only_attendance(world)
    assert attendance.time_in is None
    assert attendance.time_out == at(17, 0)
    assert AttendanceStatus.NO_CHECKED_IN in attendance.statuses
    assert AttendanceStatus.CHECKED_OUT in attendance.statuses
    (request,) = requests_of(world, WorkTimeType.NO_CHECKED_IN)
    assert request.duration is None


def test_early_check_out_is_under_time(world):
    ingest(world, punch(9, 0), punch(16, 30))

    attendance = only_attendance(world)
    assert AttendanceStatus.UNDER_TIME in attendance.statuses
    (request,) = requests_of(world, WorkTimeType.UNDER_TIME)
    assert request.duration == 30


def test_check_out_past_threshold_is_overtime(world):
    ingest(world, punch(9, 0), punch(17, 45))

    attendance = only_attendance(world)
    assert AttendanceStatus.OVERTIME in attendance.statuses
    (request,) = requests_of(world, WorkTimeType.OVERTIME)
    assert request.duration == 45


def test_check_out_inside_overtime_threshold_raises_nothing(world):
    ingest(world, punch(9, 0), punch(17, 20))

    attendance = only_attendance(world)
    assert attendance.statuses == (AttendanceStatus.CHECKED_IN, AttendanceStatus.CHECKED_OUT)
    assert world.requests.items == {}


def test_last_check_out_wins_and_statuses_do_not_pile_up(world):
    ingest(world, punch(9, 0), punch(16, 30), punch(18, 0))

    attendance = only_attendance(world)
    assert attendance.time_out == at(18, 0)
    assert AttendanceStatus.UNDER_TIME not in attendance.statuses
    assert AttendanceStatus.OVERTIME in attendance.statuses
    assert attendance.statuses.count(AttendanceStatus.CHECKED_OUT) == 1


def test_later_check_out_withdraws_the_request_its_tag_no_longer_shows(world):
    ingest(world, punch(9, 0), punch(16, 30), punch(18, 0))

    (under,) = requests_of(world, WorkTimeType.UNDER_TIME)
    (overtime,) = requests_of(world, WorkTimeType.OVERTIME)
    assert under.status == RequestStatus.REJECTED
    assert overtime.status == RequestStatus.PENDING
    with pytest.raises(ConflictError):
        world.container.work_time_service.respond(
            request_id=under.request_id, approved=True, message="ok", responder_id=9
        )


def test_normal_check_out_after_overtime_withdraws_the_overtime_request(world):
    ingest(world, punch(9, 0), punch(18, 0), punch(17, 10))

    attendance = only_attendance(world)
    assert attendance.time_out == at(17, 10)
    assert AttendanceStatus.OVERTIME not in attendance.statuses
    (overtime,) = requests_of(world, WorkTimeType.OVERTIME)
    assert overtime.status == RequestStatus.REJECTED


def test_second_check_in_is_recorded_but_changes_nothing(world):
    ingest(world, punch(9, 0), punch(9, 30))

    attendance = only_attendance(world)
    assert attendance.time_in == at(9, 0)
    assert len(world.punches.items) == 2
    assert "Already checked in" in world.notifications.titles()


def test_direction_comes_from_shift_midpoint_not_device_flag(world):
    ingest(world, punch(9, 0, type="1"), punch(17, 0, type="0"))

    directions = [p.direction for p in world.punches.items]
    assert directions == [PunchDirection.CHECK_IN, PunchDirection.CHECK_OUT]
    assert [p.raw_type for p in world.punches.items] == ["1", "0"]


def test_every_applied_punch_gets_an_audit_row(world):
    ingest(world, punch(9, 0), punch(12, 0), punch(17, 0))

    attendance = only_attendance(world)
    assert [p.attendance_id for p in world.punches.items] == [attendance.attendance_id] * 3
    assert all(p.device_id == "DEV-1" and p.employee_number == "1001" for p in world.punches.items)


def test_non_numeric_or_unknown_codes_are_skipped(world):
    summary = ingest(world, punch(9, 0, user_id="abc"), punch(9, 0, user_id="9999"), punch(9, 0))

    assert summary.received == 3
    assert summary.skipped == 2
    assert summary.processed == 1
    assert len(world.attendance.items) == 1


def test_punch_without_schedule_notifies_and_is_skipped(world):
    summary = ingest(world, punch(9, 0, day=date(2025, 1, 7)))

    assert summary.skipped == 1
    assert world.attendance.items == {}
    assert world.notifications.titles() == ["No schedule"]


def test_failing_notifier_does_not_abort_ingestion():
    w = build_world(notifications_fail=True)
    w.add_employee()
    w.add_schedule()

    summary = ingest(w, punch(9, 15), punch(17, 0))

    assert summary.processed == 2
    assert summary.failed == 0
    assert only_attendance(w).time_out == at(17, 0)


def test_bad_punch_is_counted_and_the_rest_of_the_batch_continues(world):
    world.add_employee(employee_id=2, number="1002", user_id=502)
    world.add_schedule(schedule_id=2, employee_id=2, start="9am", end="5pm")

    summary = ingest(world, punch(9, 0, user_id="1002"), punch(9, 0))

    assert summary.failed == 1
    assert summary.processed == 1
    assert [a.employee_id for a in world.attendance.items.values()] == [1]


def test_device_buffer_is_cleared_after_a_batch(world):
    ingest(world, punch(9, 0))

    assert world.device_buffer.cleared == ["DEV-1"]


def test_ingest_pending_reads_the_device_buffer(world):
    world.device_buffer.pending["DEV-1"] = [punch(9, 0), punch(17, 0)]

    summary = world.container.attendance_service.ingest_pending("DEV-1")

    assert summary.processed == 2
    assert world.device_buffer.pending == {}


def test_mapping_punches_with_iso_timestamps_are_accepted(world):
    summary = ingest(world, {"userId": 1001, "timestamp": "2025-01-06T09:00:00", "type": 0})

    assert summary.processed == 1
    assert only_attendance(world).time_in == at(9, 0)


def test_offset_timestamps_are_ingested_without_failing(world):
    summary = ingest(world, {"user_id": "1001", "timestamp": "2025-01-06T09:00:00+00:00"})

    assert summary.failed == 0
    assert summary.processed + summary.skipped == 1


def test_rest_day_holiday_punch_is_tagged_and_notified():
    w = build_world()
    w.add_employee()
    w.add_schedule(rest_day=True, holiday=Holiday(holiday_id=1, name="New Year", holiday_type=HolidayType.REGULAR))

    ingest(w, punch(9, 0))

    attendance = only_attendance(w)
    assert attendance.day_type == DayType.REGULAR_HOLIDAY_REST_DAY
    assert AttendanceStatus.REST_DAY in attendance.statuses
    assert AttendanceStatus.HOLIDAY in attendance.statuses
    assert {"Rest day check-in", "Holiday check-in"} <= set(w.notifications.titles())


def test_punch_on_leave_day_warns_the_employee():
    w = build_world()
    w.add_employee()
    w.add_schedule(status=ScheduleStatus.LEAVE)

    ingest(w, punch(9, 0))

    assert "Already on leave" in w.notifications.titles()


def test_after_midnight_punch_belongs_to_overnight_shift():
    w = build_world()
    w.add_employee()
    w.add_schedule(start="22:00:00", end="06:00:00")
    w.add_schedule(schedule_id=2, work_date=date(2025, 1, 7), start="22:00:00", end="06:00:00")

    ingest(w, punch(22, 0), punch(5, 50, day=date(2025, 1, 7)))

    attendance = only_attendance(w)
    assert attendance.schedule_id == 1
    assert attendance.time_in == at(22, 0)
    assert attendance.time_out == at(5, 50, date(2025, 1, 7))


def overnight_world():
    w = build_world()
    w.add_employee()
    w.add_schedule(start="22:00:00", end="06:00:00")
    return w


def test_late_check_out_after_overnight_shift_is_overtime():
    w = overnight_world()

    summary = ingest(w, punch(22, 0), punch(7, 30, day=date(2025, 1, 7)))

    assert summary.processed == 2
    attendance = only_attendance(w)
    assert attendance.schedule_id == 1
    assert attendance.time_out == at(7, 30, date(2025, 1, 7))
    assert AttendanceStatus.OVERTIME in attendance.statuses
    (request,) = requests_of(w, WorkTimeType.OVERTIME)
    assert request.duration == 90
    assert "No schedule" not in w.notifications.titles()


def test_punch_past_the_overnight_allowance_is_not_a_check_out():
    w = overnight_world()

    summary = ingest(w, punch(22, 0), punch(10, 30, day=date(2025, 1, 7)))

    assert summary.skipped == 1
    assert only_attendance(w).time_out is None


def test_punch_nearer_todays_shift_is_its_check_in():
    w = overnight_world()
    w.add_schedule(schedule_id=2, work_date=date(2025, 1, 7), start="09:00:00", end="17:00:00")

    ingest(w, punch(22, 0), punch(6, 45, day=date(2025, 1, 7)), punch(8, 50, day=date(2025, 1, 7)))

    night = w.attendance.get_for_schedule(1)
    day = w.attendance.get_for_schedule(2)
    assert night.time_out == at(6, 45, date(2025, 1, 7))
    assert day.time_in == at(8, 50, date(2025, 1, 7))
    assert day.time_out is None


def test_finalize_day_flags_missing_check_out_and_computes_the_batch(world):
    ingest(world, punch(9, 0))

    result = world.container.attendance_service.finalize_day(WORK_DATE, processed_by=7)

    attendance = only_attendance(world)
    assert AttendanceStatus.NO_CHECKED_OUT in attendance.statuses
    (request,) = requests_of(world, WorkTimeType.NO_CHECKED_OUT)
    assert request.duration is None
    assert "No check-out" in world.notifications.titles()

    assert result.attendance_ids == (attendance.attendance_id,)
    job = world.jobs.get(result.batch_id)
    assert job.status == JobStatus.COMPLETED
    assert attendance.is_processed is True
    record = world.final_work_hours.get_for_attendance(attendance.attendance_id)
    assert record.batch_id == result.batch_id
    assert record.no_time_out_hours == 1.0


def test_finalize_day_with_nothing_to_do_publishes_nothing(world):
    result = world.container.attendance_service.finalize_day(WORK_DATE, processed_by=7)

    assert result.batch_id is None
    assert world.jobs.items == {}
