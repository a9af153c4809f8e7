from __future__ import annotations

from src.timekeeping.timekeeping.biometrics.model import RawPunch
from src.timekeeping.timekeeping.core.enums import AttendanceStatus, JobStatus, RequestStatus, WorkTimeType
from tests.fakes import WORK_DATE, at


def test_late_punch_approval_and_batch_agree(world):
    container = world.container

    summary = container.attendance_service.ingest_attendance_batch(
        "DEV-1",
        [RawPunch(user_id="1001", timestamp=at(9, 15)), RawPunch(user_id="1001", timestamp=at(17, 0))],
    )
    (attendance_id,) = summary.attendance_ids
    attendance = world.attendance.get_by_id(attendance_id)
    assert attendance.statuses == (AttendanceStatus.CHECKED_IN, AttendanceStatus.LATE, AttendanceStatus.CHECKED_OUT)

    (late,) = world.requests.items.values()
    assert (late.request_type, late.duration, late.status) == (WorkTimeType.LATE, 10, RequestStatus.PENDING)

    container.work_time_service.respond(request_id=late.request_id, approved=True, message="traffic", responder_id=9)
    after_approval = world.final_work_hours.get_for_attendance(attendance_id)
    assert after_approval.time_in == at(9, 10)
    assert after_approval.no_time_in_hours == 0.0
    assert after_approval.regular_day_hours == 7.83

    result = container.attendance_service.finalize_day(WORK_DATE, processed_by=9)
    assert world.jobs.get(result.batch_id).status == JobStatus.COMPLETED

    after_batch = world.final_work_hours.get_for_attendance(attendance_id)
    assert after_batch.final_work_hour_id == after_approval.final_work_hour_id
    assert after_batch.time_in == after_approval.time_in
    assert after_batch.regular_day_hours == after_approval.regular_day_hours
    assert after_batch.total_hours == after_approval.total_hours
    assert world.attendance.get_by_id(attendance_id).is_processed is True
