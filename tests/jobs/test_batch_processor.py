from __future__ import annotations

import pytest

from src.timekeeping.timekeeping.attendance.model import Attendance
from src.timekeeping.timekeeping.core.exceptions import BatchFailedError
from src.timekeeping.timekeeping.jobs.model import WorkHourJob
from src.timekeeping.timekeeping.jobs.processor import WorkHourBatchProcessor
from tests.fakes import WORK_DATE, at, build_world


def world_with(total, broken):
    """`total` attendances, the first `broken` of them on an unparseable schedule."""
    w = build_world()
    ids = []
    for n in range(1, total + 1):
        w.add_employee(employee_id=n, number=str(1000 + n), user_id=500 + n)
        w.add_schedule(schedule_id=n, employee_id=n, start="bad" if n <= broken else "09:00:00")
        ids.append(
            w.attendance.create(
                Attendance(attendance_id=None, employee_id=n, schedule_id=n, work_date=WORK_DATE, time_in=at(9), time_out=at(17))
            )
        )
    return w, tuple(ids)


def job(ids):
    return WorkHourJob(batch_id="batch-1", attendance_ids=ids, processed_by=7)


def test_batch_tolerates_a_minority_of_failures():
    w, ids = world_with(10, broken=4)

    result = WorkHourBatchProcessor(w.container.work_hour_service).process(job(ids))

    assert (result.total, result.processed, result.failed) == (10, 6, 4)
    assert sorted(a for a, _ in result.failures) == list(ids[:4])
    assert sorted(w.final_work_hours.items) == list(ids[4:])
    assert all(r.regular_day_hours == 8.0 for r in w.final_work_hours.items.values())


def test_exactly_half_failing_still_succeeds():
    w, ids = world_with(10, broken=5)

    result = WorkHourBatchProcessor(w.container.work_hour_service).process(job(ids))

    assert result.failure_ratio == 0.5


def test_batch_fails_when_most_items_fail():
    w, ids = world_with(10, broken=6)

    with pytest.raises(BatchFailedError) as excinfo:
        WorkHourBatchProcessor(w.container.work_hour_service).process(job(ids))

    assert excinfo.value.result.failed == 6
    assert len(w.final_work_hours.items) == 4


def test_parallel_workers_compute_every_item():
    w, ids = world_with(8, broken=0)

    result = WorkHourBatchProcessor(w.container.work_hour_service, max_workers=4).process(job(ids))

    assert result.processed == 8
    assert len(w.final_work_hours.items) == 8
