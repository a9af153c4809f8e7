from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..configurations.service import AttendanceConfigurationService
from ..core.events import WorkTimeResponded
from ..core.exceptions import DataInvariantError, NotFoundError
from ..employees.repository import EmployeeRepository
from ..payroll.service import PayrollRecalculationService
from ..schedules.repository import ScheduleRepository
from ..work_time.repository import WorkTimeRequestRepository
from .calculator.base import CalculationInput, WorkHourCalculator
from .calculator.standard_calculator import StandardWorkHourCalculator
from .model import FinalWorkHour
from .repository import FinalWorkHourRepository

logger = logging.getLogger(__name__)


class WorkHourService:
    """Single entry point for computing a FinalWorkHour, shared by batches and approvals."""

    def __init__(
        self,
        final_work_hours: FinalWorkHourRepository,
        attendance: AttendanceRepository,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
        requests: WorkTimeRequestRepository,
        *,
        configurations: AttendanceConfigurationService,
        payroll: PayrollRecalculationService,
        calculator: Optional[WorkHourCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._final_work_hours = final_work_hours
        self._attendance = attendance
        self._schedules = schedules
        self._employees = employees
        self._requests = requests
        self._configurations = configurations
        self._payroll = payroll
        self._calculator = calculator or StandardWorkHourCalculator()
        self._clock = clock

    def get_for_attendance(self, attendance_id: int) -> FinalWorkHour:
        record = self._final_work_hours.get_for_attendance(int(attendance_id))
        if not record:
            raise NotFoundError(f"No work hours computed for attendance {attendance_id}")
        return record

    def compute_for_attendance(
        self,
        attendance_id: int,
        *,
        batch_id: str,
        processed_by: Optional[int],
        mark_processed: bool = True,
    ) -> FinalWorkHour:
        """Recompute and overwrite the FinalWorkHour of one attendance.

        All fields are computed before the single upsert, so a failure leaves
        the stored row untouched.
        """
        attendance = self._attendance.get_by_id(int(attendance_id))
        if not attendance:
            raise NotFoundError(f"Attendance {attendance_id} not found")
        schedule = self._schedules.get_by_id(attendance.schedule_id)
        if not schedule:
            raise DataInvariantError(f"Attendance {attendance_id} references missing schedule {attendance.schedule_id}")
        employee = self._employees.get_by_id(attendance.employee_id)
        if not employee:
            raise DataInvariantError(f"Attendance {attendance_id} references missing employee {attendance.employee_id}")

        approved = [
            r
            for r in self._requests.list_approved(employee_id=attendance.employee_id, work_date=attendance.work_date)
            if r.attendance_id in (None, attendance.attendance_id)
        ]
        record = self._calculator.calculate(
            CalculationInput(
                attendance=attendance,
                schedule=schedule,
                employee=employee,
                config=self._configurations.for_organization(employee.organization_id),
                approved_requests=approved,
                batch_id=batch_id,
                processed_by=processed_by,
                processed_at=self._clock(),
            )
        )
        record.verify_totals()

        saved = self._final_work_hours.upsert(record)
        if mark_processed and processed_by is not None:
            self._attendance.mark_processed(
                int(attendance.attendance_id), processed_by=processed_by, processed_at=record.processed_at
            )
        self._payroll.on_work_hours_saved(saved, actor_id=processed_by)
        logger.debug(
            "[work-hours] attendance %s batch %s: regular=%s overtime=%s",
            attendance_id, batch_id, saved.total_regular_hours, saved.total_overtime_hours,
        )
        return saved

    def recompute(self, attendance_id: int, *, processed_by: Optional[int]) -> FinalWorkHour:
        """Out-of-batch recompute; the attendance keeps its processed flag."""
        return self.compute_for_attendance(
            attendance_id, batch_id=f"single-{uuid.uuid4()}", processed_by=processed_by, mark_processed=False
        )

    def on_work_time_responded(self, event: WorkTimeResponded) -> None:
        """Recompute the one attendance governed by the responded request."""
        request = self._requests.get(event.request_id)
        if not request:
            logger.warning("[work-hours] responded request %s no longer exists", event.request_id)
            return

        attendance_id = request.attendance_id
        if attendance_id is None:
            # Pre-emptive manager requests: the attendance may exist by now.
            schedule = self._schedules.get_for_employee_and_date(
                employee_id=request.employee_id, work_date=request.work_date
            )
            attendance = self._attendance.get_for_schedule(schedule.schedule_id) if schedule else None
            if not attendance:
                logger.info("[work-hours] request %s has no attendance yet; nothing to recompute", request.request_id)
                return
            attendance_id = attendance.attendance_id

        try:
            self.recompute(int(attendance_id), processed_by=event.responder_id)
        except Exception:
            logger.exception(
                "[work-hours] recompute of attendance %s after response to request %s failed",
                attendance_id, request.request_id,
            )
