from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from ..biometrics.model import RawPunch
from ..biometrics.repository import DeviceBufferRepository
from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import parse_employee_code, require_non_empty
from ..configurations.service import AttendanceConfigurationService
from ..core.enums import AttendanceStatus, NotificationSeverity, PunchMethod, ScheduleStatus, WorkTimeType
from ..core.events import AttendanceFinalized, EventBus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..notifications.service import NotificationService
from ..schedules.service import ScheduleLookupService, classify_day, schedule_window
from ..work_time.service import WorkTimeRequestService
from .factory import PunchStrategyFactory
from .model import Attendance, AttendancePunch
from .repository import AttendancePunchRepository, AttendanceRepository
from .strategies.base import Notice, PunchContext

logger = logging.getLogger(__name__)

PunchInput = Union[RawPunch, Mapping[str, Any]]


@dataclass(frozen=True)
class IngestionSummary:
    device_id: str
    received: int
    processed: int
    skipped: int
    failed: int
    attendance_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class FinalizeResult:
    work_date: date
    attendance_ids: Tuple[int, ...]
    batch_id: Optional[str]


def to_raw_punch(punch: PunchInput) -> RawPunch:
    if isinstance(punch, RawPunch):
        return punch
    user_id = punch.get("user_id", punch.get("userId"))
    if punch.get("timestamp") is None:
        raise ValidationError("timestamp is required")
    return RawPunch(
        user_id="" if user_id is None else str(user_id),
        timestamp=parse_iso_datetime(punch["timestamp"]),
        type=None if punch.get("type") is None else str(punch.get("type")),
    )


class AttendanceService:
    """Use cases: ingest device punches, finalize a day's attendances."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        punches: AttendancePunchRepository,
        employees: EmployeeRepository,
        schedules: ScheduleLookupService,
        *,
        configurations: AttendanceConfigurationService,
        work_time: WorkTimeRequestService,
        notifications: NotificationService,
        device_buffer: DeviceBufferRepository,
        events: EventBus,
        strategy_factory: Optional[PunchStrategyFactory] = None,
    ):
        self._attendance = attendance
        self._punches = punches
        self._employees = employees
        self._schedules = schedules
        self._configurations = configurations
        self._work_time = work_time
        self._notifications = notifications
        self._device_buffer = device_buffer
        self._events = events
        self._strategy_factory = strategy_factory or PunchStrategyFactory()

    def ingest_attendance_batch(self, device_id: str, punches: Sequence[PunchInput]) -> IngestionSummary:
        """Apply one device report in arrival order, then clear the device buffer.

        A bad punch is logged and counted; it never stops the rest of the batch.
        """
        device_id = require_non_empty(device_id, "device_id")
        processed = skipped = failed = 0
        attendance_ids: List[int] = []

        for punch in punches:
            try:
                attendance_id = self.ingest_punch(device_id, to_raw_punch(punch))
            except Exception:
                failed += 1
                logger.exception("[ingest] device %s: punch %r failed", device_id, punch)
                continue
            if attendance_id is None:
                skipped += 1
                continue
            processed += 1
            if attendance_id not in attendance_ids:
                attendance_ids.append(attendance_id)

        try:
            self._device_buffer.clear(device_id)
        except Exception:
            logger.exception("[ingest] device %s: could not clear buffered records", device_id)

        summary = IngestionSummary(
            device_id=device_id,
            received=len(punches),
            processed=processed,
            skipped=skipped,
            failed=failed,
            attendance_ids=tuple(attendance_ids),
        )
        logger.info(
            "[ingest] device %s: received=%s processed=%s skipped=%s failed=%s",
            device_id, summary.received, processed, skipped, failed,
        )
        return summary

    def ingest_pending(self, device_id: str) -> IngestionSummary:
        device_id = require_non_empty(device_id, "device_id")
        return self.ingest_attendance_batch(device_id, list(self._device_buffer.list_pending(device_id)))

    def ingest_punch(self, device_id: str, punch: RawPunch) -> Optional[int]:
        """Apply one punch; returns the attendance id, or None when the punch was discarded."""
        code = parse_employee_code(punch.user_id)
        if code is None:
            logger.warning("[ingest] device %s: discarded punch with non-numeric user id %r", device_id, punch.user_id)
            return None

        employee = self._employees.get_by_number(code)
        if employee is None:
            logger.warning("[ingest] device %s: no employee with number %s", device_id, code)
            return None

        schedule = self._schedules.for_punch(employee_id=employee.employee_id, at=punch.timestamp)
        if schedule is None:
            logger.info("[ingest] employee %s has no schedule for %s", employee.employee_id, punch.timestamp.date())
            self._notifications.notify(
                user_id=employee.user_id,
                title="No schedule",
                message=f"Your punch at {punch.timestamp:%Y-%m-%d %H:%M} was ignored: no schedule for that day.",
                severity=NotificationSeverity.WARNING,
            )
            return None

        config = self._configurations.for_organization(employee.organization_id)
        shift_start, shift_end = schedule_window(schedule)

        notices: List[Notice] = []
        attendance = self._attendance.get_for_schedule(schedule.schedule_id)
        created = attendance is None
        if attendance is None:
            attendance = Attendance(
                attendance_id=None,
                employee_id=employee.employee_id,
                schedule_id=schedule.schedule_id,
                work_date=schedule.work_date,
                day_type=classify_day(schedule),
            )
            if schedule.rest_day:
                attendance = attendance.with_status(AttendanceStatus.REST_DAY)
                notices.append(Notice("Rest day check-in", f"You punched in on your rest day ({schedule.work_date})."))
            if schedule.holiday:
                attendance = attendance.with_status(AttendanceStatus.HOLIDAY)
                notices.append(Notice("Holiday check-in", f"You punched in on a holiday: {schedule.holiday.name}."))
            if schedule.status == ScheduleStatus.LEAVE:
                notices.append(
                    Notice("Already on leave", f"You are on leave on {schedule.work_date}.", NotificationSeverity.WARNING)
                )

        strategy = self._strategy_factory.for_punch(
            punch_time=punch.timestamp, shift_start=shift_start, shift_end=shift_end
        )
        decision = strategy.apply(
            PunchContext(
                attendance=attendance,
                punch_time=punch.timestamp,
                shift_start=shift_start,
                shift_end=shift_end,
                config=config,
            )
        )
        attendance = decision.attendance

        if created:
            attendance = replace(attendance, attendance_id=self._attendance.create(attendance))
        elif decision.changed:
            self._attendance.update(attendance)

        self._punches.add(
            AttendancePunch(
                attendance_id=int(attendance.attendance_id),
                punch_time=punch.timestamp,
                direction=decision.direction,
                employee_number=code,
                method=PunchMethod.BIOMETRIC,
                device_id=device_id,
                raw_type=punch.type,
            )
        )

        for deviation in decision.deviations:
            self._work_time.raise_for_deviation(
                attendance=attendance,
                employee=employee,
                request_type=deviation.request_type,
                duration=deviation.duration,
            )

        for request_type in decision.cleared:
            self._work_time.withdraw_pending(attendance_id=int(attendance.attendance_id), request_type=request_type)

        for notice in notices + list(decision.notices):
            self._notifications.notify(
                user_id=employee.user_id, title=notice.title, message=notice.message, severity=notice.severity
            )

        return attendance.attendance_id

    def list_punches(self, attendance_id: int) -> Sequence[AttendancePunch]:
        if not self._attendance.get_by_id(int(attendance_id)):
            raise NotFoundError(f"Attendance {attendance_id} not found")
        return self._punches.list_for_attendance(int(attendance_id))

    def finalize_day(self, work_date: date, *, processed_by: int) -> FinalizeResult:
        """Close a day: flag missing check-outs, then signal that its attendances can be computed."""
        attendances = list(self._attendance.list_unprocessed_for_date(work_date))
        for attendance in attendances:
            if attendance.time_in is None or attendance.time_out is not None:
                continue
            if attendance.has_status(AttendanceStatus.NO_CHECKED_OUT):
                continue
            try:
                self._flag_missing_check_out(attendance)
            except Exception:
                logger.exception("[finalize] attendance %s: could not flag missing check-out", attendance.attendance_id)

        ids = tuple(int(a.attendance_id) for a in attendances)
        if not ids:
            logger.info("[finalize] nothing to finalize for %s", work_date)
            return FinalizeResult(work_date=work_date, attendance_ids=(), batch_id=None)

        batch_id = str(uuid.uuid4())
        self._events.publish(AttendanceFinalized(attendance_ids=ids, processed_by=processed_by, batch_id=batch_id))
        logger.info("[finalize] %s: %s attendance(s) finalized as batch %s", work_date, len(ids), batch_id)
        return FinalizeResult(work_date=work_date, attendance_ids=ids, batch_id=batch_id)

    def _flag_missing_check_out(self, attendance: Attendance) -> None:
        attendance = attendance.with_status(AttendanceStatus.NO_CHECKED_OUT)
        self._attendance.update(attendance)
        employee = self._employees.get_by_id(attendance.employee_id)
        if employee is None:
            logger.warning("[finalize] attendance %s: employee %s not found", attendance.attendance_id, attendance.employee_id)
            return
        self._work_time.raise_for_deviation(
            attendance=attendance, employee=employee, request_type=WorkTimeType.NO_CHECKED_OUT, duration=None
        )
        self._notifications.notify(
            user_id=employee.user_id,
            title="No check-out",
            message=f"We have no check-out for your shift on {attendance.work_date}.",
            severity=NotificationSeverity.WARNING,
        )
