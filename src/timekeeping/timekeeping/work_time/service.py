from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

from ..attendance.model import Attendance
from ..attendance.repository import AttendanceRepository
from ..common.validators import require_non_empty, require_positive_int
from ..configurations.service import AttendanceConfigurationService
from ..core.constants import MANAGEMENT_AUTO_APPROVAL_MESSAGE
from ..core.enums import NotificationSeverity, RequestStatus, WorkTimeType
from ..core.events import EventBus, WorkTimeResponded
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications.service import NotificationService
from ..schedules.repository import ScheduleRepository
from ..schedules.service import classify_day
from .model import WorkTimeRequest, WorkTimeResponse, status_for
from .repository import WorkTimeRequestRepository

logger = logging.getLogger(__name__)

MANAGEMENT_REQUEST_TYPES = (WorkTimeType.EARLY, WorkTimeType.OVERTIME)


def _parse_type(value: Any) -> WorkTimeType:
    try:
        return WorkTimeType(str(value).upper())
    except ValueError as exc:
        raise ValidationError(f"Unknown work-time request type: {value!r}") from exc


def _parse_approved(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError("approved must be true, false or null")


class WorkTimeRequestService:
    """Use cases: raise deviation requests, respond to them, manager-initiated requests."""

    def __init__(
        self,
        requests: WorkTimeRequestRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        attendance: AttendanceRepository,
        *,
        configurations: AttendanceConfigurationService,
        notifications: NotificationService,
        events: EventBus,
    ):
        self._requests = requests
        self._employees = employees
        self._schedules = schedules
        self._attendance = attendance
        self._configurations = configurations
        self._notifications = notifications
        self._events = events

    def get(self, request_id: int) -> WorkTimeRequest:
        request = self._requests.get(int(request_id))
        if not request:
            raise NotFoundError(f"Work-time request {request_id} not found")
        return request

    def list_requests(
        self, *, status: Optional[RequestStatus] = None, employee_id: Optional[int] = None, limit: int = 200
    ) -> Sequence[WorkTimeRequest]:
        return self._requests.list_requests(status=status, employee_id=employee_id, limit=limit)

    def raise_for_deviation(
        self,
        *,
        attendance: Attendance,
        employee: Employee,
        request_type: WorkTimeType,
        duration: Optional[int],
        reason: Optional[str] = None,
    ) -> int:
        """Create the PENDING request for a deviation, or refresh the duration of the open one."""
        if attendance.attendance_id is None:
            raise ValidationError("attendance must be saved before raising a request")

        existing = self._requests.find_pending(attendance_id=attendance.attendance_id, request_type=request_type)
        if existing:
            if existing.duration != duration:
                self._requests.update_duration(request_id=existing.request_id, duration=duration)
            return int(existing.request_id)

        return self._requests.create(
            WorkTimeRequest(
                request_id=None,
                employee_id=employee.employee_id,
                work_date=attendance.work_date,
                request_type=request_type,
                day_type=attendance.day_type,
                attendance_id=attendance.attendance_id,
                duration=duration,
                reason=reason,
                organization_id=employee.organization_id,
                branch_id=employee.branch_id,
                department_id=employee.department_id,
                user_id=employee.user_id,
            )
        )

    def withdraw_pending(self, *, attendance_id: int, request_type: WorkTimeType) -> Optional[int]:
        """Close the open request of a deviation the attendance no longer shows."""
        existing = self._requests.find_pending(attendance_id=int(attendance_id), request_type=request_type)
        if not existing or not self._requests.withdraw(int(existing.request_id)):
            return None
        logger.info(
            "[work-time] request %s (%s) withdrawn: attendance %s no longer shows it",
            existing.request_id, request_type.value, attendance_id,
        )
        return int(existing.request_id)

    def respond(self, *, request_id: int, approved: Any, message: Optional[str], responder_id: Any) -> WorkTimeResponse:
        """Record the single response of a request and publish WorkTimeResponded.

        Subscribers (work-hour recomputation) run before this returns.
        """
        approved = _parse_approved(approved)
        message = require_non_empty(message, "message")
        responder_id = require_positive_int(responder_id, "responded_by")
        request = self.get(request_id)

        if self._requests.get_response(int(request.request_id)):
            raise ConflictError(f"Work-time request {request_id} already has a response")
        if request.status != RequestStatus.PENDING:
            raise ConflictError(f"Work-time request {request_id} was withdrawn")

        response = self._requests.create_response(
            request_id=int(request.request_id), approved=approved, message=message, responded_by=responder_id
        )
        self._after_response(request, response)
        return response

    def update_response(
        self, *, request_id: int, approved: Any, message: Optional[str], responder_id: Any
    ) -> WorkTimeResponse:
        approved = _parse_approved(approved)
        message = require_non_empty(message, "message")
        responder_id = require_positive_int(responder_id, "responded_by")
        request = self.get(request_id)

        if not self._requests.get_response(int(request.request_id)):
            raise NotFoundError(f"Work-time request {request_id} has no response yet")

        response = self._requests.update_response(
            request_id=int(request.request_id), approved=approved, message=message, responded_by=responder_id
        )
        self._after_response(request, response)
        return response

    def _after_response(self, request: WorkTimeRequest, response: WorkTimeResponse) -> None:
        status = status_for(response.approved)
        logger.info(
            "[work-time] request %s (%s) -> %s by %s",
            request.request_id, request.request_type.value, status.value, response.responded_by,
        )
        self._events.publish(
            WorkTimeResponded(
                request_id=int(request.request_id), approved=response.approved, responder_id=response.responded_by
            )
        )
        if status != RequestStatus.PENDING:
            self._notifications.notify(
                user_id=request.user_id,
                title=f"Work-time request {status.value.lower()}",
                message=f"Your {request.request_type.value} request for {request.work_date} was {status.value.lower()}: {response.message}",
                severity=NotificationSeverity.INFO if status == RequestStatus.APPROVED else NotificationSeverity.WARNING,
            )

    def create_management_request(
        self,
        *,
        manager_id: Any,
        employee_ids: Sequence[Any],
        work_date: date,
        request_type: Any,
        duration: Any,
        reason: Optional[str] = None,
    ) -> List[int]:
        """Manager-initiated EARLY/OVERTIME requests, auto-approved for each employee.

        Per-employee failures are collected; only a run where nobody got a request fails.
        """
        manager_id = require_positive_int(manager_id, "manager_id")
        request_type = _parse_type(request_type)
        if request_type not in MANAGEMENT_REQUEST_TYPES:
            raise ValidationError("Management requests can only be EARLY or OVERTIME")
        duration = require_positive_int(duration, "duration")
        if not employee_ids:
            raise ValidationError("employee_ids is required")

        created: List[int] = []
        failures: List[Tuple[Any, str]] = []
        for employee_id in dict.fromkeys(employee_ids):
            try:
                created.append(
                    self._create_management_request(
                        manager_id=manager_id,
                        employee_id=require_positive_int(employee_id, "employee_id"),
                        work_date=work_date,
                        request_type=request_type,
                        duration=duration,
                        reason=reason,
                    )
                )
            except DomainError as exc:
                failures.append((employee_id, str(exc)))
                logger.warning("[work-time] management request for employee %s failed: %s", employee_id, exc)

        if not created:
            details = "; ".join(f"{eid}: {msg}" for eid, msg in failures)
            raise ValidationError(f"No management request could be created ({details})")
        return created

    def _create_management_request(
        self,
        *,
        manager_id: int,
        employee_id: int,
        work_date: date,
        request_type: WorkTimeType,
        duration: int,
        reason: Optional[str],
    ) -> int:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError(f"Employee {employee_id} not found")

        config = self._configurations.for_organization(employee.organization_id)
        if request_type == WorkTimeType.EARLY and not config.allow_early_time:
            raise ValidationError("Early time is not allowed for this organization")
        if request_type == WorkTimeType.OVERTIME and not config.allow_overtime:
            raise ValidationError("Overtime is not allowed for this organization")

        schedule = self._schedules.get_for_employee_and_date(employee_id=employee_id, work_date=work_date)
        if not schedule:
            raise NotFoundError(f"Employee {employee_id} has no schedule on {work_date}")
        attendance = self._attendance.get_for_schedule(schedule.schedule_id)

        request_id = self._requests.create(
            WorkTimeRequest(
                request_id=None,
                employee_id=employee_id,
                work_date=work_date,
                request_type=request_type,
                day_type=classify_day(schedule),
                attendance_id=attendance.attendance_id if attendance else None,
                duration=duration,
                reason=reason,
                management_requested=True,
                requested_by_manager=manager_id,
                organization_id=employee.organization_id,
                branch_id=employee.branch_id,
                department_id=employee.department_id,
                user_id=employee.user_id,
            )
        )
        self.respond(
            request_id=request_id,
            approved=True,
            message=MANAGEMENT_AUTO_APPROVAL_MESSAGE,
            responder_id=manager_id,
        )
        return request_id
