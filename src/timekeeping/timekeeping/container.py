from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendancePunchRepository, MySQLAttendanceRepository
from .attendance.repository import AttendancePunchRepository, AttendanceRepository
from .attendance.service import AttendanceService
from .biometrics.mysql_device_buffer_repository import MySQLDeviceBufferRepository
from .biometrics.repository import DeviceBufferRepository
from .configurations.mysql_configuration_repository import MySQLAttendanceConfigurationRepository
from .configurations.repository import AttendanceConfigurationRepository
from .configurations.service import AttendanceConfigurationService
from .core.constants import (
    DEFAULT_JOB_BACKOFF_SECONDS,
    DEFAULT_JOB_MAX_ATTEMPTS,
    DEFAULT_OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES,
)
from .core.events import AttendanceFinalized, EventBus, WorkTimeResponded
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .jobs.mysql_job_repository import MySQLWorkHourJobRepository
from .jobs.processor import WorkHourBatchProcessor
from .jobs.queue import WorkHourQueue
from .jobs.repository import WorkHourJobRepository
from .notifications.mysql_notification_repository import MySQLNotificationGateway
from .notifications.repository import NotificationGateway
from .notifications.service import NotificationService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRecalculator, PayrollRepository
from .payroll.service import PayrollRecalculationService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository
from .schedules.service import ScheduleLookupService
from .work_hours.mysql_final_work_hour_repository import MySQLFinalWorkHourRepository
from .work_hours.repository import FinalWorkHourRepository
from .work_hours.service import WorkHourService
from .work_time.mysql_work_time_repository import MySQLWorkTimeRequestRepository
from .work_time.repository import WorkTimeRequestRepository
from .work_time.service import WorkTimeRequestService


@dataclass(frozen=True)
class Repositories:
    employees: EmployeeRepository
    schedules: ScheduleRepository
    configurations: AttendanceConfigurationRepository
    attendance: AttendanceRepository
    punches: AttendancePunchRepository
    requests: WorkTimeRequestRepository
    final_work_hours: FinalWorkHourRepository
    jobs: WorkHourJobRepository
    payrolls: PayrollRepository
    payroll_recalculator: PayrollRecalculator
    notifications: NotificationGateway
    device_buffer: DeviceBufferRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories
    events: EventBus

    configuration_service: AttendanceConfigurationService
    notification_service: NotificationService
    attendance_service: AttendanceService
    work_time_service: WorkTimeRequestService
    work_hour_service: WorkHourService
    work_hour_queue: WorkHourQueue


def mysql_repositories(conn: DatabaseConnection) -> Repositories:
    payrolls = MySQLPayrollRepository(conn)
    return Repositories(
        employees=MySQLEmployeeRepository(conn),
        schedules=MySQLScheduleRepository(conn),
        configurations=MySQLAttendanceConfigurationRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        punches=MySQLAttendancePunchRepository(conn),
        requests=MySQLWorkTimeRequestRepository(conn),
        final_work_hours=MySQLFinalWorkHourRepository(conn),
        jobs=MySQLWorkHourJobRepository(conn),
        payrolls=payrolls,
        payroll_recalculator=payrolls,
        notifications=MySQLNotificationGateway(conn),
        device_buffer=MySQLDeviceBufferRepository(conn),
    )


def wire(repos: Repositories, *, settings: Optional[Mapping[str, Any]] = None, **overrides: Any) -> Container:
    """Build services over any set of repositories and subscribe the event handlers.

    `overrides` lets callers inject `executor`, `sleep` or `clock`.
    """
    settings = dict(settings or {})
    events = EventBus()

    configuration_service = AttendanceConfigurationService(
        repos.configurations, defaults=settings.get("ATTENDANCE_DEFAULTS")
    )
    notification_service = NotificationService(repos.notifications)
    clock_kwargs = {"clock": overrides["clock"]} if "clock" in overrides else {}

    work_time_service = WorkTimeRequestService(
        repos.requests,
        repos.employees,
        repos.schedules,
        repos.attendance,
        configurations=configuration_service,
        notifications=notification_service,
        events=events,
    )
    attendance_service = AttendanceService(
        repos.attendance,
        repos.punches,
        repos.employees,
        ScheduleLookupService(
            repos.schedules,
            overnight_checkout_allowance=timedelta(
                minutes=int(
                    settings.get("OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES", DEFAULT_OVERNIGHT_CHECKOUT_ALLOWANCE_MINUTES)
                )
            ),
        ),
        configurations=configuration_service,
        work_time=work_time_service,
        notifications=notification_service,
        device_buffer=repos.device_buffer,
        events=events,
    )
    work_hour_service = WorkHourService(
        repos.final_work_hours,
        repos.attendance,
        repos.schedules,
        repos.employees,
        repos.requests,
        configurations=configuration_service,
        payroll=PayrollRecalculationService(repos.payrolls, repos.payroll_recalculator),
        **clock_kwargs,
    )
    processor = WorkHourBatchProcessor(
        work_hour_service, max_workers=int(settings.get("WORK_HOUR_ITEM_WORKERS", 1))
    )
    queue_kwargs = {k: overrides[k] for k in ("executor", "sleep") if k in overrides}
    work_hour_queue = WorkHourQueue(
        repos.jobs,
        processor,
        repos.attendance,
        max_workers=int(settings.get("WORK_HOUR_QUEUE_WORKERS", 2)),
        max_attempts=int(settings.get("JOB_MAX_ATTEMPTS", DEFAULT_JOB_MAX_ATTEMPTS)),
        backoff_seconds=float(settings.get("JOB_BACKOFF_SECONDS", DEFAULT_JOB_BACKOFF_SECONDS)),
        **queue_kwargs,
    )

    events.subscribe(WorkTimeResponded, work_hour_service.on_work_time_responded)
    events.subscribe(AttendanceFinalized, work_hour_queue.on_attendance_finalized)

    return Container(
        repos=repos,
        events=events,
        configuration_service=configuration_service,
        notification_service=notification_service,
        attendance_service=attendance_service,
        work_time_service=work_time_service,
        work_hour_service=work_hour_service,
        work_hour_queue=work_hour_queue,
    )


def build_container(*, db_config: dict, settings: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(mysql_repositories(conn), settings=settings)
