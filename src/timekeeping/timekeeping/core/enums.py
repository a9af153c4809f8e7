from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    LATE = "LATE"
    EARLY = "EARLY"
    UNDER_TIME = "UNDER_TIME"
    OVERTIME = "OVERTIME"
    NO_CHECKED_IN = "NO_CHECKED_IN"
    NO_CHECKED_OUT = "NO_CHECKED_OUT"
    ABSENT = "ABSENT"
    REST_DAY = "REST_DAY"
    HOLIDAY = "HOLIDAY"


class WorkTimeType(str, Enum):
    """Deviation kinds a work-time request can be raised for."""

    LATE = "LATE"
    EARLY = "EARLY"
    UNDER_TIME = "UNDER_TIME"
    OVERTIME = "OVERTIME"
    NO_CHECKED_IN = "NO_CHECKED_IN"
    NO_CHECKED_OUT = "NO_CHECKED_OUT"


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DayType(str, Enum):
    REGULAR_DAY = "REGULAR_DAY"
    REST_DAY = "REST_DAY"
    SPECIAL_HOLIDAY = "SPECIAL_HOLIDAY"
    REGULAR_HOLIDAY = "REGULAR_HOLIDAY"
    SPECIAL_HOLIDAY_REST_DAY = "SPECIAL_HOLIDAY_REST_DAY"
    REGULAR_HOLIDAY_REST_DAY = "REGULAR_HOLIDAY_REST_DAY"


class HolidayType(str, Enum):
    REGULAR = "REGULAR"
    SPECIAL_WORKING = "SPECIAL_WORKING"
    SPECIAL_NON_WORKING = "SPECIAL_NON_WORKING"


class ScheduleStatus(str, Enum):
    ACTIVE = "ACTIVE"
    LEAVE = "LEAVE"


class PunchMethod(str, Enum):
    BIOMETRIC = "BIOMETRIC"
    MANUAL = "MANUAL"


class PunchDirection(str, Enum):
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"


class NotificationSeverity(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class JobStatus(str, Enum):
    PENDING = "PENDING"
    RUNNING = "RUNNING"
    RETRYING = "RETRYING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
