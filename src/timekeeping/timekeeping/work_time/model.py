from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import DayType, RequestStatus, WorkTimeType


def status_for(approved: Optional[bool]) -> RequestStatus:
    if approved is True:
        return RequestStatus.APPROVED
    if approved is False:
        return RequestStatus.REJECTED
    return RequestStatus.PENDING


@dataclass(frozen=True)
class WorkTimeRequest:
    request_id: Optional[int]
    employee_id: int
    work_date: date
    request_type: WorkTimeType
    status: RequestStatus = RequestStatus.PENDING
    day_type: DayType = DayType.REGULAR_DAY
    attendance_id: Optional[int] = None
    duration: Optional[int] = None
    reason: Optional[str] = None
    documents: Tuple[str, ...] = ()
    management_requested: bool = False
    requested_by_manager: Optional[int] = None
    organization_id: Optional[int] = None
    branch_id: Optional[int] = None
    department_id: Optional[int] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class WorkTimeResponse:
    response_id: int
    request_id: int
    approved: Optional[bool]
    message: str
    responded_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
