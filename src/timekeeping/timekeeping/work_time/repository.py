from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, WorkTimeType
from .model import WorkTimeRequest, WorkTimeResponse


class WorkTimeRequestRepository(Protocol):
    # Requests
    def create(self, request: WorkTimeRequest) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[WorkTimeRequest]:
        raise NotImplementedError

    def find_pending(self, *, attendance_id: int, request_type: WorkTimeType) -> Optional[WorkTimeRequest]:
        raise NotImplementedError

    def update_duration(self, *, request_id: int, duration: Optional[int]) -> None:
        raise NotImplementedError

    def withdraw(self, request_id: int) -> bool:
        """Close a PENDING request without a response; False when it was no longer pending."""
        raise NotImplementedError

    def list_approved(self, *, employee_id: int, work_date: date) -> Sequence[WorkTimeRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[WorkTimeRequest]:
        raise NotImplementedError

    # Responses (1:1 with a request)
    def get_response(self, request_id: int) -> Optional[WorkTimeResponse]:
        raise NotImplementedError

    def create_response(
        self, *, request_id: int, approved: Optional[bool], message: str, responded_by: int
    ) -> WorkTimeResponse:
        """Insert the response and move the request status in one transaction.

        Raises ConflictError when the request already has a response.
        """

        raise NotImplementedError

    def update_response(
        self, *, request_id: int, approved: Optional[bool], message: str, responded_by: int
    ) -> WorkTimeResponse:
        raise NotImplementedError
