from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import DayType, RequestStatus, WorkTimeType
from ..core.exceptions import ConflictError, NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import WorkTimeRequest, WorkTimeResponse, status_for
from .repository import WorkTimeRequestRepository

_REQUEST_COLUMNS = """
    id, employee_id, attendance_id, organization_id, branch_id, department_id, user_id, work_date,
    request_type, duration, day_type, status, reason, documents, management_requested,
    requested_by_manager, created_at
"""


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _to_request(r: Dict[str, Any]) -> WorkTimeRequest:
    documents = json.loads(r["documents"]) if r.get("documents") else []
    return WorkTimeRequest(
        request_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        request_type=WorkTimeType(r["request_type"]),
        status=RequestStatus(r["status"]),
        day_type=DayType(r["day_type"]),
        attendance_id=_opt_int(r.get("attendance_id")),
        duration=_opt_int(r.get("duration")),
        reason=r.get("reason"),
        documents=tuple(str(d) for d in documents),
        management_requested=as_bool(r.get("management_requested")),
        requested_by_manager=_opt_int(r.get("requested_by_manager")),
        organization_id=_opt_int(r.get("organization_id")),
        branch_id=_opt_int(r.get("branch_id")),
        department_id=_opt_int(r.get("department_id")),
        user_id=_opt_int(r.get("user_id")),
        created_at=r.get("created_at"),
    )


def _to_response(r: Dict[str, Any]) -> WorkTimeResponse:
    approved = r.get("approved")
    return WorkTimeResponse(
        response_id=int(r["id"]),
        request_id=int(r["request_id"]),
        approved=None if approved is None else bool(int(approved)),
        message=str(r["message"]),
        responded_by=int(r["responded_by"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _select_response(cur, request_id: int) -> WorkTimeResponse:
    cur.execute(
        """
        SELECT id, request_id, approved, message, responded_by, created_at, updated_at
        FROM work_time_responses WHERE request_id=%s
        """,
        (request_id,),
    )
    return _to_response(fetchone(cur))


def _lock_request(cur, request_id: int) -> None:
    cur.execute("SELECT id FROM work_time_requests WHERE id=%s FOR UPDATE", (request_id,))
    if not fetchone(cur):
        raise NotFoundError(f"Work-time request {request_id} not found")


class MySQLWorkTimeRequestRepository(WorkTimeRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: WorkTimeRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_time_requests(
                    employee_id, attendance_id, organization_id, branch_id, department_id, user_id,
                    work_date, request_type, duration, day_type, status, reason, documents,
                    management_requested, requested_by_manager
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request.employee_id,
                    request.attendance_id,
                    request.organization_id,
                    request.branch_id,
                    request.department_id,
                    request.user_id,
                    request.work_date,
                    request.request_type.value,
                    request.duration,
                    request.day_type.value,
                    request.status.value,
                    request.reason,
                    json.dumps(list(request.documents)) if request.documents else None,
                    1 if request.management_requested else 0,
                    request.requested_by_manager,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[WorkTimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM work_time_requests WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def find_pending(self, *, attendance_id: int, request_type: WorkTimeType) -> Optional[WorkTimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM work_time_requests
                WHERE attendance_id=%s AND request_type=%s AND status='PENDING'
                ORDER BY id DESC
                LIMIT 1
                """,
                (int(attendance_id), request_type.value),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def update_duration(self, *, request_id: int, duration: Optional[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE work_time_requests SET duration=%s WHERE id=%s", (duration, int(request_id)))

    def withdraw(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE work_time_requests SET status='REJECTED' WHERE id=%s AND status='PENDING'",
                (int(request_id),),
            )
            return cur.rowcount == 1

    def list_approved(self, *, employee_id: int, work_date: date) -> Sequence[WorkTimeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM work_time_requests
                WHERE employee_id=%s AND work_date=%s AND status='APPROVED'
                ORDER BY id
                """,
                (int(employee_id), work_date),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[WorkTimeRequest]:
        where = []
        params: list[Any] = []
        if status:
            where.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        sql = f"SELECT {_REQUEST_COLUMNS} FROM work_time_requests"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY created_at DESC, id DESC LIMIT %s"
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def get_response(self, request_id: int) -> Optional[WorkTimeResponse]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, request_id, approved, message, responded_by, created_at, updated_at
                FROM work_time_responses WHERE request_id=%s
                """,
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_response(r) if r else None

    def create_response(
        self, *, request_id: int, approved: Optional[bool], message: str, responded_by: int
    ) -> WorkTimeResponse:
        with db_cursor(self._conn_factory) as (_, cur):
            _lock_request(cur, int(request_id))
            try:
                cur.execute(
                    """
                    INSERT INTO work_time_responses(request_id, approved, message, responded_by)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(request_id), None if approved is None else int(approved), message, int(responded_by)),
                )
            except mysql_errors.IntegrityError as exc:
                raise ConflictError(f"Work-time request {request_id} already has a response") from exc
            cur.execute(
                "UPDATE work_time_requests SET status=%s WHERE id=%s",
                (status_for(approved).value, int(request_id)),
            )
            return _select_response(cur, int(request_id))

    def update_response(
        self, *, request_id: int, approved: Optional[bool], message: str, responded_by: int
    ) -> WorkTimeResponse:
        with db_cursor(self._conn_factory) as (_, cur):
            _lock_request(cur, int(request_id))
            cur.execute("SELECT id FROM work_time_responses WHERE request_id=%s", (int(request_id),))
            if not fetchone(cur):
                raise NotFoundError(f"Work-time request {request_id} has no response to update")
            cur.execute(
                """
                UPDATE work_time_responses SET approved=%s, message=%s, responded_by=%s
                WHERE request_id=%s
                """,
                (None if approved is None else int(approved), message, int(responded_by), int(request_id)),
            )
            cur.execute(
                "UPDATE work_time_requests SET status=%s WHERE id=%s",
                (status_for(approved).value, int(request_id)),
            )
            return _select_response(cur, int(request_id))
