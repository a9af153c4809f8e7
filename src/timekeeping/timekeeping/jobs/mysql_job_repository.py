from __future__ import annotations

import json
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errors as mysql_errors

from ..core.enums import JobStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WorkHourJob
from .repository import WorkHourJobRepository

_COLUMNS = """
    batch_id, attendance_ids, processed_by, status, attempts, processed_count, failed_count,
    last_error, created_at, updated_at
"""


def _to_job(r: Dict[str, Any]) -> WorkHourJob:
    return WorkHourJob(
        batch_id=str(r["batch_id"]),
        attendance_ids=tuple(int(i) for i in json.loads(r["attendance_ids"] or "[]")),
        processed_by=int(r["processed_by"]),
        status=JobStatus(r["status"]),
        attempts=int(r.get("attempts") or 0),
        processed_count=int(r.get("processed_count") or 0),
        failed_count=int(r.get("failed_count") or 0),
        last_error=r.get("last_error"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLWorkHourJobRepository(WorkHourJobRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_if_absent(self, job: WorkHourJob) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO work_hour_jobs(batch_id, attendance_ids, processed_by, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (job.batch_id, json.dumps(list(job.attendance_ids)), job.processed_by, job.status.value),
                )
        except mysql_errors.IntegrityError:
            return False
        return True

    def get(self, batch_id: str) -> Optional[WorkHourJob]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_hour_jobs WHERE batch_id=%s", (batch_id,))
            r = fetchone(cur)
            return _to_job(r) if r else None

    def save(self, job: WorkHourJob) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_hour_jobs
                SET status=%s, attempts=%s, processed_count=%s, failed_count=%s, last_error=%s
                WHERE batch_id=%s
                """,
                (
                    job.status.value,
                    job.attempts,
                    job.processed_count,
                    job.failed_count,
                    (job.last_error or "")[:1000] or None,
                    job.batch_id,
                ),
            )

    def list_unfinished(self) -> Sequence[WorkHourJob]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM work_hour_jobs
                WHERE status IN ('PENDING','RUNNING','RETRYING')
                ORDER BY created_at, batch_id
                """
            )
            return [_to_job(r) for r in fetchall(cur)]
