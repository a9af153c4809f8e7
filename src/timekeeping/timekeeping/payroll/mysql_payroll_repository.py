from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import Payroll
from .repository import PayrollRecalculator, PayrollRepository


class MySQLPayrollRepository(PayrollRepository, PayrollRecalculator):
    """Reads payroll headers and queues recalculation requests for the payroll module."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee_and_cutoff(self, *, employee_id: int, cutoff_id: int) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, cutoff_id, state, is_void
                FROM payrolls
                WHERE employee_id=%s AND cutoff_id=%s
                ORDER BY id
                """,
                (int(employee_id), int(cutoff_id)),
            )
            return [
                Payroll(
                    payroll_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    cutoff_id=int(r["cutoff_id"]),
                    state=str(r["state"]),
                    is_void=as_bool(r.get("is_void")),
                )
                for r in fetchall(cur)
            ]

    def recalculate(self, payroll_id: int, *, preserve_state: bool, actor_id: Optional[int]) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_recalculation_requests(payroll_id, preserve_state, requested_by)
                VALUES(%s,%s,%s)
                """,
                (int(payroll_id), 1 if preserve_state else 0, actor_id),
            )
