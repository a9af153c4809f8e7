from __future__ import annotations

from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "id, employee_number, full_name, user_id, organization_id, branch_id, department_id, is_active"


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["id"]),
        employee_number=str(r["employee_number"]),
        full_name=str(r["full_name"]),
        user_id=_opt_int(r.get("user_id")),
        organization_id=_opt_int(r.get("organization_id")),
        branch_id=_opt_int(r.get("branch_id")),
        department_id=_opt_int(r.get("department_id")),
        is_active=as_bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_number(self, employee_number: str) -> Optional[Employee]:
        # Devices strip leading zeros, so compare numerically as well.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE is_active=1 AND (employee_number=%s OR CAST(employee_number AS UNSIGNED)=%s)
                ORDER BY employee_number=%s DESC
                LIMIT 1
                """,
                (employee_number, int(employee_number), employee_number),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None
