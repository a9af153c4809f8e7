from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    employee_id: int
    employee_number: str
    full_name: str
    user_id: Optional[int] = None
    organization_id: Optional[int] = None
    branch_id: Optional[int] = None
    department_id: Optional[int] = None
    is_active: bool = True
