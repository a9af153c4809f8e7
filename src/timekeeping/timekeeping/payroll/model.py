from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Payroll:
    payroll_id: int
    employee_id: int
    cutoff_id: int
    state: str
    is_void: bool = False
