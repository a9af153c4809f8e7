from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Payroll


class PayrollRepository(Protocol):
    def list_for_employee_and_cutoff(self, *, employee_id: int, cutoff_id: int) -> Sequence[Payroll]:
        raise NotImplementedError


class PayrollRecalculator(Protocol):
    def recalculate(self, payroll_id: int, *, preserve_state: bool, actor_id: Optional[int]) -> None:
        raise NotImplementedError
