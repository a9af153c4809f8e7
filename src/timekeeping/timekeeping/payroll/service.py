from __future__ import annotations

import logging
from typing import List, Optional

from ..work_hours.model import FinalWorkHour
from .repository import PayrollRecalculator, PayrollRepository

logger = logging.getLogger(__name__)


class PayrollRecalculationService:
    """Hand-off to payroll: refresh every non-void payroll that used these hours."""

    def __init__(self, payrolls: PayrollRepository, recalculator: PayrollRecalculator):
        self._payrolls = payrolls
        self._recalculator = recalculator

    def on_work_hours_saved(self, record: FinalWorkHour, *, actor_id: Optional[int]) -> List[int]:
        if record.cutoff_id is None:
            return []
        triggered = []
        for payroll in self._payrolls.list_for_employee_and_cutoff(
            employee_id=record.employee_id, cutoff_id=record.cutoff_id
        ):
            if payroll.is_void:
                continue
            self._recalculator.recalculate(payroll.payroll_id, preserve_state=True, actor_id=actor_id)
            triggered.append(payroll.payroll_id)
        if triggered:
            logger.info(
                "[payroll] attendance %s changed; recalculating payroll(s) %s", record.attendance_id, triggered
            )
        return triggered
