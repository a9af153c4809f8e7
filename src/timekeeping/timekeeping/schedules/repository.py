from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Schedule


class ScheduleRepository(Protocol):
    def get_for_employee_and_date(self, *, employee_id: int, work_date: date) -> Optional[Schedule]:
        raise NotImplementedError

    def get_by_id(self, schedule_id: int) -> Optional[Schedule]:
        raise NotImplementedError
