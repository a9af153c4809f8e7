from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ...attendance.model import Attendance
from ...configurations.model import AttendanceConfiguration
from ...employees.model import Employee
from ...schedules.model import Schedule
from ...work_time.model import WorkTimeRequest
from ..model import FinalWorkHour


@dataclass(frozen=True)
class CalculationInput:
    """Everything one computation reads; the calculator touches nothing else."""

    attendance: Attendance
    schedule: Schedule
    employee: Employee
    config: AttendanceConfiguration
    approved_requests: Sequence[WorkTimeRequest]
    batch_id: str
    processed_by: Optional[int]
    processed_at: datetime


class WorkHourCalculator(ABC):
    """Strategy: turn an attendance into its FinalWorkHour breakdown."""

    @abstractmethod
    def calculate(self, data: CalculationInput) -> FinalWorkHour:
        raise NotImplementedError
