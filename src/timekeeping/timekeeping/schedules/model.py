from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import HolidayType, ScheduleStatus


@dataclass(frozen=True)
class Holiday:
    holiday_id: int
    name: str
    holiday_type: HolidayType


@dataclass(frozen=True)
class Schedule:
    """One employee's expected shift on one date (owned by the scheduling module).

    `start_time`/`end_time` are time-of-day strings (HH:MM:SS) exactly as stored;
    they are only parsed when a window is needed.
    """

    schedule_id: int
    employee_id: int
    work_date: date
    start_time: str
    end_time: str
    break_minutes: int = 0
    rest_day: bool = False
    holiday: Optional[Holiday] = None
    cutoff_id: Optional[int] = None
    status: ScheduleStatus = ScheduleStatus.ACTIVE
