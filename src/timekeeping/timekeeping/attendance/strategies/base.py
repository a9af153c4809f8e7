from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ...configurations.model import AttendanceConfiguration
from ...core.enums import NotificationSeverity, PunchDirection, WorkTimeType
from ..model import Attendance


@dataclass(frozen=True)
class PunchContext:
    attendance: Attendance
    punch_time: datetime
    shift_start: datetime
    shift_end: datetime
    config: AttendanceConfiguration


@dataclass(frozen=True)
class Deviation:
    """A work-time request the punch should raise."""

    request_type: WorkTimeType
    duration: Optional[int] = None


@dataclass(frozen=True)
class Notice:
    title: str
    message: str
    severity: NotificationSeverity = NotificationSeverity.INFO


@dataclass(frozen=True)
class PunchDecision:
    attendance: Attendance
    direction: PunchDirection
    deviations: Tuple[Deviation, ...] = ()
    notices: Tuple[Notice, ...] = ()
    # Deviation kinds whose tag this punch removed; their open requests are withdrawn.
    cleared: Tuple[WorkTimeType, ...] = ()
    changed: bool = True


class PunchStrategy(ABC):
    """Strategy Pattern: how one side (in/out) of an attendance absorbs a punch."""

    direction: PunchDirection

    @abstractmethod
    def apply(self, ctx: PunchContext) -> PunchDecision:
        raise NotImplementedError
