from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..common.datetime_utils import midpoint
from .strategies.base import PunchStrategy
from .strategies.checkin_strategy import CheckInStrategy
from .strategies.checkout_strategy import CheckOutStrategy


@dataclass
class PunchStrategyFactory:
    """Factory Pattern: route a punch by the shift midpoint, never by the device flag."""

    check_in: PunchStrategy = field(default_factory=CheckInStrategy)
    check_out: PunchStrategy = field(default_factory=CheckOutStrategy)

    def for_punch(self, *, punch_time: datetime, shift_start: datetime, shift_end: datetime) -> PunchStrategy:
        if punch_time < midpoint(shift_start, shift_end):
            return self.check_in
        return self.check_out
