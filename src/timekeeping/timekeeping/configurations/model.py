from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from ..core import constants


@dataclass(frozen=True)
class AttendanceConfiguration:
    """Per-organization attendance rules. `organization_id=None` is the global row."""

    organization_id: Optional[int] = None

    allow_early_time: bool = False
    allow_late: bool = False
    allow_under_time: bool = False
    allow_overtime: bool = True

    early_time_threshold_minutes: int = constants.DEFAULT_EARLY_TIME_THRESHOLD_MINUTES
    grace_period_minutes: int = constants.DEFAULT_GRACE_PERIOD_MINUTES
    under_time_threshold_minutes: int = constants.DEFAULT_UNDER_TIME_THRESHOLD_MINUTES
    overtime_threshold_minutes: int = constants.DEFAULT_OVERTIME_THRESHOLD_MINUTES

    round_down_early_time: bool = False
    round_down_early_time_minutes: int = constants.DEFAULT_ROUNDING_STEP_MINUTES
    round_up_late: bool = False
    round_up_late_minutes: int = constants.DEFAULT_ROUNDING_STEP_MINUTES
    round_down_under_time: bool = False
    round_down_under_time_minutes: int = constants.DEFAULT_ROUNDING_STEP_MINUTES
    round_up_overtime: bool = False
    round_up_overtime_minutes: int = constants.DEFAULT_ROUNDING_STEP_MINUTES

    consider_early_time_as_overtime: bool = False

    no_time_in_deduction: bool = True
    no_time_out_deduction: bool = True
    no_time_in_deduction_minutes: int = constants.DEFAULT_NO_TIME_IN_DEDUCTION_MINUTES
    no_time_out_deduction_minutes: int = constants.DEFAULT_NO_TIME_OUT_DEDUCTION_MINUTES

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], *, base: Optional["AttendanceConfiguration"] = None) -> "AttendanceConfiguration":
        """Overlay known keys from `values` (settings dict or DB row) on `base`."""
        base = base or cls()
        known = {f.name: f for f in fields(cls)}
        updates = {}
        for key, value in values.items():
            if key not in known or value is None or key == "id":
                continue
            default = getattr(base, key)
            if isinstance(default, bool):
                updates[key] = bool(int(value)) if not isinstance(value, bool) else value
            elif isinstance(default, int):
                updates[key] = int(value)
            else:
                updates[key] = value
        return replace(base, **updates)

    def late_request_minutes(self, minutes: int) -> int:
        return _round_up(minutes, self.round_up_late_minutes) if self.round_up_late else minutes

    def under_time_request_minutes(self, minutes: int) -> int:
        return _round_up(minutes, self.round_down_under_time_minutes) if self.round_down_under_time else minutes

    def overtime_request_minutes(self, minutes: int) -> int:
        return _round_up(minutes, self.round_up_overtime_minutes) if self.round_up_overtime else minutes


def _round_up(minutes: int, step: int) -> int:
    if step <= 0:
        return minutes
    return int(math.ceil(minutes / step) * step)
