from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Tuple

from ..core.constants import HOURS_PRECISION, NIGHT_DIFFERENTIAL_END, NIGHT_DIFFERENTIAL_START
from ..core.exceptions import DataInvariantError, ValidationError
from ..database.mysql_base import normalize_mysql_time


def now_local() -> datetime:
    return datetime.now().replace(microsecond=0)


def parse_iso_date(value: str) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValidationError(f"Invalid date: {value!r}") from exc


def parse_iso_datetime(value: Any) -> datetime:
    """Parse a device timestamp into local naive time; offsets (and a trailing Z) are honoured."""
    if not isinstance(value, datetime):
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"Invalid timestamp: {value!r}") from exc
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def parse_shift_time(value: Any) -> time:
    """Parse a schedule's HH:MM:SS time-of-day, whatever the driver handed back."""
    try:
        parsed = normalize_mysql_time(value)
    except (TypeError, ValueError) as exc:
        raise DataInvariantError(f"Unparseable shift time: {value!r}") from exc
    if parsed is None:
        raise DataInvariantError("Shift time is missing")
    return parsed


def shift_window(work_date: date, start: Any, end: Any) -> Tuple[datetime, datetime]:
    """Return the (start, end) datetimes of a shift; overnight shifts end the next day."""
    start_at = datetime.combine(work_date, parse_shift_time(start))
    end_at = datetime.combine(work_date, parse_shift_time(end))
    if end_at <= start_at:
        end_at += timedelta(days=1)
    return start_at, end_at


def midpoint(start: datetime, end: datetime) -> datetime:
    return start + (end - start) / 2


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, a started minute counting as one."""
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(math.ceil(seconds / 60))


def round_hours(value: float) -> float:
    return round(value + 0.0, HOURS_PRECISION)


def hours_between(start: Optional[datetime], end: Optional[datetime]) -> float:
    if start is None or end is None or end <= start:
        return 0.0
    return round_hours((end - start).total_seconds() / 3600)


def _night_windows(day: date):
    yield (
        datetime.combine(day - timedelta(days=1), NIGHT_DIFFERENTIAL_START),
        datetime.combine(day, NIGHT_DIFFERENTIAL_END),
    )
    yield (
        datetime.combine(day, NIGHT_DIFFERENTIAL_START),
        datetime.combine(day + timedelta(days=1), NIGHT_DIFFERENTIAL_END),
    )


def night_overlap_hours(start: Optional[datetime], end: Optional[datetime]) -> float:
    """Hours of [start, end) inside the 22:00-06:00 window.

    Walks the span one wall-clock hour at a time and sums the exact overlap of
    each step; rounding happens once on the total.
    """
    if start is None or end is None or end <= start:
        return 0.0

    seconds = 0.0
    cursor = start
    step = timedelta(hours=1)
    while cursor < end:
        step_end = min(cursor + step, end)
        for window_start, window_end in _night_windows(cursor.date()):
            lo = max(cursor, window_start)
            hi = min(step_end, window_end)
            if hi > lo:
                seconds += (hi - lo).total_seconds()
        cursor = step_end
    return round_hours(seconds / 3600)
