from __future__ import annotations

import re
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .connection import DatabaseConnection

_TIME_TEXT = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One unit of work: yield (conn, cursor), commit on success, roll back on any error."""
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def as_bool(value: Any) -> bool:
    return bool(int(value)) if value is not None else False


def as_float(value: Any) -> float:
    return float(value) if value is not None else 0.0


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column to `datetime.time`.

    The connector hands TIME back as `timedelta` (C extension), `time`, or text
    depending on driver and column; text must be HH:MM or HH:MM:SS.
    """
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)
    if isinstance(value, str):
        match = _TIME_TEXT.fullmatch(value.strip())
        if not match:
            raise ValueError(f"Invalid time string: {value!r}")
        hours, minutes, seconds = (int(part or 0) for part in match.groups())
        return time(hours, minutes, seconds)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def format_mysql_time(value: Any) -> Optional[str]:
    t = normalize_mysql_time(value)
    return t.strftime("%H:%M:%S") if t else None
