from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RawPunch:
    """One record as reported by a device: its user code, timestamp and direction flag."""

    user_id: str
    timestamp: datetime
    type: Optional[str] = None
