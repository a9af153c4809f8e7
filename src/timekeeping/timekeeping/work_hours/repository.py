from __future__ import annotations

from typing import Optional, Protocol

from .model import FinalWorkHour


class FinalWorkHourRepository(Protocol):
    def get_for_attendance(self, attendance_id: int) -> Optional[FinalWorkHour]:
        raise NotImplementedError

    def upsert(self, record: FinalWorkHour) -> FinalWorkHour:
        """Create or overwrite the row of `record.attendance_id` in one write.

        The stored id, creator and approval fields survive an overwrite.
        """

        raise NotImplementedError
