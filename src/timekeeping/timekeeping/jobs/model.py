from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..core.enums import JobStatus


@dataclass(frozen=True)
class WorkHourJob:
    batch_id: str
    attendance_ids: Tuple[int, ...]
    processed_by: int
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0
    processed_count: int = 0
    failed_count: int = 0
    last_error: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def finished(self) -> bool:
        return self.status in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(frozen=True)
class BatchResult:
    batch_id: str
    total: int
    processed: int
    failed: int
    failures: Tuple[Tuple[int, str], ...] = ()

    @property
    def failure_ratio(self) -> float:
        return self.failed / self.total if self.total else 0.0
