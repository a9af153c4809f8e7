from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from ..core.constants import BATCH_FAILURE_RATIO
from ..core.exceptions import BatchFailedError
from ..work_hours.service import WorkHourService
from .model import BatchResult, WorkHourJob

logger = logging.getLogger(__name__)


class WorkHourBatchProcessor:
    """Fan a job's attendances through WorkHourService.

    Item failures are logged and counted; the batch fails only when more than
    `failure_ratio` of its items failed.
    """

    def __init__(self, work_hours: WorkHourService, *, max_workers: int = 1, failure_ratio: float = BATCH_FAILURE_RATIO):
        self._work_hours = work_hours
        self._max_workers = max(1, int(max_workers))
        self._failure_ratio = failure_ratio

    def process(self, job: WorkHourJob) -> BatchResult:
        ids = list(job.attendance_ids)

        def run_one(attendance_id: int) -> Optional[Tuple[int, str]]:
            try:
                self._work_hours.compute_for_attendance(
                    attendance_id, batch_id=job.batch_id, processed_by=job.processed_by
                )
            except Exception as exc:
                logger.exception(
                    "[batch %s] attendance %s failed (processed_by=%s)", job.batch_id, attendance_id, job.processed_by
                )
                return attendance_id, f"{type(exc).__name__}: {exc}"
            return None

        if self._max_workers > 1 and len(ids) > 1:
            with ThreadPoolExecutor(
                max_workers=min(self._max_workers, len(ids)), thread_name_prefix="work-hours"
            ) as pool:
                outcomes = list(pool.map(run_one, ids))
        else:
            outcomes = [run_one(attendance_id) for attendance_id in ids]

        failures: List[Tuple[int, str]] = [o for o in outcomes if o is not None]
        result = BatchResult(
            batch_id=job.batch_id,
            total=len(ids),
            processed=len(ids) - len(failures),
            failed=len(failures),
            failures=tuple(failures),
        )
        if result.failure_ratio > self._failure_ratio:
            logger.error(
                "[batch %s] %s/%s attendances failed; failing the job", job.batch_id, result.failed, result.total
            )
            raise BatchFailedError(result)

        logger.info("[batch %s] done: processed=%s failed=%s", job.batch_id, result.processed, result.failed)
        return result
