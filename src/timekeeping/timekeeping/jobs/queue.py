from __future__ import annotations

import logging
import time
import uuid
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_JOB_BACKOFF_SECONDS, DEFAULT_JOB_MAX_ATTEMPTS
from ..core.enums import JobStatus
from ..core.events import AttendanceFinalized
from ..core.exceptions import BatchFailedError, NotFoundError, ValidationError
from .model import BatchResult, WorkHourJob
from .processor import WorkHourBatchProcessor
from .repository import WorkHourJobRepository

logger = logging.getLogger(__name__)


class WorkHourQueue:
    """Durable, retrying runner for work-hour batches.

    Jobs are stored before they run, keyed by batch id: enqueueing a known
    batch id is a no-op. A failed attempt is retried after an exponential
    delay until `max_attempts`, then the job is marked FAILED.
    """

    def __init__(
        self,
        jobs: WorkHourJobRepository,
        processor: WorkHourBatchProcessor,
        attendance: AttendanceRepository,
        *,
        executor: Optional[Executor] = None,
        max_workers: int = 2,
        max_attempts: int = DEFAULT_JOB_MAX_ATTEMPTS,
        backoff_seconds: float = DEFAULT_JOB_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._jobs = jobs
        self._processor = processor
        self._attendance = attendance
        self._executor = executor or ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="work-hour-jobs")
        self._max_attempts = max(1, int(max_attempts))
        self._backoff_seconds = float(backoff_seconds)
        self._sleep = sleep

    def backoff_delay(self, attempt: int) -> float:
        return self._backoff_seconds * (2 ** (attempt - 1))

    def enqueue(self, attendance_ids: Iterable[int], processed_by: int, *, batch_id: Optional[str] = None) -> str:
        """Store and schedule a batch; returns its batch id without waiting for it."""
        ids = tuple(dict.fromkeys(require_positive_int(i, "attendance_id") for i in attendance_ids))
        if not ids:
            raise ValidationError("attendance_ids is required")
        processed_by = require_positive_int(processed_by, "processed_by")
        batch_id = str(batch_id or "").strip() or str(uuid.uuid4())

        job = WorkHourJob(batch_id=batch_id, attendance_ids=ids, processed_by=processed_by)
        if not self._jobs.create_if_absent(job):
            logger.info("[queue] batch %s already enqueued; ignoring duplicate", batch_id)
            return batch_id

        logger.info("[queue] batch %s enqueued with %s attendance(s)", batch_id, len(ids))
        self._submit(batch_id)
        return batch_id

    def get_job(self, batch_id: str) -> WorkHourJob:
        job = self._jobs.get(batch_id)
        if not job:
            raise NotFoundError(f"Batch {batch_id} not found")
        return job

    def resume_unfinished(self) -> List[str]:
        """Resubmit jobs a previous process left PENDING, RUNNING or RETRYING."""
        resumed = []
        for job in self._jobs.list_unfinished():
            self._submit(job.batch_id)
            resumed.append(job.batch_id)
        if resumed:
            logger.info("[queue] resumed %s unfinished batch(es)", len(resumed))
        return resumed

    def recalculate_cutoff(self, cutoff_id: int, processed_by: int) -> str:
        processed_by = require_positive_int(processed_by, "processed_by")
        ids = list(self._attendance.list_processed_ids_for_cutoff(require_positive_int(cutoff_id, "cutoff_id")))
        if not ids:
            raise NotFoundError(f"No processed attendance found for cutoff {cutoff_id}")
        return self.enqueue(ids, processed_by)

    def on_attendance_finalized(self, event: AttendanceFinalized) -> None:
        self.enqueue(event.attendance_ids, event.processed_by, batch_id=event.batch_id)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _submit(self, batch_id: str) -> Future:
        return self._executor.submit(self._run_safely, batch_id)

    def _run_safely(self, batch_id: str) -> Optional[BatchResult]:
        try:
            return self.run(batch_id)
        except Exception:
            logger.exception("[queue] batch %s crashed outside of its attempts", batch_id)
            return None

    def run(self, batch_id: str) -> Optional[BatchResult]:
        """Execute a stored job with retries; returns None when it ends FAILED or was already finished."""
        job = self._jobs.get(batch_id)
        if job is None:
            logger.warning("[queue] batch %s vanished before it ran", batch_id)
            return None
        if job.finished:
            return None

        while True:
            job = replace(job, status=JobStatus.RUNNING, attempts=job.attempts + 1)
            self._jobs.save(job)
            try:
                result = self._processor.process(job)
            except Exception as exc:
                counts = exc.result if isinstance(exc, BatchFailedError) else None
                job = replace(
                    job,
                    processed_count=counts.processed if counts else job.processed_count,
                    failed_count=counts.failed if counts else job.failed_count,
                    last_error=str(exc),
                )
                if job.attempts >= self._max_attempts:
                    self._jobs.save(replace(job, status=JobStatus.FAILED))
                    logger.error(
                        "[queue] batch %s permanently failed after %s attempt(s): %s", batch_id, job.attempts, exc
                    )
                    return None
                delay = self.backoff_delay(job.attempts)
                job = replace(job, status=JobStatus.RETRYING)
                self._jobs.save(job)
                logger.warning(
                    "[queue] batch %s attempt %s failed (%s); retrying in %.0fs", batch_id, job.attempts, exc, delay
                )
                self._sleep(delay)
                continue

            self._jobs.save(
                replace(
                    job,
                    status=JobStatus.COMPLETED,
                    processed_count=result.processed,
                    failed_count=result.failed,
                    last_error=None,
                )
            )
            return result
