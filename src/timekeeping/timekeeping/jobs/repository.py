from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import WorkHourJob


class WorkHourJobRepository(Protocol):
    def create_if_absent(self, job: WorkHourJob) -> bool:
        """Store a new job; False when its batch id is already known."""

        raise NotImplementedError

    def get(self, batch_id: str) -> Optional[WorkHourJob]:
        raise NotImplementedError

    def save(self, job: WorkHourJob) -> None:
        raise NotImplementedError

    def list_unfinished(self) -> Sequence[WorkHourJob]:
        raise NotImplementedError
