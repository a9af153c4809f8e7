from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..jobs.model import BatchResult


class DomainError(Exception):
    """Base error for domain/service layer."""


class ValidationError(DomainError):
    pass


class NotFoundError(DomainError):
    pass


class ConflictError(DomainError):
    """The requested state transition was already taken."""


class DataInvariantError(DomainError):
    """Stored data cannot be used as-is (bad shift strings, broken totals, missing relation)."""


class BatchFailedError(DomainError):
    def __init__(self, result: "BatchResult"):
        super().__init__(
            f"batch {result.batch_id} failed: {result.failed}/{result.total} attendances could not be computed"
        )
        self.result = result
