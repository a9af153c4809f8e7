from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, DefaultDict, List, Optional, Sequence, Type, TypeVar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkTimeResponded:
    """A work-time request just got (or changed) its response."""

    request_id: int
    approved: Optional[bool]
    responder_id: int


@dataclass(frozen=True)
class AttendanceFinalized:
    """Punch ingestion for these attendances is over; they can be computed."""

    attendance_ids: Sequence[int]
    processed_by: int
    batch_id: Optional[str] = None


E = TypeVar("E")
Handler = Callable[[E], None]


class EventBus:
    """Synchronous in-process dispatcher with explicit, per-type subscriptions.

    Handlers run in subscription order on the publisher's thread, so publish()
    returns only after every subscriber has finished. A failing subscriber is
    logged and does not prevent the others from running.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[type, List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[E], handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def subscribers(self, event_type: type) -> List[Handler]:
        return list(self._handlers.get(event_type, []))

    def publish(self, event: object) -> None:
        for handler in self.subscribers(type(event)):
            try:
                handler(event)
            except Exception:
                logger.exception("[events] subscriber %r failed for %r", handler, event)
