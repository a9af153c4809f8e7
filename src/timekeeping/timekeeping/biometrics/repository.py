from __future__ import annotations

from typing import Protocol, Sequence

from .model import RawPunch


class DeviceBufferRepository(Protocol):
    def list_pending(self, device_id: str) -> Sequence[RawPunch]:
        raise NotImplementedError

    def clear(self, device_id: str) -> int:
        """Drop the device's buffered records; returns how many were removed."""

        raise NotImplementedError
