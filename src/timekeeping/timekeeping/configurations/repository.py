from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceConfiguration


class AttendanceConfigurationRepository(Protocol):
    def get_for_organization(self, organization_id: Optional[int]) -> Optional[AttendanceConfiguration]:
        """Row for `organization_id`; `None` asks for the global row."""

        raise NotImplementedError
