from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .model import AttendanceConfiguration
from .repository import AttendanceConfigurationRepository

logger = logging.getLogger(__name__)


class AttendanceConfigurationService:
    """Resolve the rules for an organization: its own row, else the global row, else defaults."""

    def __init__(self, configurations: AttendanceConfigurationRepository, *, defaults: Optional[Mapping[str, Any]] = None):
        self._configurations = configurations
        self._defaults = AttendanceConfiguration.from_mapping(defaults or {})

    def for_organization(self, organization_id: Optional[int]) -> AttendanceConfiguration:
        if organization_id is not None:
            config = self._configurations.get_for_organization(organization_id)
            if config:
                return config
        config = self._configurations.get_for_organization(None)
        if config:
            return config
        logger.debug("[config] no attendance configuration for org %s, using defaults", organization_id)
        return self._defaults
