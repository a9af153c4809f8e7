import os
from typing import Optional

_SETTINGS_MODULES = {
    "dev": "config.development",
    "development": "config.development",
    "test": "config.testing",
    "testing": "config.testing",
    "prod": "config.production",
    "production": "config.production",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted settings module for `env` (default: APP_ENV); unknown names mean development."""
    name = (env or os.getenv("APP_ENV") or "development").strip().lower()
    return _SETTINGS_MODULES.get(name, "config.development")
