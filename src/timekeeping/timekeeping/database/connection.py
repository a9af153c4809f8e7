from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "timekeeping_db"
    connection_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(db_config.get("host", defaults.host)),
            port=int(db_config.get("port", defaults.port)),
            user=str(db_config.get("user", defaults.user)),
            password=str(db_config.get("password", defaults.password)),
            database=str(db_config.get("database", defaults.database)),
            connection_timeout=int(db_config.get("connection_timeout", defaults.connection_timeout)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        kwargs = asdict(self)
        if not with_database:
            kwargs.pop("database")
        return kwargs


class DatabaseConnection:
    """Process-wide connection factory.

    Every repository call opens and closes its own connection; batch item
    workers therefore hold at most one connection each.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(autocommit=False, **self._config.connect_kwargs())
