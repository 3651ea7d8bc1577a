from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

CONNECT_TIMEOUT_SECONDS = 10


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "attendance_tracker"

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(db_config.get("host") or defaults.host),
            port=int(db_config.get("port") or defaults.port),
            user=str(db_config.get("user") or defaults.user),
            password=str(db_config.get("password") or ""),
            database=str(db_config.get("database") or defaults.database),
        )

    def describe(self) -> str:
        """Connection target without the password, for logs and script output."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Process-wide connection factory for one DBConfig.

    Every repository call opens its own short-lived connection, so one call is
    one transaction and nothing is shared between request threads.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        # Without a database the server connection can still CREATE DATABASE.
        params = {
            "host": self._config.host,
            "port": self._config.port,
            "user": self._config.user,
            "password": self._config.password,
            "autocommit": False,
            "connection_timeout": CONNECT_TIMEOUT_SECONDS,
            "use_pure": True,
        }
        if with_database:
            params["database"] = self._config.database
        return mysql.connector.connect(**params)
