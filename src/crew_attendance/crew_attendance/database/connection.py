from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connection_timeout: int = 10


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation; the driver's own
    connect timeout is the only timeout applied.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=int(self._config.connection_timeout),
            charset="utf8mb4",
            collation="utf8mb4_unicode_ci",
            # rowcount = matched rows, not changed rows
            client_flags=[ClientFlag.FOUND_ROWS],
        )
