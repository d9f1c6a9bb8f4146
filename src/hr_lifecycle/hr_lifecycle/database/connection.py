from __future__ import annotations

from dataclasses import dataclass

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """DB connection factory, one per configured database.

    Note: We create short-lived connections per operation; one connection is
    one transaction (see ``db_cursor``).
    """

    def __init__(self, config: DBConfig):
        self._config = config

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            autocommit=False,
            # Affected-row counts must mean "changed", not "matched"; the
            # check-in upsert relies on it.
            client_flags=[-ClientFlag.FOUND_ROWS],
        )
