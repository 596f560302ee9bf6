from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import pooling

POOL_NAME = "family_care"


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 5

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "family_care")),
            pool_size=int(db_config.get("pool_size", 5)),
        )

    def connect_args(self, *, with_database: bool = True) -> dict:
        args = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "charset": "utf8mb4",
            "collation": "utf8mb4_unicode_ci",
        }
        if with_database:
            args["database"] = self.database
        return args


class DatabaseConnection:
    """Process-wide connection factory backed by a mysql-connector pool.

    Callers close what `connect()` returns; closing hands the connection back
    to the pool. The pool is created on first use.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        if self._pool is None:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=POOL_NAME,
                pool_size=self._config.pool_size,
                pool_reset_session=True,
                **self._config.connect_args(),
            )
        try:
            return self._pool.get_connection()
        except mysql.connector.errors.PoolError:
            # pool exhausted: fall back to a dedicated connection
            return mysql.connector.connect(**self._config.connect_args())
