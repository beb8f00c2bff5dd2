from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .local_store import LocalKeyValueStore


class MySQLKeyValueStore(LocalKeyValueStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT store_value FROM kv_store WHERE store_key=%s", (key,))
            r = fetchone(cur)
            return str(r["store_value"]) if r else None

    def set(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(store_key, store_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE store_value=VALUES(store_value)
                """,
                (key, value),
            )

    def remove(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE store_key=%s", (key,))
