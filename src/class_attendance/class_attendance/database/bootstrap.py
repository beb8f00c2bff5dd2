from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    sql = re.sub(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b.*?;\s*$", "", sql)
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def split_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ';', ignoring semicolons inside quoted literals."""
    buf: list[str] = []
    quote = None
    prev = ""

    for ch in sql:
        if quote:
            if ch == quote and prev != "\\":
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            prev = ch
            if stmt:
                yield stmt
            continue
        buf.append(ch)
        prev = "" if prev == "\\" else ch

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Apply schema.sql (idempotent: CREATE TABLE IF NOT EXISTS)."""
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        database=target.database,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        for stmt in split_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("schema applied to %s@%s/%s", target.user, target.host, target.database)
