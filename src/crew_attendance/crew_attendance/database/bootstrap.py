from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")


def _connect(db_config: dict, *, with_database: bool = True):
    kwargs = dict(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = str(db_config.get("database", "crew_attendance"))
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql stays usable whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside quotes. Line comments are dropped."""
    buf: list[str] = []
    quote = ""
    escape = False

    for line in sql.splitlines(keepends=True):
        if not quote and line.lstrip().startswith("--"):
            continue
        for ch in line:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif quote:
                if ch == quote:
                    quote = ""
            elif ch in ("'", '"'):
                quote = ch
            elif ch == ";":
                stmt = "".join(buf).strip()
                buf.clear()
                if stmt:
                    yield stmt
                continue
            buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    name = str(db_config.get("database", "crew_attendance"))
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
