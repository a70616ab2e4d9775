"""Development helpers: create the database and apply ``database/schema.sql``."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator

import mysql.connector

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def _connect(db_config: dict, *, with_database: bool = True):
    kwargs = {
        "host": str(db_config.get("host", "localhost")),
        "port": int(db_config.get("port", 3306)),
        "user": str(db_config.get("user", "root")),
        "password": str(db_config.get("password", "")),
        "use_pure": True,
    }
    if with_database:
        kwargs["database"] = str(db_config.get("database", "attendance_engine"))
    return mysql.connector.connect(**kwargs)


def iter_statements(sql: str) -> Iterator[str]:
    """Split a schema file on ';' after dropping ``--`` comment lines."""

    sql = re.sub(r"(?m)^\s*--.*$", "", sql)
    for stmt in sql.split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    name = str(db_config.get("database", "attendance_engine"))
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci")
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    sql = Path(schema_path).read_text(encoding="utf-8")

    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        for stmt in iter_statements(sql):
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
