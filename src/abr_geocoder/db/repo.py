from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterable, Mapping
from pathlib import Path

from abr_geocoder.db.schema import ensure_schema, get_table_schema

DEFAULT_DB_PATH = "data/abr_geocoder.sqlite3"
LIKE_ESCAPE_CHAR = "\\"


def resolve_db_path(db_path: str | Path | None = None) -> Path:
    value = db_path or os.getenv("SQLITE_DB_PATH") or DEFAULT_DB_PATH
    return Path(value).expanduser().resolve()


def connect(db_path: str | Path) -> sqlite3.Connection:
    path = ensure_schema(db_path)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    return conn


def escape_like(value: str) -> str:
    """Make ``%``, ``_`` and the escape char literal inside a LIKE pattern."""
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def insert_rows(conn: sqlite3.Connection, table: str, rows: Iterable[Mapping[str, object]]) -> int:
    schema = get_table_schema(table)
    placeholders = ", ".join("?" for _ in schema.columns)
    sql = f"INSERT OR REPLACE INTO {schema.name}({', '.join(schema.columns)}) VALUES ({placeholders})"
    count = 0
    for row in rows:
        conn.execute(sql, tuple(row.get(column) for column in schema.columns))
        count += 1
    conn.commit()
    return count
