from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from abr_geocoder.dataset.fields import DataField as F
from abr_geocoder.dataset.fields import columns


@dataclass(frozen=True)
class TableSchema:
    name: str
    ddl: str
    columns: tuple[str, ...]
    primary_key: tuple[str, ...]


TABLE_SCHEMAS: tuple[TableSchema, ...] = (
    TableSchema(
        name="city",
        ddl="""
        CREATE TABLE IF NOT EXISTS city (
            lg_code TEXT PRIMARY KEY,
            pref_name TEXT,
            county_name TEXT,
            city_name TEXT,
            od_city_name TEXT,
            rep_pnt_lat REAL,
            rep_pnt_lon REAL
        )
        """,
        columns=columns(
            F.LG_CODE,
            F.PREF_NAME,
            F.COUNTY_NAME,
            F.CITY_NAME,
            F.OD_CITY_NAME,
            F.REP_PNT_LAT,
            F.REP_PNT_LON,
        ),
        primary_key=columns(F.LG_CODE),
    ),
    TableSchema(
        name="town",
        ddl="""
        CREATE TABLE IF NOT EXISTS town (
            lg_code TEXT NOT NULL,
            town_id TEXT NOT NULL,
            oaza_town_name TEXT,
            chome_name TEXT,
            koaza_name TEXT,
            rsdt_addr_flg INTEGER,
            rep_pnt_lat REAL,
            rep_pnt_lon REAL,
            PRIMARY KEY(lg_code, town_id)
        )
        """,
        columns=columns(
            F.LG_CODE,
            F.TOWN_ID,
            F.OAZA_TOWN_NAME,
            F.CHOME_NAME,
            F.KOAZA_NAME,
            F.RSDT_ADDR_FLG,
            F.REP_PNT_LAT,
            F.REP_PNT_LON,
        ),
        primary_key=columns(F.LG_CODE, F.TOWN_ID),
    ),
    TableSchema(
        name="rsdtdsp_blk",
        ddl="""
        CREATE TABLE IF NOT EXISTS rsdtdsp_blk (
            lg_code TEXT NOT NULL,
            town_id TEXT NOT NULL,
            blk_id TEXT NOT NULL,
            blk_num TEXT,
            rep_pnt_lat REAL,
            rep_pnt_lon REAL,
            PRIMARY KEY(lg_code, town_id, blk_id)
        )
        """,
        columns=columns(F.LG_CODE, F.TOWN_ID, F.BLK_ID, F.BLK_NUM, F.REP_PNT_LAT, F.REP_PNT_LON),
        primary_key=columns(F.LG_CODE, F.TOWN_ID, F.BLK_ID),
    ),
    TableSchema(
        name="rsdtdsp_rsdt",
        ddl="""
        CREATE TABLE IF NOT EXISTS rsdtdsp_rsdt (
            lg_code TEXT NOT NULL,
            town_id TEXT NOT NULL,
            blk_id TEXT NOT NULL,
            addr_id TEXT NOT NULL,
            addr2_id TEXT NOT NULL DEFAULT '',
            rsdt_num TEXT,
            rsdt_num2 TEXT,
            rep_pnt_lat REAL,
            rep_pnt_lon REAL,
            PRIMARY KEY(lg_code, town_id, blk_id, addr_id, addr2_id)
        )
        """,
        columns=columns(
            F.LG_CODE,
            F.TOWN_ID,
            F.BLK_ID,
            F.ADDR_ID,
            F.ADDR2_ID,
            F.RSDT_NUM,
            F.RSDT_NUM2,
            F.REP_PNT_LAT,
            F.REP_PNT_LON,
        ),
        primary_key=columns(F.LG_CODE, F.TOWN_ID, F.BLK_ID, F.ADDR_ID, F.ADDR2_ID),
    ),
)

ADDITIVE_MIGRATION_COLUMNS: dict[str, dict[str, str]] = {
    "town": {
        "rep_pnt_lat": "REAL",
        "rep_pnt_lon": "REAL",
    },
}


class SchemaMismatchError(RuntimeError):
    pass


def get_table_schema(name: str) -> TableSchema:
    for table in TABLE_SCHEMAS:
        if table.name == name:
            return table
    raise KeyError(f"Unknown table: {name}")


def normalize_db_path(db_path: str | Path) -> Path:
    return Path(db_path).expanduser().resolve()


def ensure_schema(db_path: str | Path) -> Path:
    path = normalize_db_path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(path) as conn:
        conn.row_factory = sqlite3.Row
        for table in TABLE_SCHEMAS:
            conn.execute(table.ddl)
            info_rows = conn.execute(f"PRAGMA table_info({table.name})").fetchall()
            if not info_rows:
                raise SchemaMismatchError(f"Missing required table: {table.name}")

            actual = {row["name"] for row in info_rows}
            missing = [column for column in table.columns if column not in actual]
            if missing:
                migration_cols = ADDITIVE_MIGRATION_COLUMNS.get(table.name, {})
                migrated = False
                for column in missing:
                    column_type = migration_cols.get(column)
                    if column_type:
                        conn.execute(f"ALTER TABLE {table.name} ADD COLUMN {column} {column_type}")
                        migrated = True
                if migrated:
                    info_rows = conn.execute(f"PRAGMA table_info({table.name})").fetchall()
                    actual = {row["name"] for row in info_rows}

            if not set(table.columns).issubset(actual):
                missing_required = tuple(column for column in table.columns if column not in actual)
                existing = tuple(row["name"] for row in info_rows)
                raise SchemaMismatchError(
                    f"Schema mismatch on {table.name}. missing_required={missing_required} actual={existing}"
                )
    return path


def list_tables(conn: sqlite3.Connection) -> list[str]:
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ).fetchall()
    return [row[0] for row in rows]
