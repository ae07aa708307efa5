import sqlite3

import pytest

from abr_geocoder.dataset.fields import DataField
from abr_geocoder.db.repo import connect
from abr_geocoder.db.schema import TABLE_SCHEMAS, SchemaMismatchError, ensure_schema, list_tables


def test_field_catalog_is_bijective() -> None:
    columns = [field.db_column for field in DataField]

    assert len(columns) == len(set(columns))
    for field in DataField:
        assert DataField.from_column(field.db_column) is field


def test_schema_columns_come_from_field_catalog() -> None:
    catalog = {field.db_column for field in DataField}
    for table in TABLE_SCHEMAS:
        assert set(table.columns) <= catalog
        assert set(table.primary_key) <= set(table.columns)


def test_ensure_schema_creates_reference_tables(tmp_path) -> None:
    conn = connect(tmp_path / "abr.sqlite3")
    try:
        assert list_tables(conn) == ["city", "rsdtdsp_blk", "rsdtdsp_rsdt", "town"]
    finally:
        conn.close()


def test_ensure_schema_migrates_town_rep_point(tmp_path) -> None:
    db = tmp_path / "legacy.sqlite3"
    with sqlite3.connect(db) as conn:
        conn.execute(
            """
            CREATE TABLE town (
                lg_code TEXT NOT NULL,
                town_id TEXT NOT NULL,
                oaza_town_name TEXT,
                chome_name TEXT,
                koaza_name TEXT,
                rsdt_addr_flg INTEGER,
                PRIMARY KEY(lg_code, town_id)
            )
            """
        )

    ensure_schema(db)

    with sqlite3.connect(db) as conn:
        columns = {row[1] for row in conn.execute("PRAGMA table_info(town)")}
    assert {"rep_pnt_lat", "rep_pnt_lon"} <= columns


def test_ensure_schema_rejects_missing_required_column(tmp_path) -> None:
    db = tmp_path / "broken.sqlite3"
    with sqlite3.connect(db) as conn:
        conn.execute("CREATE TABLE rsdtdsp_blk (lg_code TEXT, town_id TEXT, blk_id TEXT)")

    with pytest.raises(SchemaMismatchError):
        ensure_schema(db)
