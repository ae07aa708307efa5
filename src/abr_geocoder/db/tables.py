from __future__ import annotations

from sqlalchemy import Column, Float, Integer, MetaData, String, Table

from abr_geocoder.dataset.fields import COORDINATE_FIELDS, DataField
from abr_geocoder.db.schema import TABLE_SCHEMAS

metadata = MetaData()


def _column(name: str, primary_key: bool) -> Column:
    field = DataField.from_column(name)
    if field in COORDINATE_FIELDS:
        column_type = Float()
    elif field is DataField.RSDT_ADDR_FLG:
        column_type = Integer()
    else:
        column_type = String()
    return Column(name, column_type, primary_key=primary_key)


def _build_table(name: str) -> Table:
    schema = next(table for table in TABLE_SCHEMAS if table.name == name)
    return Table(
        schema.name,
        metadata,
        *(_column(column, column in schema.primary_key) for column in schema.columns),
    )


city = _build_table("city")
town = _build_table("town")
rsdtdsp_blk = _build_table("rsdtdsp_blk")
rsdtdsp_rsdt = _build_table("rsdtdsp_rsdt")


def col(table: Table, field: DataField) -> Column:
    return table.c[field.db_column]
