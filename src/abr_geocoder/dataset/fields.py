from __future__ import annotations

from enum import Enum, unique


@unique
class DataField(Enum):
    """Semantic address attribute -> column name in the reference database."""

    LG_CODE = "lg_code"
    PREF_NAME = "pref_name"
    COUNTY_NAME = "county_name"
    CITY_NAME = "city_name"
    OD_CITY_NAME = "od_city_name"
    TOWN_ID = "town_id"
    OAZA_TOWN_NAME = "oaza_town_name"
    CHOME_NAME = "chome_name"
    KOAZA_NAME = "koaza_name"
    RSDT_ADDR_FLG = "rsdt_addr_flg"
    BLK_ID = "blk_id"
    BLK_NUM = "blk_num"
    ADDR_ID = "addr_id"
    ADDR2_ID = "addr2_id"
    RSDT_NUM = "rsdt_num"
    RSDT_NUM2 = "rsdt_num2"
    REP_PNT_LAT = "rep_pnt_lat"
    REP_PNT_LON = "rep_pnt_lon"

    @property
    def db_column(self) -> str:
        return self.value

    @classmethod
    def from_column(cls, column: str) -> "DataField":
        return cls(column)


COORDINATE_FIELDS = frozenset({DataField.REP_PNT_LAT, DataField.REP_PNT_LON})


def columns(*fields: DataField) -> tuple[str, ...]:
    return tuple(field.db_column for field in fields)
