from __future__ import annotations

import csv
import sqlite3
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from abr_geocoder.dataset.fields import DataField as F

# Header names used by the ABR mt_town_pos_prefXX.csv files.
CSV_HEADERS: dict[F, str] = {
    F.LG_CODE: "全国地方公共団体コード",
    F.TOWN_ID: "町字id",
    F.REP_PNT_LON: "代表点_経度",
    F.REP_PNT_LAT: "代表点_緯度",
}

UPDATE_TOWN_POS_SQL = f"""
    UPDATE town
    SET
        {F.REP_PNT_LON.db_column} = :{F.REP_PNT_LON.db_column},
        {F.REP_PNT_LAT.db_column} = :{F.REP_PNT_LAT.db_column}
    WHERE
        {F.LG_CODE.db_column} = :{F.LG_CODE.db_column} AND
        {F.TOWN_ID.db_column} = :{F.TOWN_ID.db_column}
"""


@dataclass(frozen=True)
class TownPosition:
    lg_code: str
    town_id: str
    lat: float
    lon: float


def _to_float(value: str | None) -> float | None:
    text = (value or "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def parse_town_pos_rows(rows: Iterable[Mapping[str, str]]) -> list[TownPosition]:
    positions: list[TownPosition] = []
    for row in rows:
        lg_code = (row.get(CSV_HEADERS[F.LG_CODE]) or "").strip()
        town_id = (row.get(CSV_HEADERS[F.TOWN_ID]) or "").strip()
        lat = _to_float(row.get(CSV_HEADERS[F.REP_PNT_LAT]))
        lon = _to_float(row.get(CSV_HEADERS[F.REP_PNT_LON]))
        if not lg_code or not town_id or lat is None or lon is None:
            continue
        positions.append(TownPosition(lg_code=lg_code, town_id=town_id, lat=lat, lon=lon))
    return positions


def load_town_pos_csv(path: str | Path) -> list[TownPosition]:
    with Path(path).open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            raise ValueError("town pos csv header missing")
        return parse_town_pos_rows(reader)


def update_town_positions(conn: sqlite3.Connection, positions: Iterable[TownPosition]) -> int:
    updated = 0
    for pos in positions:
        cur = conn.execute(
            UPDATE_TOWN_POS_SQL,
            {
                F.LG_CODE.db_column: pos.lg_code,
                F.TOWN_ID.db_column: pos.town_id,
                F.REP_PNT_LAT.db_column: pos.lat,
                F.REP_PNT_LON.db_column: pos.lon,
            },
        )
        updated += cur.rowcount
    conn.commit()
    return updated
