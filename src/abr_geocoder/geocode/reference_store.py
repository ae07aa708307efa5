from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import and_, bindparam, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from abr_geocoder.dataset.fields import DataField as F
from abr_geocoder.db import tables
from abr_geocoder.db.repo import LIKE_ESCAPE_CHAR, escape_like
from abr_geocoder.db.tables import col
from abr_geocoder.geocode.errors import ReferenceStoreError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TownBlock:
    lg_code: str
    town_id: str
    blk_id: str
    pref: str
    city: str
    town: str
    blk: str
    lat: float | None
    lon: float | None


@dataclass(frozen=True)
class RsdtAddr:
    lg_code: str
    town_id: str
    blk_id: str
    addr1_id: str
    addr2_id: str
    blk: str
    addr1: str
    addr2: str
    lat: float | None
    lon: float | None


class ReferenceStore(Protocol):
    async def get_block_list(self, prefecture: str, city: str, town: str) -> list[TownBlock]: ...

    async def get_rsdt_list(self, prefecture: str, city: str, town: str) -> list[RsdtAddr]: ...


def _joined(*columns: Any) -> Any:
    expr = func.coalesce(columns[0], "")
    for column in columns[1:]:
        expr = expr + func.coalesce(column, "")
    return expr


def _like(expr: Any, name: str) -> Any:
    return expr.like(bindparam(name), escape=LIKE_ESCAPE_CHAR)


_city, _town, _blk, _rsdt = tables.city, tables.town, tables.rsdtdsp_blk, tables.rsdtdsp_rsdt

CITY_NAME_EXPR = _joined(col(_city, F.COUNTY_NAME), col(_city, F.CITY_NAME), col(_city, F.OD_CITY_NAME))
TOWN_NAME_EXPR = _joined(col(_town, F.OAZA_TOWN_NAME), col(_town, F.CHOME_NAME))

_SCOPE_JOIN = _city.join(
    _town,
    and_(
        col(_town, F.LG_CODE) == col(_city, F.LG_CODE),
        _like(TOWN_NAME_EXPR, "town"),
    ),
).join(
    _blk,
    and_(
        col(_blk, F.LG_CODE) == col(_city, F.LG_CODE),
        col(_blk, F.TOWN_ID) == col(_town, F.TOWN_ID),
    ),
)

_SCOPE_WHERE = (
    _like(col(_city, F.PREF_NAME), "prefecture"),
    _like(CITY_NAME_EXPR, "city"),
    col(_blk, F.BLK_NUM).is_not(None),
)

BLOCK_LIST_STATEMENT = (
    select(
        col(_blk, F.LG_CODE).label("lg_code"),
        col(_blk, F.TOWN_ID).label("town_id"),
        col(_blk, F.BLK_ID).label("blk_id"),
        col(_city, F.PREF_NAME).label("pref"),
        CITY_NAME_EXPR.label("city"),
        TOWN_NAME_EXPR.label("town"),
        col(_blk, F.BLK_NUM).label("blk"),
        col(_blk, F.REP_PNT_LAT).label("lat"),
        col(_blk, F.REP_PNT_LON).label("lon"),
    )
    .select_from(_SCOPE_JOIN)
    .where(*_SCOPE_WHERE)
)

RSDT_LIST_STATEMENT = (
    select(
        col(_rsdt, F.LG_CODE).label("lg_code"),
        col(_rsdt, F.TOWN_ID).label("town_id"),
        col(_rsdt, F.BLK_ID).label("blk_id"),
        col(_rsdt, F.ADDR_ID).label("addr1_id"),
        col(_rsdt, F.ADDR2_ID).label("addr2_id"),
        col(_blk, F.BLK_NUM).label("blk"),
        col(_rsdt, F.RSDT_NUM).label("addr1"),
        col(_rsdt, F.RSDT_NUM2).label("addr2"),
        col(_rsdt, F.REP_PNT_LAT).label("lat"),
        col(_rsdt, F.REP_PNT_LON).label("lon"),
    )
    .select_from(
        _SCOPE_JOIN.join(
            _rsdt,
            and_(
                col(_rsdt, F.LG_CODE) == col(_city, F.LG_CODE),
                col(_rsdt, F.TOWN_ID) == col(_town, F.TOWN_ID),
                col(_rsdt, F.BLK_ID) == col(_blk, F.BLK_ID),
            ),
        )
    )
    .where(
        *_SCOPE_WHERE,
        (col(_rsdt, F.RSDT_NUM).is_not(None)) | (col(_rsdt, F.RSDT_NUM2).is_not(None)),
    )
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _float(value: Any) -> float | None:
    return None if value is None else float(value)


class SqlReferenceStore:
    """Reads blocks and residential units from the SQLite reference database.

    The methods are coroutines. Each SQLAlchemy call runs in a worker thread.
    """

    def __init__(self, engine: Engine, wildcard_helper: Callable[[str], str] = escape_like):
        self._engine = engine
        self._wildcard_helper = wildcard_helper

    def _params(self, prefecture: str, city: str, town: str) -> dict[str, str]:
        return {
            "prefecture": self._wildcard_helper(prefecture),
            "city": self._wildcard_helper(city),
            "town": self._wildcard_helper(town),
        }

    def _fetch(self, statement: Any, params: dict[str, str]) -> list[Any]:
        try:
            with self._engine.connect() as conn:
                return list(conn.execute(statement, params).mappings())
        except SQLAlchemyError as exc:
            raise ReferenceStoreError(f"reference lookup failed: {exc}") from exc

    async def get_block_list(self, prefecture: str, city: str, town: str) -> list[TownBlock]:
        rows = await asyncio.to_thread(self._fetch, BLOCK_LIST_STATEMENT, self._params(prefecture, city, town))
        LOGGER.debug("block candidates pref=%s city=%s town=%s count=%d", prefecture, city, town, len(rows))
        return [
            TownBlock(
                lg_code=_text(row["lg_code"]),
                town_id=_text(row["town_id"]),
                blk_id=_text(row["blk_id"]),
                pref=_text(row["pref"]),
                city=_text(row["city"]),
                town=_text(row["town"]),
                blk=_text(row["blk"]),
                lat=_float(row["lat"]),
                lon=_float(row["lon"]),
            )
            for row in rows
        ]

    async def get_rsdt_list(self, prefecture: str, city: str, town: str) -> list[RsdtAddr]:
        rows = await asyncio.to_thread(self._fetch, RSDT_LIST_STATEMENT, self._params(prefecture, city, town))
        LOGGER.debug("rsdt candidates pref=%s city=%s town=%s count=%d", prefecture, city, town, len(rows))
        return [
            RsdtAddr(
                lg_code=_text(row["lg_code"]),
                town_id=_text(row["town_id"]),
                blk_id=_text(row["blk_id"]),
                addr1_id=_text(row["addr1_id"]),
                addr2_id=_text(row["addr2_id"]),
                blk=_text(row["blk"]),
                addr1=_text(row["addr1"]),
                addr2=_text(row["addr2"]),
                lat=_float(row["lat"]),
                lon=_float(row["lon"]),
            )
            for row in rows
        ]
