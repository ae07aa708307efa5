from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from abr_geocoder.geocode.errors import UnresolvedBlockKey
from abr_geocoder.geocode.query import CoordinateLevel, MatchLevel, Query
from abr_geocoder.geocode.reference_store import ReferenceStore, RsdtAddr

LOGGER = logging.getLogger(__name__)

RE_BLOCK_ADDR_NUMBERS = re.compile(r"^([1-9][0-9]*)(?:-([1-9][0-9]*))?(?:-([1-9][0-9]*))?")


def format_residential_section(
    block_num: str | None = None,
    addr1: str | None = None,
    addr2: str | None = None,
) -> str:
    return "-".join(part for part in (block_num, addr1, addr2) if part)


def _row_key(row: RsdtAddr) -> str:
    return format_residential_section(row.blk, row.addr1, row.addr2)


def _position(row: RsdtAddr, level: CoordinateLevel) -> dict[str, object]:
    # rows without a representative point keep the coordinates already resolved
    if row.lat is None or row.lon is None:
        return {}
    return {"lat": row.lat, "lon": row.lon, "coordinate_level": level}


class ResidentialIndex:
    """Residential Section Key -> row.

    Rows are indexed longest key first. Two rows with the same key in one
    town scope are a data defect; the later row replaces the earlier one and
    a warning is logged.
    """

    def __init__(self, rows: Iterable[RsdtAddr]):
        self._rows: dict[str, RsdtAddr] = {}
        for row in sorted(rows, key=lambda r: len(_row_key(r)), reverse=True):
            key = _row_key(row)
            previous = self._rows.get(key)
            if previous is not None and previous != row:
                LOGGER.warning(
                    "duplicate residential key=%s lg_code=%s town_id=%s replaced blk_id=%s addr1_id=%s",
                    key,
                    row.lg_code,
                    row.town_id,
                    previous.blk_id,
                    previous.addr1_id,
                )
            self._rows[key] = row

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, key: object) -> bool:
        return key in self._rows

    def get(self, key: str) -> RsdtAddr | None:
        return self._rows.get(key)

    def block(self, block_num: str) -> RsdtAddr:
        row = self._rows.get(block_num)
        if row is None:
            raise UnresolvedBlockKey(block_num)
        return row


class AddressFinder:
    """Resolves the block and residential unit at the head of the residual text.

    The query must already carry prefecture, city and town. A query that
    cannot be resolved any further is returned unchanged.
    """

    def __init__(self, store: ReferenceStore):
        self._store = store

    async def find(self, query: Query) -> Query:
        if not (query.prefecture and query.city and query.town):
            return query

        town_blocks = await self._store.get_block_list(query.prefecture, query.city, query.town)
        if not town_blocks:
            # no residential display system in this town
            LOGGER.debug("no blocks for %s%s%s", query.prefecture, query.city, query.town)
            return query

        index = ResidentialIndex(await self._store.get_rsdt_list(query.prefecture, query.city, query.town))

        m = RE_BLOCK_ADDR_NUMBERS.match(query.residual_text)
        if not m:
            LOGGER.debug("no leading block number in %r", query.residual_text)
            return query
        block_num, addr1, addr2 = m.group(1), m.group(2), m.group(3)
        consumed = query.copy(residual_text=query.residual_text[m.end() :])

        # 1-1-1 (or 1-1)
        if addr1:
            full_key = format_residential_section(block_num, addr1, addr2)
            rsdt = index.get(full_key)
            if rsdt is not None:
                return consumed.copy(
                    block=rsdt.blk,
                    block_id=rsdt.blk_id,
                    addr1=addr1,
                    addr1_id=rsdt.addr1_id,
                    addr2=addr2 or "",
                    addr2_id=rsdt.addr2_id,
                    match_level=MatchLevel.RESIDENTIAL_DETAIL,
                    **_position(rsdt, CoordinateLevel.RESIDENTIAL_DETAIL),
                    rsdtblk_key=block_num,
                    rsdtdsp_key=full_key,
                )

        # 1-1, leaving "-1" for later stages
        if addr1 and addr2:
            partial_key = format_residential_section(block_num, addr1)
            rsdt = index.get(partial_key)
            if rsdt is not None:
                return consumed.copy(
                    block=rsdt.blk,
                    block_id=rsdt.blk_id,
                    addr1=rsdt.addr1,
                    addr1_id=rsdt.addr1_id,
                    addr2=rsdt.addr2,
                    addr2_id=rsdt.addr2_id,
                    match_level=MatchLevel.RESIDENTIAL_DETAIL,
                    **_position(rsdt, CoordinateLevel.RESIDENTIAL_DETAIL),
                    residual_text=f"-{addr2}{consumed.residual_text}",
                    rsdtblk_key=block_num,
                    rsdtdsp_key=partial_key,
                )

        # 1
        try:
            rsdt = index.block(block_num)
        except UnresolvedBlockKey as exc:
            LOGGER.debug("%s (input=%s)", exc, query.original_input)
            return query

        unmatched = "".join(
            [
                f"-{addr1}" if addr1 else "",
                f"-{addr2}" if addr2 else "",
                consumed.residual_text,
            ]
        )
        return consumed.copy(
            block=rsdt.blk,
            block_id=rsdt.blk_id,
            match_level=MatchLevel.RESIDENTIAL_BLOCK,
            **_position(rsdt, CoordinateLevel.RESIDENTIAL_BLOCK),
            residual_text=unmatched,
            rsdtblk_key=block_num,
        )
