import asyncio
import logging

from abr_geocoder.geocode.address_finder import AddressFinder, ResidentialIndex, format_residential_section
from abr_geocoder.geocode.query import MatchLevel, Query
from abr_geocoder.geocode.reference_store import RsdtAddr, TownBlock


class FakeStore:
    def __init__(self, blocks: list[TownBlock], rsdts: list[RsdtAddr]):
        self.blocks = blocks
        self.rsdts = rsdts
        self.calls: list[tuple[str, str, str, str]] = []

    async def get_block_list(self, prefecture: str, city: str, town: str) -> list[TownBlock]:
        self.calls.append(("blk", prefecture, city, town))
        return list(self.blocks)

    async def get_rsdt_list(self, prefecture: str, city: str, town: str) -> list[RsdtAddr]:
        self.calls.append(("rsdt", prefecture, city, town))
        return list(self.rsdts)


def _block(blk: str, lat: float = 35.0, lon: float = 139.0) -> TownBlock:
    return TownBlock(
        lg_code="131016",
        town_id="0056000",
        blk_id=blk.zfill(3),
        pref="東京都",
        city="千代田区",
        town="紀尾井町",
        blk=blk,
        lat=lat,
        lon=lon,
    )


def _rsdt(
    blk: str, addr1: str = "", addr2: str = "", lat: float | None = 35.1, lon: float | None = 139.1
) -> RsdtAddr:
    return RsdtAddr(
        lg_code="131016",
        town_id="0056000",
        blk_id=blk.zfill(3),
        addr1_id=addr1.zfill(3) if addr1 else "",
        addr2_id=addr2.zfill(3) if addr2 else "",
        blk=blk,
        addr1=addr1,
        addr2=addr2,
        lat=lat,
        lon=lon,
    )


def _query(residual: str) -> Query:
    return Query.create(
        f"東京都千代田区紀尾井町{residual}",
        residual_text=residual,
        prefecture="東京都",
        city="千代田区",
        town="紀尾井町",
        town_id="0056000",
        lg_code="131016",
        match_level=MatchLevel.MACHIAZA,
    )


def _find(store: FakeStore, query: Query) -> Query:
    return asyncio.run(AddressFinder(store).find(query))


def test_format_residential_section_skips_empty_parts() -> None:
    assert format_residential_section("1", "2", "3") == "1-2-3"
    assert format_residential_section("1", "", "3") == "1-3"
    assert format_residential_section("1", None, None) == "1"
    assert format_residential_section() == ""


def test_block_addr1_match_sets_residential_fields() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "3", lat=35.681411, lon=139.73495)])

    result = _find(store, _query("1-3"))

    assert result.block == "1"
    assert result.block_id == "001"
    assert result.addr1 == "3"
    assert result.addr1_id == "003"
    assert result.addr2 == ""
    assert result.residual_text == ""
    assert (result.lat, result.lon) == (35.681411, 139.73495)
    assert result.match_level == MatchLevel.RESIDENTIAL_DETAIL
    assert result.coordinate_level == MatchLevel.RESIDENTIAL_DETAIL
    assert result.rsdtdsp_key == "1-3"


def test_block_only_match_reprepends_addr1() -> None:
    store = FakeStore([_block("2")], [_rsdt("2", lat=35.5, lon=139.4), _rsdt("3", "1")])

    result = _find(store, _query("2-22"))

    assert result.block == "2"
    assert result.block_id == "002"
    assert result.addr1 is None
    assert result.residual_text == "-22"
    assert (result.lat, result.lon) == (35.5, 139.4)
    assert result.match_level == MatchLevel.RESIDENTIAL_BLOCK


def test_missing_block_key_returns_query_unchanged() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "1"), _rsdt("1", "2")])
    query = _query("1")

    result = _find(store, query)

    assert result == query


def test_no_blocks_returns_query_unchanged() -> None:
    store = FakeStore([], [_rsdt("1", "3")])
    query = _query("1-3 ビル")

    result = _find(store, query)

    assert result == query
    assert [call[0] for call in store.calls] == ["blk"]


def test_full_key_wins_over_partial_and_block_keys() -> None:
    store = FakeStore(
        [_block("1")],
        [
            _rsdt("1", lat=1.0, lon=1.0),
            _rsdt("1", "2", lat=2.0, lon=2.0),
            _rsdt("1", "2", "3", lat=3.0, lon=3.0),
        ],
    )

    result = _find(store, _query("1-2-3"))

    assert (result.block, result.addr1, result.addr2) == ("1", "2", "3")
    assert result.addr2_id == "003"
    assert (result.lat, result.lon) == (3.0, 3.0)
    assert result.residual_text == ""


def test_partial_key_reprepends_addr2_before_remaining_text() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "2", lat=2.0, lon=2.0)])

    result = _find(store, _query("1-2-3 東京ガーデンテラス"))

    assert (result.block, result.addr1) == ("1", "2")
    assert result.addr1_id == "002"
    assert result.residual_text == "-3 東京ガーデンテラス"
    assert result.match_level == MatchLevel.RESIDENTIAL_DETAIL


def test_block_key_reprepends_addr1_addr2_and_remaining_text() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", lat=1.0, lon=1.0)])

    result = _find(store, _query("1-2-3階"))

    assert result.block == "1"
    assert result.residual_text == "-2-3階"


def test_residual_without_leading_number_is_unchanged() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "3")])

    for residual in ("東京ガーデンテラス", "01-3", "", "-1-3"):
        query = _query(residual)
        assert _find(store, query) == query


def test_numbers_beyond_three_parts_stay_in_residual() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "2", "3")])

    result = _find(store, _query("1-2-3-4"))

    assert (result.block, result.addr1, result.addr2) == ("1", "2", "3")
    assert result.residual_text == "-4"


def test_input_query_is_not_mutated_by_find() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "3")])
    query = _query("1-3")
    before = query.to_dict()

    _find(store, query)

    assert query.to_dict() == before


def test_query_without_town_is_skipped() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "3")])
    query = Query.create("東京都千代田区1-3", residual_text="1-3", prefecture="東京都", city="千代田区")

    assert _find(store, query) == query
    assert store.calls == []


def test_duplicate_keys_last_row_wins_with_warning(caplog) -> None:
    first = _rsdt("1", "3", lat=1.0, lon=1.0)
    second = _rsdt("1", "3", lat=2.0, lon=2.0)

    with caplog.at_level(logging.WARNING, logger="abr_geocoder.geocode.address_finder"):
        index = ResidentialIndex([first, second])

    assert len(index) == 1
    assert index.get("1-3") == second
    assert "duplicate residential key=1-3" in caplog.text


def _located_query(residual: str) -> Query:
    return _query(residual).copy(lat=35.68, lon=139.73, coordinate_level=MatchLevel.MACHIAZA)


def test_row_without_coordinates_keeps_resolved_position() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "3", lat=None, lon=None)])

    result = _find(store, _located_query("1-3"))

    assert (result.block, result.addr1) == ("1", "3")
    assert result.match_level == MatchLevel.RESIDENTIAL_DETAIL
    assert (result.lat, result.lon) == (35.68, 139.73)
    assert result.coordinate_level == MatchLevel.MACHIAZA


def test_block_row_without_coordinates_keeps_resolved_position() -> None:
    store = FakeStore([_block("2")], [_rsdt("2", lat=None, lon=None)])

    result = _find(store, _located_query("2-22"))

    assert result.block == "2"
    assert result.residual_text == "-22"
    assert result.match_level == MatchLevel.RESIDENTIAL_BLOCK
    assert (result.lat, result.lon) == (35.68, 139.73)
    assert result.coordinate_level == MatchLevel.MACHIAZA


def test_row_with_coordinates_raises_coordinate_level() -> None:
    store = FakeStore([_block("1")], [_rsdt("1", "3", lat=35.681411, lon=139.73495)])

    result = _find(store, _located_query("1-3"))

    assert (result.lat, result.lon) == (35.681411, 139.73495)
    assert result.coordinate_level == MatchLevel.RESIDENTIAL_DETAIL
