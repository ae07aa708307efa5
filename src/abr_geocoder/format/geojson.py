from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any

from abr_geocoder.geocode.address_finder import format_residential_section
from abr_geocoder.geocode.query import Query

BLANK_CHAR = "�"


def format_address(query: Query) -> str:
    parts = [query.prefecture or "", query.city or "", query.town or ""]
    parts.append(format_residential_section(query.block, query.addr1, query.addr2))
    parts.append(query.residual_text)
    return "".join(parts)


def score(query: Query) -> float:
    """Share of the input consumed by resolution, 0.0 to 1.0."""
    if not query.original_input:
        return 0.0
    consumed = len(query.original_input) - len(query.residual_text)
    return round(max(consumed, 0) / len(query.original_input), 2)


def _or_blank(value: Any) -> Any:
    if value is None or value == "":
        return BLANK_CHAR
    return value


class NdGeoJsonTransform:
    mimetype = "application/json"

    def __init__(self, debug: bool = False):
        self.debug = debug

    def feature(self, query: Query) -> dict[str, Any]:
        properties: dict[str, Any] = {
            "input": query.original_input,
            "output": format_address(query),
            "score": score(query),
            "match_level": query.match_level.label,
            "lg_code": _or_blank(query.lg_code),
            "pref": _or_blank(query.prefecture),
            "county": BLANK_CHAR,
            "city": _or_blank(query.city),
            "ward": BLANK_CHAR,
            "machiaza_id": _or_blank(query.town_id),
            "oaza_cho": _or_blank(query.town),
            "chome": BLANK_CHAR,
            "koaza": BLANK_CHAR,
            "blk_num": _or_blank(query.block),
            "blk_id": _or_blank(query.block_id),
            "rsdt_num": _or_blank(query.addr1),
            "rsdt_id": _or_blank(query.addr1_id),
            "rsdt_num2": _or_blank(query.addr2),
            "rsdt2_id": _or_blank(query.addr2_id),
            "prc_num1": BLANK_CHAR,
            "prc_num2": BLANK_CHAR,
            "prc_num3": BLANK_CHAR,
            "prc_id": BLANK_CHAR,
            "lat": _or_blank(query.lat),
            "lon": _or_blank(query.lon),
            "coordinate_level": query.coordinate_level.label,
        }
        if self.debug:
            properties["debug_rsdtblk_key"] = query.rsdtblk_key
            properties["debug_rsdtdsp_key"] = query.rsdtdsp_key
        return {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [query.lon, query.lat]},
            "properties": properties,
        }

    def format(self, query: Query) -> str:
        return json.dumps(self.feature(query), ensure_ascii=False) + "\n"

    def __call__(self, queries: Iterable[Query]) -> Iterator[str]:
        for query in queries:
            yield self.format(query)
