from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any

from abr_geocoder.format.schemas import GeocodeRecord, GeocodeResult, QueryInput
from abr_geocoder.geocode.query import Query


def to_record(query: Query) -> GeocodeRecord:
    return GeocodeRecord(
        query=QueryInput(input=query.original_input),
        result=GeocodeResult(
            prefecture=query.prefecture,
            match_level=int(query.match_level),
            city=query.city,
            town=query.town,
            town_id=query.town_id,
            lg_code=query.lg_code,
            other=query.residual_text,
            lat=query.lat,
            lon=query.lon,
            block=query.block,
            block_id=query.block_id,
            addr1=query.addr1,
            addr1_id=query.addr1_id,
            addr2=query.addr2,
            addr2_id=query.addr2_id,
        ),
    )


def to_payload(query: Query) -> dict[str, Any]:
    return to_record(query).model_dump(exclude_none=True)


class NdJsonTransform:
    mimetype = "application/x-ndjson"

    def format(self, query: Query) -> str:
        return json.dumps(to_payload(query), ensure_ascii=False) + "\n"

    def __call__(self, queries: Iterable[Query]) -> Iterator[str]:
        for query in queries:
            yield self.format(query)
