from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Iterator

from abr_geocoder.geocode.query import Query

CSV_COLUMNS = (
    "input",
    "match_level",
    "lg_code",
    "prefecture",
    "city",
    "town",
    "town_id",
    "block",
    "block_id",
    "addr1",
    "addr1_id",
    "addr2",
    "addr2_id",
    "other",
    "lat",
    "lon",
)


def to_row(query: Query) -> dict[str, str]:
    values = {
        "input": query.original_input,
        "match_level": query.match_level.label,
        "lg_code": query.lg_code,
        "prefecture": query.prefecture,
        "city": query.city,
        "town": query.town,
        "town_id": query.town_id,
        "block": query.block,
        "block_id": query.block_id,
        "addr1": query.addr1,
        "addr1_id": query.addr1_id,
        "addr2": query.addr2,
        "addr2_id": query.addr2_id,
        "other": query.residual_text,
        "lat": query.lat,
        "lon": query.lon,
    }
    return {k: "" if v is None else str(v) for k, v in values.items()}


class CsvTransform:
    mimetype = "text/csv"

    def __call__(self, queries: Iterable[Query]) -> Iterator[str]:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
        writer.writeheader()
        yield self._drain(buffer)
        for query in queries:
            writer.writerow(to_row(query))
            yield self._drain(buffer)

    @staticmethod
    def _drain(buffer: io.StringIO) -> str:
        value = buffer.getvalue()
        buffer.seek(0)
        buffer.truncate(0)
        return value
