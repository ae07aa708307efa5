from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import os
import sys
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import TextIO

from abr_geocoder import messages
from abr_geocoder.db.database import create_reference_engine
from abr_geocoder.db.repo import resolve_db_path
from abr_geocoder.format import FORMATS, get_transform
from abr_geocoder.geocode.address_finder import AddressFinder
from abr_geocoder.geocode.query import CoordinateLevel, MatchLevel, Query
from abr_geocoder.geocode.reference_store import SqlReferenceStore
from abr_geocoder.normalize.jp import normalize_residual
from abr_geocoder.util.text import normalize_admin_name

LOGGER = logging.getLogger(__name__)

INPUT_COLUMNS = ("input", "prefecture", "city", "town", "town_id", "lg_code", "other", "lat", "lon")


def _optional_float(value: str | None) -> float | None:
    text = (value or "").strip()
    return float(text) if text else None


def query_from_row(row: Mapping[str, str]) -> Query:
    """Build a query from one upstream-resolved CSV row."""
    original = row.get("input") or ""
    residual = row.get("other")
    prefecture = normalize_admin_name(row.get("prefecture")) or None
    city = normalize_admin_name(row.get("city")) or None
    town = normalize_admin_name(row.get("town")) or None
    level = MatchLevel.UNKNOWN
    for value, candidate in ((prefecture, MatchLevel.PREFECTURE), (city, MatchLevel.CITY), (town, MatchLevel.MACHIAZA)):
        if not value:
            break
        level = candidate
    lat = _optional_float(row.get("lat"))
    lon = _optional_float(row.get("lon"))
    return Query.create(
        original,
        residual_text=normalize_residual(residual if residual is not None else original),
        prefecture=prefecture,
        city=city,
        town=town,
        town_id=(row.get("town_id") or None),
        lg_code=(row.get("lg_code") or None),
        lat=lat,
        lon=lon,
        match_level=level,
        coordinate_level=level if lat is not None and lon is not None else CoordinateLevel.UNKNOWN,
    )


def read_queries(fp: TextIO) -> list[Query]:
    reader = csv.DictReader(fp)
    if reader.fieldnames is None:
        raise ValueError(messages.to_string(messages.Message.INPUT_HEADER_MISSING))
    return [query_from_row({k: (v or "") for k, v in row.items()}) for row in reader]


async def geocode_all(finder: AddressFinder, queries: Iterable[Query]) -> list[Query]:
    results: list[Query] = []
    for query in queries:
        results.append(await finder.find(query))
    return results


def run(db_path: str | Path, input_fp: TextIO, output_fp: TextIO, fmt: str = "ndjson", debug: bool = False) -> list[Query]:
    engine = create_reference_engine(db_path)
    try:
        finder = AddressFinder(SqlReferenceStore(engine))
        results = asyncio.run(geocode_all(finder, read_queries(input_fp)))
    finally:
        engine.dispose()

    transform = get_transform(fmt, debug=debug)
    for chunk in transform(results):
        output_fp.write(chunk)
    return results


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m abr_geocoder.cli.geocode",
        description="Resolve block / residential numbers for town-resolved addresses",
    )
    parser.add_argument("--db", default=os.getenv("SQLITE_DB_PATH", "data/abr_geocoder.sqlite3"))
    parser.add_argument("--in", dest="input_csv", default="-", help="CSV with columns: " + ",".join(INPUT_COLUMNS))
    parser.add_argument("--out", dest="output", default="-")
    parser.add_argument("--format", choices=FORMATS, default="ndjson")
    parser.add_argument("--locale", choices=[locale.value for locale in messages.Locale], default=None)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if args.locale:
        messages.set_locale(args.locale)

    db_path = resolve_db_path(args.db)
    LOGGER.info(messages.to_string(messages.Message.DB_PATH, path=db_path))
    LOGGER.info(messages.to_string(messages.Message.START_GEOCODING))

    input_fp = sys.stdin if args.input_csv == "-" else open(args.input_csv, "r", encoding="utf-8-sig", newline="")
    output_fp = sys.stdout if args.output == "-" else open(args.output, "w", encoding="utf-8", newline="")
    try:
        results = run(db_path, input_fp, output_fp, fmt=args.format, debug=args.debug)
    finally:
        if input_fp is not sys.stdin:
            input_fp.close()
        if output_fp is not sys.stdout:
            output_fp.close()

    resolved = sum(1 for q in results if q.match_level >= MatchLevel.RESIDENTIAL_BLOCK)
    LOGGER.info(messages.to_string(messages.Message.GEOCODED_COUNT, count=resolved))
    LOGGER.info(messages.to_string(messages.Message.UNRESOLVED_COUNT, count=len(results) - resolved))
    if args.output != "-":
        LOGGER.info(messages.to_string(messages.Message.OUTPUT_WRITTEN, path=args.output))


if __name__ == "__main__":
    main()
