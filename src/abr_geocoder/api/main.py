from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, status

from abr_geocoder.db.database import get_engine
from abr_geocoder.db.repo import resolve_db_path
from abr_geocoder.format.ndjson import to_record
from abr_geocoder.format.schemas import GeocodeRecord
from abr_geocoder.geocode.address_finder import AddressFinder
from abr_geocoder.geocode.errors import ReferenceStoreError
from abr_geocoder.geocode.query import MatchLevel
from abr_geocoder.geocode.query import Query as GeocodeQuery
from abr_geocoder.geocode.reference_store import SqlReferenceStore
from abr_geocoder.normalize.jp import normalize_residual
from abr_geocoder.util.text import normalize_admin_name

app = FastAPI(title="ABR Geocoder")


def _db_status() -> str:
    if not resolve_db_path().is_file():
        return "missing"
    try:
        with get_engine().connect():
            return "ok"
    except Exception:
        return "error"


@app.get("/health")
def health():
    return {
        "status": "ok",
        "app": app.title,
        "time": datetime.now(timezone.utc).isoformat(),
        "db": _db_status(),
    }


def get_finder() -> AddressFinder:
    return AddressFinder(SqlReferenceStore(get_engine()))


Finder = Annotated[AddressFinder, Depends(get_finder)]


@app.get("/geocode", response_model=GeocodeRecord, response_model_exclude_none=True)
async def geocode(
    finder: Finder,
    prefecture: Annotated[str, Query(min_length=1)],
    city: Annotated[str, Query(min_length=1)],
    town: Annotated[str, Query(min_length=1)],
    address: str = "",
    input_text: Annotated[str | None, Query(alias="input")] = None,
):
    query = GeocodeQuery.create(
        input_text or f"{prefecture}{city}{town}{address}",
        residual_text=normalize_residual(address),
        prefecture=normalize_admin_name(prefecture),
        city=normalize_admin_name(city),
        town=normalize_admin_name(town),
        match_level=MatchLevel.MACHIAZA,
    )
    try:
        result = await finder.find(query)
    except ReferenceStoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return to_record(result)
