from pydantic import BaseModel, field_validator


class QueryInput(BaseModel):
    input: str


class GeocodeResult(BaseModel):
    prefecture: str | None = None
    match_level: int
    city: str | None = None
    town: str | None = None
    town_id: str | None = None
    lg_code: str | None = None
    other: str
    lat: float | None = None
    lon: float | None = None
    block: str | None = None
    block_id: str | None = None
    addr1: str | None = None
    addr1_id: str | None = None
    addr2: str | None = None
    addr2_id: str | None = None

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, value: float | None) -> float | None:
        if value is None:
            return value
        if value < -90 or value > 90:
            raise ValueError("lat must be between -90 and 90")
        return value

    @field_validator("lon")
    @classmethod
    def validate_lon(cls, value: float | None) -> float | None:
        if value is None:
            return value
        if value < -180 or value > 180:
            raise ValueError("lon must be between -180 and 180")
        return value


class GeocodeRecord(BaseModel):
    query: QueryInput
    result: GeocodeResult
