from .csv_rows import CsvTransform
from .geojson import BLANK_CHAR, NdGeoJsonTransform
from .ndjson import NdJsonTransform

FORMATS = ("ndjson", "geojson", "csv")


def get_transform(name: str, debug: bool = False):
    if name == "ndjson":
        return NdJsonTransform()
    if name == "geojson":
        return NdGeoJsonTransform(debug=debug)
    if name == "csv":
        return CsvTransform()
    raise ValueError(f"Unknown output format: {name}")


__all__ = [
    "BLANK_CHAR",
    "FORMATS",
    "CsvTransform",
    "NdGeoJsonTransform",
    "NdJsonTransform",
    "get_transform",
]
