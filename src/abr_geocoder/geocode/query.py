from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import IntEnum
from typing import Any


class MatchLevel(IntEnum):
    UNKNOWN = 0
    PREFECTURE = 1
    CITY = 2
    MACHIAZA = 3
    MACHIAZA_DETAIL = 4
    RESIDENTIAL_BLOCK = 7
    RESIDENTIAL_DETAIL = 8

    @property
    def label(self) -> str:
        return self.name.lower()


# Coordinates share the same granularity ladder as matches.
CoordinateLevel = MatchLevel

_LEVEL_FIELDS = ("match_level", "coordinate_level")


@dataclass(frozen=True)
class Query:
    """In-flight resolution state for one input address.

    Instances are never changed in place. Every resolution step calls
    :meth:`copy` and hands the new instance to the next step.
    """

    original_input: str
    residual_text: str
    prefecture: str | None = None
    city: str | None = None
    town: str | None = None
    town_id: str | None = None
    lg_code: str | None = None
    block: str | None = None
    block_id: str | None = None
    addr1: str | None = None
    addr1_id: str | None = None
    addr2: str | None = None
    addr2_id: str | None = None
    lat: float | None = None
    lon: float | None = None
    match_level: MatchLevel = MatchLevel.UNKNOWN
    coordinate_level: CoordinateLevel = CoordinateLevel.UNKNOWN
    rsdtblk_key: str | None = None
    rsdtdsp_key: str | None = None

    @classmethod
    def create(cls, original_input: str, residual_text: str | None = None, **resolved: Any) -> "Query":
        if residual_text is None:
            residual_text = original_input
        return cls(original_input=original_input, residual_text=residual_text, **resolved)

    def copy(self, **patch: Any) -> "Query":
        if "original_input" in patch:
            raise TypeError("original_input cannot be patched")
        for name in _LEVEL_FIELDS:
            if name in patch:
                patch[name] = MatchLevel(max(getattr(self, name), patch[name]))
        return replace(self, **patch)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
