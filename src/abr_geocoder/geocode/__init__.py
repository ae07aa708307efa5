from .address_finder import AddressFinder, ResidentialIndex, format_residential_section
from .errors import GeocodeError, ReferenceStoreError, UnresolvedBlockKey
from .patterns import build_patterns, get_city_patterns
from .query import CoordinateLevel, MatchLevel, Query
from .reference_store import ReferenceStore, RsdtAddr, SqlReferenceStore, TownBlock

__all__ = [
    "AddressFinder",
    "CoordinateLevel",
    "GeocodeError",
    "MatchLevel",
    "Query",
    "ReferenceStore",
    "ReferenceStoreError",
    "ResidentialIndex",
    "RsdtAddr",
    "SqlReferenceStore",
    "TownBlock",
    "UnresolvedBlockKey",
    "build_patterns",
    "format_residential_section",
    "get_city_patterns",
]
