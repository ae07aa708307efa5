from __future__ import annotations


class GeocodeError(Exception):
    pass


class ReferenceStoreError(GeocodeError):
    pass


class UnresolvedBlockKey(GeocodeError, LookupError):
    def __init__(self, block: str):
        super().__init__(f"No residential row for block key: {block}")
        self.block = block
