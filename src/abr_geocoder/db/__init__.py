from .repo import connect, escape_like, insert_rows, resolve_db_path
from .schema import SchemaMismatchError, ensure_schema

__all__ = [
    "SchemaMismatchError",
    "connect",
    "ensure_schema",
    "escape_like",
    "insert_rows",
    "resolve_db_path",
]
