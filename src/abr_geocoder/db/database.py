from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from abr_geocoder.db.repo import resolve_db_path
from abr_geocoder.db.schema import ensure_schema

_ENGINE: Engine | None = None
_DB_PATH: Path | None = None


def get_database_url(db_path: Path) -> str:
    return f"sqlite+pysqlite:///{db_path.as_posix()}"


def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    # name lookups go through LIKE; ASCII letters must compare exactly
    dbapi_connection.execute("PRAGMA case_sensitive_like=ON")


def create_reference_engine(db_path: str | Path) -> Engine:
    path = ensure_schema(db_path)
    engine = create_engine(
        get_database_url(path),
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def get_engine() -> Engine:
    global _ENGINE
    global _DB_PATH

    db_path = resolve_db_path()
    if _ENGINE is None or _DB_PATH != db_path:
        if _ENGINE is not None:
            _ENGINE.dispose()
        _DB_PATH = db_path
        _ENGINE = create_reference_engine(db_path)

    return _ENGINE


def reset_engine() -> None:
    global _ENGINE
    global _DB_PATH
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _DB_PATH = None
