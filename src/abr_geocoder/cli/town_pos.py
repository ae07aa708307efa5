from __future__ import annotations

import argparse
import os

from abr_geocoder.dataset.town_pos import load_town_pos_csv, update_town_positions
from abr_geocoder.db.repo import connect, resolve_db_path


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="python -m abr_geocoder.cli.town_pos",
        description="Apply mt_town_pos representative points to the town table",
    )
    parser.add_argument("--db", default=os.getenv("SQLITE_DB_PATH", "data/abr_geocoder.sqlite3"))
    parser.add_argument("--csv", dest="csv_paths", nargs="+", required=True)
    args = parser.parse_args(argv)

    db_path = resolve_db_path(args.db)
    print(f"DB_PATH={db_path}")
    conn = connect(db_path)
    try:
        for csv_path in args.csv_paths:
            positions = load_town_pos_csv(csv_path)
            updated = update_town_positions(conn, positions)
            print(f"town_pos file={csv_path} rows={len(positions)} updated={updated}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
