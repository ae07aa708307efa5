from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]


def repo_path(*parts: str) -> Path:
    return REPO_ROOT.joinpath(*parts)


SRC = repo_path("src")
sys.path.insert(0, str(SRC))

from abr_geocoder.db.repo import connect, insert_rows  # noqa: E402

CITY_ROWS = [
    {"lg_code": "131016", "pref_name": "東京都", "county_name": "", "city_name": "千代田区", "od_city_name": ""},
    {"lg_code": "132098", "pref_name": "東京都", "county_name": "", "city_name": "町田市", "od_city_name": ""},
    {"lg_code": "062014", "pref_name": "山形県", "county_name": "", "city_name": "山形市", "od_city_name": ""},
]

TOWN_ROWS = [
    {"lg_code": "131016", "town_id": "0056000", "oaza_town_name": "紀尾井町", "chome_name": "", "rsdt_addr_flg": 1},
    {"lg_code": "131016", "town_id": "0001001", "oaza_town_name": "丸の内", "chome_name": "一丁目", "rsdt_addr_flg": 0},
    {"lg_code": "132098", "town_id": "0006002", "oaza_town_name": "森野", "chome_name": "二丁目", "rsdt_addr_flg": 1},
    {"lg_code": "062014", "town_id": "0247002", "oaza_town_name": "旅篭町", "chome_name": "二丁目", "rsdt_addr_flg": 1},
]

BLOCK_ROWS = [
    {"lg_code": "131016", "town_id": "0056000", "blk_id": "001", "blk_num": "1", "rep_pnt_lat": 35.681411, "rep_pnt_lon": 139.73495},
    {"lg_code": "132098", "town_id": "0006002", "blk_id": "002", "blk_num": "2", "rep_pnt_lat": 35.548247, "rep_pnt_lon": 139.440264},
    {"lg_code": "062014", "town_id": "0247002", "blk_id": "003", "blk_num": "3", "rep_pnt_lat": 38.255437, "rep_pnt_lon": 140.339126},
]

RSDT_ROWS = [
    {"lg_code": "131016", "town_id": "0056000", "blk_id": "001", "addr_id": "003", "addr2_id": "", "rsdt_num": "3", "rsdt_num2": None, "rep_pnt_lat": 35.681411, "rep_pnt_lon": 139.73495},
    {"lg_code": "132098", "town_id": "0006002", "blk_id": "002", "addr_id": "022", "addr2_id": "", "rsdt_num": "22", "rsdt_num2": None, "rep_pnt_lat": 35.548247, "rep_pnt_lon": 139.440264},
    {"lg_code": "062014", "town_id": "0247002", "blk_id": "003", "addr_id": "025", "addr2_id": "", "rsdt_num": "25", "rsdt_num2": None, "rep_pnt_lat": 38.255437, "rep_pnt_lon": 140.339126},
]


def build_reference_db(db_path: Path) -> Path:
    conn = connect(db_path)
    try:
        insert_rows(conn, "city", CITY_ROWS)
        insert_rows(conn, "town", TOWN_ROWS)
        insert_rows(conn, "rsdtdsp_blk", BLOCK_ROWS)
        insert_rows(conn, "rsdtdsp_rsdt", RSDT_ROWS)
    finally:
        conn.close()
    return db_path
