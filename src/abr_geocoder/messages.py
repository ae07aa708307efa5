from __future__ import annotations

import logging
import os
from enum import Enum

LOGGER = logging.getLogger(__name__)


class Locale(str, Enum):
    JA = "ja"
    EN = "en"


class Message(str, Enum):
    START_GEOCODING = "START_GEOCODING"
    GEOCODED_COUNT = "GEOCODED_COUNT"
    UNRESOLVED_COUNT = "UNRESOLVED_COUNT"
    DB_PATH = "DB_PATH"
    OUTPUT_WRITTEN = "OUTPUT_WRITTEN"
    INPUT_HEADER_MISSING = "INPUT_HEADER_MISSING"


MESSAGES: dict[Locale, dict[Message, str]] = {
    Locale.JA: {
        Message.START_GEOCODING: "ジオコーディングを開始します",
        Message.GEOCODED_COUNT: "住居表示まで特定した件数: {count}",
        Message.UNRESOLVED_COUNT: "街区を特定できなかった件数: {count}",
        Message.DB_PATH: "データベース: {path}",
        Message.OUTPUT_WRITTEN: "出力しました: {path}",
        Message.INPUT_HEADER_MISSING: "入力CSVにヘッダーがありません",
    },
    Locale.EN: {
        Message.START_GEOCODING: "Start geocoding",
        Message.GEOCODED_COUNT: "Resolved to residential level: {count}",
        Message.UNRESOLVED_COUNT: "Block not resolved: {count}",
        Message.DB_PATH: "Database: {path}",
        Message.OUTPUT_WRITTEN: "Output written: {path}",
        Message.INPUT_HEADER_MISSING: "input csv header missing",
    },
}

def locale_from_env() -> Locale:
    value = os.getenv("ABRG_LOCALE", Locale.JA.value)
    try:
        return Locale(value)
    except ValueError:
        LOGGER.warning("unsupported ABRG_LOCALE=%s, using %s", value, Locale.JA.value)
        return Locale.JA


_locale = locale_from_env()


def set_locale(locale: str | Locale) -> None:
    global _locale
    _locale = Locale(locale)


def get_locale() -> Locale:
    return _locale


def to_string(message: Message, **params: object) -> str:
    return MESSAGES[_locale][message].format(**params)
