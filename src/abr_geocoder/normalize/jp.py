from __future__ import annotations

import re
import unicodedata

RE_KANJI_NUM = re.compile(r"([〇零一二三四五六七八九十百千]+)(?=(?:\s*-?\s*(?:丁目|番地?|番|号)))")
RE_CHOME = re.compile(r"(\d+)\s*-?\s*丁目")
RE_BANCHI = re.compile(r"(\d+)\s*番地?(?:の)?")
RE_GO = re.compile(r"(\d+)\s*号")
RE_NO_BETWEEN_DIGITS = re.compile(r"(?<=\d)の(?=\d)")
RE_DANGLING_HYPHEN = re.compile(r"(?<=\d)-(?=\s|$)")
# A long-vowel mark between digits is a dash; elsewhere it is part of a name.
RE_DIGIT_HYPHEN = re.compile(r"(?<=\d)[‐‑‒–—―−ーｰ－]+(?=\d)")

_KANJI_DIGITS = {"〇": 0, "零": 0, "一": 1, "二": 2, "三": 3, "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9}


def kanji_number_to_int(token: str) -> int | None:
    if not token:
        return None

    total = 0
    for unit_char, unit in (("千", 1000), ("百", 100), ("十", 10)):
        if unit_char in token:
            left, token = token.split(unit_char, 1)
            if left and left not in _KANJI_DIGITS:
                return None
            total += (_KANJI_DIGITS[left] if left else 1) * unit

    if token:
        if all(ch in _KANJI_DIGITS for ch in token) and total == 0:
            # positional form such as 一〇
            return int("".join(str(_KANJI_DIGITS[ch]) for ch in token))
        if token not in _KANJI_DIGITS:
            return None
        total += _KANJI_DIGITS[token]

    return total


def _nfkc(text: str) -> str:
    return unicodedata.normalize("NFKC", text or "")


def normalize_residual(value: str) -> str:
    """Rewrite the text after the town name into ``1-2-3`` notation.

    Text following the numbers, such as a building name, is kept as-is.
    """
    text = _nfkc(value)
    text = RE_DIGIT_HYPHEN.sub("-", text)

    def _replace_kanji_number(match: re.Match[str]) -> str:
        num = kanji_number_to_int(match.group(1))
        return str(num) if num is not None else match.group(1)

    text = RE_KANJI_NUM.sub(_replace_kanji_number, text)
    text = RE_CHOME.sub(r"\1-", text)
    text = RE_BANCHI.sub(r"\1-", text)
    text = RE_GO.sub(r"\1", text)
    text = RE_NO_BETWEEN_DIGITS.sub("-", text)
    text = re.sub(r"(?<=\d)-+(?=\d)", "-", text)
    text = RE_DANGLING_HYPHEN.sub("", text)
    return text

