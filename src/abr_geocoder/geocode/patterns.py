from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

# 郡 qualifies towns and villages; callers often omit it.
RE_COUNTY_PREFIX = re.compile(r"^(.+?郡)(.+)$")


@dataclass(frozen=True)
class NamePattern:
    pattern: str
    source: str

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.pattern)


@dataclass(frozen=True)
class CityPattern:
    prefecture: str
    pattern: str
    city: str

    def match(self, text: str) -> re.Match[str] | None:
        return re.match(self.pattern, text)


def to_pattern(name: str) -> str:
    m = RE_COUNTY_PREFIX.match(name)
    if m:
        return f"^({re.escape(m.group(1))})?{re.escape(m.group(2))}"
    return f"^{re.escape(name)}"


def build_patterns(names: Iterable[str]) -> list[NamePattern]:
    """Return anchored patterns ordered longest name first.

    ``sorted`` is stable, so names of equal length keep their input order.
    """
    unique_names = list(dict.fromkeys(names))
    ordered = sorted(unique_names, key=len, reverse=True)
    return [NamePattern(pattern=to_pattern(name), source=name) for name in ordered]


def get_city_patterns(prefecture: str, cities: Iterable[str]) -> list[CityPattern]:
    return [
        CityPattern(prefecture=prefecture, pattern=item.pattern, city=item.source)
        for item in build_patterns(cities)
    ]


def match_longest(text: str, patterns: Iterable[NamePattern]) -> tuple[NamePattern, str] | None:
    """Return the first pattern matching ``text`` and the text it leaves unconsumed."""
    for item in patterns:
        m = re.match(item.pattern, text)
        if m:
            return item, text[m.end() :]
    return None
