from __future__ import annotations

import re
import unicodedata


def normalize_text(value: str | None) -> str:
    if not value:
        return ""
    normalized = unicodedata.normalize("NFKC", value)
    normalized = re.sub(r"\s+", " ", normalized).strip()
    return normalized


def normalize_admin_name(value: str | None) -> str:
    """Prefecture, city and town names never contain spaces."""
    return re.sub(r"\s", "", normalize_text(value))
