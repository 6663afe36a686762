# core/utils.py

from datetime import datetime, timezone
from typing import Iterable, List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def clean_text(value: Optional[str]) -> Optional[str]:
    """Strip whitespace; blank strings become None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def clean_fields(data: dict) -> dict:
    """
    Sanitize user-supplied text fields:
    - Strip string whitespace
    - Empty strings → None
    - Everything else kept as-is
    """
    clean = {}
    for k, v in data.items():
        clean[k] = clean_text(v) if isinstance(v, str) else v
    return clean


def is_blank(value: Optional[str]) -> bool:
    return clean_text(value) is None


def matches_search(row: dict, term: Optional[str], fields: Iterable[str]) -> bool:
    """Case-insensitive substring match across the given fields."""
    needle = clean_text(term)
    if needle is None:
        return True
    needle = needle.lower()
    return any(needle in str(row.get(f) or "").lower() for f in fields)


def filter_by_search(rows: List[dict], term: Optional[str], fields: Iterable[str]) -> List[dict]:
    fields = tuple(fields)
    return [r for r in rows if matches_search(r, term, fields)]
