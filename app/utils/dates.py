# app/utils/dates.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

# Accept multiple date formats, including common regional ones
_DATE_FMTS: list[str] = [
    "%Y-%m-%d",  # ISO
    "%m/%d/%Y",  # US
    "%d/%m/%Y",  # EU
    "%Y/%m/%d",
    "%d-%m-%Y",
    "%m-%d-%Y",
]


def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(s: str | None) -> Optional[datetime]:
    """Parse an ISO timestamp or one of the accepted date formats (midnight UTC)."""
    if not s:
        return None
    s = str(s).strip()
    if not s:
        return None
    try:
        return as_utc(datetime.fromisoformat(s.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in _DATE_FMTS:
        try:
            return datetime.strptime(s, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None
