# app/models.py
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class TitleRecord(BaseModel):
    """A single catalogue record.

    ``date`` is kept as the raw ISO string from the data file; it is
    parsed only when sorting or formatting, so that a malformed value
    degrades the ordering instead of failing the load. ``image`` is an
    optional URL and is ``None`` when the entry has no picture.
    """

    model_config = ConfigDict(frozen=True)

    date: str = ""
    description: str = ""
    image: Optional[str] = None


# Ordered sequence of (title, record) pairs produced by the query engine.
QueryResult = List[Tuple[str, TitleRecord]]


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date or datetime string.

    Returns a naive datetime (aware values are converted to UTC first so
    that every parsed value is comparable), or ``None`` when the value is
    missing or malformed.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
