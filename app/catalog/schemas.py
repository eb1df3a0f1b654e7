"""
Pydantic schema definitions for the catalog module.

``TitleEntry`` flattens a ``(title, record)`` pair from the query
engine into the shape returned by the JSON API, and ``TitleListing``
bundles a sorted result set with the counts the list page displays.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import TitleRecord


class TitleEntry(BaseModel):
    """Flattened ``(title, record)`` pair with a link to its detail page."""

    title: str
    date: str
    description: str = ""
    image: Optional[str] = None
    href: str

    @classmethod
    def from_pair(cls, title: str, record: TitleRecord, href: str) -> "TitleEntry":
        return cls(
            title=title,
            date=record.date,
            description=record.description,
            image=record.image,
            href=href,
        )


class TitleListing(BaseModel):
    """Result of ``/titles``: the filtered and sorted entries."""

    query: str = ""
    sort: str
    total: int
    catalog_total: int
    items: List[TitleEntry] = Field(default_factory=list)


class Suggestions(BaseModel):
    query: str
    suggestions: List[str] = Field(default_factory=list)


class CatalogStats(BaseModel):
    count: int
    fingerprint: str
    sample: List[str] = Field(default_factory=list)
