"""
Layout projection of a query result.

The same ``QueryResult`` can be arranged as masonry columns, a fixed
grid or a plain list. Projection only decides *where* each card goes
and what it shows; it never filters or reorders the result set, so
reading a layout's cards back in ``position`` order always gives the
query order.
"""

from __future__ import annotations

from typing import Collection, List, Optional

from pydantic import BaseModel, Field

from ..config import LayoutMode
from ..models import QueryResult, TitleRecord, parse_date
from .detail import title_path

LAYOUT_MODES = ("masonry", "grid", "list")

# Rough card heights, in description lines, used to balance masonry columns.
_IMAGE_HEIGHT = 6
_BASE_HEIGHT = 2
_CHARS_PER_LINE = 24


class Card(BaseModel):
    title: str
    href: str
    date: str
    date_label: str
    description: str = ""
    image: Optional[str] = None
    placeholder: bool = False
    position: int


class LayoutView(BaseModel):
    """Cards arranged for one layout mode.

    ``columns`` is used by masonry, ``rows`` by grid and ``items`` by
    list; the other two stay empty.
    """

    layout: LayoutMode
    total: int
    columns: List[List[Card]] = Field(default_factory=list)
    rows: List[List[Card]] = Field(default_factory=list)
    items: List[Card] = Field(default_factory=list)

    def cards(self) -> List[Card]:
        """All cards in query order, whatever the layout."""
        if self.layout == "list":
            return list(self.items)
        groups = self.columns if self.layout == "masonry" else self.rows
        return sorted((card for group in groups for card in group), key=lambda c: c.position)


def format_date(value: str) -> str:
    """Render a date the way the zh-CN locale does (``2024年3月1日``).

    Values that do not parse are returned unchanged.
    """
    parsed = parse_date(value)
    if parsed is None:
        return value
    return f"{parsed.year}年{parsed.month}月{parsed.day}日"


def build_card(position: int, title: str, record: TitleRecord, image_errors: Collection[str] = ()) -> Card:
    failed = bool(record.image) and record.image in image_errors
    return Card(
        title=title,
        href=title_path(title),
        date=record.date,
        date_label=format_date(record.date),
        description=record.description,
        image=None if failed else (record.image or None),
        placeholder=failed or not record.image,
        position=position,
    )


def _estimated_height(card: Card) -> int:
    height = _BASE_HEIGHT + len(card.description) // _CHARS_PER_LINE
    if card.image:
        height += _IMAGE_HEIGHT
    return height


def _masonry(cards: List[Card], columns: int) -> List[List[Card]]:
    buckets: List[List[Card]] = [[] for _ in range(columns)]
    heights = [0] * columns
    for card in cards:
        # Shortest column wins; ties go to the leftmost one.
        target = min(range(columns), key=lambda i: heights[i])
        buckets[target].append(card)
        heights[target] += _estimated_height(card)
    return buckets


def _grid(cards: List[Card], columns: int) -> List[List[Card]]:
    return [cards[i:i + columns] for i in range(0, len(cards), columns)]


def project_layout(
    results: QueryResult,
    layout: str = "masonry",
    image_errors: Collection[str] = (),
    columns: int = 4,
) -> LayoutView:
    """Arrange ``results`` for ``layout``; unknown layouts fall back to masonry."""
    if layout not in LAYOUT_MODES:
        layout = "masonry"
    columns = max(1, columns)
    errors = set(image_errors)
    cards = [build_card(i, title, record, errors) for i, (title, record) in enumerate(results)]

    view = LayoutView(layout=layout, total=len(cards))
    if layout == "masonry":
        view.columns = _masonry(cards, columns)
    elif layout == "grid":
        view.rows = _grid(cards, columns)
    else:
        view.items = cards
    return view
