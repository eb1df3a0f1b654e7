"""
Detail-page helpers: title ↔ URL path conversion and record lookup.

Titles are used verbatim as a path segment, percent-encoded the same
way browsers' ``encodeURIComponent`` does. A title that is not in the
catalogue resolves to a ``DetailView`` with ``found=False``; the page
renders that as a regular "not found" state.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel

from ..models import TitleRecord
from ..storage import TitleCatalog

TITLE_PATH_PREFIX = "/title/"

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_UNRESERVED = "-_.!~*'()"


class DetailView(BaseModel):
    title: str
    found: bool
    record: Optional[TitleRecord] = None
    href: str


def encode_title(title: str) -> str:
    return quote(title, safe=_UNRESERVED)


def decode_title_segment(segment: str) -> str:
    return unquote(segment)


def title_path(title: str) -> str:
    """Path of the detail page for ``title``."""
    return TITLE_PATH_PREFIX + encode_title(title)


def resolve_detail(catalog: TitleCatalog, title: str) -> DetailView:
    """Look up an already-decoded title."""
    record = catalog.get(title)
    return DetailView(title=title, found=record is not None, record=record, href=title_path(title))


def resolve_detail_path(catalog: TitleCatalog, path: str) -> DetailView:
    """Resolve a raw, still percent-encoded ``/title/...`` path."""
    segment = path[len(TITLE_PATH_PREFIX):] if path.startswith(TITLE_PATH_PREFIX) else path
    return resolve_detail(catalog, decode_title_segment(segment))
