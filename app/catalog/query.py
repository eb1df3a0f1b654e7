"""
Query engine for the title catalogue.

``search_titles`` filters the catalogue with a case-insensitive
substring match, ``sort_titles`` orders a result set by date, name or a
stable pseudo-random key, and ``suggest_titles`` produces the short
title list shown under the search box. All three are pure: they never
modify the catalogue or the sequence they are given.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from pypinyin import lazy_pinyin

from ..models import QueryResult, TitleRecord, parse_date
from ..storage import TitleCatalog

logger = logging.getLogger(__name__)


def search_titles(catalog: TitleCatalog, query: Optional[str]) -> QueryResult:
    """Return the entries whose title or description contains ``query``.

    The match is case-insensitive. An empty (or ``None``) query returns
    the whole catalogue in catalogue order; a query that matches nothing
    returns an empty list.
    """
    return catalog.search(query or "")


def _date_key(item: Tuple[str, TitleRecord]) -> Tuple[int, datetime]:
    parsed = parse_date(item[1].date)
    # Malformed dates rank below every valid one when sorting descending.
    if parsed is None:
        return (0, datetime.min)
    return (1, parsed)


def collation_key(title: str) -> Tuple[str, str]:
    """zh-CN collation key: Han characters by pinyin, Latin case-insensitively.

    The raw title is the tie-breaker so the order is total.
    """
    reading = " ".join(lazy_pinyin(title)).lower()
    return (reading, title)


def _random_key(seed: str, title: str) -> str:
    return hashlib.sha1(f"{seed}\x00{title}".encode("utf-8")).hexdigest()


def sort_titles(results: QueryResult, mode: str, seed: str = "") -> QueryResult:
    """Return a sorted copy of ``results``.

    * ``date``: newest first. Equal dates keep their input order;
      entries with a missing or malformed date go last, in input order.
    * ``name``: ascending by ``collation_key``.
    * ``random``: ordered by a hash of ``seed`` and the title, so the
      shuffle is stable for a given seed. Callers pass the catalogue
      fingerprint to keep the order fixed until the data changes.

    Any other mode returns an unsorted copy.
    """
    if mode == "date":
        # sorted() keeps equal keys in input order even with reverse=True.
        return sorted(results, key=_date_key, reverse=True)
    if mode == "name":
        return sorted(results, key=lambda item: collation_key(item[0]))
    if mode == "random":
        return sorted(results, key=lambda item: _random_key(seed, item[0]))
    logger.debug("Unknown sort mode %r, keeping input order", mode)
    return list(results)


def suggest_titles(catalog: TitleCatalog, query: Optional[str], limit: int = 5) -> List[str]:
    """Return up to ``limit`` titles containing ``query``, in catalogue order."""
    if not query or limit <= 0:
        return []
    needle = query.lower()
    suggestions: List[str] = []
    for title in catalog:
        if needle in title.lower():
            suggestions.append(title)
            if len(suggestions) >= limit:
                break
    return suggestions
