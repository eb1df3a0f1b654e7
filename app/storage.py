# app/storage.py
"""
Read-only catalogue store.

The catalogue is an ordered mapping from title to ``TitleRecord``,
loaded once from the JSON data file. Nothing in the application writes
to it; the query engine and the view layer only read through
``get_all()``, ``search()`` and ``get()``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from .models import TitleRecord
from .config import get_settings

logger = logging.getLogger(__name__)


class TitleCatalog:
    """Ordered, immutable title → record mapping."""

    def __init__(self, records: Mapping[str, TitleRecord]) -> None:
        self._records: Dict[str, TitleRecord] = {}
        for title, record in records.items():
            if not title:
                logger.warning("Skipping catalogue entry with an empty title")
                continue
            self._records[title] = record
        self._view = MappingProxyType(self._records)
        self._fingerprint = _fingerprint(self._records)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Mapping]) -> "TitleCatalog":
        records: Dict[str, TitleRecord] = {}
        for title, entry in raw.items():
            try:
                records[str(title)] = TitleRecord.model_validate(entry)
            except ValidationError as exc:
                logger.warning("Skipping malformed entry %r: %s", title, exc)
        return cls(records)

    @classmethod
    def from_file(cls, path: Path) -> "TitleCatalog":
        """Load the catalogue from a JSON object keyed by title.

        A missing or unreadable file yields an empty catalogue so that
        the site still renders (with an empty list).
        """
        try:
            with Path(path).open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Could not load catalogue from %s: %s", path, exc)
            return cls({})
        if not isinstance(raw, dict):
            logger.error("Catalogue file %s must contain a JSON object", path)
            return cls({})
        catalog = cls.from_dict(raw)
        logger.info("Loaded %d titles from %s", len(catalog), path)
        return catalog

    def get_all(self) -> Mapping[str, TitleRecord]:
        return self._view

    def get(self, title: str) -> Optional[TitleRecord]:
        return self._records.get(title)

    def search(self, query: Optional[str]) -> List[Tuple[str, TitleRecord]]:
        """Case-insensitive substring match on the title or the description."""
        if not query:
            return list(self._records.items())
        needle = query.lower()
        return [
            (title, record)
            for title, record in self._records.items()
            if needle in title.lower() or needle in record.description.lower()
        ]

    @property
    def fingerprint(self) -> str:
        """Digest of the catalogue contents; changes whenever the data does."""
        return self._fingerprint

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, title: object) -> bool:
        return title in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)


def _fingerprint(records: Mapping[str, TitleRecord]) -> str:
    digest = hashlib.sha1()
    for title, record in records.items():
        digest.update(title.encode("utf-8"))
        digest.update(b"\x00")
        digest.update(record.model_dump_json().encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()


@lru_cache(maxsize=1)
def get_catalog() -> TitleCatalog:
    """Return the process-wide catalogue, loading it on first use."""
    return TitleCatalog.from_file(get_settings().data_file)
