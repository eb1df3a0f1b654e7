"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET  /titles              : search + sort the catalogue
- GET  /titles/{name}       : one title (``found`` is false when unknown)
- GET  /suggestions         : top-N titles matching the search text
- GET  /layout              : search + sort, arranged for a layout mode
- GET  /stats               : dataset size, fingerprint and a sample
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..config import LayoutMode, Settings, SortMode, get_settings
from ..storage import TitleCatalog, get_catalog
from ..view.detail import DetailView, resolve_detail, title_path
from ..view.layouts import LayoutView, project_layout
from .query import search_titles, sort_titles, suggest_titles
from .schemas import CatalogStats, Suggestions, TitleEntry, TitleListing

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def _seed(catalog: TitleCatalog, seed: Optional[str]) -> str:
    # The random order stays fixed until the data changes unless a seed is given.
    return seed if seed else catalog.fingerprint


@router.get("/titles", response_model=TitleListing)
def list_titles(
    q: str = Query(default="", description="搜索称号或描述"),
    sort: Optional[SortMode] = Query(default=None, description="排序: date, name, random"),
    seed: Optional[str] = Query(default=None, description="随机排序种子"),
    catalog: TitleCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> TitleListing:
    mode = sort or settings.default_sort
    results = sort_titles(search_titles(catalog, q), mode, seed=_seed(catalog, seed))
    return TitleListing(
        query=q,
        sort=mode,
        total=len(results),
        catalog_total=len(catalog),
        items=[TitleEntry.from_pair(title, record, title_path(title)) for title, record in results],
    )


@router.get("/titles/{name:path}", response_model=DetailView)
def get_title(name: str, catalog: TitleCatalog = Depends(get_catalog)) -> DetailView:
    return resolve_detail(catalog, name)


@router.get("/suggestions", response_model=Suggestions)
def get_suggestions(
    q: str = Query(default=""),
    limit: Optional[int] = Query(default=None, ge=1, le=50),
    catalog: TitleCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> Suggestions:
    return Suggestions(query=q, suggestions=suggest_titles(catalog, q, limit or settings.suggestion_limit))


@router.get("/layout", response_model=LayoutView)
def get_layout(
    q: str = Query(default=""),
    sort: Optional[SortMode] = Query(default=None),
    layout: Optional[LayoutMode] = Query(default=None),
    failed: List[str] = Query(default=[], description="加载失败的图片地址"),
    catalog: TitleCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
) -> LayoutView:
    mode = layout or settings.default_layout
    results = sort_titles(search_titles(catalog, q), sort or settings.default_sort, seed=catalog.fingerprint)
    columns = settings.masonry_columns if mode == "masonry" else settings.grid_columns
    return project_layout(results, mode, image_errors=failed, columns=columns)


@router.get("/stats", response_model=CatalogStats)
def catalog_stats(catalog: TitleCatalog = Depends(get_catalog)) -> CatalogStats:
    return CatalogStats(count=len(catalog), fingerprint=catalog.fingerprint, sample=list(catalog)[:5])
