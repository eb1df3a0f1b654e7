"""Shared fixtures: an in-memory catalogue and an app wired to it."""

import pytest
from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import app
from app.storage import TitleCatalog, get_catalog

SAMPLE_TITLES = {
    "报备哥": {"date": "2024-03-01", "description": "出门必报备", "image": "/img/baobei.jpg"},
    "路痴哥": {"date": "2024-01-01", "description": "校园里也会迷路"},
}

RICH_TITLES = {
    "报备哥": {"date": "2024-03-01", "description": "出门必报备", "image": "/img/baobei.jpg"},
    "路痴哥": {"date": "2024-01-01", "description": "校园里也会迷路"},
    "干饭王": {"date": "2024-05-20", "description": "Never misses LUNCH"},
    "熬夜冠军": {"date": "2024-05-20", "description": "凌晨三点还在线", "image": "/img/aoye.jpg"},
    "PPT大师": {"date": "2023-11-11", "description": "五十页动画"},
    "早八 战士": {"date": "2024-02-29", "description": "从不迟到", "image": "/img/zaoba.jpg"},
    "C++ & Rust/布道者?": {"date": "2023-09-10", "description": "重写一切"},
    "100% 纯度": {"date": "not-a-date", "description": "日期写错了"},
}


@pytest.fixture
def sample_catalog():
    return TitleCatalog.from_dict(SAMPLE_TITLES)


@pytest.fixture
def catalog():
    return TitleCatalog.from_dict(RICH_TITLES)


@pytest.fixture
def settings(tmp_path):
    return Settings(data_file=tmp_path / "unused.json")


@pytest.fixture
def client(catalog, settings):
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
