"""Tests for application settings."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from app.config import DEFAULT_DATA_FILE, Settings


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self):
        settings = Settings()
        assert settings.data_file == DEFAULT_DATA_FILE
        assert settings.default_sort == "date"
        assert settings.default_layout == "masonry"
        assert settings.suggestion_limit == 5
        assert settings.suggestion_debounce_ms == 300
        assert settings.compact_header_offset < settings.back_to_top_offset

    def test_env_overrides(self, tmp_path):
        env = {
            "SMGWIKI_DATA_FILE": str(tmp_path / "titles.json"),
            "SMGWIKI_SUGGESTION_LIMIT": "3",
            "SMGWIKI_DEFAULT_LAYOUT": "list",
        }
        with patch.dict(os.environ, env):
            settings = Settings.from_env()
        assert settings.data_file == Path(tmp_path / "titles.json")
        assert settings.suggestion_limit == 3
        assert settings.default_layout == "list"

    def test_invalid_env_value_rejected(self):
        with patch.dict(os.environ, {"SMGWIKI_DEFAULT_SORT": "popularity"}):
            with pytest.raises(ValidationError):
                Settings.from_env()

    def test_log_level_is_normalized(self):
        with patch.dict(os.environ, {"SMGWIKI_LOG_LEVEL": "debug"}):
            settings = Settings.from_env()
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with patch.dict(os.environ, {"SMGWIKI_LOG_LEVEL": "LOUD"}):
            with pytest.raises(ValidationError):
                Settings.from_env()
