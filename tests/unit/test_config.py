"""Tests for ViewerConfig — env-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from buildlens.config import ViewerConfig


class TestViewerConfig:
    def test_defaults(self):
        config = ViewerConfig(_env_file=None)
        assert config.log_level == "INFO"
        assert config.page_size == 20
        assert config.diff_body_lines + config.diff_header_lines == 203

    def test_unknown_settings_are_ignored(self, monkeypatch):
        monkeypatch.setenv("BUILDLENS_ENVIRONMENT", "production")
        config = ViewerConfig(_env_file=None)
        assert not hasattr(config, "environment")
        assert not hasattr(config, "is_production")

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("BUILDLENS_BACKEND_URL", "http://backend.example:5352")
        monkeypatch.setenv("BUILDLENS_PAGE_SIZE", "50")
        config = ViewerConfig(_env_file=None)
        assert config.backend_url == "http://backend.example:5352"
        assert config.page_size == 50

    def test_chunk_cap(self):
        assert ViewerConfig(_env_file=None).chunk_cap == 64 * 1024
        assert ViewerConfig(_env_file=None, log_chunk_max_bytes=0).chunk_cap is None

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValidationError):
            ViewerConfig(_env_file=None, page_size=0)
