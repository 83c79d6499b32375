"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from sqltemplates.settings import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PORT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_dialect == "postgres"
        assert settings.template_cache_size == 256
        assert settings.effective_port == 8000

    def test_port_takes_precedence(self) -> None:
        settings = Settings(_env_file=None, api_server_port=9000, port=8080)
        assert settings.effective_port == 8080

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEFAULT_DIALECT", "snowflake")
        monkeypatch.setenv("MAX_TEMPLATE_SIZE", "42")
        settings = Settings(_env_file=None)
        assert settings.default_dialect == "snowflake"
        assert settings.max_template_size == 42
