"""Tests for seqgap.core.settings — SEQGAP_* environment configuration."""

import pytest
from pydantic import ValidationError

from seqgap.core.settings import SeqgapSettings, clear_settings_cache, get_settings


class TestSeqgapSettings:
    def test_defaults(self):
        s = SeqgapSettings(_env_file=None)
        assert s.database_url is None
        assert s.log_level == "WARNING"
        assert s.json_logs is None
        assert s.max_span == 10_000_000
        assert s.default_strategy == "python"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("SEQGAP_DATABASE_URL", "lab.db")
        monkeypatch.setenv("SEQGAP_LOG_LEVEL", "debug")
        monkeypatch.setenv("SEQGAP_MAX_SPAN", "500")
        monkeypatch.setenv("SEQGAP_DEFAULT_STRATEGY", "sql")
        monkeypatch.setenv("SEQGAP_JSON_LOGS", "true")
        s = SeqgapSettings(_env_file=None)
        assert s.database_url == "lab.db"
        assert s.log_level == "DEBUG"
        assert s.max_span == 500
        assert s.default_strategy == "sql"
        assert s.json_logs is True

    def test_dotenv_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("SEQGAP_MAX_SPAN=42\n")
        assert SeqgapSettings(_env_file=str(env)).max_span == 42

    @pytest.mark.parametrize(
        "key, value",
        [
            ("SEQGAP_LOG_LEVEL", "chatty"),
            ("SEQGAP_MAX_SPAN", "0"),
            ("SEQGAP_DEFAULT_STRATEGY", "fast"),
        ],
    )
    def test_invalid_values(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ValidationError):
            SeqgapSettings(_env_file=None)


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_clear_cache_rereads_env(self, monkeypatch):
        assert get_settings().max_span == 10_000_000
        monkeypatch.setenv("SEQGAP_MAX_SPAN", "7")
        assert get_settings().max_span == 10_000_000
        clear_settings_cache()
        assert get_settings().max_span == 7
