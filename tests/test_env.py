"""
Tests for environment-driven settings.
"""

from pathlib import Path

import pytest

from formmatch.env import Settings, get_settings, load_env, load_settings, reset_settings
from pipelines.matching.scoring import form_similarity, pool_form_similarity

ENV_VARS = [
    "FORMMATCH_DB",
    "FORMMATCH_LOG_LEVEL",
    "FORMMATCH_LOG_DIR",
    "FORMMATCH_MAX_POOL",
    "FORMMATCH_MAX_TOKENS",
    "FORMMATCH_FORM_SCORER",
    "FORMMATCH_FILL_PASSWORDS",
    "FORMMATCH_REQUEST_TIMEOUT",
]


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so values written by load_dotenv are removed on teardown
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestLoadSettings:
    """Test reading settings from the environment."""

    def test_defaults(self, clean_env):
        settings = load_settings()
        assert settings.db_path == Path("data/formmatch.db")
        assert settings.max_pool_size == 1000
        assert settings.max_tokens == 50
        assert settings.form_scorer == "structure"
        assert settings.fill_passwords is False

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("FORMMATCH_DB", str(tmp_path / "f.db"))
        clean_env.setenv("FORMMATCH_LOG_LEVEL", "debug")
        clean_env.setenv("FORMMATCH_MAX_POOL", "0")
        clean_env.setenv("FORMMATCH_FORM_SCORER", " Pool ")
        clean_env.setenv("FORMMATCH_FILL_PASSWORDS", "yes")

        settings = load_settings()

        assert settings.db_path == tmp_path / "f.db"
        assert settings.log_level == "DEBUG"
        assert settings.pool_limit() is None
        assert settings.form_scorer == "pool"
        assert settings.fill_passwords is True

    def test_blank_values_use_defaults(self, clean_env):
        clean_env.setenv("FORMMATCH_MAX_TOKENS", "  ")
        clean_env.setenv("FORMMATCH_FILL_PASSWORDS", "")
        settings = load_settings()
        assert settings.max_tokens == 50
        assert settings.fill_passwords is False

    def test_bad_integer(self, clean_env):
        clean_env.setenv("FORMMATCH_MAX_POOL", "lots")
        with pytest.raises(ValueError, match="FORMMATCH_MAX_POOL must be an integer"):
            load_settings()

    def test_cached_until_reset(self, clean_env):
        first = get_settings()
        clean_env.setenv("FORMMATCH_MAX_TOKENS", "10")
        assert get_settings() is first

        reset_settings()
        assert get_settings().max_tokens == 10


class TestSettingsHelpers:
    """Test values derived from settings."""

    def test_form_scorer_func(self):
        assert Settings().form_scorer_func() is form_similarity
        assert Settings(form_scorer="pool").form_scorer_func() is pool_form_similarity

    def test_unknown_form_scorer(self):
        with pytest.raises(ValueError, match="choose from: pool, structure"):
            Settings(form_scorer="magic").form_scorer_func()

    def test_rules_carry_token_limit(self):
        assert Settings(max_tokens=5).rules().max_tokens == 5
        assert Settings(max_tokens=0).rules().max_tokens is None

    def test_pool_limit(self):
        assert Settings().pool_limit() == 1000


class TestLoadEnv:
    """Test seeding the environment from a .env file."""

    def test_reads_env_file(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("FORMMATCH_MAX_TOKENS=7\n")
        clean_env.chdir(tmp_path)

        load_env()

        assert load_settings().max_tokens == 7

    def test_existing_variables_win(self, clean_env, tmp_path):
        (tmp_path / ".env").write_text("FORMMATCH_MAX_TOKENS=7\n")
        clean_env.setenv("FORMMATCH_MAX_TOKENS", "9")
        clean_env.chdir(tmp_path)

        load_env()

        assert load_settings().max_tokens == 9

    def test_missing_env_file(self, clean_env, tmp_path):
        clean_env.chdir(tmp_path)
        load_env()
        assert load_settings().max_tokens == 50
