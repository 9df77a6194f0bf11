"""Tests for environment-driven settings."""

from pathlib import Path

import pytest

from nota.infrastructure.config import ConfigurationError, load_settings

KEYS = (
    "NOTA_DATA_DIR",
    "NOTA_TRANSACTION_PREFIX",
    "NOTA_COUNTER_SEED",
    "NOTA_STORE_TIMEOUT",
    "NOTA_TIMEZONE",
    "NOTA_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in KEYS:
        # setenv first so teardown also removes values a .env file loaded.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    # Keep a stray .env in the working directory out of the picture.
    monkeypatch.chdir(tmp_path)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.transaction_prefix == "RJA/APT"
        assert settings.counter_seed == "2504040159"
        assert settings.store_timeout == 5.0
        assert settings.timezone == "Asia/Jakarta"
        assert settings.log_level == "WARNING"
        assert settings.store_file.name == "nota.json"

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("NOTA_DATA_DIR", str(tmp_path / "d"))
        monkeypatch.setenv("NOTA_TRANSACTION_PREFIX", "INV")
        monkeypatch.setenv("NOTA_COUNTER_SEED", "7")
        monkeypatch.setenv("NOTA_STORE_TIMEOUT", "0.5")
        monkeypatch.setenv("NOTA_TIMEZONE", "UTC")
        monkeypatch.setenv("NOTA_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.store_file == Path(tmp_path / "d" / "nota.json")
        assert settings.transaction_prefix == "INV"
        assert settings.counter_seed == "7"
        assert settings.store_timeout == 0.5
        assert str(settings.tz) == "UTC"
        assert settings.log_level == "DEBUG"

    def test_dotenv_file_is_read(self, tmp_path):
        (tmp_path / ".env").write_text("NOTA_TRANSACTION_PREFIX=DOT\n")
        assert load_settings().transaction_prefix == "DOT"

    @pytest.mark.parametrize(
        "key, value",
        [
            ("NOTA_COUNTER_SEED", "12a"),
            ("NOTA_STORE_TIMEOUT", "soon"),
            ("NOTA_STORE_TIMEOUT", "0"),
            ("NOTA_TIMEZONE", "Mars/Olympus"),
            ("NOTA_LOG_LEVEL", "LOUD"),
        ],
    )
    def test_invalid_values(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(ConfigurationError, match=key):
            load_settings()
