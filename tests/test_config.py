"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from inflationkit.config import DATA_SOURCE_ENV, Config, ConfigError, load_config


class TestDefaultConfig:
    """Test default configuration values."""

    def test_default_data(self):
        config = Config()
        assert config.data.source == "./data"
        assert config.data.timeout_seconds == 20.0
        assert config.data.cache_ttl_seconds == 300.0
        assert not config.data.is_remote

    def test_default_retry(self):
        config = Config()
        assert config.retry.max_attempts == 3
        assert config.retry.base_delay_seconds == 1.0
        assert config.retry.max_delay_seconds == 8.0

    def test_default_calculator(self):
        config = Config()
        assert config.calculator.default_currency == "USD"
        assert config.calculator.default_from_year == 2020
        assert config.calculator.renormalize_weights is False

    def test_default_logging(self):
        assert Config().logging.level == "INFO"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self):
        assert load_config() == Config()

    def test_load_from_file(self, tmp_path: Path):
        toml_file = tmp_path / "custom.toml"
        toml_file.write_text(
            """\
[data]
source = "https://data.example.test/"
timeout_seconds = 5
cache_ttl_seconds = 60

[retry]
max_attempts = 5
base_delay_seconds = 0.5

[calculator]
default_currency = "gbp"
default_from_year = 1990
renormalize_weights = true

[logging]
level = "debug"
"""
        )
        config = load_config(toml_file)

        assert config.data.source == "https://data.example.test/"
        assert config.data.is_remote
        assert config.data.timeout_seconds == 5.0
        assert config.data.cache_ttl_seconds == 60.0
        assert config.retry.max_attempts == 5
        assert config.retry.base_delay_seconds == 0.5
        assert config.retry.max_delay_seconds == 8.0
        assert config.calculator.default_currency == "GBP"
        assert config.calculator.default_from_year == 1990
        assert config.calculator.renormalize_weights is True
        assert config.logging.level == "DEBUG"

    def test_finds_file_in_cwd(self, tmp_path: Path):
        (tmp_path / "inflationkit.toml").write_text('[data]\nsource = "/srv/inflation"\n')
        assert load_config().data.source == "/srv/inflation"

    def test_finds_file_in_home(self, tmp_path: Path):
        home_dir = tmp_path / "home" / ".inflationkit"
        home_dir.mkdir(parents=True)
        (home_dir / "inflationkit.toml").write_text("[retry]\nmax_attempts = 7\n")
        assert load_config().retry.max_attempts == 7

    def test_invalid_values_fall_back(self, tmp_path: Path):
        toml_file = tmp_path / "bad-values.toml"
        toml_file.write_text(
            '[data]\ntimeout_seconds = -1\n[retry]\nmax_attempts = "many"\n'
            "[calculator]\ndefault_from_year = 0\n"
        )
        config = load_config(toml_file)
        assert config.data.timeout_seconds == 20.0
        assert config.retry.max_attempts == 3
        assert config.calculator.default_from_year == 2020

    def test_invalid_toml_raises(self, tmp_path: Path):
        toml_file = tmp_path / "broken.toml"
        toml_file.write_text("[data\nsource = ")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(toml_file)

    def test_env_overrides_data_source(self, tmp_path: Path, monkeypatch):
        toml_file = tmp_path / "custom.toml"
        toml_file.write_text('[data]\nsource = "./from-file"\n')
        monkeypatch.setenv(DATA_SOURCE_ENV, "https://mirror.example.test")

        config = load_config(toml_file)

        assert config.data.source == "https://mirror.example.test"
        assert config.data.is_remote
