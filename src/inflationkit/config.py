"""Configuration loader for inflationkit.

Reads inflationkit.toml from the working directory or ~/.inflationkit/,
falling back to defaults, and lets INFLATIONKIT_DATA_SOURCE override the data source.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from inflationkit.exceptions import ConfigError

CONFIG_FILENAME = "inflationkit.toml"
DATA_SOURCE_ENV = "INFLATIONKIT_DATA_SOURCE"
DEFAULT_USER_AGENT = "inflationkit/0.1 (+https://www.globalinflationcalculator.com/)"


@dataclass(frozen=True)
class DataConfig:
    source: str = "./data"
    timeout_seconds: float = 20.0
    cache_ttl_seconds: float = 300.0
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 8.0


@dataclass(frozen=True)
class CalculatorConfig:
    default_currency: str = "USD"
    default_from_year: int = 2020
    renormalize_weights: bool = False


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class Config:
    """Top-level inflationkit configuration."""

    data: DataConfig = field(default_factory=DataConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    calculator: CalculatorConfig = field(default_factory=CalculatorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _non_negative_float(value: object, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default


def _positive_int(value: object, default: int) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _section(raw: dict, name: str) -> dict:
    data = raw.get(name, {})
    return data if isinstance(data, dict) else {}


def load_config(path: Path | None = None) -> Config:
    """Load configuration from a TOML file.

    If path is None, searches for inflationkit.toml in the current directory
    then ~/.inflationkit/. Returns default config if no file is found.
    The INFLATIONKIT_DATA_SOURCE environment variable overrides data.source.
    """
    if path is None:
        candidates = [
            Path.cwd() / CONFIG_FILENAME,
            Path.home() / ".inflationkit" / CONFIG_FILENAME,
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    raw: dict = {}
    if path is not None and path.exists():
        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

    data_raw = _section(raw, "data")
    data = DataConfig(
        source=str(data_raw.get("source", "./data")),
        timeout_seconds=_non_negative_float(data_raw.get("timeout_seconds"), 20.0),
        cache_ttl_seconds=_non_negative_float(data_raw.get("cache_ttl_seconds"), 300.0),
        user_agent=str(data_raw.get("user_agent", DEFAULT_USER_AGENT)),
    )

    retry_raw = _section(raw, "retry")
    retry = RetryConfig(
        max_attempts=_positive_int(retry_raw.get("max_attempts"), 3),
        base_delay_seconds=_non_negative_float(retry_raw.get("base_delay_seconds"), 1.0),
        max_delay_seconds=_non_negative_float(retry_raw.get("max_delay_seconds"), 8.0),
    )

    calc_raw = _section(raw, "calculator")
    calculator = CalculatorConfig(
        default_currency=str(calc_raw.get("default_currency", "USD")).strip().upper() or "USD",
        default_from_year=_positive_int(calc_raw.get("default_from_year"), 2020),
        renormalize_weights=bool(calc_raw.get("renormalize_weights", False)),
    )

    log_raw = _section(raw, "logging")
    logging_cfg = LoggingConfig(level=str(log_raw.get("level", "INFO")).upper())

    config = Config(data=data, retry=retry, calculator=calculator, logging=logging_cfg)

    env_source = os.environ.get(DATA_SOURCE_ENV, "").strip()
    if env_source:
        config = replace(config, data=replace(config.data, source=env_source))
    return config
