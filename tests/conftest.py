"""Shared test fixtures for inflationkit."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from inflationkit.config import DATA_SOURCE_ENV
from inflationkit.models import InflationMeasure
from inflationkit.providers.measures import base_series_path, clear_cache, measure_path

CPI_2000 = 172.2
CPI_2024 = 310.3


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep user config, env overrides and cached resolutions out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(DATA_SOURCE_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Provide an empty local data directory."""
    path = tmp_path / "data"
    (path / "measures").mkdir(parents=True)
    return path


@pytest.fixture
def write_measure(data_dir: Path) -> Callable[..., Path]:
    def _write(
        currency: str,
        key: str,
        data: dict,
        *,
        source: str = "Bureau of Labor Statistics",
        in_metadata: bool = False,
    ) -> Path:
        payload: dict = {"data": data}
        if in_metadata:
            payload["metadata"] = {"source": source}
        else:
            payload["source"] = source
        path = data_dir / measure_path(currency, key)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_base_series(data_dir: Path) -> Callable[..., Path]:
    def _write(currency: str, data: dict, *, source: str = "Test base series") -> Path:
        path = data_dir / base_series_path(currency)
        path.write_text(
            json.dumps({"metadata": {"source": source}, "data": data}),
            encoding="utf-8",
        )
        return path

    return _write


def make_measure(
    name: str = "CPI",
    series: dict[int, float] | None = None,
    *,
    weight: float = 1.0,
    confidence: str = "High",
    is_real_data: bool = True,
) -> InflationMeasure:
    return InflationMeasure(
        name=name,
        series=series if series is not None else {2000: CPI_2000, 2024: CPI_2024},
        weight=weight,
        confidence=confidence,
        is_real_data=is_real_data,
    )


@pytest.fixture
def measure_factory() -> Callable[..., InflationMeasure]:
    return make_measure
