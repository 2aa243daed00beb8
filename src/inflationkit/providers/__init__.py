"""Measure data providers: real per-measure files and simulated fallbacks."""

from .measures import (
    MeasureDataSource,
    base_series_path,
    cache_status,
    clear_cache,
    load_base_series,
    load_measure,
    load_real_measures,
    measure_from_payload,
    measure_path,
    resolve_measures,
)
from .simulated import build_simulated_measures, simulate_measure

__all__ = [
    "MeasureDataSource",
    "base_series_path",
    "build_simulated_measures",
    "cache_status",
    "clear_cache",
    "load_base_series",
    "load_measure",
    "load_real_measures",
    "measure_from_payload",
    "measure_path",
    "resolve_measures",
    "simulate_measure",
]
