"""Simulated measure sets derived from a single base CPI-like series."""

from __future__ import annotations

from collections.abc import Mapping

from inflationkit.measures import (
    CANONICAL_MEASURES,
    SIMULATED_CONFIDENCE,
    SIMULATED_OFFSETS,
    STANDARD_WEIGHTS,
    measure_description,
    measure_display_name,
)
from inflationkit.models import InflationMeasure, MeasureSet
from inflationkit.series import normalize_series


def simulate_measure(
    key: str,
    base_series: Mapping[int, float],
    *,
    provenance: str = "",
) -> InflationMeasure:
    """Scale the base series by the fixed offset for one measure key."""
    offset = SIMULATED_OFFSETS[key]
    return InflationMeasure(
        name=measure_display_name(key),
        key=key,
        description=measure_description(key),
        series={year: value * offset for year, value in base_series.items()},
        weight=STANDARD_WEIGHTS[key],
        confidence=SIMULATED_CONFIDENCE[key],
        is_real_data=False,
        source=f"Simulated from {provenance}" if provenance else "Simulated",
    )


def build_simulated_measures(
    base_series: Mapping[object, object],
    *,
    currency: str = "USD",
    provenance: str = "",
) -> MeasureSet:
    """Derive the six standard measures from one base series.

    Every simulated measure is flagged as estimated data. An empty or
    unusable base series yields an empty simulated set.
    """
    series = normalize_series(base_series)
    if not series:
        return MeasureSet.simulated(currency)
    measures = {}
    for key in CANONICAL_MEASURES:
        measure = simulate_measure(key, series, provenance=provenance)
        measures[measure.name] = measure
    return MeasureSet.simulated(currency, measures)
