"""Data-quality scoring and series validation for measure sets."""

from __future__ import annotations

from collections.abc import Mapping

from inflationkit.consensus import MeasureInput, as_measure_mapping
from inflationkit.models import (
    DataQualityDetails,
    DataQualityScore,
    SeriesGap,
    SeriesOutlier,
    ValidationResult,
)
from inflationkit.series import years_coverage
from inflationkit.text import round_half_up

MIN_DATA_POINTS = 2
RECOMMENDED_DATA_POINTS = 10
MAX_MISSING_YEARS = 5
MAX_YEAR_OVER_YEAR_CHANGE = 50.0
MIN_YEAR_OVER_YEAR_CHANGE = -20.0


def score_data_quality(measures: MeasureInput | None) -> DataQualityScore:
    """Score a measure set by the share of measures backed by real data.

    The result is advisory and never feeds back into consensus math.
    """
    mapping = as_measure_mapping(measures)
    total = len(mapping)
    if total == 0:
        return DataQualityScore()

    real = sum(1 for m in mapping.values() if m.is_real_data)
    coverage = sum(years_coverage(m.series) for m in mapping.values()) / total

    return DataQualityScore(
        score=round_half_up(100.0 * real / total),
        details=DataQualityDetails(
            total_measures=total,
            real_data_measures=real,
            estimated_measures=total - real,
            average_years_coverage=coverage,
        ),
    )


def _gaps(years: list[int]) -> tuple[list[int], list[SeriesGap]]:
    missing: list[int] = []
    gaps: list[SeriesGap] = []
    present = set(years)
    gap_start: int | None = None
    for year in range(years[0], years[-1] + 1):
        if year not in present:
            missing.append(year)
            if gap_start is None:
                gap_start = year
        elif gap_start is not None:
            gaps.append(SeriesGap(start=gap_start, end=year - 1, length=year - gap_start))
            gap_start = None
    return missing, gaps


def validate_series(series: Mapping[int, float], *, name: str = "series") -> ValidationResult:
    """Check a normalized series for coverage, gaps and implausible jumps."""
    errors: list[str] = []
    warnings: list[str] = []

    years = sorted(year for year, value in series.items() if value and value > 0)
    if not years:
        return ValidationResult(
            is_valid=False,
            score=0,
            errors=(f"{name}: no usable data points",),
        )

    if len(years) < MIN_DATA_POINTS:
        errors.append(
            f"{name}: insufficient data points ({len(years)}, minimum {MIN_DATA_POINTS})"
        )
    elif len(years) < RECOMMENDED_DATA_POINTS:
        warnings.append(f"{name}: only {len(years)} data points")

    missing, gaps = _gaps(years)
    if len(missing) > MAX_MISSING_YEARS:
        warnings.append(f"{name}: large data gaps ({len(missing)} missing years)")

    outliers: list[SeriesOutlier] = []
    for prev, year in zip(years, years[1:]):
        if year != prev + 1:
            continue
        change = (series[year] / series[prev] - 1.0) * 100.0
        if change > MAX_YEAR_OVER_YEAR_CHANGE or change < MIN_YEAR_OVER_YEAR_CHANGE:
            outliers.append(
                SeriesOutlier(
                    year=year,
                    value=series[year],
                    reason=f"year-over-year change of {change:.1f}%",
                )
            )
    if outliers:
        warnings.append(f"{name}: {len(outliers)} extreme year-over-year change(s)")

    expected = years[-1] - years[0] + 1
    completeness = len(years) / expected
    score = 100.0
    score -= len(errors) * 20
    score -= len(warnings) * 5
    score -= (1.0 - completeness) * 30
    score -= len(outliers) * 2
    if len(years) >= 50:
        score += 5
    if len(years) >= 100:
        score += 5
    final = max(0, min(100, round_half_up(score)))

    return ValidationResult(
        is_valid=not errors,
        score=final,
        errors=tuple(errors),
        warnings=tuple(warnings),
        data_points=len(years),
        years_covered=expected,
        missing_years=tuple(missing),
        gaps=tuple(gaps),
        outliers=tuple(outliers),
    )
