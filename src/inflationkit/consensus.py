"""Weighted multi-measure inflation consensus."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from statistics import fmean, pstdev

from inflationkit.measures import canonical_rank
from inflationkit.models import (
    ConsensusResult,
    InflationMeasure,
    MeasureResolution,
    MeasureResult,
    MeasureSet,
    MeasureSpread,
    SpreadRange,
)
from inflationkit.text import coerce_int, safe_float

logger = logging.getLogger(__name__)

HIGH_AGREEMENT_SPREAD = 5.0
MEDIUM_AGREEMENT_SPREAD = 15.0

MeasureInput = Mapping[str, InflationMeasure] | MeasureSet | MeasureResolution


def as_measure_mapping(measures: MeasureInput | None) -> Mapping[str, InflationMeasure]:
    if measures is None:
        return {}
    if isinstance(measures, (MeasureSet, MeasureResolution)):
        return measures.measures
    return measures


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def coerce_amount(amount: object) -> float | None:
    """Return ``amount`` as a finite positive float, or None."""
    value = safe_float(amount)
    if value is None or value <= 0:
        return None
    return value


def annual_average_percent(adjusted: float, amount: float, years: int) -> float:
    """Compound annual rate, in percent, that turns amount into adjusted."""
    if years <= 0 or amount <= 0 or adjusted <= 0:
        return 0.0
    try:
        rate = (adjusted / amount) ** (1.0 / years) - 1.0
    except (OverflowError, ZeroDivisionError):
        return 0.0
    return _finite(rate * 100.0)


def calculate_for_measure(
    measure: InflationMeasure,
    from_year: int,
    to_year: int,
    amount: float,
    *,
    name: str | None = None,
) -> MeasureResult | None:
    """Adjust ``amount`` from one year to another along a single measure.

    Returns None when either endpoint has no usable value or the
    arithmetic does not produce finite numbers.
    """
    from_value = measure.value_at(from_year)
    to_value = measure.value_at(to_year)
    if from_value is None or to_value is None:
        return None

    try:
        adjusted = amount * to_value / from_value
        percent = (adjusted - amount) / amount * 100.0
    except (OverflowError, ZeroDivisionError):
        return None
    if not (math.isfinite(adjusted) and math.isfinite(percent)):
        return None

    return MeasureResult(
        measure_name=name or measure.name,
        adjusted_amount=adjusted,
        total_inflation_percent=percent,
        weight=measure.weight,
        confidence=measure.confidence,
        annual_average_percent=annual_average_percent(
            adjusted, amount, to_year - from_year
        ),
    )


def compute_consensus(
    measures: MeasureInput | None,
    currency: str,
    from_year: int,
    to_year: int,
    amount: object,
    *,
    renormalize: bool = False,
) -> ConsensusResult:
    """Compute per-measure and weighted consensus adjusted amounts.

    Measures lacking a usable value at either endpoint are left out of
    the breakdown and the sums. By default the surviving measures keep
    their original weights, so the consensus is not a true weighted
    average when data is incomplete; ``renormalize=True`` divides by the
    weight actually used instead.

    Year ordering is not validated: ``from_year > to_year`` converts the
    amount back in time along the same index ratio.
    """
    start = coerce_int(from_year, default=0) or 0
    end = coerce_int(to_year, default=0) or 0
    value = coerce_amount(amount)
    if value is None:
        logger.debug("Ignoring consensus request with invalid amount %r", amount)
        return ConsensusResult.empty(currency, start, end, 0.0)

    mapping = as_measure_mapping(measures)
    ordered = sorted(
        enumerate(mapping.items()),
        key=lambda item: (canonical_rank(item[1][0]), item[0]),
    )

    included: list[MeasureResult] = []
    excluded: list[str] = []
    for _, (name, measure) in ordered:
        result = calculate_for_measure(measure, start, end, value, name=name)
        if result is None:
            excluded.append(name)
            continue
        weight = safe_float(result.weight)
        if weight is None:
            excluded.append(name)
            continue
        included.append(result)

    if excluded:
        logger.debug(
            "%s %s->%s: excluded %d measure(s) without data: %s",
            currency, start, end, len(excluded), ", ".join(excluded),
        )

    total_weight = sum(m.weight for m in included)
    weighted_amount = sum(m.adjusted_amount * m.weight for m in included)
    weighted_percent = sum(m.total_inflation_percent * m.weight for m in included)

    if renormalize and total_weight > 0:
        weighted_amount /= total_weight
        weighted_percent /= total_weight
        included = [
            MeasureResult(
                measure_name=m.measure_name,
                adjusted_amount=m.adjusted_amount,
                total_inflation_percent=m.total_inflation_percent,
                weight=m.weight / total_weight,
                confidence=m.confidence,
                annual_average_percent=m.annual_average_percent,
            )
            for m in included
        ]

    weighted_amount = _finite(weighted_amount)
    weighted_percent = _finite(weighted_percent)

    return ConsensusResult(
        currency=currency,
        from_year=start,
        to_year=end,
        amount=value,
        individual_measures=tuple(included),
        consensus_adjusted_amount=weighted_amount,
        consensus_total_inflation_percent=weighted_percent,
        consensus_annual_average_percent=annual_average_percent(
            weighted_amount, value, end - start
        ),
        total_weight=_finite(total_weight),
        excluded_measures=tuple(excluded),
    )


def calculate_measure_spread(
    individual_measures: Iterable[MeasureResult],
) -> MeasureSpread:
    """Summarize how far the individual measures disagree."""
    values = [m.total_inflation_percent for m in individual_measures]

    if not values:
        return MeasureSpread(
            spread_percentage=0.0,
            standard_deviation=0.0,
            range=SpreadRange(),
            agreement_level="High",
            description="No measures available",
        )
    if len(values) == 1:
        only = values[0]
        return MeasureSpread(
            spread_percentage=0.0,
            standard_deviation=0.0,
            range=SpreadRange(min=only, max=only, difference=0.0),
            agreement_level="High",
            description="Only one measure available",
        )

    mean = fmean(values)
    deviation = pstdev(values)
    low, high = min(values), max(values)
    spread = deviation / abs(mean) * 100.0 if mean != 0 else 0.0

    if spread < HIGH_AGREEMENT_SPREAD:
        level = "High"
        description = "All measures closely agree - high confidence in results"
    elif spread < MEDIUM_AGREEMENT_SPREAD:
        level = "Medium"
        description = "Measures show moderate variation - typical for multi-measure analysis"
    else:
        level = "Low"
        description = (
            "Significant disagreement between measures - "
            "results should be interpreted with caution"
        )

    return MeasureSpread(
        spread_percentage=round(_finite(spread), 2),
        standard_deviation=round(_finite(deviation), 2),
        range=SpreadRange(min=low, max=high, difference=high - low),
        agreement_level=level,
        description=description,
    )
