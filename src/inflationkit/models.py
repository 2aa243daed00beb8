"""Normalized data models for inflation measures and consensus results."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


def _frozen_series(series: Mapping[int, float]) -> Mapping[int, float]:
    return MappingProxyType({year: series[year] for year in sorted(series)})


@dataclass(frozen=True)
class InflationMeasure:
    """One named inflation index with its weight in the consensus."""

    name: str
    series: Mapping[int, float]
    weight: float
    confidence: str = "Medium"
    is_real_data: bool = False
    description: str = ""
    key: str = ""
    source: str = ""

    def __post_init__(self):
        object.__setattr__(self, "series", _frozen_series(self.series))

    def value_at(self, year: int) -> float | None:
        """Return a usable index value for ``year`` or None."""
        value = self.series.get(year)
        if value is None:
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number) or number <= 0:
            return None
        return number

    def year_bounds(self) -> tuple[int, int] | None:
        if not self.series:
            return None
        years = list(self.series)
        return years[0], years[-1]

    def to_dict(self, *, include_series: bool = False) -> dict:
        bounds = self.year_bounds()
        payload = {
            "name": self.name,
            "key": self.key,
            "description": self.description,
            "weight": self.weight,
            "confidence": self.confidence,
            "is_real_data": self.is_real_data,
            "source": self.source,
            "earliest_year": bounds[0] if bounds else None,
            "latest_year": bounds[1] if bounds else None,
        }
        if include_series:
            payload["series"] = {str(year): value for year, value in self.series.items()}
        return payload


class MeasureSetKind(StrEnum):
    REAL = "real"
    SIMULATED = "simulated"


@dataclass(frozen=True)
class MeasureSet:
    """Measures for one currency, tagged by where their data came from.

    The variant is fixed when the set is resolved; consumers read
    ``measures`` the same way for both kinds.
    """

    kind: MeasureSetKind
    currency: str
    measures: Mapping[str, InflationMeasure] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "measures", MappingProxyType(dict(self.measures)))

    @classmethod
    def real(cls, currency: str, measures: Mapping[str, InflationMeasure]) -> MeasureSet:
        return cls(kind=MeasureSetKind.REAL, currency=currency, measures=measures)

    @classmethod
    def simulated(
        cls,
        currency: str,
        measures: Mapping[str, InflationMeasure] | None = None,
    ) -> MeasureSet:
        return cls(kind=MeasureSetKind.SIMULATED, currency=currency, measures=measures or {})

    @property
    def has_real_data(self) -> bool:
        return self.kind == MeasureSetKind.REAL and any(
            m.is_real_data for m in self.measures.values()
        )

    @property
    def fallback_used(self) -> bool:
        return self.kind == MeasureSetKind.SIMULATED

    def __len__(self) -> int:
        return len(self.measures)


@dataclass(frozen=True)
class MeasureResolution:
    """Outcome of resolving the usable measures for a currency."""

    measure_set: MeasureSet

    @property
    def measures(self) -> Mapping[str, InflationMeasure]:
        return self.measure_set.measures

    @property
    def has_real_data(self) -> bool:
        return self.measure_set.has_real_data

    @property
    def fallback_used(self) -> bool:
        return self.measure_set.fallback_used

    @property
    def currency(self) -> str:
        return self.measure_set.currency

    def to_dict(self) -> dict:
        return {
            "currency": self.currency,
            "kind": self.measure_set.kind.value,
            "has_real_data": self.has_real_data,
            "fallback_used": self.fallback_used,
            "measures": {name: m.to_dict() for name, m in self.measures.items()},
        }


@dataclass(frozen=True)
class MeasureResult:
    """Adjusted amount for a single measure over the requested span."""

    measure_name: str
    adjusted_amount: float
    total_inflation_percent: float
    weight: float
    confidence: str
    annual_average_percent: float = 0.0

    def to_dict(self) -> dict:
        return {
            "measure_name": self.measure_name,
            "adjusted_amount": self.adjusted_amount,
            "total_inflation_percent": self.total_inflation_percent,
            "annual_average_percent": self.annual_average_percent,
            "weight": self.weight,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ConsensusResult:
    """Per-measure and weighted consensus results for one calculation."""

    currency: str
    from_year: int
    to_year: int
    amount: float
    individual_measures: tuple[MeasureResult, ...] = ()
    consensus_adjusted_amount: float = 0.0
    consensus_total_inflation_percent: float = 0.0
    consensus_annual_average_percent: float = 0.0
    total_weight: float = 0.0
    excluded_measures: tuple[str, ...] = ()

    @classmethod
    def empty(
        cls,
        currency: str = "",
        from_year: int = 0,
        to_year: int = 0,
        amount: float = 0.0,
    ) -> ConsensusResult:
        return cls(currency=currency, from_year=from_year, to_year=to_year, amount=amount)

    @property
    def is_empty(self) -> bool:
        return not self.individual_measures

    def to_dict(self) -> dict:
        return {
            "currency": self.currency,
            "from_year": self.from_year,
            "to_year": self.to_year,
            "amount": self.amount,
            "consensus_adjusted_amount": self.consensus_adjusted_amount,
            "consensus_total_inflation_percent": self.consensus_total_inflation_percent,
            "consensus_annual_average_percent": self.consensus_annual_average_percent,
            "total_weight": self.total_weight,
            "individual_measures": [m.to_dict() for m in self.individual_measures],
            "excluded_measures": list(self.excluded_measures),
        }


@dataclass(frozen=True)
class DataQualityDetails:
    total_measures: int = 0
    real_data_measures: int = 0
    estimated_measures: int = 0
    average_years_coverage: float = 0.0


@dataclass(frozen=True)
class DataQualityScore:
    """Advisory score for how much of a measure set is authority data."""

    score: int = 0
    details: DataQualityDetails = field(default_factory=DataQualityDetails)

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "details": {
                "total_measures": self.details.total_measures,
                "real_data_measures": self.details.real_data_measures,
                "estimated_measures": self.details.estimated_measures,
                "average_years_coverage": self.details.average_years_coverage,
            },
        }


@dataclass(frozen=True)
class SpreadRange:
    min: float = 0.0
    max: float = 0.0
    difference: float = 0.0


@dataclass(frozen=True)
class MeasureSpread:
    """How closely the individual measures agree with each other."""

    spread_percentage: float
    standard_deviation: float
    range: SpreadRange
    agreement_level: str
    description: str

    def to_dict(self) -> dict:
        return {
            "spread_percentage": self.spread_percentage,
            "standard_deviation": self.standard_deviation,
            "range": {
                "min": self.range.min,
                "max": self.range.max,
                "difference": self.range.difference,
            },
            "agreement_level": self.agreement_level,
            "description": self.description,
        }


@dataclass(frozen=True)
class SeriesGap:
    start: int
    end: int
    length: int


@dataclass(frozen=True)
class SeriesOutlier:
    year: int
    value: float
    reason: str


@dataclass(frozen=True)
class ValidationResult:
    """Structural and numeric health of one normalized series."""

    is_valid: bool
    score: int
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    data_points: int = 0
    years_covered: int = 0
    missing_years: tuple[int, ...] = ()
    gaps: tuple[SeriesGap, ...] = ()
    outliers: tuple[SeriesOutlier, ...] = ()
