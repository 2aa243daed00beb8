"""Multi-measure inflation consensus calculations."""

from .consensus import calculate_measure_spread, compute_consensus
from .models import (
    ConsensusResult,
    DataQualityScore,
    InflationMeasure,
    MeasureResolution,
    MeasureResult,
    MeasureSet,
    MeasureSetKind,
)
from .providers import resolve_measures
from .quality import score_data_quality

__version__ = "0.1.0"

__all__ = [
    "ConsensusResult",
    "DataQualityScore",
    "InflationMeasure",
    "MeasureResolution",
    "MeasureResult",
    "MeasureSet",
    "MeasureSetKind",
    "__version__",
    "calculate_measure_spread",
    "compute_consensus",
    "resolve_measures",
    "score_data_quality",
]
