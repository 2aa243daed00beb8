"""Tests for data-quality scoring and series validation."""

from __future__ import annotations

import pytest

from inflationkit.models import MeasureResolution, MeasureSet
from inflationkit.providers.simulated import build_simulated_measures
from inflationkit.quality import score_data_quality, validate_series
from inflationkit.series import CPI_U_ANNUAL


def _smooth(start: int, count: int, rate: float = 0.03) -> dict[int, float]:
    return {start + i: 100.0 * (1 + rate) ** i for i in range(count)}


class TestScoreDataQuality:
    def test_empty_set_scores_zero(self):
        score = score_data_quality({})
        assert score.score == 0
        assert score.details.total_measures == 0
        assert score.details.average_years_coverage == 0.0

    def test_simulated_set_scores_zero(self):
        resolution = MeasureResolution(build_simulated_measures(CPI_U_ANNUAL))
        score = score_data_quality(resolution)
        assert score.score == 0
        assert score.details.total_measures == 6
        assert score.details.estimated_measures == 6
        assert score.details.average_years_coverage == max(CPI_U_ANNUAL) - min(CPI_U_ANNUAL)

    def test_all_real_scores_hundred(self, measure_factory):
        measures = {"CPI": measure_factory(), "PCE": measure_factory("PCE")}
        score = score_data_quality(measures)
        assert score.score == 100
        assert score.details.real_data_measures == 2
        assert score.details.average_years_coverage == 24

    @pytest.mark.parametrize(
        ("real", "total", "expected"),
        [(1, 3, 33), (2, 3, 67), (1, 2, 50), (1, 8, 13)],
    )
    def test_score_rounds_half_up(self, measure_factory, real, total, expected):
        measures = {
            f"M{i}": measure_factory(f"M{i}", is_real_data=i < real)
            for i in range(total)
        }
        score = score_data_quality(measures)
        assert score.score == expected
        assert 0 <= score.score <= 100

    def test_mixed_coverage_is_averaged(self, measure_factory):
        measures = {
            "A": measure_factory("A", {2000: 1.0, 2010: 1.2}),
            "B": measure_factory("B", {2000: 1.0, 2020: 1.5}),
        }
        score = score_data_quality(MeasureSet.real("USD", measures))
        assert score.details.average_years_coverage == pytest.approx(15.0)

    def test_to_dict_shape(self, measure_factory):
        payload = score_data_quality({"CPI": measure_factory()}).to_dict()
        assert payload["score"] == 100
        assert set(payload["details"]) == {
            "total_measures",
            "real_data_measures",
            "estimated_measures",
            "average_years_coverage",
        }


class TestValidateSeries:
    def test_empty_series_is_invalid(self):
        result = validate_series({}, name="cpi")
        assert not result.is_valid
        assert result.score == 0
        assert "no usable data points" in result.errors[0]

    def test_single_point_is_invalid(self):
        result = validate_series({2000: 172.2}, name="cpi")
        assert not result.is_valid
        assert "insufficient data points" in result.errors[0]

    def test_smooth_series_is_clean(self):
        result = validate_series(_smooth(2000, 20))
        assert result.is_valid
        assert result.errors == ()
        assert result.warnings == ()
        assert result.score == 100
        assert result.data_points == 20
        assert result.years_covered == 20

    def test_short_series_warns(self):
        result = validate_series({2000: 172.2, 2001: 177.1}, name="cpi")
        assert result.is_valid
        assert any("only 2 data points" in w for w in result.warnings)

    def test_gaps_are_reported(self):
        series = _smooth(2000, 12)
        series[2020] = series[2011] * 1.05
        result = validate_series(series)

        assert result.missing_years == tuple(range(2012, 2020))
        assert len(result.gaps) == 1
        gap = result.gaps[0]
        assert (gap.start, gap.end, gap.length) == (2012, 2019, 8)
        assert any("large data gaps" in w for w in result.warnings)
        assert result.score < 100

    def test_extreme_jumps_are_outliers(self):
        series = _smooth(2000, 12)
        series[2005] = series[2004] * 2.0
        result = validate_series(series)

        years = [o.year for o in result.outliers]
        assert 2005 in years
        assert 2006 in years
        assert any("extreme year-over-year" in w for w in result.warnings)

    def test_long_series_earns_bonus(self):
        result = validate_series(_smooth(1900, 120, rate=0.01))
        assert result.score == 100

    def test_bundled_series_is_valid(self):
        result = validate_series(CPI_U_ANNUAL, name="cpi-u")
        assert result.is_valid
        assert result.data_points == len(CPI_U_ANNUAL)
