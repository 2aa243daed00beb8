"""Tests for the measure catalogue and display helpers."""

from __future__ import annotations

import pytest

from inflationkit.measures import (
    CANONICAL_MEASURES,
    CONFIDENCE_LABELS,
    CURRENCIES,
    CURRENCY_MEASURE_WEIGHTS,
    DEFAULT_DESCRIPTION,
    SIMULATED_CONFIDENCE,
    SIMULATED_OFFSETS,
    STANDARD_WEIGHTS,
    SUPPORTED_CURRENCIES,
    canonical_rank,
    confidence_for_source,
    currency_measure_keys,
    is_authority_source,
    measure_description,
    measure_display_name,
    measure_key,
    measure_long_name,
    measure_weight,
    normalize_currency,
)


class TestCatalogue:
    def test_standard_weights_sum_to_one(self):
        assert sum(STANDARD_WEIGHTS.values()) == pytest.approx(1.0)

    def test_tables_cover_canonical_measures(self):
        for key in CANONICAL_MEASURES:
            assert key in STANDARD_WEIGHTS
            assert key in SIMULATED_OFFSETS
            assert SIMULATED_CONFIDENCE[key] in CONFIDENCE_LABELS

    def test_supported_currencies(self):
        assert SUPPORTED_CURRENCIES == {"USD", "GBP", "EUR", "CAD", "AUD", "CHF", "JPY", "NZD"}
        assert CURRENCIES["GBP"].symbol == "£"

    def test_normalize_currency(self):
        assert normalize_currency(" gbp ") == "GBP"
        assert normalize_currency(None) == ""


class TestCurrencyCatalogue:
    @pytest.mark.parametrize("currency", sorted(CURRENCY_MEASURE_WEIGHTS))
    def test_weights_sum_to_one(self, currency):
        assert sum(CURRENCY_MEASURE_WEIGHTS[currency].values()) == pytest.approx(1.0)

    def test_every_supported_currency_has_a_catalogue(self):
        assert set(CURRENCY_MEASURE_WEIGHTS) == SUPPORTED_CURRENCIES

    def test_catalogue_keys(self):
        assert currency_measure_keys("eur")[:2] == ("hicp", "core_hicp")
        assert "cpih" in currency_measure_keys("GBP")
        assert "core_pce" in currency_measure_keys("USD")
        assert currency_measure_keys("XYZ") == CANONICAL_MEASURES

    def test_measure_weight(self):
        assert measure_weight("GBP", "cpih") == 0.20
        assert measure_weight("GBP", "cpi") == 0.30
        assert measure_weight("USD", "gdp_deflator") == 0.05
        assert measure_weight("gbp", "CPI including Housing (CPIH)") == 0.20

    def test_measure_outside_catalogue_has_no_weight(self):
        assert measure_weight("EUR", "cpi") == 0.0

    def test_unknown_currency_uses_standard_weights(self):
        assert measure_weight("XYZ", "gdp_deflator") == STANDARD_WEIGHTS["gdp_deflator"]


class TestDisplayNames:
    @pytest.mark.parametrize(
        ("key", "label"),
        [
            ("cpi", "CPI"),
            ("core_cpi", "Core CPI"),
            ("chained_cpi", "Chained CPI"),
            ("pce", "PCE"),
            ("ppi", "PPI"),
            ("gdp_deflator", "GDP Deflator"),
            ("trimmed_mean_cpi", "Trimmed Mean CPI"),
        ],
    )
    def test_known_keys(self, key, label):
        assert measure_display_name(key) == label

    def test_unknown_key_is_title_cased(self):
        assert measure_display_name("services_index") == "Services Index"

    def test_display_name_round_trips_to_key(self):
        assert measure_key("Core CPI") == "core_cpi"
        assert measure_key("GDP Deflator") == "gdp_deflator"
        assert measure_display_name("Core CPI") == "Core CPI"

    def test_long_names(self):
        assert measure_long_name("cpi") == "Consumer Price Index (CPI)"
        assert measure_long_name("core_cpi") == "Core CPI"
        assert measure_key("Producer Price Index (PPI)") == "ppi"

    def test_descriptions(self):
        assert measure_description("pce") == "Federal Reserve's preferred inflation measure"
        assert measure_description("mystery") == DEFAULT_DESCRIPTION


class TestRanking:
    def test_canonical_rank(self):
        assert canonical_rank("CPI") == 0
        assert canonical_rank("gdp_deflator") == 5
        assert canonical_rank("Housing Index") == len(CANONICAL_MEASURES)


class TestSourceConfidence:
    @pytest.mark.parametrize(
        "source",
        [
            "FRED series CPIAUCSL",
            "ONS",
            "ONS CPI",
            "ABS",
            "Bureau of Labor Statistics",
            "Official data",
            "BLS/CPI-U",
        ],
    )
    def test_authority_sources(self, source):
        assert is_authority_source(source)
        assert confidence_for_source(source) == "High"

    @pytest.mark.parametrize(
        "source",
        ["", None, "Simulated", "estimate", "Unofficial data", "RECONSTRUCTIONS", "CONSUMER INDEX"],
    )
    def test_non_authority_sources(self, source):
        assert not is_authority_source(source)
        assert confidence_for_source(source) == "Medium"
