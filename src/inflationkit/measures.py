"""Measure catalogue: canonical keys, weights, labels and currencies."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Canonical display order for consensus breakdowns.
CANONICAL_MEASURES: tuple[str, ...] = (
    "cpi",
    "core_cpi",
    "chained_cpi",
    "pce",
    "ppi",
    "gdp_deflator",
)

STANDARD_WEIGHTS: dict[str, float] = {
    "cpi": 0.25,
    "core_cpi": 0.20,
    "chained_cpi": 0.15,
    "pce": 0.15,
    "ppi": 0.10,
    "gdp_deflator": 0.15,
}

# Measures published per currency, with their consensus weights. Each
# table sums to 1. Currencies not listed use STANDARD_WEIGHTS.
CURRENCY_MEASURE_WEIGHTS: dict[str, dict[str, float]] = {
    "USD": {
        "cpi": 0.25,
        "core_cpi": 0.20,
        "chained_cpi": 0.15,
        "pce": 0.15,
        "core_pce": 0.10,
        "ppi": 0.10,
        "gdp_deflator": 0.05,
    },
    "GBP": {
        "cpi": 0.30,
        "core_cpi": 0.25,
        "cpih": 0.20,
        "rpi": 0.10,
        "ppi_output": 0.10,
        "gdp_deflator": 0.05,
    },
    "EUR": {
        "hicp": 0.35,
        "core_hicp": 0.25,
        "services_hicp": 0.15,
        "goods_hicp": 0.10,
        "ppi": 0.10,
        "gdp_deflator": 0.05,
    },
    "CAD": {
        "cpi": 0.30,
        "core_cpi": 0.20,
        "cpi_trim": 0.20,
        "cpi_median": 0.15,
        "ippi": 0.10,
        "gdp_deflator": 0.05,
    },
    "CHF": {
        "cpi": 0.40,
        "core_cpi": 0.25,
        "ppi": 0.20,
        "gdp_deflator": 0.10,
        "housing_index": 0.05,
    },
    "JPY": {
        "cpi": 0.30,
        "core_cpi": 0.25,
        "core_core_cpi": 0.20,
        "cgpi": 0.15,
        "gdp_deflator": 0.10,
    },
    "AUD": {
        "cpi": 0.30,
        "trimmed_mean_cpi": 0.25,
        "weighted_median_cpi": 0.20,
        "core_cpi": 0.15,
        "ppi": 0.05,
        "gdp_deflator": 0.05,
    },
    "NZD": {
        "cpi": 0.35,
        "core_cpi": 0.25,
        "non_tradables_cpi": 0.20,
        "tradables_cpi": 0.10,
        "ppi": 0.05,
        "gdp_deflator": 0.05,
    },
}

# Multipliers applied to a base CPI-like series to simulate each measure.
SIMULATED_OFFSETS: dict[str, float] = {
    "cpi": 1.00,
    "core_cpi": 0.98,
    "chained_cpi": 0.96,
    "pce": 0.97,
    "ppi": 1.02,
    "gdp_deflator": 0.99,
}

SIMULATED_CONFIDENCE: dict[str, str] = {
    "cpi": "High",
    "core_cpi": "High",
    "chained_cpi": "Medium",
    "pce": "Very High",
    "ppi": "Low",
    "gdp_deflator": "Medium",
}

CONFIDENCE_LABELS = frozenset({"High", "Medium", "Low", "Very High"})

# Names in a payload source that mark it as authority-published data.
# Matched as whole words, so "ONS" does not match inside "RECONSTRUCTIONS".
AUTHORITY_SOURCE_MARKERS: tuple[str, ...] = (
    "FRED",
    "ONS",
    "Bureau of Labor Statistics",
    "BLS",
    "Eurostat",
    "Statistics Canada",
    "Australian Bureau of Statistics",
    "ABS",
    "Bank of Japan",
    "Statistics Bureau of Japan",
    "Swiss Federal Statistical Office",
    "Stats NZ",
    "Statistics New Zealand",
    "Reserve Bank",
    "Federal Reserve",
    "ECB",
    "European Central Bank",
    "Real data",
    "Official data",
    "official data",
)

_AUTHORITY_RE = re.compile(
    "|".join(
        rf"(?<![A-Za-z]){re.escape(marker)}(?![A-Za-z])"
        for marker in AUTHORITY_SOURCE_MARKERS
    )
)

_DISPLAY_NAMES: dict[str, str] = {
    "cpi": "CPI",
    "core_cpi": "Core CPI",
    "chained_cpi": "Chained CPI",
    "pce": "PCE",
    "core_pce": "Core PCE",
    "ppi": "PPI",
    "gdp_deflator": "GDP Deflator",
    "trimmed_mean_cpi": "Trimmed Mean CPI",
    "hicp": "Harmonized Index of Consumer Prices",
    "core_hicp": "Core HICP",
    "cpih": "CPI including Housing (CPIH)",
    "rpi": "Retail Price Index (RPI)",
    "ppi_input": "PPI Input Prices",
    "ppi_output": "PPI Output Prices",
    "cpi_trim": "CPI-trim",
    "cpi_median": "CPI-median",
    "ippi": "Industrial Product Price Index",
    "rmpi": "Raw Materials Price Index",
    "cgpi": "Corporate Goods Price Index",
    "sppi": "Services Producer Price Index",
    "core_core_cpi": "Core-Core CPI",
    "weighted_median_cpi": "Weighted Median CPI",
    "tradables_cpi": "CPI Tradables",
    "non_tradables_cpi": "CPI Non-tradables",
    "services_hicp": "HICP Services",
    "goods_hicp": "HICP Goods",
    "housing_index": "Housing Price Index",
}

_LONG_NAMES: dict[str, str] = {
    "cpi": "Consumer Price Index (CPI)",
    "pce": "Personal Consumption Expenditures (PCE)",
    "ppi": "Producer Price Index (PPI)",
}

_DESCRIPTIONS: dict[str, str] = {
    "cpi": "Standard measure of inflation for consumer goods and services",
    "core_cpi": "CPI excluding volatile food and energy prices",
    "chained_cpi": "Accounts for consumer substitution behavior",
    "pce": "Federal Reserve's preferred inflation measure",
    "core_pce": "PCE excluding food and energy, closely watched by Fed",
    "ppi": "Measures wholesale price changes",
    "gdp_deflator": (
        "Measures price changes across the entire economy, "
        "including government and investment"
    ),
    "trimmed_mean_cpi": "Excludes extreme price movements for a more stable measure",
    "hicp": "Harmonized measure used across EU countries",
    "core_hicp": "HICP excluding energy and unprocessed food",
    "cpih": "UK's preferred measure including owner-occupiers' housing costs",
    "rpi": "Traditional UK measure, still used for some purposes",
    "cpi_trim": "Bank of Canada's preferred core measure",
    "cpi_median": "Median of price changes across CPI components",
    "cgpi": "Japan's broad measure of producer prices",
    "weighted_median_cpi": "RBA's preferred underlying inflation measure",
    "tradables_cpi": "Prices of goods that can be traded internationally",
    "non_tradables_cpi": "Prices of domestic services and non-traded goods",
}

DEFAULT_DESCRIPTION = "Inflation measure"


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    name: str
    symbol: str
    earliest_year: int
    average_inflation_rate: float


CURRENCIES: dict[str, CurrencyInfo] = {
    "USD": CurrencyInfo("USD", "US Dollar", "$", 1913, 0.032),
    "GBP": CurrencyInfo("GBP", "British Pound", "£", 1947, 0.038),
    "EUR": CurrencyInfo("EUR", "Euro", "€", 1996, 0.021),
    "CAD": CurrencyInfo("CAD", "Canadian Dollar", "CA$", 1914, 0.032),
    "AUD": CurrencyInfo("AUD", "Australian Dollar", "AU$", 1948, 0.034),
    "CHF": CurrencyInfo("CHF", "Swiss Franc", "CHF", 1914, 0.018),
    "JPY": CurrencyInfo("JPY", "Japanese Yen", "¥", 1946, 0.025),
    "NZD": CurrencyInfo("NZD", "New Zealand Dollar", "NZ$", 1914, 0.038),
}

SUPPORTED_CURRENCIES = frozenset(CURRENCIES)


def normalize_currency(value: object) -> str:
    return str(value or "").strip().upper()


def measure_key(name: str) -> str:
    """Map a display name or loosely-written key to its snake_case key."""
    text = str(name or "").strip()
    for key, label in _DISPLAY_NAMES.items():
        if text == label:
            return key
    for key, label in _LONG_NAMES.items():
        if text == label:
            return key
    return text.lower().replace("-", "_").replace(" ", "_")


def measure_display_name(measure: str) -> str:
    """Return the short display label for a measure key.

    Unknown keys are title-cased with underscores turned into spaces, so
    the function never fails for a key it has not seen.
    """
    key = measure_key(measure)
    if key in _DISPLAY_NAMES:
        return _DISPLAY_NAMES[key]
    words = str(measure).replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def measure_long_name(measure: str) -> str:
    key = measure_key(measure)
    return _LONG_NAMES.get(key) or measure_display_name(measure)


def measure_description(measure: str) -> str:
    return _DESCRIPTIONS.get(measure_key(measure), DEFAULT_DESCRIPTION)


def currency_measure_keys(currency: str) -> tuple[str, ...]:
    """Measure keys published for a currency, in catalogue order."""
    weights = CURRENCY_MEASURE_WEIGHTS.get(normalize_currency(currency))
    if weights is None:
        return CANONICAL_MEASURES
    return tuple(weights)


def measure_weight(currency: str, measure: str) -> float:
    key = measure_key(measure)
    weights = CURRENCY_MEASURE_WEIGHTS.get(normalize_currency(currency))
    if weights is None:
        return STANDARD_WEIGHTS.get(key, 0.0)
    return weights.get(key, 0.0)


def canonical_rank(name: str) -> int:
    """Position in the canonical order; non-canonical measures sort last."""
    key = measure_key(name)
    try:
        return CANONICAL_MEASURES.index(key)
    except ValueError:
        return len(CANONICAL_MEASURES)


def is_authority_source(source: object) -> bool:
    text = str(source or "")
    return _AUTHORITY_RE.search(text) is not None


def confidence_for_source(source: object) -> str:
    """Confidence label for a loaded measure, derived from its provenance."""
    if is_authority_source(source):
        return "High"
    return "Medium"
