"""Index-series normalization and the bundled USD base series."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from inflationkit.text import parse_year, safe_float

# CPI-U annual averages (US city average, all items). Values are rounded.
# Used as the USD base series when no base file can be fetched.
CPI_U_ANNUAL: dict[int, float] = {
    1913: 9.9,
    1914: 10.0,
    1915: 10.1,
    1916: 10.9,
    1917: 12.8,
    1918: 15.0,
    1919: 17.3,
    1920: 20.0,
    1921: 17.9,
    1922: 16.8,
    1923: 17.1,
    1924: 17.1,
    1925: 17.5,
    1926: 17.7,
    1927: 17.4,
    1928: 17.1,
    1929: 17.1,
    1930: 16.7,
    1931: 15.2,
    1932: 13.7,
    1933: 13.0,
    1934: 13.4,
    1935: 13.7,
    1936: 13.9,
    1937: 14.4,
    1938: 14.1,
    1939: 13.9,
    1940: 14.0,
    1941: 14.7,
    1942: 16.3,
    1943: 17.3,
    1944: 17.6,
    1945: 18.0,
    1946: 19.5,
    1947: 22.3,
    1948: 24.1,
    1949: 23.8,
    1950: 24.1,
    1951: 26.0,
    1952: 26.5,
    1953: 26.7,
    1954: 26.9,
    1955: 26.8,
    1956: 27.2,
    1957: 28.1,
    1958: 28.9,
    1959: 29.1,
    1960: 29.6,
    1961: 29.9,
    1962: 30.2,
    1963: 30.6,
    1964: 31.0,
    1965: 31.5,
    1966: 32.4,
    1967: 33.4,
    1968: 34.8,
    1969: 36.7,
    1970: 38.8,
    1971: 40.5,
    1972: 41.8,
    1973: 44.4,
    1974: 49.3,
    1975: 53.8,
    1976: 56.9,
    1977: 60.6,
    1978: 65.2,
    1979: 72.6,
    1980: 82.4,
    1981: 90.9,
    1982: 96.5,
    1983: 99.6,
    1984: 103.9,
    1985: 107.6,
    1986: 109.6,
    1987: 113.6,
    1988: 118.3,
    1989: 124.0,
    1990: 130.7,
    1991: 136.2,
    1992: 140.3,
    1993: 144.5,
    1994: 148.2,
    1995: 152.4,
    1996: 156.9,
    1997: 160.5,
    1998: 163.0,
    1999: 166.6,
    2000: 172.2,
    2001: 177.1,
    2002: 179.9,
    2003: 184.0,
    2004: 188.9,
    2005: 195.3,
    2006: 201.6,
    2007: 207.3,
    2008: 215.3,
    2009: 214.5,
    2010: 218.1,
    2011: 224.9,
    2012: 229.6,
    2013: 233.0,
    2014: 236.7,
    2015: 237.0,
    2016: 240.0,
    2017: 245.1,
    2018: 251.1,
    2019: 255.7,
    2020: 258.8,
    2021: 271.0,
    2022: 292.7,
    2023: 305.3,
    2024: 312.2,
    2025: 318.0,
}

SERIES_PROVENANCE = "BLS CPI-U annual averages (bundled snapshot)"

_RECORD_VALUE_KEYS = ("inflation_factor", "index_value", "value")


def _record_value(raw: object) -> float | None:
    """Pull one positive number out of a flat value or a rich year record."""
    if isinstance(raw, Mapping):
        for key in _RECORD_VALUE_KEYS:
            value = safe_float(raw.get(key))
            if value is not None and value > 0:
                return value
        return None
    value = safe_float(raw)
    if value is None or value <= 0:
        return None
    return value


def normalize_series(data: object) -> dict[int, float]:
    """Normalize a ``year -> value`` mapping into ``{int year: float}``.

    Accepts both flat ``{"2000": 1.72}`` maps and the richer
    ``{"2000": {"index_value": ..., "inflation_factor": ...}}`` shape.
    Keys that are not years, and values that are missing, zero,
    negative or non-numeric, are dropped.
    """
    if not isinstance(data, Mapping):
        return {}
    out: dict[int, float] = {}
    for raw_year, raw_value in data.items():
        year = parse_year(raw_year)
        if year is None:
            continue
        value = _record_value(raw_value)
        if value is None:
            continue
        out[year] = value
    return dict(sorted(out.items()))


def series_from_payload(payload: object) -> dict[int, float]:
    """Extract the normalized series from a measure or base-series payload."""
    if not isinstance(payload, Mapping):
        return {}
    return normalize_series(payload.get("data"))


def payload_source(payload: object) -> str:
    """Return the provenance string of a payload, top-level or in metadata."""
    if not isinstance(payload, Mapping):
        return ""
    source = payload.get("source")
    if not source:
        metadata = payload.get("metadata")
        if isinstance(metadata, Mapping):
            source = metadata.get("source")
    return str(source or "").strip()


def year_bounds(series: Mapping[int, Any]) -> tuple[int, int] | None:
    """Return ``(earliest, latest)`` years of a series, or None when empty."""
    years = [year for year in series if isinstance(year, int)]
    if not years:
        return None
    return min(years), max(years)


def years_coverage(series: Mapping[int, Any]) -> int:
    bounds = year_bounds(series)
    if bounds is None:
        return 0
    return bounds[1] - bounds[0]


def bundled_base_series(currency: str) -> tuple[dict[int, float], str] | None:
    """Return the bundled base series and its provenance for a currency."""
    if currency.strip().upper() != "USD":
        return None
    return dict(CPI_U_ANNUAL), SERIES_PROVENANCE
