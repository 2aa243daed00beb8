"""Per-currency measure loading with graceful fallback to simulated data."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import httpx

from inflationkit.config import Config
from inflationkit.exceptions import DataSourceError, DataValidationError
from inflationkit.measures import (
    SUPPORTED_CURRENCIES,
    confidence_for_source,
    currency_measure_keys,
    is_authority_source,
    measure_description,
    measure_display_name,
    measure_weight,
    normalize_currency,
)
from inflationkit.models import InflationMeasure, MeasureResolution, MeasureSet
from inflationkit.providers.simulated import build_simulated_measures
from inflationkit.quality import validate_series
from inflationkit.retry import RetryPolicy, call_with_retry
from inflationkit.series import bundled_base_series, payload_source, series_from_payload
from inflationkit.utils.files import read_text

logger = logging.getLogger(__name__)

_NULLISH_PAYLOAD_TEXT = frozenset({"", "null", "none", '"null"', "'null'"})
_RESOLUTION_CACHE: dict[tuple[str, str], tuple[float, MeasureResolution]] = {}


def measure_path(currency: str, measure: str) -> str:
    key = measure.strip().lower().replace(" ", "_")
    return f"measures/{currency.lower()}-{key}.json"


def base_series_path(currency: str) -> str:
    return f"{currency.lower()}-inflation.json"


def _headers(user_agent: str) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "application/json,text/plain,*/*",
        "Cache-Control": "no-cache",
    }


def _decode_json_text(text: str, *, origin: str) -> Any:
    clean = text.lstrip("\ufeff").strip()
    if clean.lower() in _NULLISH_PAYLOAD_TEXT:
        return {}
    try:
        payload = json.loads(clean)
    except json.JSONDecodeError as e:
        raise DataValidationError(f"Invalid JSON payload from {origin}") from e
    return payload if payload is not None else {}


class MeasureDataSource:
    """Reads measure JSON files from a local directory or an HTTP base URL.

    Remote sources share one ``httpx.AsyncClient``; a caller-supplied client
    is used as-is and left open on ``aclose``.
    """

    def __init__(
        self,
        location: str | Path,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 20.0,
        user_agent: str = "",
    ) -> None:
        self.location = str(location)
        self.is_remote = self.location.startswith(("http://", "https://"))
        self._client = client
        self._owns_client = False
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent or "inflationkit"

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> MeasureDataSource:
        return cls(
            config.data.source,
            client=client,
            timeout_seconds=config.data.timeout_seconds,
            user_agent=config.data.user_agent,
        )

    @property
    def cache_key(self) -> str:
        return self.location.rstrip("/")

    async def __aenter__(self) -> MeasureDataSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    def _http_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout_seconds),
                follow_redirects=True,
                headers=_headers(self._user_agent),
            )
            self._owns_client = True
        return self._client

    async def fetch_json(self, relative_path: str) -> Any:
        if self.is_remote:
            return await self._fetch_remote(relative_path)
        return await self._fetch_local(relative_path)

    async def _fetch_remote(self, relative_path: str) -> Any:
        url = f"{self.location.rstrip('/')}/{relative_path}"
        client = self._http_client()
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise DataSourceError(
                f"HTTP {status} loading {url}",
                transient=status >= 500 or status == 429,
            ) from e
        except httpx.HTTPError as e:
            raise DataSourceError(f"Request failed for {url}: {e}") from e
        if not response.content:
            return {}
        return _decode_json_text(response.text, origin=url)

    async def _fetch_local(self, relative_path: str) -> Any:
        path = Path(self.location).expanduser() / relative_path
        try:
            text = await read_text(path)
        except FileNotFoundError as e:
            raise DataSourceError(f"No data file at {path}", transient=False) from e
        except OSError as e:
            raise DataSourceError(f"Cannot read {path}: {e}") from e
        except ValueError as e:
            raise DataValidationError(f"Cannot decode {path}") from e
        return _decode_json_text(text, origin=str(path))


def measure_from_payload(key: str, payload: Any, *, currency: str = "USD") -> InflationMeasure:
    """Build a weighted measure from a per-measure payload.

    Raises DataValidationError when the payload has no usable series.
    """
    if not isinstance(payload, dict) or "data" not in payload:
        raise DataValidationError(f"Payload for {key} has no data section")
    series = series_from_payload(payload)
    validation = validate_series(series, name=key)
    if not validation.is_valid:
        raise DataValidationError("; ".join(validation.errors))
    for warning in validation.warnings:
        logger.debug("Measure warning: %s", warning)

    source = payload_source(payload)
    return InflationMeasure(
        name=measure_display_name(key),
        key=key,
        description=measure_description(key),
        series=series,
        weight=measure_weight(currency, key),
        confidence=confidence_for_source(source),
        is_real_data=is_authority_source(source),
        source=source,
    )


async def load_measure(
    source: MeasureDataSource,
    currency: str,
    key: str,
) -> InflationMeasure | None:
    """Load one measure; any failure drops just this measure."""
    path = measure_path(currency, key)
    try:
        payload = await source.fetch_json(path)
        return measure_from_payload(key, payload, currency=currency)
    except DataSourceError as e:
        if e.transient:
            logger.warning("Failed to load %s %s: %s", currency, key, e)
        else:
            logger.debug("No %s %s data: %s", currency, key, e)
    except DataValidationError as e:
        logger.warning("Invalid data for %s %s, skipping: %s", currency, key, e)
    return None


async def load_real_measures(
    source: MeasureDataSource,
    currency: str,
) -> dict[str, InflationMeasure]:
    """Load the currency's catalogue of measures concurrently, keeping those that succeed."""
    loaded = await asyncio.gather(
        *(load_measure(source, currency, key) for key in currency_measure_keys(currency))
    )
    return {m.name: m for m in loaded if m is not None}


async def load_base_series(
    source: MeasureDataSource,
    currency: str,
    *,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> tuple[dict[int, float], str] | None:
    """Fetch the single CPI-like base series with bounded backoff.

    Falls back to the bundled series for currencies that have one.
    """
    policy = policy or RetryPolicy()
    path = base_series_path(currency)

    async def _fetch() -> tuple[dict[int, float], str]:
        payload = await source.fetch_json(path)
        series = series_from_payload(payload)
        if not series:
            raise DataValidationError(f"Base series for {currency} has no usable values")
        return series, payload_source(payload) or f"{currency} base series"

    def _on_failure(attempt: int, total: int, error: BaseException, remaining: int) -> None:
        logger.debug(
            "Base series %s attempt %d/%d failed: %s (%d left)",
            currency, attempt, total, error, remaining,
        )

    try:
        return await call_with_retry(
            _fetch, policy=policy, on_failure=_on_failure, sleep=sleep
        )
    except (DataSourceError, DataValidationError) as e:
        logger.warning("Base series unavailable for %s: %s", currency, e)

    bundled = bundled_base_series(currency)
    if bundled is not None:
        logger.info("Using bundled base series for %s", currency)
    return bundled


async def resolve_measures(
    currency: str,
    *,
    source: MeasureDataSource | str | Path | None = None,
    client: httpx.AsyncClient | None = None,
    config: Config | None = None,
    use_cache: bool = True,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> MeasureResolution:
    """Resolve the usable measures for a currency.

    Prefers real per-measure data; with none available, simulates the
    standard measures from a base series. Missing or partial data never
    raises: total failure yields an empty simulated set.
    """
    config = config or Config()
    code = normalize_currency(currency)

    owns_source = not isinstance(source, MeasureDataSource)
    if source is None:
        data_source = MeasureDataSource.from_config(config, client=client)
    elif isinstance(source, MeasureDataSource):
        data_source = source
    else:
        data_source = MeasureDataSource(
            source,
            client=client,
            timeout_seconds=config.data.timeout_seconds,
            user_agent=config.data.user_agent,
        )

    cache_key = (data_source.cache_key, code)
    try:
        if code not in SUPPORTED_CURRENCIES:
            logger.warning("Unsupported currency %r; no measures available", currency)
            return MeasureResolution(MeasureSet.simulated(code))

        if use_cache:
            cached = _cached(cache_key, config.data.cache_ttl_seconds)
            if cached is not None:
                logger.debug("Measure cache hit for %s", code)
                return cached

        resolution = await _resolve_uncached(data_source, code, config=config, sleep=sleep)
        if resolution.measures and use_cache:
            _RESOLUTION_CACHE[cache_key] = (time.monotonic(), resolution)
        return resolution
    finally:
        if owns_source:
            await data_source.aclose()


async def _resolve_uncached(
    source: MeasureDataSource,
    currency: str,
    *,
    config: Config,
    sleep: Callable[[float], Awaitable[object]],
) -> MeasureResolution:
    real = await load_real_measures(source, currency)
    if real:
        logger.info("Loaded %d measure(s) for %s", len(real), currency)
        return MeasureResolution(MeasureSet.real(currency, real))

    logger.warning("No measure data for %s; using simulated measures", currency)
    base = await load_base_series(
        source,
        currency,
        policy=RetryPolicy.from_config(config.retry),
        sleep=sleep,
    )
    if base is None:
        logger.warning("No base series for %s; returning empty measure set", currency)
        return MeasureResolution(MeasureSet.simulated(currency))
    series, provenance = base
    return MeasureResolution(
        build_simulated_measures(series, currency=currency, provenance=provenance)
    )


def _cached(key: tuple[str, str], ttl_seconds: float) -> MeasureResolution | None:
    entry = _RESOLUTION_CACHE.get(key)
    if entry is None:
        return None
    stored_at, resolution = entry
    if time.monotonic() - stored_at >= ttl_seconds:
        _RESOLUTION_CACHE.pop(key, None)
        return None
    return resolution


def clear_cache() -> None:
    """Drop every cached resolution."""
    _RESOLUTION_CACHE.clear()
    logger.debug("Measure cache cleared")


def cache_status() -> list[dict[str, Any]]:
    """Describe cached resolutions for diagnostics."""
    now = time.monotonic()
    return [
        {
            "source": source,
            "currency": currency,
            "age_seconds": now - stored_at,
            "measure_count": len(resolution.measures),
            "fallback_used": resolution.fallback_used,
        }
        for (source, currency), (stored_at, resolution) in _RESOLUTION_CACHE.items()
    ]
