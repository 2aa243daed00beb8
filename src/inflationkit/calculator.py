"""Calculator state as a pure reducer, plus superseding measure requests.

The calculator is modelled as ``reduce(state, event) -> state``. Loading a
currency's measures is asynchronous; ``MeasureRequestSupervisor`` makes sure
only the most recently requested currency can land in the state, whatever
order the underlying fetches finish in.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from functools import partial
from typing import Any

from inflationkit.config import Config
from inflationkit.consensus import compute_consensus
from inflationkit.measures import normalize_currency
from inflationkit.models import ConsensusResult, MeasureResolution, MeasureSet
from inflationkit.providers.measures import resolve_measures

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = (
    "Failed to load inflation data. Please check your connection and try again."
)


@dataclass(frozen=True)
class CalculatorState:
    currency: str = "USD"
    from_year: int = 2020
    to_year: int | None = None  # None = latest year in the loaded measures
    amount: str = "100"
    measure_set: MeasureSet | None = None
    loading: bool = False
    error: str | None = None
    request_id: int = 0
    retry_count: int = 0

    @classmethod
    def from_config(cls, config: Config) -> CalculatorState:
        return cls(
            currency=config.calculator.default_currency,
            from_year=config.calculator.default_from_year,
        )


@dataclass(frozen=True)
class CurrencyChanged:
    currency: str


@dataclass(frozen=True)
class YearChanged:
    from_year: int | None = None
    to_year: int | None = None


@dataclass(frozen=True)
class AmountChanged:
    amount: str


@dataclass(frozen=True)
class RetryRequested:
    pass


@dataclass(frozen=True)
class DataLoaded:
    request_id: int
    measure_set: MeasureSet


@dataclass(frozen=True)
class DataFetchFailed:
    request_id: int
    message: str = LOAD_FAILED_MESSAGE


Event = (
    CurrencyChanged
    | YearChanged
    | AmountChanged
    | RetryRequested
    | DataLoaded
    | DataFetchFailed
)


def reduce(state: CalculatorState, event: Event) -> CalculatorState:
    """Apply one event to the calculator state."""
    if isinstance(event, CurrencyChanged):
        return replace(
            state,
            currency=normalize_currency(event.currency),
            measure_set=None,
            loading=True,
            error=None,
            request_id=state.request_id + 1,
            retry_count=0,
        )
    if isinstance(event, RetryRequested):
        return replace(
            state,
            loading=True,
            error=None,
            request_id=state.request_id + 1,
            retry_count=state.retry_count + 1,
        )
    if isinstance(event, YearChanged):
        return replace(
            state,
            from_year=event.from_year if event.from_year is not None else state.from_year,
            to_year=event.to_year if event.to_year is not None else state.to_year,
        )
    if isinstance(event, AmountChanged):
        return replace(state, amount=event.amount)
    if isinstance(event, DataLoaded):
        if event.request_id != state.request_id:
            logger.debug(
                "Dropping stale measures for request %d (current %d)",
                event.request_id, state.request_id,
            )
            return state
        return replace(state, measure_set=event.measure_set, loading=False, error=None)
    if isinstance(event, DataFetchFailed):
        if event.request_id != state.request_id:
            return state
        return replace(state, loading=False, error=event.message)
    raise TypeError(f"Unknown calculator event: {event!r}")


def latest_year(measure_set: MeasureSet | None) -> int | None:
    if measure_set is None:
        return None
    years = [
        bounds[1]
        for bounds in (m.year_bounds() for m in measure_set.measures.values())
        if bounds is not None
    ]
    return max(years) if years else None


def consensus_for(state: CalculatorState, *, renormalize: bool = False) -> ConsensusResult:
    """Derive the consensus for the current state; empty while loading."""
    to_year = state.to_year if state.to_year is not None else latest_year(state.measure_set)
    if state.measure_set is None or to_year is None:
        return ConsensusResult.empty(state.currency, state.from_year, to_year or 0)
    return compute_consensus(
        state.measure_set,
        state.currency,
        state.from_year,
        to_year,
        state.amount,
        renormalize=renormalize,
    )


MeasureLoader = Callable[[str], Awaitable[MeasureResolution]]
Dispatch = Callable[[Any], None]


class MeasureRequestSupervisor:
    """Runs measure loads so that a newer request always supersedes older ones.

    Starting a request cancels the in-flight one. A load that completes
    after being superseded, or after ``close()``, is discarded instead of
    being dispatched.
    """

    def __init__(self, loader: MeasureLoader, dispatch: Dispatch) -> None:
        self._loader = loader
        self._dispatch = dispatch
        self._current: asyncio.Task[None] | None = None
        self._current_id: int | None = None
        self._closed = False

    def request(self, currency: str, request_id: int) -> asyncio.Task[None]:
        if self._closed:
            raise RuntimeError("supervisor is closed")
        self._cancel_current()
        self._current_id = request_id
        task = asyncio.get_running_loop().create_task(self._run(currency, request_id))
        self._current = task
        return task

    def is_current(self, request_id: int) -> bool:
        return not self._closed and request_id == self._current_id

    async def _run(self, currency: str, request_id: int) -> None:
        try:
            resolution = await self._loader(currency)
        except asyncio.CancelledError:
            logger.debug("Measure request %d for %s cancelled", request_id, currency)
            raise
        except Exception as e:
            if self.is_current(request_id):
                logger.warning("Measure request for %s failed: %s", currency, e)
                self._dispatch(DataFetchFailed(request_id))
            return

        if not self.is_current(request_id):
            logger.debug("Discarding late result for request %d (%s)", request_id, currency)
            return
        if not resolution.measures:
            self._dispatch(DataFetchFailed(request_id))
            return
        self._dispatch(DataLoaded(request_id, resolution.measure_set))

    def _cancel_current(self) -> None:
        if self._current is not None and not self._current.done():
            self._current.cancel()
        self._current = None

    async def close(self) -> None:
        """Cancel pending work and suppress any further callbacks."""
        self._closed = True
        task = self._current
        self._cancel_current()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)


class CalculatorSession:
    """Holds one calculator's state and drives its measure requests."""

    def __init__(
        self,
        *,
        config: Config | None = None,
        loader: MeasureLoader | None = None,
        state: CalculatorState | None = None,
    ) -> None:
        self.config = config or Config()
        self.state = state or CalculatorState.from_config(self.config)
        self._supervisor = MeasureRequestSupervisor(
            loader or partial(resolve_measures, config=self.config),
            self.dispatch,
        )

    def dispatch(self, event: Event) -> CalculatorState:
        self.state = reduce(self.state, event)
        return self.state

    def change_currency(self, currency: str) -> asyncio.Task[None]:
        self.dispatch(CurrencyChanged(currency))
        return self._supervisor.request(self.state.currency, self.state.request_id)

    def retry(self) -> asyncio.Task[None]:
        self.dispatch(RetryRequested())
        return self._supervisor.request(self.state.currency, self.state.request_id)

    def set_years(self, from_year: int | None = None, to_year: int | None = None) -> None:
        self.dispatch(YearChanged(from_year=from_year, to_year=to_year))

    def set_amount(self, amount: str) -> None:
        self.dispatch(AmountChanged(amount))

    def result(self) -> ConsensusResult:
        return consensus_for(
            self.state,
            renormalize=self.config.calculator.renormalize_weights,
        )

    async def close(self) -> None:
        await self._supervisor.close()
