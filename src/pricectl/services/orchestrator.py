"""BoundedFetcher — one rate query per date, at most P in flight.

A fixed pool of worker threads drains a shared queue of dates.  Each
worker issues one query at a time, so the pool size is the bound on
concurrent requests.  Results land in a dict guarded by a lock; every
date is written exactly once, by the worker that dequeued it.

Failure policy:

* ``QueryFailure`` is recorded against its date and the batch continues.
* ``FatalFetchError`` sets the abort event.  Workers check the event
  before dequeuing, so no new query starts; queries already in flight
  finish naturally and their results are thrown away.  The first fatal
  error is re-raised once the pool has drained.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import TYPE_CHECKING

import structlog

from pricectl.domain.errors import FatalFetchError, InvalidConfigError, QueryFailure
from pricectl.domain.rates import AggregatedResults, RateQuery, RateResult

if TYPE_CHECKING:
    from pricectl.infrastructure.client import RateClient

log = structlog.get_logger(__name__)


def validate_parallelism(parallel_requests: int) -> None:
    if parallel_requests < 1:
        msg = f"parallel_requests must be at least 1, got {parallel_requests}"
        raise InvalidConfigError(msg, detail={"parallel_requests": parallel_requests})


class BoundedFetcher:
    """Fan rate queries out over a bounded worker pool.

    Parameters:
        client: Anything with ``fetch(RateQuery) -> Mapping[str, Decimal]``
            that raises ``QueryFailure`` or ``FatalFetchError``.
        parallel_requests: Maximum number of queries in flight (>= 1).
    """

    def __init__(self, client: RateClient, *, parallel_requests: int) -> None:
        validate_parallelism(parallel_requests)
        self._client = client
        self._parallel_requests = parallel_requests

    def fetch(
        self,
        dates: Iterable[date],
        base: str,
        commodities: Iterable[str],
    ) -> AggregatedResults:
        """Run one query per date and collect the results.

        Raises:
            InvalidConfigError: If *commodities* is empty (before any request).
            FatalFetchError: The first fatal error seen; partial results are discarded.
        """
        wanted = tuple(commodities)
        if not wanted:
            raise InvalidConfigError("At least one commodity is required")

        work: queue.SimpleQueue[date] = queue.SimpleQueue()
        scheduled = 0
        for day in dates:
            work.put(day)
            scheduled += 1
        if scheduled == 0:
            return AggregatedResults()

        results: dict[date, RateResult] = {}
        lock = threading.Lock()
        abort = threading.Event()
        fatal: list[BaseException] = []

        def record_abort(exc: BaseException) -> None:
            with lock:
                if not fatal:
                    fatal.append(exc)
            abort.set()

        def worker() -> None:
            while not abort.is_set():
                try:
                    day = work.get_nowait()
                except queue.Empty:
                    return
                query = RateQuery(day=day, base=base, commodities=wanted)
                log.debug("fetch.start", date=day.isoformat())
                try:
                    rates = self._client.fetch(query)
                except QueryFailure as exc:
                    log.debug("fetch.failed", date=day.isoformat(), reason=exc.reason)
                    result = RateResult.failed(exc)
                except FatalFetchError as exc:
                    log.warning("fetch.aborted", date=day.isoformat(), code=exc.code)
                    record_abort(exc)
                    return
                except BaseException as exc:
                    record_abort(exc)
                    raise
                else:
                    log.debug("fetch.done", date=day.isoformat())
                    result = RateResult.success(day, rates)
                with lock:
                    results[day] = result

        workers = min(self._parallel_requests, scheduled)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pricectl-fetch") as pool:
            for _ in range(workers):
                pool.submit(worker)

        # Unexpected client errors are recorded alongside fatal ones.
        if fatal:
            raise fatal[0]
        return AggregatedResults(results)
