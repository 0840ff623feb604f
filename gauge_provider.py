"""
gauge_provider.py

Always-available flow history for a gauge.

GaugeDataProvider.fetch() never raises. Each call walks the same cascade and
stops at the first stage that has data:

    1. cache      entry younger than the TTL, no network call
    2. remote     one USGS request; a non-empty series replaces the entry
    3. stale      expired entry, returned as-is (timestamp untouched)
    4. synthetic  generated series, stored so later calls treat it like data

An empty USGS response counts as a failure and never overwrites the cache.

The cache lives for the life of the process and is only written here. The
blocking HTTP call runs in a worker thread; cache reads and writes stay on
the event loop thread, so concurrent fetches of one gauge are simply
last-writer-wins.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, NamedTuple

import numpy as np
import requests

from synthetic_flow import generate_synthetic_series
from usgs_flow import REQUEST_TIMEOUT, FlowSample, fetch_usgs_payload, parse_usgs_response

log = logging.getLogger(__name__)

CACHE_TTL = timedelta(minutes=5)

SOURCE_CACHE     = "cache"
SOURCE_REMOTE    = "remote"
SOURCE_STALE     = "stale"
SOURCE_SYNTHETIC = "synthetic"


class CacheEntry(NamedTuple):
    series: list[FlowSample]
    produced_at: datetime   # when the data was accepted, not requested


class FetchResult(NamedTuple):
    series: list[FlowSample]
    source: str             # one of the SOURCE_* constants


class FlowCache:
    """One entry per gauge id. Entries are replaced, never removed."""

    def __init__(self):
        self._entries: dict[str, CacheEntry] = {}

    def get(self, gauge_id: str) -> CacheEntry | None:
        return self._entries.get(gauge_id)

    def put(self, gauge_id: str, entry: CacheEntry) -> None:
        self._entries[gauge_id] = entry

    def __contains__(self, gauge_id: str) -> bool:
        return gauge_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GaugeDataProvider:
    """
    Cached, fallback-backed access to USGS flow history, one gauge at a time.

    Everything it talks to can be swapped out for tests or hosting:
      cache    FlowCache shared with whoever owns the provider
      session  anything with a requests-style get(); defaults to requests
      clock    returns the current aware UTC datetime
      rng      numpy Generator handed to the synthetic fallback
    """

    def __init__(self, cache: FlowCache | None = None, session=requests,
                 ttl: timedelta = CACHE_TTL, timeout: float = REQUEST_TIMEOUT,
                 clock: Callable[[], datetime] = _utc_now,
                 rng: np.random.Generator | None = None):
        self.cache   = cache if cache is not None else FlowCache()
        self.ttl     = ttl
        self.timeout = timeout
        self._session = session
        self._clock   = clock
        self._rng     = rng

    async def fetch(self, gauge_id: str) -> list[FlowSample]:
        result = await self.fetch_with_source(gauge_id)
        return result.series

    async def fetch_with_source(self, gauge_id: str) -> FetchResult:
        entry = self.cache.get(gauge_id)
        if entry is not None and self._is_fresh(entry):
            log.debug("gauge %s: cache hit (%d samples)", gauge_id, len(entry.series))
            return FetchResult(entry.series, SOURCE_CACHE)

        series = await self._fetch_remote(gauge_id)
        if series:
            self.cache.put(gauge_id, CacheEntry(series, self._clock()))
            return FetchResult(series, SOURCE_REMOTE)

        # Re-read: another fetch for this gauge may have stored data while we waited.
        entry = self.cache.get(gauge_id)
        if entry is not None:
            log.info("gauge %s: serving cached series from %s",
                     gauge_id, entry.produced_at.isoformat())
            return FetchResult(entry.series, SOURCE_STALE)

        now = self._clock()
        series = generate_synthetic_series(gauge_id, now=now, rng=self._rng)
        self.cache.put(gauge_id, CacheEntry(series, now))
        log.info("gauge %s: no data available, using synthetic series", gauge_id)
        return FetchResult(series, SOURCE_SYNTHETIC)

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.produced_at < self.ttl

    async def _fetch_remote(self, gauge_id: str) -> list[FlowSample]:
        try:
            payload = await asyncio.to_thread(
                fetch_usgs_payload, gauge_id, self._session, self.timeout
            )
            series = parse_usgs_response(payload)
        except (requests.RequestException, ValueError, TypeError, OverflowError) as exc:
            log.warning("gauge %s: USGS request failed: %s", gauge_id, exc)
            return []

        if not series:
            log.warning("gauge %s: USGS returned no usable discharge readings", gauge_id)
        return series
