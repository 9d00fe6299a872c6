"""
Process-wide, per-year holiday cache with single-flight population.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Dict, FrozenSet, Iterable, List, Protocol, Set

logger = logging.getLogger(__name__)


class HolidaySourceProtocol(Protocol):
    """Protocol describing the holiday source behaviour needed by the cache."""

    def fetch_holidays(self) -> Set[str]:
        """Return every known holiday as a ``YYYY-MM-DD`` string."""


class HolidayCache:
    """
    Caches holiday sets keyed by calendar year.

    - A miss fetches the whole document once and keeps only that year
    - Concurrent callers asking for the same missing year share one fetch
    - Entries are never evicted
    - Failed fetches propagate to every waiter and are not cached
    """

    def __init__(self, source: HolidaySourceProtocol) -> None:
        self._source = source
        self._years: Dict[int, FrozenSet[str]] = {}
        self._pending: Dict[int, asyncio.Future] = {}

    def cached_years(self) -> List[int]:
        return sorted(self._years)

    async def get_holidays(self, year: int) -> FrozenSet[str]:
        """
        Get the holidays of ``year``, fetching them on first use.

        Raises:
            CalendarSourceUnavailableError: If the upstream fetch fails
        """
        while True:
            cached = self._years.get(year)
            if cached is not None:
                return cached

            pending = self._pending.get(year)
            if pending is None:
                break
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                # The owning task was cancelled, not this one: take over the fetch
                if not pending.cancelled():
                    raise

        future = asyncio.get_running_loop().create_future()
        self._pending[year] = future
        try:
            holidays = await self._fetch_year(year)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so an unawaited failure does not warn
            future.exception()
            raise
        else:
            self._years[year] = holidays
            future.set_result(holidays)
            return holidays
        finally:
            del self._pending[year]

    async def _fetch_year(self, year: int) -> FrozenSet[str]:
        logger.info("Fetching holidays for %d", year)
        dates = await asyncio.to_thread(self._source.fetch_holidays)
        prefix = f"{year:04d}-"
        holidays = frozenset(d for d in dates if d.startswith(prefix))
        logger.info("Cached %d holiday(s) for %d", len(holidays), year)
        return holidays

    async def prefetch(self, years: Iterable[int]) -> None:
        """Populate ``years`` sequentially, stopping at the first failure."""
        for year in years:
            await self.get_holidays(year)

    def calendar(self) -> "YearlyHolidayCalendar":
        return YearlyHolidayCalendar(self)


class YearlyHolidayCalendar:
    """On-demand holiday predicate backed by a ``HolidayCache``."""

    def __init__(self, cache: HolidayCache) -> None:
        self._cache = cache

    async def is_holiday(self, day: date) -> bool:
        holidays = await self._cache.get_holidays(day.year)
        return day.isoformat()[:10] in holidays
