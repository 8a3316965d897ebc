"""
Rate Cache Manager

🔒 At most one provider fetch and one store insert per calendar date.
"Today" is the local calendar date; callers handling an event compute it
once and pass it down so a request straddling midnight sees one date.
"""

import asyncio
import logging
from datetime import date as date_type
from typing import Callable

from pydantic import ValidationError

from cnvtbot.models import RateSnapshot
from cnvtbot.providers.base import BaseRateProvider, RateProviderError
from cnvtbot.storage.base import SnapshotStore

logger = logging.getLogger(__name__)


def today_date() -> str:
    """Local calendar date as YYYY-MM-DD."""
    return date_type.today().isoformat()


class RateCacheManager:
    """Get today's snapshot from the store, refreshing from the provider if absent."""

    def __init__(
        self,
        store: SnapshotStore,
        provider: BaseRateProvider,
        clock: Callable[[], str] = today_date
    ):
        self.store = store
        self.provider = provider
        self.clock = clock

    async def get_current_snapshot(self, today: str | None = None) -> RateSnapshot:
        """
        Return the snapshot for `today` (defaults to the clock's date).

        Raises:
            RateProviderError: If a refresh was needed and the provider failed
            StoreError: If the store could not be read or written
        """
        if today is None:
            today = self.clock()

        snapshot = await self.store.find_by_date(today)
        if snapshot is not None:
            logger.debug(f"Snapshot cache hit for {today}")
            return snapshot

        return await self.refresh(today)

    async def refresh(self, date: str) -> RateSnapshot:
        """Fetch symbols and rates for `date`, persist them, return the stored snapshot."""
        logger.info(f"Refreshing rates for {date} from {self.provider.PROVIDER_NAME}")

        symbols = await self.provider.fetch_symbols()
        base, rates = await self.provider.fetch_rates(date)

        snapshot = self._build_snapshot(date, symbols, base, rates)
        stored = await self.store.insert(snapshot)

        logger.info(
            f"✅ Snapshot for {date} stored: base={stored.base}, "
            f"{len(stored.symbols)} symbols, {len(stored.rates)} rates"
        )
        return stored

    def _build_snapshot(self, date, symbols, base, rates) -> RateSnapshot:
        try:
            return RateSnapshot(date=date, symbols=symbols, base=base, rates=rates)
        except ValidationError as e:
            raise RateProviderError(
                message=f"Malformed rate data for {date}",
                provider=self.provider.PROVIDER_NAME,
                error_type="PARSE_ERROR",
                details={"errors": e.errors(include_url=False)}
            ) from e


class SnapshotHolder:
    """
    The process-wide current snapshot.

    Refreshes are serialised by a lock and staleness is re-checked inside it,
    so concurrent events for a new date trigger a single refresh.
    """

    def __init__(self, manager: RateCacheManager):
        self.manager = manager
        self._snapshot: RateSnapshot | None = None
        self._lock = asyncio.Lock()

    def get(self) -> RateSnapshot | None:
        return self._snapshot

    async def load(self) -> RateSnapshot:
        """Load the initial snapshot. Failures propagate; startup must not continue without data."""
        async with self._lock:
            self._snapshot = await self.manager.get_current_snapshot()
            logger.info(f"Current snapshot loaded for {self._snapshot.date}")
            return self._snapshot

    async def refresh_if_stale(self, today: str | None = None) -> RateSnapshot:
        if today is None:
            today = self.manager.clock()

        current = self._snapshot
        if current is not None and current.date == today:
            return current

        async with self._lock:
            current = self._snapshot
            if current is not None and current.date == today:
                return current

            stale_date = current.date if current is not None else None
            self._snapshot = await self.manager.get_current_snapshot(today)
            logger.info(f"Current snapshot replaced: {stale_date} -> {self._snapshot.date}")
            return self._snapshot
