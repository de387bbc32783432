"""Periodic refresh of every tracked match.

Each cycle fetches all match documents concurrently, waits for every fetch
to settle, then merges the successful results one by one into the store.
A failure for one match only skips that match until the next cycle.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Callable, Optional

from core.config import RefreshConfig
from core.models import MatchRecord, RefreshResult
from core.ports import DocumentFetcherPort
from core.store import MatchStore

LOGGER = logging.getLogger(__name__)


class RefreshScheduler:
    """Cancellable periodic task that keeps match clocks and scores current."""

    def __init__(
        self,
        store: MatchStore,
        fetcher: DocumentFetcherPort,
        config: RefreshConfig,
        on_updated: Callable[[], None],
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._config = config
        self._on_updated = on_updated
        self._stop = asyncio.Event()
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._pending: set[asyncio.Task] = set()
        self.cycles = 0

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def stop(self) -> None:
        """Ask the loop to exit; it wakes immediately if it is waiting."""

        self._stop.set()
        for task in list(self._pending):
            task.cancel()

    async def run(self) -> None:
        """Run refresh cycles until ``stop`` is called or the task is cancelled."""

        LOGGER.info("Refresh loop started (every %ss)", self._config.interval_seconds)
        while not self._stop.is_set():
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._config.interval_seconds)
            except asyncio.TimeoutError:
                pass
            if self._stop.is_set():
                break
            try:
                await self.run_cycle()
            except Exception:
                LOGGER.exception("Refresh cycle failed")
        LOGGER.info("Refresh loop stopped")

    async def run_cycle(self) -> int:
        """Refresh every tracked match once and return how many were updated."""

        self.cycles += 1
        targets = [match for match in self._store.snapshot().matches if match.source_url]
        if not targets:
            return 0

        self._ensure_semaphore()

        results = await asyncio.gather(*(self._refresh_one(match) for match in targets))

        updated = 0
        for result in results:
            if result is not None and self._store.merge_refresh_result(result):
                updated += 1

        LOGGER.debug("Refresh cycle %s: %s/%s matches updated", self.cycles, updated, len(targets))
        if updated:
            self._on_updated()
        return updated

    def schedule_refresh(self, match_id: str) -> Optional[asyncio.Task]:
        """Start a one-off refresh of a single match on the running loop.

        Called from the producer channel when a match is added, so its clock
        and part scores do not wait for the next cycle.
        """

        if self._stop.is_set():
            return None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.debug("No running loop; %s waits for the next cycle", match_id)
            return None
        task = loop.create_task(self.refresh_match(match_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def refresh_match(self, match_id: str) -> bool:
        """Refresh one tracked match now. Returns True when it was updated."""

        match = self._store.get(match_id)
        if match is None or not match.source_url:
            return False
        self._ensure_semaphore()
        result = await self._refresh_one(match)
        if result is None or not self._store.merge_refresh_result(result):
            return False
        self._on_updated()
        return True

    def _ensure_semaphore(self) -> None:
        if self._config.max_concurrency > 0 and self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self._config.max_concurrency)

    async def _refresh_one(self, match: MatchRecord) -> Optional[RefreshResult]:
        try:
            if self._semaphore is None:
                return await self._fetch(match)
            async with self._semaphore:
                return await self._fetch(match)
        except asyncio.TimeoutError:
            LOGGER.warning("Refresh timed out for %s (%s)", match.id, match.source_url)
        except Exception as exc:
            LOGGER.warning("Refresh failed for %s (%s): %s", match.id, match.source_url, exc)
        return None

    async def _fetch(self, match: MatchRecord) -> Optional[RefreshResult]:
        result = await asyncio.wait_for(
            self._fetcher.fetch(match),
            timeout=self._config.fetch_timeout_seconds,
        )
        if result is None:
            LOGGER.info("No match fragment found for %s (%s)", match.id, match.source_url)
            return None
        if result.match_id != match.id:
            # Fetchers may not know the store id; results always belong to the
            # match that was asked for.
            result = replace(result, match_id=match.id)
        return result
