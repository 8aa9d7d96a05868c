import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from loguru import logger

from ghs_games.models.event import Event, ScheduleSnapshot

EventsLoader = Callable[[], Awaitable[List[Event]]]


class ScheduleCache:
    """Holds the latest current-week schedule.

    Readers get the last published snapshot without waiting. Refreshes are
    serialized by a lock and publish a new snapshot only when the load
    succeeds.
    """

    def __init__(self, loader: EventsLoader):
        self._loader = loader
        self._lock = asyncio.Lock()
        self._snapshot: Optional[ScheduleSnapshot] = None

    def read_snapshot(self) -> Optional[ScheduleSnapshot]:
        return self._snapshot

    async def refresh(self) -> ScheduleSnapshot:
        async with self._lock:
            return await self._load()

    async def get_events(self) -> List[Event]:
        """Events from the current snapshot, loading once if there is none yet."""
        snapshot = self._snapshot
        if snapshot is None:
            async with self._lock:
                # Another request may have loaded while we waited
                snapshot = self._snapshot
                if snapshot is None:
                    snapshot = await self._load()
        return list(snapshot.events)

    async def _load(self) -> ScheduleSnapshot:
        # Caller holds self._lock
        events = await self._loader()
        snapshot = ScheduleSnapshot(
            events=tuple(events), refreshed_at=datetime.now(timezone.utc)
        )
        self._snapshot = snapshot
        logger.info(f"Schedule cache refreshed with {len(snapshot.events)} events")
        return snapshot


async def run_refresh_loop(cache: ScheduleCache, interval: float) -> None:
    """Refreshes `cache` every `interval` seconds until cancelled."""
    logger.info(f"Starting schedule refresh loop every {interval}s")
    while True:
        try:
            await cache.refresh()
        except Exception:
            logger.exception("Schedule refresh failed; keeping previous snapshot")
        await asyncio.sleep(interval)
