"""Inactive participant reaper.

A participant that has not sent a heartbeat for ``inactive_after`` seconds is
considered gone.  Every ``interval`` seconds the reaper announces the
departure of all such participants with one batch of ``status`` messages and
then removes them with one batch delete.

Departures are written before the deletes, so a failed delete may produce a
repeated "sai da sala" notice on the next sweep but never a silent removal.
A failing sweep is logged and otherwise ignored; the schedule carries on.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass, field
from typing import List, Optional

from lib.contracts.message import status_message
from lib.store import ChatStore
from lib.telemetry.logger import get_logger
from lib.utils.clock import Clock, SystemClock

from apps.chat_room import LEAVE_TEXT

log = get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 15.0
DEFAULT_INACTIVE_AFTER_SECONDS = 10.0


@dataclass
class Reaper:
    """Periodic sweep over the participants of a :class:`ChatStore`."""

    store: ChatStore
    clock: Clock = field(default_factory=SystemClock)
    interval: float = DEFAULT_INTERVAL_SECONDS
    inactive_after: float = DEFAULT_INACTIVE_AFTER_SECONDS
    _task: Optional[asyncio.Task] = field(default=None, init=False, repr=False)

    async def sweep(self) -> List[str]:
        """Run one sweep and return the names that were removed."""

        threshold = self.clock.timestamp_ms() - int(self.inactive_after * 1000)
        try:
            inactive = await self.store.find_inactive(threshold)
            if not inactive:
                return []
            when = self.clock.clock_time()
            await self.store.insert_messages(status_message(p.name, LEAVE_TEXT, when) for p in inactive)
            names = [p.name for p in inactive]
            await self.store.delete_participants(names)
        except asyncio.CancelledError:
            raise
        except Exception:
            log.exception("Inactive participant sweep failed")
            return []

        log.info("Removed %d inactive participant(s): %s", len(names), ", ".join(names))
        return names

    async def run(self) -> None:
        """Sweep every ``interval`` seconds until cancelled."""

        while True:
            await asyncio.sleep(self.interval)
            await self.sweep()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run(), name="chat-room-reaper")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


__all__ = ["Reaper"]
