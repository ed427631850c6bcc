"""Time sources used for participant timestamps and message times."""

from __future__ import annotations

import time
from datetime import datetime


def _normalize_hhmmss(h: int, m: int, s: int) -> str:
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_clock_time(epoch_ms: int) -> str:
    """Render ``epoch_ms`` as a local ``HH:MM:SS`` string."""

    moment = datetime.fromtimestamp(epoch_ms / 1000)
    return _normalize_hhmmss(moment.hour, moment.minute, moment.second)


class Clock:
    """Interface for time sources.

    ``timestamp_ms`` drives inactivity comparisons, ``clock_time`` is the
    human readable time stamped on messages.  The latter carries no date, so
    message times are not comparable across midnight.
    """

    def timestamp_ms(self) -> int:
        raise NotImplementedError

    def clock_time(self) -> str:
        return format_clock_time(self.timestamp_ms())


class SystemClock(Clock):
    def timestamp_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start_ms: int = 0):
        self.now_ms = int(start_ms)

    def timestamp_ms(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


__all__ = ["Clock", "ManualClock", "SystemClock", "format_clock_time"]
