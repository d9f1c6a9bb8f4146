from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall-clock time.

    Without a zone this is server-local naive time, which is what every stored
    timestamp uses. With a zone name the instant is converted to that zone and
    returned naive so it compares cleanly with stored values.
    """

    def __init__(self, tz_name: Optional[str] = None):
        self._tz = ZoneInfo(tz_name) if tz_name else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()
