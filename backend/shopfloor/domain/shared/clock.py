"""Clock abstraction so "now" can be injected into scheduling runs."""

from abc import ABC, abstractmethod
from datetime import datetime, tzinfo


class Clock(ABC):
    """Source of the current instant."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(Clock):
    """Real-time clock returning timezone-aware instants."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def now(self) -> datetime:
        if self._tz is not None:
            return datetime.now(self._tz)
        return datetime.now().astimezone()


class FixedClock(Clock):
    """Clock frozen at a given instant, for deterministic runs and tests."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant
