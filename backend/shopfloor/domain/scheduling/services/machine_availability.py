"""
MachineAvailabilityIndex Domain Service

Tracks committed busy intervals per machine and answers "what is the earliest
feasible start at or after T" respecting both the intervals and the daily window.
"""

from __future__ import annotations

from bisect import insort
from collections.abc import Iterable
from datetime import datetime, timedelta

from ...shared.exceptions import ResourceConflictError
from ..value_objects.busy_interval import BusyInterval
from ..value_objects.daily_window import DailyWindow


class MachineAvailabilityIndex:
    """
    Per-machine interval index.

    Built from a snapshot of previously persisted intervals plus every interval
    committed earlier in the same run. Snapshot intervals are accepted as-is (legacy
    rows may already overlap each other); intervals added during a run must not
    overlap anything already stored for the machine.
    """

    def __init__(
        self, window: DailyWindow, intervals: Iterable[BusyInterval] = ()
    ) -> None:
        self._window = window
        self._by_machine: dict[str, list[BusyInterval]] = {}
        for interval in intervals:
            self._insert(interval)

    @classmethod
    def from_intervals(
        cls, window: DailyWindow, intervals: Iterable[BusyInterval]
    ) -> MachineAvailabilityIndex:
        return cls(window, intervals)

    def machines(self) -> list[str]:
        return sorted(self._by_machine)

    def intervals_for(self, machine_id: str) -> list[BusyInterval]:
        return list(self._by_machine.get(machine_id, []))

    def earliest_free(
        self,
        machine_id: str,
        candidate: datetime,
        duration: timedelta = timedelta(0),
    ) -> datetime:
        """
        Find the first instant at or after ``candidate`` that is inside a window and
        where ``[instant, instant + duration)`` collides with no stored interval.

        Each step moves the candidate strictly forward (to a blocking interval's end
        or to the next window start) and the interval set is finite, so the loop
        terminates.

        Args:
            machine_id: Machine to check
            candidate: Requested lower bound for the start
            duration: Span that must be free; zero checks the single instant

        Returns:
            Earliest feasible start
        """
        intervals = self._by_machine.get(machine_id, [])
        candidate = self._window.normalize(candidate)

        while True:
            blocking = self._latest_blocking(intervals, candidate, candidate + duration)
            if blocking is None:
                return candidate
            candidate = self._window.normalize(self._align(blocking.end, candidate))

    def add_interval(self, machine_id: str, start: datetime, end: datetime) -> BusyInterval:
        """
        Commit a new busy interval for a machine.

        Raises:
            ResourceConflictError: If the interval overlaps a stored one
        """
        interval = BusyInterval(machine_id=machine_id, start=start, end=end)
        existing = self._latest_blocking(
            self._by_machine.get(machine_id, []), start, end
        )
        if existing is not None:
            raise ResourceConflictError(
                f"Interval {interval} overlaps committed interval {existing}",
                {
                    "machine_id": machine_id,
                    "start": start.isoformat(),
                    "end": end.isoformat(),
                },
            )
        self._insert(interval)
        return interval

    @staticmethod
    def _align(instant: datetime, reference: datetime) -> datetime:
        # window boundaries are wall-clock, so read stored ends in the caller's zone
        if instant.tzinfo is not None and reference.tzinfo is not None:
            return instant.astimezone(reference.tzinfo)
        return instant

    def _insert(self, interval: BusyInterval) -> None:
        insort(
            self._by_machine.setdefault(interval.machine_id, []),
            interval,
            key=lambda itv: (itv.start, itv.end),
        )

    @staticmethod
    def _latest_blocking(
        intervals: list[BusyInterval], start: datetime, end: datetime
    ) -> BusyInterval | None:
        # sorted by start: nothing starting after the span can collide with it
        limit = max(start, end)
        blocking = None
        for interval in intervals:
            if interval.start > limit:
                break
            if interval.overlaps(start, end):
                if blocking is None or interval.end > blocking.end:
                    blocking = interval
        return blocking
