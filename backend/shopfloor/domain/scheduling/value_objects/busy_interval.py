"""Busy interval value object: a half-open span during which a machine is occupied."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .time import TimeValidationError


@dataclass(frozen=True)
class BusyInterval:
    machine_id: str
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise TimeValidationError(
                f"Busy interval on {self.machine_id} ends before it starts "
                f"({self.start.isoformat()} > {self.end.isoformat()})"
            )

    def __str__(self) -> str:
        return f"{self.machine_id} [{self.start.isoformat()}, {self.end.isoformat()})"

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """
        Check whether ``[start, end)`` collides with this interval.

        A zero-length span is treated as the single instant ``start``.
        """
        if end <= start:
            return self.contains(start)
        return self.start < end and start < self.end
