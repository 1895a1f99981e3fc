"""
Daily Window Value Object

The recurring daily availability window shared by all machines: a wall-clock start
time and a duration. All boundary arithmetic keeps the tzinfo of the instant it is
given, so aware instants stay aware and wall-clock hours are respected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from ...shared.exceptions import ScheduleConfigurationError
from .time import TimeOfDay, hours_to_timedelta

DEFAULT_WINDOW_START = TimeOfDay(6, 30)
DEFAULT_DAILY_DURATION_HOURS = 12.0


@dataclass(frozen=True)
class DailyWindow:
    """
    Recurring working window.

    A window-relative *day* runs from one window start to the next, so with a
    22:00 start an instant at 02:00 belongs to the previous calendar date's day.
    """

    start: TimeOfDay = field(default=DEFAULT_WINDOW_START)
    daily_duration_hours: float = DEFAULT_DAILY_DURATION_HOURS

    def __post_init__(self):
        if self.daily_duration_hours <= 0:
            raise ScheduleConfigurationError(
                "daily_duration_hours",
                self.daily_duration_hours,
                "daily window duration must be positive",
            )
        if self.daily_duration_hours > 24:
            raise ScheduleConfigurationError(
                "daily_duration_hours",
                self.daily_duration_hours,
                "daily window cannot be longer than 24 hours",
            )

    def __str__(self) -> str:
        return f"{self.start} +{self.daily_duration_hours:g}h"

    @property
    def length(self) -> timedelta:
        return hours_to_timedelta(self.daily_duration_hours)

    # Calendar-date boundaries

    def start_of_window(self, instant: datetime) -> datetime:
        """Window start on the calendar date of ``instant``."""
        return instant.replace(
            hour=self.start.hour, minute=self.start.minute, second=0, microsecond=0
        )

    def end_of_window(self, instant: datetime) -> datetime:
        return self.start_of_window(instant) + self.length

    def next_window_start(self, instant: datetime) -> datetime:
        """Window start on the calendar date after ``instant``."""
        return self.start_of_window(instant + timedelta(days=1))

    # Window-relative day boundaries

    def window_start_for(self, instant: datetime) -> datetime:
        """Latest window start at or before ``instant``."""
        window_start = self.start_of_window(instant)
        if window_start > instant:
            window_start = self.start_of_window(instant - timedelta(days=1))
        return window_start

    def window_end_for(self, instant: datetime) -> datetime:
        return self.window_start_for(instant) + self.length

    def window_day(self, instant: datetime) -> date:
        """Calendar key of the window-relative day containing ``instant``."""
        return self.window_start_for(instant).date()

    def following_window_start(self, instant: datetime) -> datetime:
        """Start of the window after the one whose day contains ``instant``."""
        return self.start_of_window(self.window_start_for(instant) + timedelta(days=1))

    def contains(self, instant: datetime) -> bool:
        window_start = self.window_start_for(instant)
        return window_start <= instant < window_start + self.length

    def normalize(self, instant: datetime) -> datetime:
        """
        Move ``instant`` forward to the nearest schedulable instant.

        Instants inside a window are returned unchanged; anything else moves to
        the next window start. Never returns an instant earlier than the input.
        """
        if self.contains(instant):
            return instant
        return self.following_window_start(instant)

    def fits(self, start: datetime, duration: timedelta) -> bool:
        """True when ``[start, start + duration)`` lies inside a single window."""
        return self.contains(start) and start + duration <= self.window_end_for(start)

    @classmethod
    def from_values(cls, start: str, daily_duration_hours: float) -> DailyWindow:
        return cls(
            start=TimeOfDay.from_string(start),
            daily_duration_hours=daily_duration_hours,
        )
