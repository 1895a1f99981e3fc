"""
Time-based Value Objects

Immutable value objects representing wall-clock concepts used by the daily
working window and by schedule arithmetic.
"""

from dataclasses import dataclass
from datetime import time, timedelta


class TimeValidationError(ValueError):
    """Raised when time-related validation fails."""

    pass


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """
    Represents a specific time of day (hours and minutes).

    Used for the recurring start of the daily working window.
    """

    hour: int
    minute: int

    def __post_init__(self):
        if not (0 <= self.hour <= 23):
            raise TimeValidationError(f"Hour must be between 0 and 23, got {self.hour}")
        if not (0 <= self.minute <= 59):
            raise TimeValidationError(
                f"Minute must be between 0 and 59, got {self.minute}"
            )

    def __str__(self) -> str:
        """Return time in HH:MM format."""
        return f"{self.hour:02d}:{self.minute:02d}"

    @property
    def total_minutes_from_midnight(self) -> int:
        return self.hour * 60 + self.minute

    def to_time(self) -> time:
        return time(self.hour, self.minute)

    @classmethod
    def from_time(cls, time_obj: time) -> "TimeOfDay":
        return cls(time_obj.hour, time_obj.minute)

    @classmethod
    def from_string(cls, time_str: str) -> "TimeOfDay":
        """
        Create from string in HH:MM or H:MM format.

        Examples: "06:30", "6:30", "14:15"
        """
        try:
            parts = time_str.strip().split(":")
            if len(parts) != 2:
                raise ValueError("Time must be in HH:MM format")

            return cls(int(parts[0]), int(parts[1]))
        except (ValueError, IndexError) as e:
            raise TimeValidationError(f"Invalid time format '{time_str}': {e}") from e


def hours_to_timedelta(hours: float) -> timedelta:
    """Convert fractional hours to a timedelta (microsecond precision)."""
    return timedelta(hours=hours)


def timedelta_to_hours(delta: timedelta) -> float:
    return delta.total_seconds() / 3600
