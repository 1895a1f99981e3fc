"""Value objects for the scheduling domain."""

from .busy_interval import BusyInterval
from .daily_window import (
    DEFAULT_DAILY_DURATION_HOURS,
    DEFAULT_WINDOW_START,
    DailyWindow,
)
from .time import TimeOfDay, TimeValidationError, hours_to_timedelta, timedelta_to_hours

__all__ = [
    "BusyInterval",
    "DailyWindow",
    "DEFAULT_DAILY_DURATION_HOURS",
    "DEFAULT_WINDOW_START",
    "TimeOfDay",
    "TimeValidationError",
    "hours_to_timedelta",
    "timedelta_to_hours",
]
