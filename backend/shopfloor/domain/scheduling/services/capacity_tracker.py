"""
DailyCapacityTracker Domain Service

Per (machine, window-relative day) accumulator of committed hours. This is the
authoritative guard against exceeding the daily window length on a machine,
independent of how the individual intervals were derived.
"""

from datetime import date, timedelta

from ...shared.exceptions import ResourceConflictError
from ..value_objects.daily_window import DailyWindow
from ..value_objects.time import timedelta_to_hours

# Bucket key used when capacity is tracked for a whole chain instead of per machine
SHARED_BUCKET = "*"


class DailyCapacityTracker:
    def __init__(self, window: DailyWindow) -> None:
        self._capacity = window.length
        self._usage: dict[tuple[str, date], timedelta] = {}

    @property
    def capacity(self) -> timedelta:
        return self._capacity

    def usage(self, machine_id: str, day: date) -> timedelta:
        return self._usage.get((machine_id, day), timedelta(0))

    def remaining(self, machine_id: str, day: date) -> timedelta:
        return max(self._capacity - self.usage(machine_id, day), timedelta(0))

    def fits(self, machine_id: str, day: date, duration: timedelta) -> bool:
        return duration <= self.remaining(machine_id, day)

    def reserve(self, machine_id: str, day: date, duration: timedelta) -> None:
        """
        Add ``duration`` to the machine's usage for ``day``.

        Raises:
            ResourceConflictError: If the reservation exceeds the remaining capacity
        """
        if not self.fits(machine_id, day, duration):
            raise ResourceConflictError(
                f"Reserving {timedelta_to_hours(duration):g}h on {machine_id} for "
                f"{day.isoformat()} exceeds remaining "
                f"{timedelta_to_hours(self.remaining(machine_id, day)):g}h",
                {"machine_id": machine_id, "day": day.isoformat()},
            )
        self._usage[(machine_id, day)] = self.usage(machine_id, day) + duration

    def usage_by_day(self) -> dict[tuple[str, date], float]:
        """Committed hours per (machine, day), for reporting."""
        return {key: timedelta_to_hours(used) for key, used in self._usage.items()}
