"""Factories for scheduling domain tests."""

from datetime import datetime, timezone

from shopfloor.domain.scheduling.entities.operation import Operation


def at(day: int, hour: int, minute: int = 0, tz=timezone.utc) -> datetime:
    """Instant in the week of Monday 2024-03-04."""
    return datetime(2024, 3, day, hour, minute, tzinfo=tz)


def make_operation(
    machine_id: str | None = "M1",
    hours: float = 1.0,
    sequence: int = 0,
    declared_start: datetime | None = None,
    **fields,
) -> Operation:
    return Operation(
        machine_id=machine_id,
        duration_hours=hours,
        sequence=sequence,
        declared_start=declared_start,
        **fields,
    )
