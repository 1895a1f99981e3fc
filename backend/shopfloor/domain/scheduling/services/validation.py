"""
Scheduling input validation.

Everything that would make the assigner fail or loop is rejected here, before a
single operation is placed.
"""

import math
from collections.abc import Collection, Iterable, Sequence
from datetime import datetime

from ...shared.exceptions import (
    MachineNotFoundError,
    MultipleValidationError,
    ScheduleConfigurationError,
    ValidationError,
)
from ..entities.operation import Operation
from ..value_objects.busy_interval import BusyInterval
from ..value_objects.daily_window import DailyWindow

# Durations are compared at 0.01 h precision
DURATION_PRECISION = 2


def validate_operations(
    operations: Sequence[Operation],
    window: DailyWindow,
    machine_registry: Collection[str] | None = None,
    busy_intervals: Iterable[BusyInterval] = (),
    now: datetime | None = None,
) -> None:
    """
    Validate operations against the window configuration and machine registry.

    Args:
        operations: Operations in caller order; indexes in errors refer to it
        window: Daily window the operations will be placed in
        machine_registry: Known machine ids, or None to skip the reference check
        busy_intervals: Committed intervals the operations will be placed around
        now: Clock instant used to seed operations without a declared start

    Raises:
        ScheduleConfigurationError: For a single configuration problem
        MultipleValidationError: When several configuration problems are found
        MachineNotFoundError: When an operation references an unknown machine
    """
    errors: list[ValidationError] = []
    unknown: list[MachineNotFoundError] = []

    awareness_error = _awareness_error(operations, busy_intervals, now)
    if awareness_error is not None:
        errors.append(awareness_error)

    for index, op in enumerate(operations):
        machine_id = (op.machine_id or "").strip()
        context = {
            "operation_index": index,
            "machine_id": op.machine_id,
            "sequence": op.sequence,
        }

        if not machine_id:
            errors.append(
                ScheduleConfigurationError(
                    "machine_id",
                    op.machine_id,
                    f"operation #{index} has no machine assigned",
                    **context,
                )
            )
        elif machine_registry is not None and machine_id not in machine_registry:
            unknown.append(MachineNotFoundError(machine_id, operation_index=index))

        error = _duration_error(op, index, window, context)
        if error is not None:
            errors.append(error)

    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise MultipleValidationError(errors)
    if unknown:
        raise unknown[0]


def _duration_error(
    op: Operation, index: int, window: DailyWindow, context: dict
) -> ScheduleConfigurationError | None:
    hours = op.duration_hours
    if not math.isfinite(hours):
        message = f"operation #{index} duration must be a finite number"
    elif hours < 0:
        message = f"operation #{index} duration cannot be negative"
    elif round(hours, DURATION_PRECISION) == 0:
        message = f"operation #{index} duration rounds to zero hours"
    elif hours > window.daily_duration_hours:
        message = (
            f"operation #{index} needs {hours:g}h but the daily window is only "
            f"{window.daily_duration_hours:g}h"
        )
    else:
        return None
    return ScheduleConfigurationError("duration_hours", hours, message, **context)


def _awareness_error(
    operations: Sequence[Operation],
    busy_intervals: Iterable[BusyInterval],
    now: datetime | None,
) -> ScheduleConfigurationError | None:
    # every instant the assigner compares must agree on timezone awareness
    sources: dict[str, set[bool]] = {}
    for op in operations:
        if op.declared_start is not None:
            sources.setdefault("declared_start", set()).add(op.declared_start.tzinfo is not None)
    for interval in busy_intervals:
        sources.setdefault("busy_intervals", set()).add(interval.start.tzinfo is not None)
    if now is not None:
        sources.setdefault("clock", set()).add(now.tzinfo is not None)

    awareness = set().union(*sources.values())
    if len(awareness) <= 1:
        return None
    return ScheduleConfigurationError(
        "declared_start",
        ", ".join(sorted(sources)),
        "timezone-aware and naive instants cannot be mixed "
        f"(sources: {', '.join(sorted(sources))})",
    )
