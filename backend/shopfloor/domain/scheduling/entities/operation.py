"""
Operation Entities

An Operation is one schedulable unit of work in a production plan, bound to a
machine and a duration. A ScheduledOperation is the same operation decorated with
the concrete start/end instants chosen by the schedule assigner.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import Field, field_validator

from ...shared.base import ValueObject
from ..value_objects.busy_interval import BusyInterval
from ..value_objects.time import hours_to_timedelta


class Operation(ValueObject):
    """
    Operation to be placed on a machine timeline.

    ``duration_hours`` is treated as opaque by the scheduler; when the plan carries
    setup/run/cleanup components it is their sum (see ``from_components``).
    ``declared_start`` is only a lower bound for placement, never a fixed start.
    """

    sequence: int = 0
    machine_id: str | None = None
    duration_hours: float
    declared_start: datetime | None = None

    operation_id: str | None = None
    plan_id: str | None = None
    operation: str | None = None
    machine_type: str | None = None
    quantity: float | None = None
    unit: str | None = None
    setup_hours: float | None = None
    run_hours: float | None = None
    cleanup_hours: float | None = None
    product_code: str | None = None
    priority: str | None = None
    notes: str | None = Field(default=None, max_length=1000)

    @field_validator("machine_id", mode="before")
    @classmethod
    def _strip_machine_id(cls, v: object) -> object:
        # surrounding whitespace never distinguishes two machines
        if isinstance(v, str):
            return v.strip() or None
        return v

    @classmethod
    def from_components(
        cls,
        *,
        setup_hours: float,
        run_hours: float,
        cleanup_hours: float,
        **fields,
    ) -> Operation:
        return cls(
            duration_hours=setup_hours + run_hours + cleanup_hours,
            setup_hours=setup_hours,
            run_hours=run_hours,
            cleanup_hours=cleanup_hours,
            **fields,
        )

    @property
    def duration(self) -> timedelta:
        return hours_to_timedelta(self.duration_hours)

    def schedule(self, start: datetime, end: datetime) -> ScheduledOperation:
        return ScheduledOperation(
            **self.model_dump(), assigned_start=start, assigned_end=end
        )


class ScheduledOperation(Operation):
    assigned_start: datetime
    assigned_end: datetime

    @property
    def assigned_duration(self) -> timedelta:
        return self.assigned_end - self.assigned_start

    def to_busy_interval(self) -> BusyInterval:
        return BusyInterval(
            machine_id=self.machine_id or "",
            start=self.assigned_start,
            end=self.assigned_end,
        )
