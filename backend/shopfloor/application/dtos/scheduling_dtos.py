"""
Scheduling DTOs for API requests and responses.

These models decouple the HTTP surface from the domain objects; the mapping
helpers build them from scheduler results.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from shopfloor.domain.scheduling.entities.operation import ScheduledOperation
from shopfloor.domain.scheduling.services.schedule_assigner import ScheduleResult


class ScheduledOperationResponse(BaseModel):
    """A single placed operation."""

    sequence: int
    machine_id: str | None
    machine_type: str | None = None
    operation: str | None = None
    product_code: str | None = None
    priority: str | None = None
    quantity: float | None = None
    unit: str | None = None
    setup_hours: float | None = None
    run_hours: float | None = None
    cleanup_hours: float | None = None
    duration_hours: float
    start: datetime
    end: datetime

    @classmethod
    def from_operation(cls, op: ScheduledOperation) -> "ScheduledOperationResponse":
        return cls(
            sequence=op.sequence,
            machine_id=op.machine_id,
            machine_type=op.machine_type,
            operation=op.operation,
            product_code=op.product_code,
            priority=op.priority,
            quantity=op.quantity,
            unit=op.unit,
            setup_hours=op.setup_hours,
            run_hours=op.run_hours,
            cleanup_hours=op.cleanup_hours,
            duration_hours=op.duration_hours,
            start=op.assigned_start,
            end=op.assigned_end,
        )


class DailyUsageResponse(BaseModel):
    machine_id: str
    day: date
    hours: float


class ScheduleResponse(BaseModel):
    """Schedule generated (or previewed) for a plan."""

    plan_id: str
    mode: str
    persisted: bool = False
    replaced_count: int = 0
    completion_time: datetime | None = None
    operations: list[ScheduledOperationResponse] = Field(default_factory=list)
    daily_usage: list[DailyUsageResponse] = Field(default_factory=list)

    @classmethod
    def from_result(
        cls,
        plan_id: str,
        result: ScheduleResult,
        persisted: bool = False,
        replaced_count: int = 0,
    ) -> "ScheduleResponse":
        return cls(
            plan_id=plan_id,
            mode=result.mode.value,
            persisted=persisted,
            replaced_count=replaced_count,
            completion_time=result.completion_time,
            operations=[
                ScheduledOperationResponse.from_operation(op) for op in result.operations
            ],
            daily_usage=[
                DailyUsageResponse(machine_id=machine_id, day=day, hours=round(hours, 4))
                for (machine_id, day), hours in sorted(result.usage_by_day.items())
            ],
        )


class WindowPreferenceRequest(BaseModel):
    """Update of the daily scheduling slot."""

    model_config = ConfigDict(populate_by_name=True)

    start: datetime = Field(..., description="Slot start; its time of day is the window start")
    duration_hours: float = Field(
        12.0, alias="durationHours", gt=0, le=24, description="Daily window length"
    )


class WindowPreferenceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start: datetime
    duration_hours: float = Field(alias="durationHours")
    window_start: str
    window_end: str
