"""
SQLModel database models for the scheduling store.

The store is row-oriented: one row per scheduled machine operation and one row per
production plan. Schedule timestamps are kept as ISO-8601 text exactly as they were
written, so legacy rows may carry values that do not parse.
"""

from datetime import date

from sqlmodel import Column, Field, SQLModel, Text


class ProductionPlanRow(SQLModel, table=True):
    __tablename__ = "production_plans"

    id: int | None = Field(default=None, primary_key=True)
    plan_id: str = Field(max_length=50, unique=True, index=True)
    product_code: str | None = Field(default=None, max_length=100)
    priority: str = Field(default="Medium", max_length=20)
    # routing document: {"bunching": {...}, "extruder": [...], ...}
    machine_schedule: str | None = Field(default=None, sa_column=Column(Text))


class MachineScheduleRow(SQLModel, table=True):
    __tablename__ = "machine_schedules"

    id: int | None = Field(default=None, primary_key=True)
    schedule_id: str = Field(max_length=64, index=True)
    plan_id: str | None = Field(default=None, max_length=50, index=True)
    machine_type: str | None = Field(default=None, max_length=50)
    machine_id: str | None = Field(default=None, max_length=50, index=True)
    operation: str | None = Field(default=None, max_length=100)
    operation_sequence: int = Field(default=0)
    product_code: str | None = Field(default=None, max_length=100)
    priority: str | None = Field(default=None, max_length=20)
    quantity: float | None = None
    unit: str | None = Field(default=None, max_length=20)
    setup_time: float | None = None
    operation_time: float | None = None
    cleanup_time: float | None = None
    total_time: float | None = None
    scheduled_start_time: str | None = Field(default=None, max_length=64)
    scheduled_end_time: str | None = Field(default=None, max_length=64)
    status: str = Field(default="Scheduled", max_length=30)
    notes: str | None = Field(default=None, sa_column=Column(Text))
    created_date: date | None = None
