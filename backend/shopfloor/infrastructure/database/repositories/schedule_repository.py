"""
Schedule repository backed by the ``machine_schedules`` table.

Reads committed rows as busy intervals for the scheduler and writes newly
scheduled operations back as rows.
"""

from collections.abc import Iterable
from datetime import date, datetime, timezone, tzinfo
from uuid import uuid4

import structlog
from sqlalchemy import delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select

from shopfloor.domain.scheduling.entities.operation import Operation, ScheduledOperation
from shopfloor.domain.scheduling.repositories.schedule_repository import (
    ScheduleRepository,
)
from shopfloor.domain.scheduling.value_objects.busy_interval import BusyInterval
from shopfloor.domain.scheduling.value_objects.time import TimeValidationError
from shopfloor.infrastructure.database.models import MachineScheduleRow

from .base import BaseRepository, DatabaseError

logger = structlog.get_logger(__name__)


def parse_timestamp(value: str | None, naive_tz: tzinfo | None) -> datetime | None:
    """Parse an ISO-8601 timestamp; returns None for empty or malformed values."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None and naive_tz is not None:
        parsed = parsed.replace(tzinfo=naive_tz)
    return parsed


class SqlScheduleRepository(BaseRepository, ScheduleRepository):
    """
    Repository implementation for machine schedule rows.

    Rows written without an offset are read as ``naive_tz`` (UTC by default), so
    every interval handed to the scheduler is timezone-aware.
    """

    def __init__(self, session, naive_tz: tzinfo | None = timezone.utc):
        super().__init__(session)
        self._naive_tz = naive_tz

    def load_busy_intervals(
        self,
        machine_ids: Iterable[str],
        since: datetime | None = None,
        exclude_plan_id: str | None = None,
    ) -> list[BusyInterval]:
        machine_ids = list(machine_ids)
        if not machine_ids:
            return []

        try:
            statement = select(MachineScheduleRow).where(
                col(MachineScheduleRow.machine_id).in_(machine_ids)
            )
            if exclude_plan_id is not None:
                statement = statement.where(
                    or_(
                        MachineScheduleRow.plan_id != exclude_plan_id,
                        col(MachineScheduleRow.plan_id).is_(None),
                    )
                )
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error loading busy intervals: {str(e)}") from e

        intervals: list[BusyInterval] = []
        for row in rows:
            interval = self._to_interval(row)
            if interval is None:
                continue
            if since is not None and interval.end <= since:
                continue
            intervals.append(interval)
        return intervals

    def list_for_plan(self, plan_id: str) -> list[Operation]:
        try:
            statement = (
                select(MachineScheduleRow)
                .where(MachineScheduleRow.plan_id == plan_id)
                .order_by(MachineScheduleRow.operation_sequence, MachineScheduleRow.id)
            )
            rows = self.session.exec(statement).all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error listing schedules for plan {plan_id}: {str(e)}") from e
        return [self._to_operation(row) for row in rows]

    def count_for_plan(self, plan_id: str) -> int:
        try:
            statement = select(func.count()).select_from(MachineScheduleRow).where(
                MachineScheduleRow.plan_id == plan_id
            )
            return int(self.session.exec(statement).one())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error counting schedules for plan {plan_id}: {str(e)}") from e

    def delete_for_plan(self, plan_id: str) -> int:
        try:
            result = self.session.exec(
                delete(MachineScheduleRow).where(MachineScheduleRow.plan_id == plan_id)
            )
            return result.rowcount or 0
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error deleting schedules for plan {plan_id}: {str(e)}") from e

    def add_scheduled(
        self,
        operations: Iterable[ScheduledOperation],
        created_on: date | None = None,
    ) -> int:
        rows = [self._to_row(op, created_on) for op in operations]
        try:
            self.session.add_all(rows)
            self.session.flush()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error storing scheduled operations: {str(e)}") from e
        return len(rows)

    def _to_interval(self, row: MachineScheduleRow) -> BusyInterval | None:
        start = parse_timestamp(row.scheduled_start_time, self._naive_tz)
        end = parse_timestamp(row.scheduled_end_time, self._naive_tz)
        if start is None or end is None:
            logger.warning(
                "skipping_malformed_schedule_row",
                row_id=row.id,
                schedule_id=row.schedule_id,
                machine_id=row.machine_id,
                scheduled_start_time=row.scheduled_start_time,
                scheduled_end_time=row.scheduled_end_time,
            )
            return None
        try:
            return BusyInterval(machine_id=row.machine_id, start=start, end=end)
        except (TimeValidationError, TypeError):
            logger.warning(
                "skipping_inconsistent_schedule_row",
                row_id=row.id,
                schedule_id=row.schedule_id,
                machine_id=row.machine_id,
            )
            return None

    def _to_operation(self, row: MachineScheduleRow) -> Operation:
        total = row.total_time
        if total is None:
            total = (row.setup_time or 0) + (row.operation_time or 0) + (row.cleanup_time or 0)
        return Operation(
            sequence=row.operation_sequence,
            machine_id=row.machine_id,
            duration_hours=total,
            declared_start=parse_timestamp(row.scheduled_start_time, self._naive_tz),
            operation_id=row.schedule_id,
            plan_id=row.plan_id,
            operation=row.operation,
            machine_type=row.machine_type,
            quantity=row.quantity,
            unit=row.unit,
            setup_hours=row.setup_time,
            run_hours=row.operation_time,
            cleanup_hours=row.cleanup_time,
            product_code=row.product_code,
            priority=row.priority,
            notes=row.notes,
        )

    @staticmethod
    def _to_row(op: ScheduledOperation, created_on: date | None) -> MachineScheduleRow:
        return MachineScheduleRow(
            schedule_id=op.operation_id or uuid4().hex,
            plan_id=op.plan_id,
            machine_type=op.machine_type,
            machine_id=op.machine_id,
            operation=op.operation,
            operation_sequence=op.sequence,
            product_code=op.product_code,
            priority=op.priority,
            quantity=op.quantity,
            unit=op.unit,
            setup_time=op.setup_hours,
            operation_time=op.run_hours,
            cleanup_time=op.cleanup_hours,
            total_time=op.duration_hours,
            scheduled_start_time=op.assigned_start.isoformat(),
            scheduled_end_time=op.assigned_end.isoformat(),
            notes=op.notes,
            created_date=created_on,
        )
