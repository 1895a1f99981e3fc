"""
Schedule Repository Interfaces

Defines the contracts the scheduler uses to read plans and committed busy intervals
and to hand back newly scheduled operations for persistence.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date, datetime

from ..entities.operation import Operation, ScheduledOperation
from ..value_objects.busy_interval import BusyInterval


class PlanRepository(ABC):
    """Read access to production plans and their routed operations."""

    @abstractmethod
    def get_operations(
        self, plan_id: str, declared_start: datetime | None = None
    ) -> list[Operation]:
        """
        Load the operations of a plan.

        Args:
            plan_id: Plan identifier
            declared_start: Start hint stamped on every generated operation

        Returns:
            Operations ordered by sequence (possibly empty)

        Raises:
            PlanNotFoundError: If the plan does not exist
            RoutingParseError: If the stored routing is malformed
        """
        pass


class ScheduleRepository(ABC):
    """
    Access to persisted schedule entries.

    The scheduler only reads a snapshot of busy intervals at the start of a run;
    new entries are written by the caller after the run completes.
    """

    @abstractmethod
    def load_busy_intervals(
        self,
        machine_ids: Iterable[str],
        since: datetime | None = None,
        exclude_plan_id: str | None = None,
    ) -> list[BusyInterval]:
        """
        Load committed busy intervals for the given machines.

        Entries with missing or malformed timestamps are skipped, not raised.

        Args:
            machine_ids: Machines of interest
            since: Only return intervals ending after this instant
            exclude_plan_id: Ignore entries belonging to this plan

        Returns:
            Busy intervals (unordered)
        """
        pass

    @abstractmethod
    def list_for_plan(self, plan_id: str) -> list[Operation]:
        """Return the plan's stored schedule entries as operations, in sequence order."""
        pass

    @abstractmethod
    def count_for_plan(self, plan_id: str) -> int:
        pass

    @abstractmethod
    def delete_for_plan(self, plan_id: str) -> int:
        """
        Delete every stored entry for a plan.

        Returns:
            Number of deleted entries
        """
        pass

    @abstractmethod
    def add_scheduled(
        self,
        operations: Iterable[ScheduledOperation],
        created_on: date | None = None,
    ) -> int:
        """
        Append scheduled operations.

        Args:
            operations: Scheduled operations to store
            created_on: Creation date recorded on each entry

        Returns:
            Number of stored entries
        """
        pass
