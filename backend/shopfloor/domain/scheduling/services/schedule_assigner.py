"""
ScheduleAssigner Domain Service

Places a plan's operations on machine timelines. Each operation gets a concrete
start and end instant such that:

- it starts no earlier than the previous operation in sequence finishes,
- it does not overlap any committed interval on its machine (machine-aware mode),
- it lies entirely inside one daily window, and
- the machine's committed hours for that window-relative day stay within the
  window length.
"""

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

import structlog

from ...shared.base import DomainService
from ...shared.clock import Clock, SystemClock
from ..entities.operation import Operation, ScheduledOperation
from ..value_objects.busy_interval import BusyInterval
from ..value_objects.daily_window import DailyWindow
from .capacity_tracker import SHARED_BUCKET, DailyCapacityTracker
from .machine_availability import MachineAvailabilityIndex
from .operation_sequencer import OperationSequencer
from .validation import validate_operations

logger = structlog.get_logger(__name__)


class AssignmentMode(str, Enum):
    """
    How machine identity is used while placing operations.

    MACHINE_AWARE checks every placement against the machine's committed
    intervals and tracks daily capacity per machine.

    SIMPLIFIED skips the interval lookup and tracks daily capacity in a single
    bucket shared by the whole chain. It cannot detect that an operation would
    overlap work already committed on the same machine, so it is only suitable
    for looking at one plan in isolation (e.g. a print preview).
    """

    MACHINE_AWARE = "machine_aware"
    SIMPLIFIED = "simplified"


@dataclass(frozen=True)
class ScheduleResult:
    """Scheduled operations in sequence order plus the busy intervals they add."""

    operations: list[ScheduledOperation]
    intervals: list[BusyInterval]
    mode: AssignmentMode
    usage_by_day: dict[tuple[str, date], float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.operations

    @property
    def completion_time(self) -> datetime | None:
        if not self.operations:
            return None
        return max(op.assigned_end for op in self.operations)


class ScheduleAssigner(DomainService):
    """
    Chains operations through the daily window and machine availability.

    The assigner is deterministic given its inputs (operations, window, prior
    intervals and the clock), which makes "delete and regenerate" safe.
    """

    def __init__(
        self,
        window: DailyWindow,
        clock: Clock | None = None,
        mode: AssignmentMode = AssignmentMode.MACHINE_AWARE,
        machine_registry: Collection[str] | None = None,
    ) -> None:
        self._window = window
        self._clock = clock or SystemClock()
        self._mode = mode
        self._machine_registry = machine_registry

    @property
    def window(self) -> DailyWindow:
        return self._window

    @property
    def mode(self) -> AssignmentMode:
        return self._mode

    def assign(
        self,
        operations: Sequence[Operation],
        busy_intervals: Iterable[BusyInterval] = (),
    ) -> ScheduleResult:
        """
        Assign start/end instants to every operation.

        Args:
            operations: Operations of one plan, in any order
            busy_intervals: Snapshot of intervals already persisted for the
                relevant machines (ignored in SIMPLIFIED mode)

        Returns:
            ScheduleResult with operations sorted by sequence

        Raises:
            ScheduleConfigurationError: If an operation can never be scheduled
            MultipleValidationError: If several operations are invalid
            MachineNotFoundError: If an operation references an unknown machine
        """
        busy_intervals = tuple(busy_intervals) if self._mode is AssignmentMode.MACHINE_AWARE else ()
        now = None
        if any(op.declared_start is None for op in operations):
            now = self._clock.now()
        validate_operations(
            operations,
            self._window,
            self._machine_registry,
            busy_intervals=busy_intervals,
            now=now,
        )
        if not operations:
            return ScheduleResult(operations=[], intervals=[], mode=self._mode)

        index = None
        if self._mode is AssignmentMode.MACHINE_AWARE:
            index = MachineAvailabilityIndex(self._window, busy_intervals)
        tracker = DailyCapacityTracker(self._window)
        sequencer = OperationSequencer(operations)

        scheduled: list[ScheduledOperation] = []
        intervals: list[BusyInterval] = []
        for op in sequencer:
            start = self._place(op, sequencer.lower_bound, index, tracker)
            end = start + op.duration

            tracker.reserve(self._bucket(op), self._window.window_day(start), op.duration)
            if index is not None:
                intervals.append(index.add_interval(op.machine_id, start, end))
            else:
                intervals.append(BusyInterval(op.machine_id, start, end))

            sequencer.advance(end)
            scheduled.append(op.schedule(start, end))

        logger.debug(
            "operations_assigned",
            mode=self._mode.value,
            count=len(scheduled),
            completion=scheduled[-1].assigned_end.isoformat(),
        )
        return ScheduleResult(
            operations=scheduled,
            intervals=intervals,
            mode=self._mode,
            usage_by_day=tracker.usage_by_day(),
        )

    def _seed(self, op: Operation, lower_bound: datetime | None) -> datetime:
        if op.declared_start is not None:
            candidate = op.declared_start
        elif lower_bound is not None:
            candidate = lower_bound
        else:
            candidate = self._window.start_of_window(self._clock.now())

        if lower_bound is not None and candidate < lower_bound:
            candidate = lower_bound
        return candidate

    def _bucket(self, op: Operation) -> str:
        if self._mode is AssignmentMode.SIMPLIFIED:
            return SHARED_BUCKET
        return op.machine_id

    def _place(
        self,
        op: Operation,
        lower_bound: datetime | None,
        index: MachineAvailabilityIndex | None,
        tracker: DailyCapacityTracker,
    ) -> datetime:
        duration = op.duration
        bucket = self._bucket(op)
        candidate = self._seed(op, lower_bound)

        # every iteration either returns or moves to a later day with full capacity
        while True:
            if index is not None:
                candidate = index.earliest_free(op.machine_id, candidate, duration)
            else:
                candidate = self._window.normalize(candidate)

            day = self._window.window_day(candidate)
            if tracker.fits(bucket, day, duration) and self._window.fits(candidate, duration):
                return candidate

            next_start = self._window.following_window_start(candidate)
            logger.debug(
                "operation_rolled_to_next_window",
                machine_id=op.machine_id,
                sequence=op.sequence,
                duration_hours=op.duration_hours,
                from_start=candidate.isoformat(),
                to_start=next_start.isoformat(),
            )
            candidate = next_start
