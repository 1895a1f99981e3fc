"""
OperationSequencer Domain Service

Imposes the process order on a plan's operations and threads the
"no earlier than the previous operation's end" bound between them.
"""

from collections.abc import Iterable, Iterator
from datetime import datetime

from ..entities.operation import Operation


class OperationSequencer:
    """
    Walks operations in ascending ``sequence`` order.

    The sort is stable, so operations sharing a sequence number keep their input
    order. The sequencer does not compute times; the caller reports each
    operation's end through ``advance``.
    """

    def __init__(self, operations: Iterable[Operation]) -> None:
        self._ordered = sorted(operations, key=lambda op: op.sequence)
        self._previous_end: datetime | None = None

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    @property
    def ordered(self) -> list[Operation]:
        return list(self._ordered)

    @property
    def lower_bound(self) -> datetime | None:
        """End of the previously placed operation, or None before the first one."""
        return self._previous_end

    def advance(self, assigned_end: datetime) -> None:
        self._previous_end = assigned_end
