"""
Property-based tests for schedule assignment invariants.

Random plans and committed intervals are drawn from a seeded generator so failures
are reproducible; each seed checks the placement rules that must hold for every
schedule the assigner produces.
"""

import random
from collections import defaultdict
from datetime import timedelta

import pytest

from shopfloor.domain.scheduling.services.schedule_assigner import (
    AssignmentMode,
    ScheduleAssigner,
)
from shopfloor.domain.scheduling.value_objects.busy_interval import BusyInterval
from shopfloor.domain.scheduling.value_objects.daily_window import DailyWindow
from shopfloor.domain.scheduling.value_objects.time import TimeOfDay
from shopfloor.domain.shared.clock import FixedClock

from .fixtures import at, make_operation

MACHINES = ["BM-001", "EXT-001", "LAY-001"]
SEEDS = list(range(12))


class ScheduleScenarioGenerator:
    """Generate plans and committed intervals for property checks."""

    def __init__(self, seed: int):
        self._random = random.Random(seed)

    def window(self) -> DailyWindow:
        start = TimeOfDay(self._random.choice([0, 6, 14, 22]), self._random.choice([0, 30]))
        return DailyWindow(start, self._random.choice([8, 10, 12, 24]))

    def operations(self, window: DailyWindow, count: int = 15):
        max_quarters = int(window.daily_duration_hours * 4)
        ops = []
        for sequence in range(1, count + 1):
            declared = None
            if self._random.random() < 0.2:
                declared = at(4, 0) + timedelta(hours=self._random.randint(0, 72))
            ops.append(
                make_operation(
                    self._random.choice(MACHINES),
                    self._random.randint(1, max_quarters) / 4,
                    sequence=sequence,
                    declared_start=declared,
                )
            )
        self._random.shuffle(ops)
        return ops

    def busy_intervals(self, per_machine: int = 6):
        intervals = []
        for machine_id in MACHINES:
            cursor = at(4, 0)
            for _ in range(per_machine):
                start = cursor + timedelta(minutes=15 * self._random.randint(0, 40))
                end = start + timedelta(minutes=15 * self._random.randint(1, 24))
                intervals.append(BusyInterval(machine_id, start, end))
                cursor = end
        return intervals


def _run(seed: int, mode: AssignmentMode = AssignmentMode.MACHINE_AWARE):
    generator = ScheduleScenarioGenerator(seed)
    window = generator.window()
    ops = generator.operations(window)
    busy = generator.busy_intervals()
    assigner = ScheduleAssigner(window, FixedClock(at(4, 5)), mode=mode)
    return window, ops, busy, assigner.assign(ops, busy)


@pytest.mark.parametrize("seed", SEEDS)
class TestScheduleInvariants:
    """Test invariants over randomly generated plans."""

    def test_every_operation_fits_one_window(self, seed):
        window, _, _, result = _run(seed)

        for op in result.operations:
            assert window.fits(op.assigned_start, op.duration)
            assert op.assigned_end - op.assigned_start == op.duration

    def test_chain_is_monotonic(self, seed):
        _, _, _, result = _run(seed)

        for previous, current in zip(result.operations, result.operations[1:]):
            assert previous.sequence <= current.sequence
            assert current.assigned_start >= previous.assigned_end

    def test_declared_start_is_a_lower_bound(self, seed):
        _, _, _, result = _run(seed)

        for op in result.operations:
            if op.declared_start is not None:
                assert op.assigned_start >= op.declared_start

    def test_no_overlap_on_any_machine(self, seed):
        _, _, busy, result = _run(seed)

        for op in result.operations:
            for other in busy + [o.to_busy_interval() for o in result.operations]:
                if other.machine_id != op.machine_id or other == op.to_busy_interval():
                    continue
                assert not other.overlaps(op.assigned_start, op.assigned_end)

    def test_daily_capacity_respected(self, seed):
        window, _, _, result = _run(seed)

        usage = defaultdict(timedelta)
        for op in result.operations:
            usage[(op.machine_id, window.window_day(op.assigned_start))] += op.duration
        assert all(total <= window.length for total in usage.values())
        assert all(hours <= window.daily_duration_hours for hours in result.usage_by_day.values())

    def test_assignment_is_deterministic(self, seed):
        _, _, _, first = _run(seed)
        _, _, _, second = _run(seed)

        assert first.operations == second.operations

    def test_simplified_mode_keeps_window_rules(self, seed):
        window, _, _, result = _run(seed, AssignmentMode.SIMPLIFIED)

        for previous, current in zip(result.operations, result.operations[1:]):
            assert current.assigned_start >= previous.assigned_end
        for op in result.operations:
            assert window.fits(op.assigned_start, op.duration)
