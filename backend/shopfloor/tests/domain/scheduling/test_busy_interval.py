from datetime import timedelta

import pytest

from shopfloor.domain.scheduling.value_objects.busy_interval import BusyInterval
from shopfloor.domain.scheduling.value_objects.time import TimeValidationError

from .fixtures import at


class TestBusyInterval:
    """Test half-open busy intervals."""

    def test_end_before_start_rejected(self):
        with pytest.raises(TimeValidationError):
            BusyInterval("M1", at(4, 10), at(4, 9))

    def test_zero_length_allowed(self):
        interval = BusyInterval("M1", at(4, 10), at(4, 10))

        assert interval.duration == timedelta(0)
        assert not interval.contains(at(4, 10))

    def test_contains_is_half_open(self):
        interval = BusyInterval("M1", at(4, 8), at(4, 10))

        assert interval.contains(at(4, 8))
        assert interval.contains(at(4, 9, 59))
        assert not interval.contains(at(4, 10))

    def test_overlaps(self):
        interval = BusyInterval("M1", at(4, 8), at(4, 10))

        assert interval.overlaps(at(4, 9), at(4, 11))
        assert interval.overlaps(at(4, 7), at(4, 12))
        assert not interval.overlaps(at(4, 10), at(4, 11))
        assert not interval.overlaps(at(4, 6), at(4, 8))

    def test_zero_length_span_is_point_check(self):
        interval = BusyInterval("M1", at(4, 8), at(4, 10))

        assert interval.overlaps(at(4, 9), at(4, 9))
        assert not interval.overlaps(at(4, 10), at(4, 10))
