"""
Scheduling Domain Services

Pure, synchronous services that turn a plan's operations into a machine schedule.
"""

from .capacity_tracker import SHARED_BUCKET, DailyCapacityTracker
from .machine_availability import MachineAvailabilityIndex
from .operation_sequencer import OperationSequencer
from .plan_routing import MachineCatalog, MachineType, expand_plan_routing
from .schedule_assigner import AssignmentMode, ScheduleAssigner, ScheduleResult
from .validation import validate_operations

__all__ = [
    "AssignmentMode",
    "DailyCapacityTracker",
    "MachineAvailabilityIndex",
    "MachineCatalog",
    "MachineType",
    "OperationSequencer",
    "SHARED_BUCKET",
    "ScheduleAssigner",
    "ScheduleResult",
    "expand_plan_routing",
    "validate_operations",
]
