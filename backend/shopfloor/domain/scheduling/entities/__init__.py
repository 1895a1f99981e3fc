from .operation import Operation, ScheduledOperation

__all__ = ["Operation", "ScheduledOperation"]
