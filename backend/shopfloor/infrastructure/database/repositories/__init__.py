from .base import BaseRepository, DatabaseError
from .plan_repository import SqlPlanRepository
from .schedule_repository import SqlScheduleRepository, parse_timestamp

__all__ = [
    "BaseRepository",
    "DatabaseError",
    "SqlPlanRepository",
    "SqlScheduleRepository",
    "parse_timestamp",
]
