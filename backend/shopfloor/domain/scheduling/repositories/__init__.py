"""
Domain Repository Interfaces

Abstract contracts implemented by the infrastructure layer.
"""

from .schedule_repository import PlanRepository, ScheduleRepository

__all__ = ["PlanRepository", "ScheduleRepository"]
