"""Application services coordinating scheduling use cases."""

from .schedule_generation_service import GenerationOutcome, ScheduleGenerationService

__all__ = ["GenerationOutcome", "ScheduleGenerationService"]
