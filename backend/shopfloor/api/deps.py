"""
Dependency wiring for the HTTP layer.

Routes receive a fully wired ScheduleGenerationService; tests replace it through
``app.dependency_overrides[get_schedule_service]``.
"""

from datetime import datetime
from functools import lru_cache
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.engine import Engine

from shopfloor.application.services.schedule_generation_service import (
    ScheduleGenerationService,
)
from shopfloor.core.config import Settings, get_settings
from shopfloor.core.db import engine_from_settings, init_db, session_factory
from shopfloor.domain.scheduling.services.plan_routing import MachineCatalog
from shopfloor.domain.scheduling.value_objects.time import TimeOfDay
from shopfloor.domain.shared.clock import SystemClock
from shopfloor.infrastructure.database.unit_of_work import SqlModelUnitOfWork
from shopfloor.infrastructure.preferences.window_preferences import (
    JsonWindowPreferenceStore,
    WindowPreference,
)

SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache
def get_engine() -> Engine:
    engine = engine_from_settings(get_settings())
    init_db(engine)
    return engine


def default_window_preference(settings: Settings) -> WindowPreference:
    """Preference used until an operator saves one: today's slot from settings."""
    tz = ZoneInfo(settings.TIMEZONE)
    start = TimeOfDay.from_string(settings.WINDOW_START).to_time()
    return WindowPreference(
        start=datetime.combine(datetime.now(tz).date(), start),
        duration_hours=settings.DAILY_DURATION_HOURS,
    )


def get_schedule_service(settings: SettingsDep) -> ScheduleGenerationService:
    tz = ZoneInfo(settings.TIMEZONE)
    sessions = session_factory(get_engine())
    return ScheduleGenerationService(
        uow_factory=lambda: SqlModelUnitOfWork(sessions, naive_tz=tz),
        window_store=JsonWindowPreferenceStore(
            settings.WINDOW_PREFERENCES_PATH, default=default_window_preference(settings)
        ),
        clock=SystemClock(tz),
        machine_registry=MachineCatalog.default(),
        tz=tz,
    )


ScheduleServiceDep = Annotated[ScheduleGenerationService, Depends(get_schedule_service)]
