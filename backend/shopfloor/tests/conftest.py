"""Shared fixtures: in-memory database, window preferences and a wired service."""

import json
from datetime import datetime, timezone

import pytest
from sqlmodel import Session

from shopfloor.application.services.schedule_generation_service import (
    ScheduleGenerationService,
)
from shopfloor.core.db import build_engine, init_db, session_factory
from shopfloor.domain.scheduling.services.plan_routing import MachineCatalog
from shopfloor.domain.scheduling.value_objects.daily_window import DailyWindow
from shopfloor.domain.shared.clock import FixedClock
from shopfloor.infrastructure.database.models import ProductionPlanRow
from shopfloor.infrastructure.database.unit_of_work import SqlModelUnitOfWork
from shopfloor.infrastructure.preferences.window_preferences import (
    JsonWindowPreferenceStore,
    WindowPreference,
)

SLOT_START = datetime(2024, 3, 4, 6, 30, tzinfo=timezone.utc)


@pytest.fixture
def window():
    """Default 06:30 + 12h window."""
    return DailyWindow()


@pytest.fixture
def clock():
    return FixedClock(SLOT_START)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def uow_factory(engine):
    sessions = session_factory(engine)
    return lambda: SqlModelUnitOfWork(sessions)


@pytest.fixture
def preference_store(tmp_path):
    store = JsonWindowPreferenceStore(tmp_path / "window_preferences.json")
    store.save(WindowPreference(start=SLOT_START, duration_hours=12))
    return store


@pytest.fixture
def schedule_service(uow_factory, preference_store, clock):
    return ScheduleGenerationService(
        uow_factory=uow_factory,
        window_store=preference_store,
        clock=clock,
        machine_registry=MachineCatalog.default(),
    )


@pytest.fixture
def seed_plan(engine):
    """Insert a production plan row with the given routing document."""

    def _seed(plan_id: str, routing: dict | str | None) -> ProductionPlanRow:
        if isinstance(routing, dict):
            routing = json.dumps(routing)
        with Session(engine) as session:
            row = ProductionPlanRow(
                plan_id=plan_id, product_code="CBL-3X2.5", machine_schedule=routing
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return row

    return _seed


@pytest.fixture
def cable_routing():
    """Bunching then extrusion: 4.0h and 3.0h including setup and cleanup."""
    return {
        "bunching": {"machine": "BM-001", "sequence": 1, "estimatedTime": 2.5},
        "extruder": [{"machine": "EXT-001", "sequence": 2, "estimatedTime": 1.5}],
    }
