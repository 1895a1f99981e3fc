"""
Integration tests for ScheduleGenerationService.

Uses the in-memory database, a JSON window preference in a temp directory and a
fixed clock, so every run is reproducible.
"""

from datetime import date, datetime, timezone

import pytest
from sqlmodel import Session, select

from shopfloor.domain.scheduling.services.schedule_assigner import AssignmentMode
from shopfloor.domain.shared.exceptions import (
    MachineNotFoundError,
    PlanNotFoundError,
    ScheduleAlreadyExistsError,
    ScheduleConfigurationError,
)
from shopfloor.infrastructure.database.models import MachineScheduleRow, ProductionPlanRow
from shopfloor.infrastructure.preferences.window_preferences import WindowPreference


def at(day, hour, minute=0):
    return datetime(2024, 3, day, hour, minute, tzinfo=timezone.utc)


def spans(outcome):
    return [
        (op.machine_id, op.assigned_start, op.assigned_end)
        for op in outcome.result.operations
    ]


class TestGenerate:
    """Test schedule generation and persistence."""

    def test_generates_and_stores_rows(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        uow_factory,
    ):
        seed_plan("P-1", cable_routing)

        outcome = schedule_service.generate("P-1")

        assert outcome.persisted
        assert spans(outcome) == [
            ("BM-001", at(4, 6, 30), at(4, 10, 30)),
            ("EXT-001", at(4, 10, 30), at(4, 13, 30)),
        ]
        with uow_factory() as uow:
            stored = uow.schedules.list_for_plan("P-1")
        assert [op.declared_start for op in stored] == [at(4, 6, 30), at(4, 10, 30)]

    def test_second_plan_waits_for_committed_rows(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
    ):
        seed_plan("P-1", cable_routing)
        seed_plan("P-2", cable_routing)
        schedule_service.generate("P-1")

        outcome = schedule_service.generate("P-2")

        assert spans(outcome) == [
            ("BM-001", at(4, 10, 30), at(4, 14, 30)),
            ("EXT-001", at(4, 14, 30), at(4, 17, 30)),
        ]

    def test_existing_schedule_requires_regenerate(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
    ):
        seed_plan("P-1", cable_routing)
        schedule_service.generate("P-1")

        with pytest.raises(ScheduleAlreadyExistsError) as exc_info:
            schedule_service.generate("P-1")

        assert exc_info.value.existing_count == 2

    def test_regenerate_replaces_own_rows(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        uow_factory,
    ):
        seed_plan("P-1", cable_routing)
        first = schedule_service.generate("P-1")

        second = schedule_service.generate("P-1", regenerate=True)

        assert second.replaced_count == 2
        assert spans(second) == spans(first)
        with uow_factory() as uow:
            assert uow.schedules.count_for_plan("P-1") == 2

    def test_created_date_from_clock(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        session,
    ):
        seed_plan("P-1", cable_routing)
        schedule_service.generate("P-1")

        rows = session.exec(select(MachineScheduleRow)).all()
        assert {row.created_date for row in rows} == {date(2024, 3, 4)}

    def test_unknown_plan(self, schedule_service):
        with pytest.raises(PlanNotFoundError):
            schedule_service.generate("P-404")

    def test_unknown_machine_writes_nothing(
        self,
        schedule_service,
        seed_plan,
        uow_factory,
    ):
        seed_plan("P-1", {"bunching": {"machine": "BM-777", "sequence": 1, "estimatedTime": 1}})

        with pytest.raises(MachineNotFoundError):
            schedule_service.generate("P-1")

        with uow_factory() as uow:
            assert uow.schedules.count_for_plan("P-1") == 0

    def test_failed_regenerate_keeps_previous_rows(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        engine,
        uow_factory,
    ):
        seed_plan("P-1", cable_routing)
        schedule_service.generate("P-1")
        with Session(engine) as session:
            plan = session.exec(
                select(ProductionPlanRow).where(ProductionPlanRow.plan_id == "P-1")
            ).one()
            plan.machine_schedule = '{"bunching": {"machine": "BM-001", "estimatedTime": 30}}'
            session.add(plan)
            session.commit()

        with pytest.raises(ScheduleConfigurationError):
            schedule_service.generate("P-1", regenerate=True)

        with uow_factory() as uow:
            assert uow.schedules.count_for_plan("P-1") == 2

    def test_rows_carry_plan_product_and_priority(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        session,
    ):
        seed_plan("P-1", cable_routing)

        outcome = schedule_service.generate("P-1")

        assert {op.product_code for op in outcome.result.operations} == {"CBL-3X2.5"}
        rows = session.exec(select(MachineScheduleRow)).all()
        assert {row.product_code for row in rows} == {"CBL-3X2.5"}
        assert {row.priority for row in rows} == {"Medium"}
        assert {row.notes for row in rows} == {"Auto-generated from plan P-1 using slot"}

    def test_rows_finished_before_slot_ignored(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        engine,
    ):
        with Session(engine) as session:
            session.add(
                MachineScheduleRow(
                    schedule_id="OLD-1",
                    plan_id="P-0",
                    machine_id="BM-001",
                    scheduled_start_time="2024-03-01T06:30:00+00:00",
                    scheduled_end_time="2024-03-04T06:00:00+00:00",
                )
            )
            session.commit()
        seed_plan("P-1", cable_routing)

        outcome = schedule_service.generate("P-1")

        assert spans(outcome)[0] == ("BM-001", at(4, 6, 30), at(4, 10, 30))

    def test_empty_plan_returns_empty_result(self, schedule_service, seed_plan):
        seed_plan("P-1", None)

        outcome = schedule_service.generate("P-1")

        assert outcome.result.is_empty
        assert not outcome.persisted

    def test_naive_preference_start_uses_service_zone(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        preference_store,
    ):
        preference_store.save(WindowPreference(start=datetime(2024, 3, 5, 9, 0), duration_hours=12))
        seed_plan("P-1", cable_routing)

        outcome = schedule_service.generate("P-1")

        assert outcome.result.operations[0].assigned_start == at(5, 9)


class TestPreview:
    """Test print preview chaining."""

    def test_preview_from_routing_persists_nothing(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
        uow_factory,
    ):
        seed_plan("P-1", cable_routing)

        outcome = schedule_service.preview("P-1")

        assert outcome.result.mode is AssignmentMode.SIMPLIFIED
        assert not outcome.persisted
        assert spans(outcome)[0] == ("BM-001", at(4, 6, 30), at(4, 10, 30))
        with uow_factory() as uow:
            assert uow.schedules.count_for_plan("P-1") == 0

    def test_preview_ignores_other_plans(
        self,
        schedule_service,
        seed_plan,
        cable_routing,
    ):
        seed_plan("P-1", cable_routing)
        seed_plan("P-2", cable_routing)
        schedule_service.generate("P-1")

        outcome = schedule_service.preview("P-2")

        assert spans(outcome)[0] == ("BM-001", at(4, 6, 30), at(4, 10, 30))

    def test_preview_uses_stored_rows(self, schedule_service, seed_plan, cable_routing):
        seed_plan("P-1", cable_routing)
        schedule_service.generate("P-1")

        outcome = schedule_service.preview("P-1")

        assert spans(outcome) == [
            ("BM-001", at(4, 6, 30), at(4, 10, 30)),
            ("EXT-001", at(4, 10, 30), at(4, 13, 30)),
        ]


class TestWindowPreference:
    """Test reading and updating the configured slot."""

    def test_round_trip(self, schedule_service):
        preference = WindowPreference(start=at(6, 7), duration_hours=8)

        schedule_service.save_window_preference(preference)

        assert schedule_service.get_window_preference() == preference
