"""
Schedule generation application service.

Coordinates one "generate schedule" use case: read the plan routing and the
committed machine intervals, run the assigner, and replace the plan's stored
schedule rows, all inside a single unit of work.
"""

from collections.abc import Callable, Collection
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

import structlog

from shopfloor.domain.scheduling.entities.operation import Operation
from shopfloor.domain.scheduling.services.schedule_assigner import (
    AssignmentMode,
    ScheduleAssigner,
    ScheduleResult,
)
from shopfloor.domain.scheduling.value_objects.daily_window import DailyWindow
from shopfloor.domain.shared.clock import Clock, SystemClock
from shopfloor.domain.shared.exceptions import ScheduleAlreadyExistsError
from shopfloor.infrastructure.database.unit_of_work import SqlModelUnitOfWork
from shopfloor.infrastructure.preferences.window_preferences import (
    JsonWindowPreferenceStore,
    WindowPreference,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    plan_id: str
    result: ScheduleResult
    persisted: bool = False
    replaced_count: int = 0


class ScheduleGenerationService:
    """
    Application service for plan schedule generation.

    Nothing is written unless the whole plan could be placed: validation and
    placement happen before the delete/insert, and the unit of work rolls back
    if anything raises.
    """

    def __init__(
        self,
        uow_factory: Callable[[], SqlModelUnitOfWork],
        window_store: JsonWindowPreferenceStore,
        clock: Clock | None = None,
        machine_registry: Collection[str] | None = None,
        tz: tzinfo = timezone.utc,
    ):
        """
        Initialize the service.

        Args:
            uow_factory: Factory for creating unit of work instances
            window_store: Source of the configured daily window
            clock: Clock used for "now" and creation dates
            machine_registry: Known machine ids, or None to accept any
            tz: Zone assumed for window preferences without an offset
        """
        self._uow_factory = uow_factory
        self._window_store = window_store
        self._clock = clock or SystemClock(tz)
        self._machine_registry = machine_registry
        self._tz = tz

    def get_window_preference(self) -> WindowPreference:
        return self._window_store.load()

    def save_window_preference(self, preference: WindowPreference) -> WindowPreference:
        # builds the window first so an invalid duration is rejected before saving
        preference.to_window()
        return self._window_store.save(preference)

    def generate(
        self,
        plan_id: str,
        regenerate: bool = False,
        mode: AssignmentMode = AssignmentMode.MACHINE_AWARE,
    ) -> GenerationOutcome:
        """
        Generate and store the schedule of a plan.

        Args:
            plan_id: Plan to schedule
            regenerate: Replace existing schedule rows instead of refusing
            mode: Assignment mode

        Returns:
            GenerationOutcome with the scheduled operations

        Raises:
            PlanNotFoundError: If the plan does not exist
            RoutingParseError: If the plan routing is malformed
            ScheduleAlreadyExistsError: If rows exist and regenerate is False
            ScheduleConfigurationError: If an operation can never be scheduled
            MachineNotFoundError: If an operation references an unknown machine
            DatabaseError: If the store fails
        """
        window, declared_start = self._window_and_start()
        assigner = ScheduleAssigner(window, self._clock, mode, self._machine_registry)

        with self._uow_factory() as uow:
            operations = uow.plans.get_operations(plan_id, declared_start)
            if not operations:
                logger.warning("plan_has_no_operations", plan_id=plan_id)
                return GenerationOutcome(plan_id, assigner.assign([]))

            existing = uow.schedules.count_for_plan(plan_id)
            if existing and not regenerate:
                raise ScheduleAlreadyExistsError(plan_id, existing)

            machine_ids = sorted({op.machine_id for op in operations if op.machine_id})
            intervals = uow.schedules.load_busy_intervals(
                machine_ids,
                since=declared_start,
                exclude_plan_id=plan_id if regenerate else None,
            )
            result = assigner.assign(operations, intervals)

            replaced = uow.schedules.delete_for_plan(plan_id) if existing else 0
            uow.schedules.add_scheduled(
                result.operations, created_on=self._clock.now().date()
            )

        logger.info(
            "schedule_generated",
            plan_id=plan_id,
            mode=mode.value,
            window=str(window),
            operations=len(result.operations),
            busy_intervals=len(intervals),
            replaced=replaced,
            completion=result.completion_time.isoformat(),
        )
        return GenerationOutcome(
            plan_id, result, persisted=True, replaced_count=replaced
        )

    def preview(self, plan_id: str) -> GenerationOutcome:
        """
        Chain a plan's operations without consulting other plans.

        Uses the stored schedule rows when the plan has any, otherwise the plan
        routing. Nothing is persisted.
        """
        window, declared_start = self._window_and_start()
        assigner = ScheduleAssigner(
            window, self._clock, AssignmentMode.SIMPLIFIED, self._machine_registry
        )

        with self._uow_factory() as uow:
            operations: list[Operation] = uow.schedules.list_for_plan(plan_id)
            if not operations:
                operations = uow.plans.get_operations(plan_id, declared_start)

        result = assigner.assign(operations)
        logger.debug("schedule_previewed", plan_id=plan_id, operations=len(operations))
        return GenerationOutcome(plan_id, result)

    def _window_and_start(self) -> tuple[DailyWindow, datetime]:
        preference = self._window_store.load()
        start = preference.start
        if start.tzinfo is None:
            start = start.replace(tzinfo=self._tz)
        return preference.to_window(), start
