"""Production plan repository backed by the ``production_plans`` table."""

from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from shopfloor.domain.scheduling.entities.operation import Operation
from shopfloor.domain.scheduling.repositories.schedule_repository import PlanRepository
from shopfloor.domain.scheduling.services.plan_routing import expand_plan_routing
from shopfloor.domain.shared.exceptions import PlanNotFoundError
from shopfloor.infrastructure.database.models import ProductionPlanRow

from .base import BaseRepository, DatabaseError


class SqlPlanRepository(BaseRepository, PlanRepository):
    def get_plan(self, plan_id: str) -> ProductionPlanRow | None:
        try:
            statement = select(ProductionPlanRow).where(
                ProductionPlanRow.plan_id == plan_id
            )
            return self.session.exec(statement).first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error loading plan {plan_id}: {str(e)}") from e

    def get_operations(
        self, plan_id: str, declared_start: datetime | None = None
    ) -> list[Operation]:
        plan = self.get_plan(plan_id)
        if plan is None:
            raise PlanNotFoundError(plan_id)
        return expand_plan_routing(
            plan_id,
            plan.machine_schedule,
            declared_start,
            product_code=plan.product_code,
            priority=plan.priority or "Medium",
        )

    def save_plan(self, plan: ProductionPlanRow) -> ProductionPlanRow:
        try:
            self.session.add(plan)
            self.session.flush()
            return plan
        except SQLAlchemyError as e:
            raise DatabaseError(f"Error saving plan {plan.plan_id}: {str(e)}") from e
