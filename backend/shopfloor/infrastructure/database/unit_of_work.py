"""
Unit of Work for scheduling transactions.

A schedule generation run reads the plan and the committed busy intervals, deletes
the plan's previous entries when regenerating, and writes the new entries. All of
it happens inside one session so a failure leaves the store untouched.
"""

from collections.abc import Callable
from datetime import timezone, tzinfo

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .repositories.base import DatabaseError
from .repositories.plan_repository import SqlPlanRepository
from .repositories.schedule_repository import SqlScheduleRepository


class SqlModelUnitOfWork:
    """
    SQLModel-based implementation of the Unit of Work pattern.

    Commits on a clean exit from the ``with`` block and rolls back when the block
    raises.
    """

    plans: SqlPlanRepository
    schedules: SqlScheduleRepository

    def __init__(
        self,
        session_factory: Callable[[], Session],
        naive_tz: tzinfo | None = timezone.utc,
    ):
        """
        Initialize the unit of work.

        Args:
            session_factory: Callable returning a new session
            naive_tz: Zone assumed for stored timestamps without an offset
        """
        self._session_factory = session_factory
        self._naive_tz = naive_tz
        self._session: Session | None = None

    def __enter__(self) -> "SqlModelUnitOfWork":
        self._session = self._session_factory()
        self.plans = SqlPlanRepository(self._session)
        self.schedules = SqlScheduleRepository(self._session, naive_tz=self._naive_tz)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is not None:
                self.rollback()
            else:
                try:
                    self.commit()
                except Exception:
                    self.rollback()
                    raise
        finally:
            if self._session:
                self._session.close()
                self._session = None

    def commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            DatabaseError: If commit fails
        """
        if not self._session:
            raise DatabaseError("No active session to commit")

        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            raise DatabaseError(f"Failed to commit transaction: {str(e)}") from e

    def rollback(self) -> None:
        if not self._session:
            raise DatabaseError("No active session to rollback")

        try:
            self._session.rollback()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to rollback transaction: {str(e)}") from e

    @property
    def session(self) -> Session:
        if not self._session:
            raise DatabaseError("No active database session")
        return self._session
