"""
Base repository implementation.

Provides the session handling and error translation shared by the concrete
SQLModel repositories.
"""

from sqlmodel import Session

from shopfloor.domain.shared.exceptions import DomainError, ErrorType


class DatabaseError(DomainError):
    """Raised when a database operation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorType.REPOSITORY)


class BaseRepository:
    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session
