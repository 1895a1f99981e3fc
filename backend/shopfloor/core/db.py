from collections.abc import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import Settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across sessions."""
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def init_db(engine: Engine) -> None:
    # make sure the table models are imported before creating the schema
    from shopfloor.infrastructure.database import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def session_factory(engine: Engine) -> Callable[[], Session]:
    def _factory() -> Session:
        return Session(engine)

    return _factory


def engine_from_settings(settings: Settings) -> Engine:
    return build_engine(settings.DATABASE_URL, echo=settings.LOG_SQL)
