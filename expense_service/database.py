"""Database connection and session management."""
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from expense_service.config import settings
from expense_service import metrics
from expense_service.logging import get_logger

logger = get_logger(__name__)


def _engine_options(url: str) -> dict:
    """Engine keyword arguments for the configured backend."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}  # Enable connection health checks


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


class StorageError(Exception):
    """Raised when a query or mutation against the database fails."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage error during {operation}: {detail}")


def connect() -> bool:
    """
    Verify the database connection and create missing tables.

    A failure is logged and reported, never raised: the service keeps
    running and every request will surface the outage as a 500.
    """
    from expense_service import models  # noqa: F401  # Register tables with metadata

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error("database_connection_failed", error=str(e))
        return False

    logger.info("database_connected", url=engine.url.render_as_string(hide_password=True))
    return True


def disconnect() -> None:
    """Release every pooled connection held by the engine."""
    engine.dispose()
    logger.info("database_disconnected")


def get_db():
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def storage_operation(db: Session, operation: str):
    """
    Wrap a single query or mutation.

    Any SQLAlchemy error rolls the session back and is re-raised as
    StorageError tagged with the operation name.
    """
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        metrics.record_storage_error(operation)
        raise StorageError(operation, str(e)) from e
