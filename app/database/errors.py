"""Map SQLAlchemy errors onto retryable / fatal persistence failures."""

from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from app.core.exceptions import PersistenceFailure


def is_retryable(error: SQLAlchemyError) -> bool:
    if isinstance(error, (OperationalError, PoolTimeoutError)):
        return True
    return isinstance(error, DBAPIError) and bool(error.connection_invalidated)


def store_failure(operation: str, error: SQLAlchemyError) -> PersistenceFailure:
    return PersistenceFailure(
        f"{operation} failed: {error.__class__.__name__}: {error}",
        retryable=is_retryable(error),
    )
