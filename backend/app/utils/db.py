"""Database query utility functions."""
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional, TypeVar, Type, Any
from uuid import UUID
from sqlalchemy.orm import Session

T = TypeVar("T")


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def parse_uuid(value: str | UUID) -> Optional[UUID]:
    """Parse a UUID, returning None for malformed input."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a block of writes as one unit: commit on success, roll back on error.

    Args:
        db: Database session

    Yields:
        The same session
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def get_by_id(
    db: Session,
    model: Type[T],
    id_value: Any,
    id_field: str = "id",
) -> Optional[T]:
    """
    Get a model instance by its primary key.

    Args:
        db: Database session
        model: SQLAlchemy model class
        id_value: Key value (UUID strings are parsed for UUID keys)
        id_field: Name of the key column

    Returns:
        Model instance, or None if absent or the key is malformed
    """
    field = getattr(model, id_field)
    if isinstance(id_value, str) and _is_uuid_column(field):
        id_value = parse_uuid(id_value)
        if id_value is None:
            return None
    return db.query(model).filter(field == id_value).first()


def _is_uuid_column(field) -> bool:
    try:
        return field.type.python_type is UUID
    except NotImplementedError:
        return False
