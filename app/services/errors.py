# app/services/errors.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError


class ScheduleError(Exception):
    """Base exception for schedule operations."""

    pass


class InvalidWindow(ScheduleError):
    """Raised when a time window does not start strictly before it ends."""

    pass


class AlreadyRegistered(ScheduleError):
    """Raised when the user already holds this commitment."""

    pass


class EventNotFound(ScheduleError):
    """Raised when a catalog event id does not resolve."""

    pass


class NotFound(ScheduleError):
    """Raised when the commitment to change or remove does not exist."""

    pass


class StorageUnavailable(ScheduleError):
    """Raised when the database cannot be read or written."""

    pass


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Re-raise any SQLAlchemy failure inside the block as StorageUnavailable.

    The SQLAlchemy exception is kept as __cause__.
    """
    try:
        yield
    except SQLAlchemyError as e:
        raise StorageUnavailable(f"{operation} failed: {e.__class__.__name__}") from e
