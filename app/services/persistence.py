# app/services/persistence.py
from typing import Type

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.catalog_event import CatalogEvent
from app.models.user import User
from app.services.errors import (
    AlreadyRegistered,
    EventNotFound,
    NotFound,
    StorageUnavailable,
    storage_errors,
)


def commit(db: Session, operation: str) -> None:
    """Commit, rolling back and raising StorageUnavailable on failure."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageUnavailable(f"{operation} failed") from e


def commit_user_event(
    db: Session,
    model: Type,
    user_id: str,
    event_id: str,
    operation: str,
    already_message: str,
) -> None:
    """
    Commit a new (user, event) row of `model`.

    An IntegrityError is only reported as AlreadyRegistered when the pair
    is actually on record after the rollback, i.e. a concurrent add won.
    A missing user or event (foreign key failure) is reported as NotFound /
    EventNotFound; anything else as StorageUnavailable.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        with storage_errors(operation):
            pair = db.query(model).filter_by(user_id=user_id, event_id=event_id).first()
            user = db.query(User).filter_by(id=user_id).first()
            event = db.query(CatalogEvent).filter_by(id=event_id).first()

        if pair is not None:
            raise AlreadyRegistered(already_message) from e
        if user is None:
            raise NotFound("User not found") from e
        if event is None:
            raise EventNotFound("Event not found") from e
        raise StorageUnavailable(f"{operation} failed") from e
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageUnavailable(f"{operation} failed") from e
