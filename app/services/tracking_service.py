# app/services/tracking_service.py
import logging
from typing import List

from sqlalchemy.orm import Session

from app.models.catalog_event import CatalogEvent
from app.models.tracked_event import TrackedEvent
from app.services.errors import (
    AlreadyRegistered,
    EventNotFound,
    NotFound,
    storage_errors,
)
from app.services.persistence import commit, commit_user_event

logger = logging.getLogger(__name__)


def track_event(db: Session, user_id: str, event_id: str) -> TrackedEvent:
    """
    Start tracking a catalog event for the user.

    Tracked events count as commitments in conflict checks.
    """
    with storage_errors("Loading event"):
        event = db.query(CatalogEvent).filter_by(id=event_id).first()
    if event is None:
        raise EventNotFound("Event not found")

    with storage_errors("Loading tracked event"):
        existing = db.query(TrackedEvent).filter_by(user_id=user_id, event_id=event_id).first()
    if existing is not None:
        raise AlreadyRegistered("User already tracking this event")

    tracked = TrackedEvent(user_id=user_id, event_id=event_id)
    db.add(tracked)
    commit_user_event(
        db,
        TrackedEvent,
        user_id,
        event_id,
        "Saving tracked event",
        "User already tracking this event",
    )

    with storage_errors("Saving tracked event"):
        db.refresh(tracked)

    logger.info("User %s is now tracking event %s", user_id, event_id)
    return tracked


def untrack_event(db: Session, user_id: str, event_id: str) -> None:
    with storage_errors("Loading tracked event"):
        tracked = db.query(TrackedEvent).filter_by(user_id=user_id, event_id=event_id).first()
    if tracked is None:
        raise NotFound("User is not tracking this event")

    with storage_errors("Removing tracked event"):
        db.delete(tracked)
    commit(db, "Removing tracked event")

    logger.info("User %s stopped tracking event %s", user_id, event_id)


def list_tracked_events(db: Session, user_id: str) -> List[CatalogEvent]:
    # start_date_time is feed text; ISO strings sort chronologically
    with storage_errors("Loading tracked events"):
        return (
            db.query(CatalogEvent)
            .join(TrackedEvent, TrackedEvent.event_id == CatalogEvent.id)
            .filter(TrackedEvent.user_id == user_id)
            .order_by(CatalogEvent.start_date_time.asc(), CatalogEvent.id.asc())
            .all()
        )
