# app/services/desired_events_service.py
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.catalog_event import CatalogEvent
from app.models.desired_event import DesiredEvent
from app.services.capacity_service import count_signups, is_at_capacity
from app.services.commitment_sources import Commitment, SourceKind
from app.services.conflict_service import find_conflicts
from app.services.errors import (
    AlreadyRegistered,
    EventNotFound,
    NotFound,
    storage_errors,
)
from app.services.persistence import commit, commit_user_event
from app.services.time_window import TimeWindow

logger = logging.getLogger(__name__)


@dataclass
class AddDesiredEventResult:
    desired_event: DesiredEvent
    conflicts: List[Commitment] = field(default_factory=list)
    capacity_warning: bool = False


def _find_desired_event(db: Session, user_id: str, event_id: str) -> Optional[DesiredEvent]:
    with storage_errors("Loading desired event"):
        return (
            db.query(DesiredEvent)
            .filter_by(user_id=user_id, event_id=event_id)
            .first()
        )


def _conflicts_for_event(db: Session, user_id: str, event: CatalogEvent) -> List[Commitment]:
    window = TimeWindow.from_raw(event.start_date_time, event.end_date_time)
    if not window.is_valid:
        # Catalog rows without usable times can't be placed on a timeline
        logger.warning(
            "Event %s has no usable time window (%r - %r); skipping conflict check",
            event.id,
            event.start_date_time,
            event.end_date_time,
        )
        return []

    result = find_conflicts(db, user_id, window)

    # The same catalog event held through another source (tracked, bought)
    # is not a conflict with itself.
    return [
        c
        for c in result.conflicts
        if c.source_kind == SourceKind.PERSONAL or c.id != event.id
    ]


def add_desired_event(db: Session, user_id: str, event_id: str) -> AddDesiredEventResult:
    """
    Add a catalog event to the user's wishlist.

    Steps:
      1. reject a duplicate (user, event) pair with AlreadyRegistered
      2. resolve the event, EventNotFound if it does not exist
      3. collect time conflicts across all of the user's commitments
      4. compute the capacity warning from the signup count *before* this add
      5. persist, whatever 3 and 4 found

    Conflicts and the capacity warning are advisory only.
    """
    if _find_desired_event(db, user_id, event_id) is not None:
        raise AlreadyRegistered("User is already registered for this event")

    with storage_errors("Loading event"):
        event = db.query(CatalogEvent).filter_by(id=event_id).first()
    if event is None:
        raise EventNotFound("Event not found")

    conflicts = _conflicts_for_event(db, user_id, event)
    capacity_warning = is_at_capacity(event.tickets_available, count_signups(db, event.id))

    desired_event = DesiredEvent(user_id=user_id, event_id=event.id)
    db.add(desired_event)
    # A concurrent add of the same pair surfaces here as AlreadyRegistered
    commit_user_event(
        db,
        DesiredEvent,
        user_id,
        event.id,
        "Saving desired event",
        "User is already registered for this event",
    )

    with storage_errors("Saving desired event"):
        db.refresh(desired_event)

    logger.info(
        "User %s added event %s (conflicts=%d, capacity_warning=%s)",
        user_id,
        event.id,
        len(conflicts),
        capacity_warning,
    )

    return AddDesiredEventResult(
        desired_event=desired_event,
        conflicts=conflicts,
        capacity_warning=capacity_warning,
    )


def remove_desired_event(db: Session, user_id: str, event_id: str) -> None:
    desired_event = _find_desired_event(db, user_id, event_id)
    if desired_event is None:
        raise NotFound("User event not found")

    with storage_errors("Removing desired event"):
        db.delete(desired_event)
    commit(db, "Removing desired event")

    logger.info("User %s removed event %s", user_id, event_id)


def get_user_desired_events(
    db: Session,
    user_id: str,
    include_canceled: Optional[bool] = None,
) -> List[DesiredEvent]:
    """
    The user's wishlist.

    include_canceled: None returns everything, True only canceled events,
    False only events that are still running.
    """
    query = (
        db.query(DesiredEvent)
        .join(CatalogEvent, DesiredEvent.event_id == CatalogEvent.id)
        .filter(DesiredEvent.user_id == user_id)
    )
    if include_canceled is not None:
        query = query.filter(CatalogEvent.is_canceled.is_(include_canceled))

    with storage_errors("Loading desired events"):
        return query.order_by(DesiredEvent.created_at.asc(), DesiredEvent.id.asc()).all()


def get_user_canceled_events(db: Session, user_id: str) -> List[CatalogEvent]:
    """Wishlisted events that have since been canceled (for the alert banner)."""
    return [de.event for de in get_user_desired_events(db, user_id, include_canceled=True)]


def user_has_desired_event(db: Session, user_id: str, event_id: str) -> bool:
    return _find_desired_event(db, user_id, event_id) is not None


def get_event_desired_count(db: Session, event_id: str) -> int:
    return count_signups(db, event_id)
