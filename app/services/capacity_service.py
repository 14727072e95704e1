# app/services/capacity_service.py
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from app.models.catalog_event import CatalogEvent
from app.models.desired_event import DesiredEvent
from app.services.errors import EventNotFound, storage_errors


@dataclass
class EventCapacity:
    event_id: str
    tickets_available: Optional[int]
    current_signup_count: int

    @property
    def at_capacity(self) -> bool:
        return is_at_capacity(self.tickets_available, self.current_signup_count)


def is_at_capacity(tickets_available: Optional[int], current_signup_count: int) -> bool:
    """
    True once signups have reached the advertised ticket count.

    None means unlimited. The count is the one *before* any pending signup,
    so the signup that takes the last seat is not itself flagged.
    """
    if tickets_available is None:
        return False
    return current_signup_count >= tickets_available


def count_signups(db: Session, event_id: str) -> int:
    with storage_errors("Counting signups"):
        return db.query(DesiredEvent).filter(DesiredEvent.event_id == event_id).count()


def get_event_capacity(db: Session, event_id: str) -> EventCapacity:
    with storage_errors("Loading event"):
        event = db.query(CatalogEvent).filter_by(id=event_id).first()
    if event is None:
        raise EventNotFound("Event not found")

    return EventCapacity(
        event_id=event.id,
        tickets_available=event.tickets_available,
        current_signup_count=count_signups(db, event.id),
    )
