# tests/conftest.py
from typing import Iterable, Optional

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session

from app.db.session import engine, SessionLocal
from app.models import (
    Base,
    CatalogEvent,
    DesiredEvent,
    PersonalEvent,
    PersonalEventAttendee,
    PurchasedEvent,
    RefundedEvent,
    TrackedEvent,
    User,
)
from app.services.time_window import parse_instant, to_naive_utc


def _clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


class Seeder:
    """Creates committed rows for a test."""

    def __init__(self, db: Session):
        self.db = db
        self._users = 0

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def user(
        self,
        first_name: str = "Test",
        last_name: Optional[str] = None,
        badge_name: Optional[str] = None,
    ) -> User:
        self._users += 1
        return self._save(
            User(
                first_name=first_name,
                last_name=last_name or f"User{self._users}",
                email=f"user{self._users}@example.com",
                badge_name=badge_name,
            )
        )

    def event(
        self,
        event_id: str,
        start: Optional[str],
        end: Optional[str],
        title: Optional[str] = None,
        tickets_available: Optional[int] = None,
        is_canceled: bool = False,
    ) -> CatalogEvent:
        return self._save(
            CatalogEvent(
                id=event_id,
                title=title or f"Event {event_id}",
                start_date_time=start,
                end_date_time=end,
                tickets_available=tickets_available,
                is_canceled=is_canceled,
            )
        )

    def desired(self, user: User, event: CatalogEvent) -> DesiredEvent:
        return self._save(DesiredEvent(user_id=user.id, event_id=event.id))

    def tracked(self, user: User, event: CatalogEvent) -> TrackedEvent:
        return self._save(TrackedEvent(user_id=user.id, event_id=event.id))

    def purchase(
        self,
        event: CatalogEvent,
        recipient: str,
        refunded: bool = False,
    ) -> PurchasedEvent:
        purchase = self._save(PurchasedEvent(event_id=event.id, recipient=recipient))
        if refunded:
            self._save(RefundedEvent(user_name=recipient, ticket_id=purchase.id))
        return purchase

    def personal(
        self,
        creator: User,
        start: str,
        end: str,
        title: str = "Dinner",
        attendees: Iterable[User] = (),
    ) -> PersonalEvent:
        event = PersonalEvent(
            title=title,
            start_time=to_naive_utc(parse_instant(start)),
            end_time=to_naive_utc(parse_instant(end)),
            created_by=creator.id,
        )
        event.attendee_links = [PersonalEventAttendee(user_id=u.id) for u in attendees]
        return self._save(event)


@pytest.fixture()
def db():
    _clean_db()
    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def seed(db):
    return Seeder(db)


@pytest.fixture()
def fk_db(db):
    """Session on its own engine with SQLite foreign keys enforced."""
    fk_engine = create_engine(engine.url, connect_args={"check_same_thread": False})

    @event.listens_for(fk_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    session = Session(bind=fk_engine)
    try:
        yield session
    finally:
        session.close()
        fk_engine.dispose()
