# app/services/commitment_sources.py
"""
Adapters that turn each kind of schedule record into a Commitment.

Every source answers one question: "what is this user committed to?".
Personal events, desired events, tracked events and purchased tickets live
in different tables with different keys; the adapters hide that so the
conflict check only ever sees Commitment objects.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from app.models.catalog_event import CatalogEvent
from app.models.desired_event import DesiredEvent
from app.models.personal_event import PersonalEvent, PersonalEventAttendee
from app.models.purchased_event import PurchasedEvent
from app.models.tracked_event import TrackedEvent
from app.services.time_window import TimeWindow
from app.services.user_service import resolve_display_name

logger = logging.getLogger(__name__)


class SourceKind(str, Enum):
    PERSONAL = "personal"
    DESIRED = "desired"
    TRACKED = "tracked"
    PURCHASED = "purchased"


SOURCE_LABELS = {
    SourceKind.DESIRED: "Added from event browser",
    SourceKind.TRACKED: "Tracked from event browser",
    SourceKind.PURCHASED: "Purchased ticket",
}


def source_label_for(kind: SourceKind, creator_name: Optional[str] = None) -> str:
    if kind == SourceKind.PERSONAL:
        return f"Created by {creator_name}" if creator_name else "Personal event"
    return SOURCE_LABELS[kind]


@dataclass(frozen=True)
class Commitment:
    id: str
    owner_user_id: str
    title: str
    window: TimeWindow
    source_kind: SourceKind
    source_label: str


class CommitmentSource:
    """
    Base adapter: load a user's rows, normalize each into a Commitment.

    A row that cannot be normalized is logged and skipped. Storage errors
    from `rows` are not caught here; callers decide how to surface them.
    """

    kind: SourceKind

    def rows(self, db: Session, user_id: str) -> Iterable[Any]:
        raise NotImplementedError

    def normalize(self, row: Any, user_id: str) -> Commitment:
        raise NotImplementedError

    def fetch(self, db: Session, user_id: str) -> List[Commitment]:
        commitments: List[Commitment] = []
        for row in self.rows(db, user_id):
            try:
                commitments.append(self.normalize(row, user_id))
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(
                    "Skipping unreadable %s record for user %s: %s",
                    self.kind.value,
                    user_id,
                    e,
                )
        return commitments


def _catalog_commitment(event: CatalogEvent, user_id: str, kind: SourceKind) -> Commitment:
    return Commitment(
        id=event.id,
        owner_user_id=user_id,
        title=event.title,
        window=TimeWindow.from_raw(event.start_date_time, event.end_date_time),
        source_kind=kind,
        source_label=source_label_for(kind),
    )


class PersonalEventSource(CommitmentSource):
    kind = SourceKind.PERSONAL

    def rows(self, db: Session, user_id: str) -> Iterable[PersonalEvent]:
        attending = select(PersonalEventAttendee.personal_event_id).where(
            PersonalEventAttendee.user_id == user_id
        )
        return (
            db.query(PersonalEvent)
            .options(joinedload(PersonalEvent.creator))
            .filter(
                or_(
                    PersonalEvent.created_by == user_id,
                    PersonalEvent.id.in_(attending),
                )
            )
            .order_by(PersonalEvent.start_time.asc(), PersonalEvent.id.asc())
            .all()
        )

    def normalize(self, row: PersonalEvent, user_id: str) -> Commitment:
        creator_name = row.creator.full_name if row.creator is not None else None
        return Commitment(
            id=row.id,
            owner_user_id=user_id,
            title=row.title,
            window=TimeWindow.from_raw(row.start_time, row.end_time),
            source_kind=self.kind,
            source_label=source_label_for(self.kind, creator_name),
        )


class DesiredEventSource(CommitmentSource):
    kind = SourceKind.DESIRED

    def rows(self, db: Session, user_id: str) -> Iterable[CatalogEvent]:
        return (
            db.query(CatalogEvent)
            .join(DesiredEvent, DesiredEvent.event_id == CatalogEvent.id)
            .filter(
                DesiredEvent.user_id == user_id,
                CatalogEvent.is_canceled.is_(False),
            )
            .order_by(DesiredEvent.created_at.asc(), DesiredEvent.id.asc())
            .all()
        )

    def normalize(self, row: CatalogEvent, user_id: str) -> Commitment:
        return _catalog_commitment(row, user_id, self.kind)


class TrackedEventSource(CommitmentSource):
    kind = SourceKind.TRACKED

    def rows(self, db: Session, user_id: str) -> Iterable[CatalogEvent]:
        return (
            db.query(CatalogEvent)
            .join(TrackedEvent, TrackedEvent.event_id == CatalogEvent.id)
            .filter(
                TrackedEvent.user_id == user_id,
                CatalogEvent.is_canceled.is_(False),
            )
            .order_by(TrackedEvent.created_at.asc(), TrackedEvent.id.asc())
            .all()
        )

    def normalize(self, row: CatalogEvent, user_id: str) -> Commitment:
        return _catalog_commitment(row, user_id, self.kind)


class PurchasedEventSource(CommitmentSource):
    """
    Purchased tickets, matched to the user by display name.

    Two steps:
      1. resolve the user's display name (see user_service)
      2. match purchases whose recipient equals it, case-insensitively,
         and drop any purchase that has a refund on record
    """

    kind = SourceKind.PURCHASED

    def rows(self, db: Session, user_id: str) -> Iterable[CatalogEvent]:
        recipient = resolve_display_name(db, user_id)
        if not recipient:
            logger.debug("No display name for user %s; skipping purchases", user_id)
            return []

        logger.debug("Matching purchases for user %s by recipient %r", user_id, recipient)
        return (
            db.query(CatalogEvent)
            .join(PurchasedEvent, PurchasedEvent.event_id == CatalogEvent.id)
            .filter(
                func.lower(PurchasedEvent.recipient) == recipient.lower(),
                ~PurchasedEvent.refunds.any(),
                CatalogEvent.is_canceled.is_(False),
            )
            .order_by(PurchasedEvent.purchase_date.asc(), PurchasedEvent.id.asc())
            .all()
        )

    def normalize(self, row: CatalogEvent, user_id: str) -> Commitment:
        return _catalog_commitment(row, user_id, self.kind)


# Order here is the order conflicts are reported in
DEFAULT_SOURCES: Tuple[CommitmentSource, ...] = (
    PersonalEventSource(),
    DesiredEventSource(),
    TrackedEventSource(),
    PurchasedEventSource(),
)
