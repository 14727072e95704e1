# app/services/schedule_service.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.models.catalog_event import CatalogEvent
from app.models.purchased_event import PurchasedEvent
from app.models.user import User
from app.services.commitment_sources import (
    DEFAULT_SOURCES,
    Commitment,
    CommitmentSource,
    DesiredEventSource,
)
from app.services.errors import storage_errors
from app.services.user_service import display_name_for

logger = logging.getLogger(__name__)


@dataclass
class ScheduleUser:
    id: str
    name: str
    events: List[CatalogEvent] = field(default_factory=list)
    # True for a ticket recipient that no user's display name matches
    purchased_only: bool = False


def _recipient_key(name: str) -> str:
    return name.strip().lower()


def list_commitments(
    db: Session,
    user_id: str,
    sources: Optional[Sequence[CommitmentSource]] = None,
) -> List[Commitment]:
    """
    Everything on the user's schedule, from every source.

    Same ordering as conflict results: grouped by source, then in the
    order each source returns its rows. Entries with unknown times are
    included.
    """
    commitments: List[Commitment] = []
    for source in sources if sources is not None else DEFAULT_SOURCES:
        with storage_errors(f"Loading {source.kind.value} commitments"):
            commitments.extend(source.fetch(db, user_id))
    return commitments


def get_schedule_data(db: Session) -> List[ScheduleUser]:
    """
    Group schedule: one row per user, plus one per unmatched ticket recipient.

    Each user row holds the user's desired events followed by the active
    (not refunded) purchases whose recipient matches the user's display
    name, case-insensitively. Users sharing a display name all get the
    purchase. Purchases whose recipient matches nobody are collected into
    a `purchased-<recipient>` row so they still show up on the grid.
    Canceled events are left out, as in the per-user views.
    """
    desired = DesiredEventSource()

    with storage_errors("Loading schedule"):
        users = db.query(User).order_by(User.created_at.asc(), User.id.asc()).all()

        rows: List[ScheduleUser] = []
        by_name: Dict[str, List[ScheduleUser]] = {}
        for user in users:
            row = ScheduleUser(
                id=user.id,
                name=user.full_name or "Unknown User",
                events=list(desired.rows(db, user.id)),
            )
            rows.append(row)

            display_name = display_name_for(user)
            if display_name:
                by_name.setdefault(_recipient_key(display_name), []).append(row)

        purchases = (
            db.query(PurchasedEvent, CatalogEvent)
            .join(CatalogEvent, PurchasedEvent.event_id == CatalogEvent.id)
            .filter(
                ~PurchasedEvent.refunds.any(),
                CatalogEvent.is_canceled.is_(False),
            )
            .order_by(PurchasedEvent.purchase_date.asc(), PurchasedEvent.id.asc())
            .all()
        )

    unmatched: Dict[str, ScheduleUser] = {}
    for purchase, event in purchases:
        key = _recipient_key(purchase.recipient)
        owners = by_name.get(key)
        if owners:
            for owner in owners:
                owner.events.append(event)
            continue

        ghost = unmatched.get(key)
        if ghost is None:
            ghost = ScheduleUser(
                id=f"purchased-{key}",
                name=purchase.recipient.strip(),
                purchased_only=True,
            )
            unmatched[key] = ghost
        ghost.events.append(event)

    if unmatched:
        logger.debug("%d ticket recipient(s) match no user", len(unmatched))

    return rows + list(unmatched.values())
