# app/services/personal_event_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from app.models.personal_event import PersonalEvent, PersonalEventAttendee
from app.services.commitment_sources import Commitment, SourceKind
from app.services.conflict_service import (
    ConflictExclusion,
    find_conflicts,
    validate_window,
)
from app.services.errors import NotFound, storage_errors
from app.services.persistence import commit
from app.services.time_window import TimeWindow, to_naive_utc
from app.services.user_service import get_user

logger = logging.getLogger(__name__)


@dataclass
class UserConflicts:
    user_id: str
    user_name: str
    conflicts: List[Commitment] = field(default_factory=list)


@dataclass
class PersonalEventResult:
    personal_event: PersonalEvent
    conflicts: List[UserConflicts] = field(default_factory=list)


def _unique_attendees(created_by: str, attendees: Iterable[str]) -> List[str]:
    seen = {created_by}
    result: List[str] = []
    for user_id in attendees:
        if user_id and user_id not in seen:
            seen.add(user_id)
            result.append(user_id)
    return result


def check_attendee_conflicts(
    db: Session,
    window: TimeWindow,
    attendees: Iterable[str],
    exclude_event_id: Optional[str] = None,
) -> List[UserConflicts]:
    """
    Run the conflict check for each user in `attendees`.

    Only users with at least one conflict are returned, in input order.
    `exclude_event_id` is a personal event id left out of every check.
    """
    exclude = (
        ConflictExclusion(id=exclude_event_id, source_kind=SourceKind.PERSONAL)
        if exclude_event_id
        else None
    )

    report: List[UserConflicts] = []
    for user_id in dict.fromkeys(attendees):
        result = find_conflicts(db, user_id, window, exclude=exclude)
        if not result.has_conflicts:
            continue

        with storage_errors("Loading user"):
            user = get_user(db, user_id)
        report.append(
            UserConflicts(
                user_id=user_id,
                user_name=user.full_name if user else "Unknown User",
                conflicts=result.conflicts,
            )
        )
    return report


def get_personal_event(db: Session, personal_event_id: str) -> PersonalEvent:
    with storage_errors("Loading personal event"):
        event = (
            db.query(PersonalEvent)
            .options(selectinload(PersonalEvent.attendee_links))
            .filter_by(id=personal_event_id)
            .first()
        )
    if event is None:
        raise NotFound("Personal event not found")
    return event


def list_personal_events(db: Session, user_id: str) -> List[PersonalEvent]:
    """Personal events the user created or was invited to, earliest first."""
    attending = select(PersonalEventAttendee.personal_event_id).where(
        PersonalEventAttendee.user_id == user_id
    )
    with storage_errors("Loading personal events"):
        return (
            db.query(PersonalEvent)
            .options(selectinload(PersonalEvent.attendee_links))
            .filter(
                or_(
                    PersonalEvent.created_by == user_id,
                    PersonalEvent.id.in_(attending),
                )
            )
            .order_by(PersonalEvent.start_time.asc(), PersonalEvent.id.asc())
            .all()
        )


def create_personal_event(
    db: Session,
    *,
    title: str,
    start_time: Any,
    end_time: Any,
    created_by: str,
    attendees: Iterable[str] = (),
    location: Optional[str] = None,
) -> PersonalEventResult:
    """
    Create a personal event and report conflicts for everyone involved.

    The creator and every attendee are checked. The event is saved even
    when conflicts are found. Raises InvalidWindow if start >= end.
    """
    window = validate_window(start_time, end_time)
    attendee_ids = _unique_attendees(created_by, attendees)

    conflicts = check_attendee_conflicts(db, window, [created_by, *attendee_ids])

    event = PersonalEvent(
        title=title,
        start_time=to_naive_utc(window.start),
        end_time=to_naive_utc(window.end),
        location=location or None,
        created_by=created_by,
    )
    event.attendee_links = [PersonalEventAttendee(user_id=uid) for uid in attendee_ids]

    db.add(event)
    commit(db, "Saving personal event")
    with storage_errors("Saving personal event"):
        db.refresh(event)

    logger.info(
        "User %s created personal event %s (%d attendee(s), %d user(s) with conflicts)",
        created_by,
        event.id,
        len(attendee_ids),
        len(conflicts),
    )
    return PersonalEventResult(personal_event=event, conflicts=conflicts)


def update_personal_event(
    db: Session,
    personal_event_id: str,
    *,
    title: Optional[str] = None,
    start_time: Any = None,
    end_time: Any = None,
    location: Optional[str] = None,
    attendees: Optional[Iterable[str]] = None,
) -> PersonalEventResult:
    """
    Edit a personal event in place.

    Fields left as None keep their value. The resulting window is checked
    for every participant, leaving this event itself out of the check.
    """
    event = get_personal_event(db, personal_event_id)

    new_start = start_time if start_time is not None else event.start_time
    new_end = end_time if end_time is not None else event.end_time
    window = validate_window(new_start, new_end)

    if title is not None:
        event.title = title
    if location is not None:
        event.location = location or None
    event.start_time = to_naive_utc(window.start)
    event.end_time = to_naive_utc(window.end)

    if attendees is not None:
        attendee_ids = _unique_attendees(event.created_by, attendees)
        # Keep surviving rows; re-inserting them would trip the unique constraint
        existing = {link.user_id: link for link in event.attendee_links}
        event.attendee_links = [
            existing.get(uid) or PersonalEventAttendee(user_id=uid) for uid in attendee_ids
        ]
    else:
        attendee_ids = list(event.attendees)

    conflicts = check_attendee_conflicts(
        db,
        window,
        [event.created_by, *attendee_ids],
        exclude_event_id=event.id,
    )

    commit(db, "Updating personal event")
    with storage_errors("Updating personal event"):
        db.refresh(event)

    logger.info("Updated personal event %s", event.id)
    return PersonalEventResult(personal_event=event, conflicts=conflicts)


def delete_personal_event(db: Session, personal_event_id: str) -> None:
    event = get_personal_event(db, personal_event_id)
    db.delete(event)
    commit(db, "Deleting personal event")
    logger.info("Deleted personal event %s", personal_event_id)

