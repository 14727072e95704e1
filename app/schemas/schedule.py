# app/schemas/schedule.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from app.models.catalog_event import CatalogEvent
from app.models.desired_event import DesiredEvent
from app.models.personal_event import PersonalEvent
from app.services.commitment_sources import Commitment
from app.services.personal_event_service import UserConflicts
from app.services.schedule_service import ScheduleUser
from app.services.time_window import parse_instant


SourceKindCode = Literal["personal", "desired", "tracked", "purchased"]


def _iso(value) -> Optional[str]:
    dt = parse_instant(value)
    return dt.isoformat() if dt is not None else None


class ConflictOut(BaseModel):
    id: str
    title: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    type: SourceKindCode
    source: str

    @classmethod
    def from_commitment(cls, c: Commitment) -> "ConflictOut":
        return cls(
            id=c.id,
            title=c.title,
            start_time=c.window.start.isoformat() if c.window.start else None,
            end_time=c.window.end.isoformat() if c.window.end else None,
            type=c.source_kind.value,
            source=c.source_label,
        )


class ConflictCheckResponse(BaseModel):
    has_conflicts: bool
    conflicts: List[ConflictOut]


class CatalogEventOut(BaseModel):
    id: str
    title: str
    start_date_time: Optional[str] = None
    end_date_time: Optional[str] = None
    event_type: Optional[str] = None
    location: Optional[str] = None
    cost: Optional[str] = None
    tickets_available: Optional[int] = None
    is_canceled: bool = False
    canceled_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, event: CatalogEvent) -> "CatalogEventOut":
        return cls(
            id=event.id,
            title=event.title,
            # Raw feed values, passed through untouched
            start_date_time=event.start_date_time,
            end_date_time=event.end_date_time,
            event_type=event.event_type,
            location=event.location,
            cost=event.cost,
            tickets_available=event.tickets_available,
            is_canceled=bool(event.is_canceled),
            canceled_at=event.canceled_at,
        )


class DesiredEventOut(BaseModel):
    id: str
    user_id: str
    event_id: str
    event: Optional[CatalogEventOut] = None

    @classmethod
    def from_model(cls, de: DesiredEvent) -> "DesiredEventOut":
        return cls(
            id=de.id,
            user_id=de.user_id,
            event_id=de.event_id,
            event=CatalogEventOut.from_model(de.event) if de.event is not None else None,
        )


class AddDesiredEventResponse(BaseModel):
    desired_event: DesiredEventOut
    conflicts: List[ConflictOut]
    capacity_warning: bool


class PersonalEventOut(BaseModel):
    id: str
    title: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    location: Optional[str] = None
    created_by: str
    attendees: List[str] = Field(default_factory=list)

    @classmethod
    def from_model(cls, event: PersonalEvent) -> "PersonalEventOut":
        return cls(
            id=event.id,
            title=event.title,
            start_time=_iso(event.start_time),
            end_time=_iso(event.end_time),
            location=event.location,
            created_by=event.created_by,
            attendees=event.attendees,
        )


class UserConflictsOut(BaseModel):
    user_id: str
    user_name: str
    conflicts: List[ConflictOut]

    @classmethod
    def from_result(cls, uc: UserConflicts) -> "UserConflictsOut":
        return cls(
            user_id=uc.user_id,
            user_name=uc.user_name,
            conflicts=[ConflictOut.from_commitment(c) for c in uc.conflicts],
        )


class PersonalEventResponse(BaseModel):
    personal_event: PersonalEventOut
    conflicts: List[UserConflictsOut]


class EventCapacityOut(BaseModel):
    event_id: str
    tickets_available: Optional[int] = None
    current_signup_count: int
    at_capacity: bool


class ScheduleUserOut(BaseModel):
    id: str
    name: str
    purchased_only: bool = False
    events: List[CatalogEventOut]

    @classmethod
    def from_row(cls, row: ScheduleUser) -> "ScheduleUserOut":
        return cls(
            id=row.id,
            name=row.name,
            purchased_only=row.purchased_only,
            events=[CatalogEventOut.from_model(ev) for ev in row.events],
        )


class ScheduleResponse(BaseModel):
    schedule_data: List[ScheduleUserOut]
