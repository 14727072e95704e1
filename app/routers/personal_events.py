# app/routers/personal_events.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator, model_validator
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.schedule import (
    PersonalEventOut,
    PersonalEventResponse,
    UserConflictsOut,
)
from app.services.conflict_service import validate_window
from app.services.errors import InvalidWindow, NotFound
from app.services.personal_event_service import (
    check_attendee_conflicts,
    create_personal_event,
    delete_personal_event,
    list_personal_events,
    update_personal_event,
)

router = APIRouter(prefix="/personal-events", tags=["personal-events"])


class PersonalEventCreate(BaseModel):
    title: str
    start_time: datetime
    end_time: datetime
    created_by: str
    location: Optional[str] = None
    attendees: List[str] = []

    @field_validator("title")
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v


class PersonalEventUpdate(BaseModel):
    title: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    attendees: Optional[List[str]] = None


class AttendeeConflictCheck(BaseModel):
    start_time: datetime
    end_time: datetime
    attendees: List[str]
    exclude_event_id: Optional[str] = None

    @model_validator(mode="after")
    def check_attendees(self) -> "AttendeeConflictCheck":
        if not self.attendees:
            raise ValueError("At least one attendee is required")
        return self


def _response(result) -> PersonalEventResponse:
    return PersonalEventResponse(
        personal_event=PersonalEventOut.from_model(result.personal_event),
        conflicts=[UserConflictsOut.from_result(uc) for uc in result.conflicts],
    )


@router.get("", response_model=List[PersonalEventOut])
def get_personal_events(user_id: str, db: Session = Depends(get_db)) -> List[PersonalEventOut]:
    """Personal events the user created or attends, earliest first."""
    return [PersonalEventOut.from_model(e) for e in list_personal_events(db, user_id)]


@router.post("", response_model=PersonalEventResponse, status_code=201)
def create(payload: PersonalEventCreate, db: Session = Depends(get_db)) -> PersonalEventResponse:
    """
    Create a personal event for the creator and its attendees.

    Conflicts are reported per user but never block the save.
    """
    try:
        result = create_personal_event(
            db,
            title=payload.title,
            start_time=payload.start_time,
            end_time=payload.end_time,
            created_by=payload.created_by,
            attendees=payload.attendees,
            location=payload.location,
        )
    except InvalidWindow as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _response(result)


@router.post("/check-conflicts")
def check_conflicts_for_attendees(
    payload: AttendeeConflictCheck,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Dry run before creating or moving a personal event.

    Pass `exclude_event_id` when re-checking an existing event.
    """
    try:
        window = validate_window(payload.start_time, payload.end_time)
    except InvalidWindow as e:
        raise HTTPException(status_code=400, detail=str(e))

    report = check_attendee_conflicts(
        db,
        window,
        payload.attendees,
        exclude_event_id=payload.exclude_event_id,
    )
    return {"conflicts": [UserConflictsOut.from_result(uc).model_dump() for uc in report]}


@router.put("/{personal_event_id}", response_model=PersonalEventResponse)
def update(
    personal_event_id: str,
    payload: PersonalEventUpdate,
    db: Session = Depends(get_db),
) -> PersonalEventResponse:
    try:
        result = update_personal_event(
            db,
            personal_event_id,
            title=payload.title,
            start_time=payload.start_time,
            end_time=payload.end_time,
            location=payload.location,
            attendees=payload.attendees,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidWindow as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _response(result)


@router.delete("/{personal_event_id}")
def delete(personal_event_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    try:
        delete_personal_event(db, personal_event_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"status": "deleted", "id": personal_event_id}
