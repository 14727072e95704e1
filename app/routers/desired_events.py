# app/routers/desired_events.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.schedule import (
    AddDesiredEventResponse,
    CatalogEventOut,
    ConflictOut,
    DesiredEventOut,
)
from app.services.desired_events_service import (
    add_desired_event,
    get_user_canceled_events,
    get_user_desired_events,
    remove_desired_event,
)
from app.services.errors import AlreadyRegistered, EventNotFound, NotFound

router = APIRouter()


class DesiredEventCreate(BaseModel):
    user_id: str
    event_id: str


@router.post("", response_model=AddDesiredEventResponse, status_code=201)
def create_desired_event(
    payload: DesiredEventCreate,
    db: Session = Depends(get_db),
) -> AddDesiredEventResponse:
    """
    Add an event to the user's wishlist.

    Always saves the entry; `conflicts` and `capacity_warning` are
    warnings for the user to review, not errors.
    """
    try:
        result = add_desired_event(db, payload.user_id, payload.event_id)
    except AlreadyRegistered as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (EventNotFound, NotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))

    return AddDesiredEventResponse(
        desired_event=DesiredEventOut.from_model(result.desired_event),
        conflicts=[ConflictOut.from_commitment(c) for c in result.conflicts],
        capacity_warning=result.capacity_warning,
    )


@router.delete("/{user_id}/{event_id}")
def delete_desired_event(
    user_id: str,
    event_id: str,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    try:
        remove_desired_event(db, user_id, event_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"status": "removed", "user_id": user_id, "event_id": event_id}


@router.get("/{user_id}", response_model=List[DesiredEventOut])
def list_desired_events(
    user_id: str,
    include_canceled: Optional[bool] = None,
    db: Session = Depends(get_db),
) -> List[DesiredEventOut]:
    return [
        DesiredEventOut.from_model(de)
        for de in get_user_desired_events(db, user_id, include_canceled=include_canceled)
    ]


@router.get("/{user_id}/canceled", response_model=List[CatalogEventOut])
def list_canceled_desired_events(
    user_id: str,
    db: Session = Depends(get_db),
) -> List[CatalogEventOut]:
    return [CatalogEventOut.from_model(ev) for ev in get_user_canceled_events(db, user_id)]
