# app/routers/events.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.schedule import EventCapacityOut
from app.services.capacity_service import get_event_capacity
from app.services.errors import EventNotFound

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/{event_id}/capacity", response_model=EventCapacityOut)
def event_capacity(event_id: str, db: Session = Depends(get_db)) -> EventCapacityOut:
    try:
        capacity = get_event_capacity(db, event_id)
    except EventNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return EventCapacityOut(
        event_id=capacity.event_id,
        tickets_available=capacity.tickets_available,
        current_signup_count=capacity.current_signup_count,
        at_capacity=capacity.at_capacity,
    )
