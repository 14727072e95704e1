# app/routers/tracked_events.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.schedule import CatalogEventOut
from app.services.errors import AlreadyRegistered, EventNotFound, NotFound
from app.services.tracking_service import list_tracked_events, track_event, untrack_event

router = APIRouter(prefix="/tracked-events", tags=["tracked-events"])


class TrackEventRequest(BaseModel):
    user_id: str
    event_id: str


@router.post("")
def track(payload: TrackEventRequest, db: Session = Depends(get_db)) -> Dict[str, Any]:
    try:
        tracked = track_event(db, payload.user_id, payload.event_id)
    except (EventNotFound, NotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except AlreadyRegistered as e:
        raise HTTPException(status_code=409, detail=str(e))

    return {"id": tracked.id, "user_id": tracked.user_id, "event_id": tracked.event_id}


@router.delete("/{user_id}/{event_id}")
def untrack(user_id: str, event_id: str, db: Session = Depends(get_db)) -> Dict[str, Any]:
    try:
        untrack_event(db, user_id, event_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"status": "untracked", "user_id": user_id, "event_id": event_id}


@router.get("/{user_id}", response_model=List[CatalogEventOut])
def tracked(user_id: str, db: Session = Depends(get_db)) -> List[CatalogEventOut]:
    return [CatalogEventOut.from_model(ev) for ev in list_tracked_events(db, user_id)]
