# app/routers/schedule.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.schedule import ConflictOut, ScheduleResponse, ScheduleUserOut
from app.services.schedule_service import get_schedule_data, list_commitments

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("", response_model=ScheduleResponse)
def group_schedule(db: Session = Depends(get_db)) -> ScheduleResponse:
    """
    Everyone's schedule on one grid.

    Ticket recipients that match no user get their own row with
    `purchased_only` set.
    """
    return ScheduleResponse(
        schedule_data=[ScheduleUserOut.from_row(row) for row in get_schedule_data(db)]
    )


@router.get("/{user_id}", response_model=List[ConflictOut])
def user_schedule(user_id: str, db: Session = Depends(get_db)) -> List[ConflictOut]:
    """All of the user's commitments, in the same shape as conflict entries."""
    return [ConflictOut.from_commitment(c) for c in list_commitments(db, user_id)]
