# app/routers/conflicts.py
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, model_validator
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.schedule import ConflictCheckResponse, ConflictOut, SourceKindCode
from app.services.conflict_service import check_conflicts
from app.services.errors import InvalidWindow

router = APIRouter(prefix="/conflicts", tags=["conflicts"])


class ConflictCheckRequest(BaseModel):
    user_id: str
    start_time: datetime
    end_time: datetime
    # Leave one commitment out, e.g. the personal event being edited
    exclude_id: Optional[str] = None
    exclude_kind: Optional[SourceKindCode] = None

    @model_validator(mode="after")
    def check_exclusion_pair(self) -> "ConflictCheckRequest":
        if (self.exclude_id is None) != (self.exclude_kind is None):
            raise ValueError("exclude_id and exclude_kind must be given together")
        return self


@router.post("/check", response_model=ConflictCheckResponse)
def check_conflicts_endpoint(
    req: ConflictCheckRequest,
    db: Session = Depends(get_db),
) -> ConflictCheckResponse:
    """
    Report which of the user's commitments overlap the given window.

    Read-only: nothing is saved.
    """
    try:
        result = check_conflicts(
            db,
            req.user_id,
            req.start_time,
            req.end_time,
            exclude_id=req.exclude_id,
            exclude_kind=req.exclude_kind,
        )
    except InvalidWindow as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ConflictCheckResponse(
        has_conflicts=result.has_conflicts,
        conflicts=[ConflictOut.from_commitment(c) for c in result.conflicts],
    )
