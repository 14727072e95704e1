# app/services/conflict_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.services.commitment_sources import (
    DEFAULT_SOURCES,
    Commitment,
    CommitmentSource,
    SourceKind,
)
from app.services.errors import InvalidWindow, storage_errors
from app.services.time_window import TimeWindow, parse_instant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConflictExclusion:
    """Identifies one commitment to leave out, e.g. the event being edited."""

    id: str
    source_kind: SourceKind

    def matches(self, commitment: Commitment) -> bool:
        return (
            commitment.id == self.id
            and commitment.source_kind == self.source_kind
        )


@dataclass
class ConflictResult:
    has_conflicts: bool = False
    conflicts: List[Commitment] = field(default_factory=list)


def validate_window(start: Any, end: Any) -> TimeWindow:
    """
    Parse a query window and require start < end.

    Raises InvalidWindow for a missing, unparseable or inverted window.
    """
    window = TimeWindow(start=parse_instant(start), end=parse_instant(end))
    if not window.is_complete:
        raise InvalidWindow("Start time and end time are required")
    if not window.is_valid:
        raise InvalidWindow("Start time must be before end time")
    return window


def find_conflicts(
    db: Session,
    user_id: str,
    window: TimeWindow,
    exclude: Optional[ConflictExclusion] = None,
    sources: Optional[Sequence[CommitmentSource]] = None,
) -> ConflictResult:
    """
    Every commitment of `user_id` that overlaps `window`.

    - All sources are queried; none is skipped because another matched.
    - `exclude` is removed before the overlap test, so an event being
      re-validated never conflicts with itself.
    - Commitments with unknown times never conflict.
    - A source that cannot be read raises StorageUnavailable instead of
      returning a partial list.

    Conflicts come back grouped by source (in `sources` order), each group
    in the order the source returned it.
    """
    query = validate_window(window.start, window.end)

    conflicts: List[Commitment] = []

    for source in sources if sources is not None else DEFAULT_SOURCES:
        with storage_errors(f"Loading {source.kind.value} commitments"):
            candidates = source.fetch(db, user_id)

        if exclude is not None:
            candidates = [c for c in candidates if not exclude.matches(c)]

        found = [c for c in candidates if c.window.overlaps(query)]

        logger.debug(
            "user=%s source=%s candidates=%d conflicts=%d",
            user_id,
            source.kind.value,
            len(candidates),
            len(found),
        )
        conflicts.extend(found)

    if conflicts:
        logger.info(
            "Found %d conflict(s) for user %s in %s - %s",
            len(conflicts),
            user_id,
            query.start.isoformat(),
            query.end.isoformat(),
        )

    return ConflictResult(has_conflicts=bool(conflicts), conflicts=conflicts)


def check_conflicts(
    db: Session,
    user_id: str,
    start_time: Any,
    end_time: Any,
    exclude_id: Optional[str] = None,
    exclude_kind: Optional[SourceKind] = None,
) -> ConflictResult:
    """
    Standalone "would this overlap?" query.

    Takes raw start/end values; `exclude_id` and `exclude_kind` must be
    given together to have any effect.
    """
    exclude = None
    if exclude_id is not None and exclude_kind is not None:
        exclude = ConflictExclusion(id=exclude_id, source_kind=SourceKind(exclude_kind))

    return find_conflicts(
        db,
        user_id,
        TimeWindow(start=parse_instant(start_time), end=parse_instant(end_time)),
        exclude=exclude,
    )
