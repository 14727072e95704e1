# app/models/catalog_event.py
from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.models.base import Base


class CatalogEvent(Base):
    """
    One event from the convention catalog.

    Rows are written by the catalog sync, which copies the feed's start/end
    values verbatim. They are usually ISO-8601 strings but can be empty or
    malformed, so they are kept as text and parsed on read.
    """

    __tablename__ = "events"

    # Feed-assigned id (e.g. "RPG25ND286543")
    id = Column(String(64), primary_key=True)

    title = Column(String(512), nullable=False)
    event_type = Column(String(64), nullable=True)
    location = Column(String(255), nullable=True)
    cost = Column(String(32), nullable=True)

    start_date_time = Column(String(64), nullable=True)
    end_date_time = Column(String(64), nullable=True)

    # NULL means unlimited seats
    tickets_available = Column(Integer, nullable=True)

    is_canceled = Column(Boolean, nullable=False, default=False)
    canceled_at = Column(DateTime, nullable=True)
