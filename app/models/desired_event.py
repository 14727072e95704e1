# app/models/desired_event.py
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base


class DesiredEvent(Base):
    __tablename__ = "desired_events"
    __table_args__ = (
        # Backstop for concurrent adds of the same pair
        UniqueConstraint("user_id", "event_id", name="uq_desired_events_user_event"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    event_id = Column(
        String(64),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", backref="desired_events")
    event = relationship("CatalogEvent", backref="desired_by")
