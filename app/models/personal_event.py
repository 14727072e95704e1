# app/models/personal_event.py
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base


class PersonalEvent(Base):
    """
    A meeting created by hand (dinner, game night, ...).

    Shows up on the schedule of its creator and of every attendee.
    Times are stored as naive UTC.
    """

    __tablename__ = "personal_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    title = Column(String(512), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=True)

    created_by = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    creator = relationship("User", backref="created_personal_events")
    attendee_links = relationship(
        "PersonalEventAttendee",
        back_populates="personal_event",
        cascade="all, delete-orphan",
        order_by="PersonalEventAttendee.id",
    )

    @property
    def attendees(self) -> list[str]:
        return [link.user_id for link in self.attendee_links]


class PersonalEventAttendee(Base):
    __tablename__ = "personal_event_attendees"
    __table_args__ = (
        UniqueConstraint(
            "personal_event_id", "user_id", name="uq_personal_event_attendee"
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    personal_event_id = Column(
        String(36),
        ForeignKey("personal_events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    personal_event = relationship("PersonalEvent", back_populates="attendee_links")
