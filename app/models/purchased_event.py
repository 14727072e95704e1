# app/models/purchased_event.py
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import Base


class PurchasedEvent(Base):
    """
    A ticket bought through the convention store.

    Tickets are filed under the recipient's display name as it appears on
    the purchase receipt, not under a user id.
    """

    __tablename__ = "purchased_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    event_id = Column(
        String(64),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    recipient = Column(String(255), nullable=False, index=True)
    purchase_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    cost = Column(String(32), nullable=True)
    confirmation = Column(String(64), nullable=True)

    event = relationship("CatalogEvent", backref="purchases")
    refunds = relationship(
        "RefundedEvent",
        back_populates="ticket",
        cascade="all, delete-orphan",
    )


class RefundedEvent(Base):
    __tablename__ = "refunded_events"
    __table_args__ = (
        UniqueConstraint("user_name", "ticket_id", name="uq_refunded_events_user_ticket"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_name = Column(String(255), nullable=False, index=True)

    ticket_id = Column(
        String(36),
        ForeignKey("purchased_events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    ticket = relationship("PurchasedEvent", back_populates="refunds")
