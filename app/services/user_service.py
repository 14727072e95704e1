# app/services/user_service.py
from typing import Optional

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.user import User


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter_by(id=user_id).first()


def display_name_for(user: User, field: Optional[str] = None) -> Optional[str]:
    """
    Name under which the store files this user's ticket purchases.

    `field` defaults to PURCHASE_RECIPIENT_FIELD. With "badge_name" a user
    without a badge name falls back to first + last.
    """
    field = field or get_settings().PURCHASE_RECIPIENT_FIELD

    if field == "badge_name" and user.badge_name and user.badge_name.strip():
        return user.badge_name.strip()

    return user.full_name or None


def resolve_display_name(db: Session, user_id: str) -> Optional[str]:
    """
    Resolve user_id -> display name for the purchased-ticket join.

    Purchases carry only a recipient name, so two users sharing a name
    will see each other's tickets. Returns None for unknown users.
    """
    user = get_user(db, user_id)
    if user is None:
        return None
    return display_name_for(user)
