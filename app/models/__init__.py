# app/models/__init__.py
from app.models.base import Base  # noqa: F401

from app.models.user import User  # noqa: F401
from app.models.catalog_event import CatalogEvent  # noqa: F401
from app.models.desired_event import DesiredEvent  # noqa: F401
from app.models.tracked_event import TrackedEvent  # noqa: F401
from app.models.personal_event import PersonalEvent, PersonalEventAttendee  # noqa: F401
from app.models.purchased_event import PurchasedEvent, RefundedEvent  # noqa: F401
