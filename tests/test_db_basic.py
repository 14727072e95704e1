# tests/test_db_basic.py
import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.session import engine, SessionLocal
from app.models import Base, CatalogEvent, DesiredEvent, User


def test_db_can_create_schema():
    # Ensure metadata can create tables
    Base.metadata.create_all(bind=engine)

    # Simple connectivity test
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1"))
        assert result.scalar() == 1


def test_create_and_read_user():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        user = User(
            first_name="Test",
            last_name="Lead",
            email="test@example.com",
            badge_name="Testy",
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        assert user.id is not None

        # fetch back
        fetched = db.query(User).filter_by(email="test@example.com").first()
        assert fetched is not None
        assert fetched.full_name == "Test Lead"
        assert fetched.badge_name == "Testy"
    finally:
        db.close()


def test_desired_event_pair_is_unique_in_storage():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db: Session = SessionLocal()
    try:
        user = User(first_name="A", last_name="B", email="ab@example.com")
        event = CatalogEvent(id="RPG001", title="Dungeon crawl")
        db.add_all([user, event])
        db.commit()

        db.add(DesiredEvent(user_id=user.id, event_id=event.id))
        db.commit()

        db.add(DesiredEvent(user_id=user.id, event_id=event.id))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

        assert db.query(DesiredEvent).count() == 1
    finally:
        db.close()
