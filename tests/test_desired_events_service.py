# tests/test_desired_events_service.py
import pytest

from app.models import DesiredEvent
from app.services import desired_events_service
from app.services.commitment_sources import SourceKind
from app.services.desired_events_service import (
    add_desired_event,
    get_event_desired_count,
    get_user_canceled_events,
    get_user_desired_events,
    remove_desired_event,
    user_has_desired_event,
)
from app.services.errors import AlreadyRegistered, EventNotFound, NotFound


def _at(hour: int, minute: int = 0) -> str:
    return f"2025-07-31T{hour:02d}:{minute:02d}:00"


def test_add_reports_overlapping_desired_event(db, seed):
    user = seed.user()
    seed.desired(user, seed.event("A", _at(10), _at(14)))
    seed.event("B", _at(11), _at(13))

    result = add_desired_event(db, user.id, "B")

    assert result.desired_event.event_id == "B"
    assert [c.id for c in result.conflicts] == ["A"]
    assert result.capacity_warning is False
    assert user_has_desired_event(db, user.id, "B")


def test_add_adjacent_event_has_no_conflicts(db, seed):
    user = seed.user()
    seed.desired(user, seed.event("A", _at(10), _at(12)))
    seed.event("B", _at(12), _at(14))

    result = add_desired_event(db, user.id, "B")

    assert result.conflicts == []


def test_add_over_capacity_warns_but_succeeds(db, seed):
    event = seed.event("C", _at(10), _at(12), tickets_available=3)
    for _ in range(3):
        seed.desired(seed.user(), event)
    user4 = seed.user()

    result = add_desired_event(db, user4.id, "C")

    assert result.capacity_warning is True
    assert result.desired_event.id is not None
    assert get_event_desired_count(db, "C") == 4


def test_add_taking_last_seat_does_not_warn(db, seed):
    event = seed.event("C", _at(10), _at(12), tickets_available=3)
    for _ in range(2):
        seed.desired(seed.user(), event)

    result = add_desired_event(db, seed.user().id, "C")

    assert result.capacity_warning is False
    assert get_event_desired_count(db, "C") == 3


def test_add_unlimited_event_never_warns(db, seed):
    event = seed.event("D", _at(10), _at(12), tickets_available=None)
    for _ in range(5):
        seed.desired(seed.user(), event)

    assert add_desired_event(db, seed.user().id, "D").capacity_warning is False


def test_add_twice_raises_already_registered(db, seed):
    user = seed.user()
    seed.event("A", _at(10), _at(12))

    add_desired_event(db, user.id, "A")
    with pytest.raises(AlreadyRegistered):
        add_desired_event(db, user.id, "A")

    assert get_event_desired_count(db, "A") == 1


def test_concurrent_add_loses_to_unique_constraint(db, seed, monkeypatch):
    user = seed.user()
    seed.event("A", _at(10), _at(12))

    # Both callers pass the existence check before either commits
    monkeypatch.setattr(desired_events_service, "_find_desired_event", lambda *args: None)

    first = add_desired_event(db, user.id, "A")
    with pytest.raises(AlreadyRegistered):
        add_desired_event(db, user.id, "A")

    rows = db.query(DesiredEvent).filter_by(user_id=user.id, event_id="A").all()
    assert [r.id for r in rows] == [first.desired_event.id]


def test_add_unknown_event(db, seed):
    user = seed.user()

    with pytest.raises(EventNotFound):
        add_desired_event(db, user.id, "NOPE")


def test_event_without_start_never_conflicts(db, seed):
    user = seed.user()
    seed.desired(user, seed.event("A", None, _at(23)))
    seed.event("B", _at(0), _at(23, 59))

    result = add_desired_event(db, user.id, "B")

    assert result.conflicts == []


def test_add_event_without_times_skips_conflict_check(db, seed):
    user = seed.user()
    seed.desired(user, seed.event("A", _at(10), _at(12)))
    seed.event("B", None, None)

    result = add_desired_event(db, user.id, "B")

    assert result.conflicts == []
    assert user_has_desired_event(db, user.id, "B")


def test_same_event_held_another_way_is_not_a_self_conflict(db, seed):
    user = seed.user("Ivy", "Hall")
    event = seed.event("A", _at(10), _at(12))
    seed.tracked(user, event)
    seed.purchase(event, "Ivy Hall")

    result = add_desired_event(db, user.id, "A")

    assert result.conflicts == []


def test_add_reports_personal_and_purchased_conflicts(db, seed):
    user = seed.user("Jon", "Park")
    personal = seed.personal(user, _at(11), _at(12))
    seed.purchase(seed.event("P", _at(10, 30), _at(11, 30)), "jon park")
    seed.event("B", _at(11), _at(13))

    result = add_desired_event(db, user.id, "B")

    assert [(c.source_kind, c.id) for c in result.conflicts] == [
        (SourceKind.PERSONAL, personal.id),
        (SourceKind.PURCHASED, "P"),
    ]


def test_remove(db, seed):
    user = seed.user()
    seed.desired(user, seed.event("A", _at(10), _at(12)))

    remove_desired_event(db, user.id, "A")

    assert user_has_desired_event(db, user.id, "A") is False


def test_remove_missing_pair_is_not_found(db, seed):
    user = seed.user()
    other = seed.user()
    event = seed.event("A", _at(10), _at(12))
    seed.desired(other, event)

    with pytest.raises(NotFound):
        remove_desired_event(db, user.id, "A")

    seed.desired(user, event)
    remove_desired_event(db, user.id, "A")
    with pytest.raises(NotFound):
        remove_desired_event(db, user.id, "A")

    # the other user's row is untouched
    assert user_has_desired_event(db, other.id, "A")


def test_list_filters_on_cancellation(db, seed):
    user = seed.user()
    seed.desired(user, seed.event("A", _at(10), _at(12)))
    seed.desired(user, seed.event("X", _at(13), _at(14), is_canceled=True))

    assert {d.event_id for d in get_user_desired_events(db, user.id)} == {"A", "X"}
    assert [d.event_id for d in get_user_desired_events(db, user.id, include_canceled=False)] == ["A"]
    assert [d.event_id for d in get_user_desired_events(db, user.id, include_canceled=True)] == ["X"]
    assert [e.id for e in get_user_canceled_events(db, user.id)] == ["X"]
