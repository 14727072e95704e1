# tests/test_time_window.py
from datetime import datetime, timedelta, timezone

import pytest

from app.services.time_window import TimeWindow, overlaps, parse_instant, to_naive_utc


def _t(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 7, 31, hour, minute, tzinfo=timezone.utc)


def test_partial_overlap():
    assert overlaps(_t(10), _t(14), _t(11), _t(13)) is True
    assert overlaps(_t(10), _t(12), _t(11), _t(13)) is True


def test_no_overlap():
    assert overlaps(_t(8), _t(9), _t(10), _t(11)) is False


def test_adjacent_windows_do_not_overlap():
    # A ends exactly when B starts, in both directions
    assert overlaps(_t(10), _t(12), _t(12), _t(14)) is False
    assert overlaps(_t(12), _t(14), _t(10), _t(12)) is False


def test_overlap_is_symmetric():
    hours = [_t(h) for h in range(8, 13)]
    windows = [(s, e) for s in hours for e in hours if s < e]
    for a0, a1 in windows:
        for b0, b1 in windows:
            assert overlaps(a0, a1, b0, b1) == overlaps(b0, b1, a0, a1)


def test_identical_windows_overlap():
    assert overlaps(_t(10), _t(11), _t(10), _t(11)) is True


@pytest.mark.parametrize(
    "args",
    [
        (None, _t(12), _t(10), _t(11)),
        (_t(10), None, _t(10), _t(11)),
        (_t(10), _t(12), None, _t(11)),
        (_t(10), _t(12), _t(10), None),
        (None, None, None, None),
    ],
)
def test_absent_bound_never_overlaps(args):
    assert overlaps(*args) is False


@pytest.mark.parametrize("bad", ["", "   ", "not a date", "2025-13-45T99:00:00", "TBD", 12345])
def test_malformed_values_are_treated_as_absent(bad):
    assert parse_instant(bad) is None
    assert overlaps(bad, _t(12), _t(10), _t(11)) is False


def test_strings_and_offsets_compare_as_instants():
    # 12:00 at UTC+2 is 10:00 UTC, so this touches but does not overlap 08:00-10:00 UTC
    assert overlaps("2025-07-31T12:00:00+02:00", "2025-07-31T14:00:00+02:00", _t(8), _t(10)) is False
    assert overlaps("2025-07-31T11:59:00+02:00", "2025-07-31T14:00:00+02:00", _t(8), _t(10)) is True


def test_parse_instant_normalizes_to_utc():
    assert parse_instant("2025-07-31T10:00:00Z") == _t(10)
    assert parse_instant("2025-07-31T10:00:00") == _t(10)
    assert parse_instant(datetime(2025, 7, 31, 10, 0)) == _t(10)

    eastern = timezone(timedelta(hours=-4))
    assert parse_instant(datetime(2025, 7, 31, 6, 0, tzinfo=eastern)) == _t(10)


def test_to_naive_utc():
    eastern = timezone(timedelta(hours=-4))
    assert to_naive_utc(datetime(2025, 7, 31, 6, 0, tzinfo=eastern)) == datetime(2025, 7, 31, 10, 0)
    assert to_naive_utc(datetime(2025, 7, 31, 6, 0)) == datetime(2025, 7, 31, 6, 0)


def test_time_window_validity():
    assert TimeWindow.from_raw("2025-07-31T10:00:00", "2025-07-31T11:00:00").is_valid
    assert not TimeWindow.from_raw("2025-07-31T11:00:00", "2025-07-31T11:00:00").is_valid
    assert not TimeWindow.from_raw("2025-07-31T12:00:00", "2025-07-31T11:00:00").is_valid

    unknown = TimeWindow.from_raw(None, "2025-07-31T11:00:00")
    assert not unknown.is_complete
    assert not unknown.overlaps(TimeWindow(_t(0), _t(23)))
