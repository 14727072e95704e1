# tests/test_conflict_report.py
from scripts.conflict_report import run_once


def test_report_lists_conflicts(db, seed, capsys):
    user = seed.user()
    seed.desired(user, seed.event("A", "2025-07-31T10:00:00", "2025-07-31T12:00:00", title="Catan Open"))

    code = run_once(user.id, "2025-07-31T11:00:00", "2025-07-31T13:00:00")

    out = capsys.readouterr().out
    assert code == 0
    assert "1 conflict(s)" in out
    assert "[desired] Catan Open" in out


def test_report_no_conflicts(db, seed, capsys):
    user = seed.user()

    assert run_once(user.id, "2025-07-31T11:00:00", "2025-07-31T13:00:00") == 0
    assert "No conflicts" in capsys.readouterr().out


def test_report_invalid_window(db, seed, capsys):
    user = seed.user()

    assert run_once(user.id, "2025-07-31T13:00:00", "2025-07-31T11:00:00") == 1
    assert "Start time must be before end time" in capsys.readouterr().err
