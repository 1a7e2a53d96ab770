from datetime import datetime, timedelta, timezone

from partner_portal.core import clock
from partner_portal.models import UserSession
from partner_portal.services.sessions import (
    create_session,
    delete_session,
    delete_user_sessions,
    validate_session,
)
from tests.factories import make_partner


def test_session_valid_before_ttl_and_removed_after(seeded, monkeypatch):
    _, user, _ = make_partner(seeded)
    session = create_session(seeded, user)
    created = clock.as_utc(session.created_at)

    monkeypatch.setattr(clock, "utcnow", lambda: created + timedelta(minutes=119))
    resolved = validate_session(seeded, session.token)
    assert resolved is not None
    assert resolved[0].id == user.id

    monkeypatch.setattr(clock, "utcnow", lambda: created + timedelta(minutes=121))
    assert validate_session(seeded, session.token) is None
    assert seeded.query(UserSession).filter(UserSession.token == session.token).first() is None


def test_validate_unknown_token(seeded):
    assert validate_session(seeded, "") is None
    assert validate_session(seeded, "missing") is None


def test_delete_session_soft_result(seeded):
    _, user, _ = make_partner(seeded)
    session = create_session(seeded, user)

    assert delete_session(seeded, session.token) == {"success": True}
    assert delete_session(seeded, session.token) == {"success": False, "message": "Session not found"}


def test_delete_user_sessions_can_keep_current(seeded):
    _, user, _ = make_partner(seeded)
    keep = create_session(seeded, user)
    create_session(seeded, user)
    create_session(seeded, user)

    assert delete_user_sessions(seeded, user.id, keep_token=keep.token) == 2
    remaining = seeded.query(UserSession).filter(UserSession.user_id == user.id).all()
    assert [s.token for s in remaining] == [keep.token]


def test_as_utc_treats_naive_values_as_utc():
    naive = datetime(2026, 3, 1, 8, 30)
    assert clock.as_utc(naive) == datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
    nairobi = datetime(2026, 3, 1, 11, 30, tzinfo=timezone(timedelta(hours=3)))
    assert clock.as_utc(nairobi) == datetime(2026, 3, 1, 8, 30, tzinfo=timezone.utc)
