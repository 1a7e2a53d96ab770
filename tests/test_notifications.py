from partner_portal.services.notifications import (
    create_notification,
    delete_all_notifications,
    delete_read_notifications,
    get_notifications,
    get_unread_count,
    mark_all_as_read,
    mark_as_read,
)
from tests.factories import make_partner


def _notify(db, partner_id, title):
    return create_notification(db, partner_id=partner_id, title=title, message=f"{title} body")


def test_unread_count_and_mark_all(seeded):
    partner, _, _ = make_partner(seeded)
    first = _notify(seeded, partner.id, "One")
    _notify(seeded, partner.id, "Two")
    _notify(seeded, partner.id, "Three")
    mark_as_read(seeded, first.id)

    assert get_unread_count(seeded, partner.id) == 2

    result = mark_all_as_read(seeded, partner.id)
    assert result["success"] is True
    assert result["count"] == 2
    assert len(result["items"]) == 2
    assert get_unread_count(seeded, partner.id) == 0


def test_unread_filter_is_partner_scoped(seeded):
    partner, _, _ = make_partner(seeded)
    other, _, _ = make_partner(seeded, name="Other Org", email="other@example.com")
    _notify(seeded, partner.id, "Mine")
    _notify(seeded, other.id, "Theirs")

    assert [n.title for n in get_notifications(seeded, partner.id, unread_only=True)] == ["Mine"]


def test_delete_read_then_all(seeded):
    partner, _, _ = make_partner(seeded)
    read = _notify(seeded, partner.id, "Read")
    _notify(seeded, partner.id, "Unread")
    mark_as_read(seeded, read.id)

    assert delete_read_notifications(seeded, partner.id)["count"] == 1
    assert [n.title for n in get_notifications(seeded, partner.id)] == ["Unread"]

    assert delete_all_notifications(seeded, partner.id)["count"] == 1
    assert get_notifications(seeded, partner.id) == []
