from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from partner_portal.core.errors import ValidationFailed
from partner_portal.services.revenue import (
    compute_partner_share,
    get_campaign_earnings,
    get_earnings_timeline,
    match_campaign,
)
from tests.factories import make_campaign, make_partner, make_program, make_transaction


def test_campaign_share_and_fallback(seeded):
    partner, _, _ = make_partner(seeded)
    campaign = make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10", partner_percentage="25")

    assert compute_partner_share(Decimal("1000"), campaign) == Decimal("250.00")
    assert compute_partner_share(Decimal("1000"), None) == Decimal("200.00")


def test_match_campaign_is_exact_and_partner_scoped(seeded):
    partner, _, _ = make_partner(seeded)
    other, _, _ = make_partner(seeded, name="Other Org", email="other@example.com")
    campaign = make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10")

    assert match_campaign(seeded, partner.id, "SAVE10").id == campaign.id
    assert match_campaign(seeded, partner.id, "save10") is None
    assert match_campaign(seeded, other.id, "SAVE10") is None
    assert match_campaign(seeded, partner.id, None) is None


def _at(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, 10, 30, tzinfo=timezone.utc)


def test_timeline_fills_every_day(seeded):
    partner, _, _ = make_partner(seeded)
    make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10", partner_percentage="25")
    today = date(2026, 3, 5)
    make_transaction(seeded, partner.id, amount="1000", campaign_code="SAVE10", mpesa_code="MP001", created_at=_at(date(2026, 3, 2)))
    make_transaction(seeded, partner.id, amount="500", campaign_code="UNKNOWN", mpesa_code="MP002", created_at=_at(date(2026, 3, 4)))
    make_transaction(
        seeded, partner.id, amount="900", mpesa_code="MP003", status="Failed", created_at=_at(date(2026, 3, 4))
    )

    timeline = get_earnings_timeline(seeded, partner.id, days=5, today=today)

    assert [point["date"] for point in timeline] == [date(2026, 3, d) for d in range(1, 6)]
    assert [point["amount"] for point in timeline] == [
        Decimal("0"),
        Decimal("250.00"),
        Decimal("0"),
        Decimal("100.00"),
        Decimal("0"),
    ]
    assert [point["count"] for point in timeline] == [0, 1, 0, 1, 0]


def test_timeline_rejects_bad_window(seeded):
    partner, _, _ = make_partner(seeded)
    with pytest.raises(ValidationFailed):
        get_earnings_timeline(seeded, partner.id, days=0)


def test_campaign_earnings(seeded):
    partner, _, _ = make_partner(seeded)
    campaign = make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10", partner_percentage="25")
    make_transaction(seeded, partner.id, amount="1000", campaign_code="SAVE10", mpesa_code="MP001")
    make_transaction(seeded, partner.id, amount="600", campaign_code="SAVE10", mpesa_code="MP002")

    [row] = get_campaign_earnings(seeded, partner.id)

    assert row["campaign_id"] == campaign.id
    assert row["total_revenue"] == Decimal("1600.00")
    assert row["partner_earnings"] == Decimal("400.00")
    assert row["enrollments"] == 0
