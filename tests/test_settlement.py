from decimal import Decimal

import pytest

from partner_portal.core.errors import PolicyViolation, WalletNotFound
from partner_portal.models import (
    AuditLog,
    EnrollmentStatus,
    Notification,
    PartnerRevenueLog,
    ProgramEnrollment,
)
from partner_portal.services import settlement
from partner_portal.services.settlement import settle_transaction
from partner_portal.services.wallet import get_wallet_by_partner
from tests.factories import make_campaign, make_partner, make_program, make_transaction, make_wallet


def test_settle_matched_campaign(seeded):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    program = make_program(seeded, pricing="300.00")
    campaign = make_campaign(seeded, partner.id, program, promo_code="SAVE10", partner_percentage="25")
    transaction = make_transaction(seeded, partner.id, amount="1000.00", campaign_code="SAVE10")

    result = settle_transaction(seeded, transaction.id, user_id=None, ip_address="10.0.0.1")

    assert not result["already_settled"]
    assert not result["fallback_applied"]
    assert result["partner_share"] == Decimal("250.00")
    assert result["new_balance"] == Decimal("250.00")

    enrollment = result["enrollment"]
    assert enrollment.campaign_id == campaign.id
    assert enrollment.status == EnrollmentStatus.REDEEMED
    assert enrollment.meta["number_of_lessons_subscribed"] == 3
    assert enrollment.meta["phone"] == transaction.phone_number

    log = (
        seeded.query(AuditLog)
        .filter(AuditLog.entity_type == "transaction", AuditLog.entity_id == str(transaction.id))
        .one()
    )
    assert log.action == "revenue.settle"
    assert log.ip_address == "10.0.0.1"
    assert seeded.query(Notification).filter(Notification.partner_id == partner.id).count() == 1


def test_settle_unmatched_uses_fallback_without_enrollment(seeded):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    transaction = make_transaction(seeded, partner.id, amount="1000.00", campaign_code="NOPE")

    result = settle_transaction(seeded, transaction.id)

    assert result["fallback_applied"]
    assert result["campaign_id"] is None
    assert result["enrollment"] is None
    assert result["partner_share"] == Decimal("200.00")
    assert seeded.query(ProgramEnrollment).count() == 0
    assert seeded.query(AuditLog).filter(AuditLog.action == "revenue.fallback_split").count() == 1


def test_settle_twice_credits_once(seeded):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10", partner_percentage="25")
    transaction = make_transaction(seeded, partner.id, amount="1000.00", campaign_code="SAVE10")

    settle_transaction(seeded, transaction.id)
    second = settle_transaction(seeded, transaction.id)

    assert second["already_settled"]
    assert second["partner_share"] == Decimal("250.00")
    assert second["new_balance"] is None
    wallet = get_wallet_by_partner(seeded, partner.id)
    assert Decimal(wallet.balance) == Decimal("250.00")
    assert seeded.query(PartnerRevenueLog).count() == 1
    assert seeded.query(ProgramEnrollment).count() == 1


def test_settle_without_wallet_writes_nothing(seeded):
    partner, _, _ = make_partner(seeded)
    make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10")
    transaction = make_transaction(seeded, partner.id, campaign_code="SAVE10")

    with pytest.raises(WalletNotFound):
        settle_transaction(seeded, transaction.id)

    assert seeded.query(PartnerRevenueLog).count() == 0
    assert seeded.query(ProgramEnrollment).count() == 0
    assert seeded.query(Notification).filter(Notification.title == "Payment Received").count() == 0


def test_only_successful_transactions_settle(seeded):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    transaction = make_transaction(seeded, partner.id, status="pending")

    with pytest.raises(PolicyViolation):
        settle_transaction(seeded, transaction.id)


def _stale_first_lookup(monkeypatch):
    real = settlement._existing
    calls = {"count": 0}

    def lookup(db, transaction):
        calls["count"] += 1
        if calls["count"] == 1:
            return None
        return real(db, transaction)

    monkeypatch.setattr(settlement, "_existing", lookup)


@pytest.mark.parametrize("campaign_code, share, enrollments", [("SAVE10", "250.00", 1), ("NOPE", "200.00", 0)])
def test_concurrent_duplicate_settlement_is_rejected_by_unique_key(
    seeded, monkeypatch, campaign_code, share, enrollments
):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    make_campaign(seeded, partner.id, make_program(seeded), promo_code="SAVE10", partner_percentage="25")
    transaction = make_transaction(seeded, partner.id, amount="1000.00", campaign_code=campaign_code)
    settle_transaction(seeded, transaction.id)

    # A second worker that read before the first commit skips the pre-check.
    _stale_first_lookup(monkeypatch)
    second = settle_transaction(seeded, transaction.id)

    assert second["already_settled"]
    assert second["partner_share"] == Decimal(share)
    assert second["fallback_applied"] is (campaign_code == "NOPE")
    wallet = get_wallet_by_partner(seeded, partner.id)
    assert Decimal(wallet.balance) == Decimal(share)
    assert Decimal(wallet.lifetime_earnings) == Decimal(share)
    assert seeded.query(PartnerRevenueLog).count() == 1
    assert seeded.query(ProgramEnrollment).count() == enrollments
    assert seeded.query(Notification).filter(Notification.title == "Payment Received").count() == 1
