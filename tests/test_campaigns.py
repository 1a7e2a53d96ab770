from datetime import date
from decimal import Decimal

import pytest

from partner_portal.core.errors import Conflict, PolicyViolation
from partner_portal.models import CampaignStatus, Notification
from partner_portal.schemas.campaign import CampaignCreate, RevenueShare
from partner_portal.services.campaigns import create_campaign, delete_campaign, update_campaign_status
from partner_portal.services.settlement import settle_transaction
from tests.factories import make_partner, make_program, make_transaction, make_wallet


def test_create_campaign_derives_targets(seeded):
    partner, admin, _ = make_partner(seeded)
    program = make_program(seeded, pricing="500.00", start=date(2026, 1, 1), end=date(2026, 1, 10))

    campaign = create_campaign(
        seeded,
        CampaignCreate(name="Term One", program_id=program.id, promo_code="TERM1", target_signups=25),
        partner_id=partner.id,
        user_id=admin.id,
    )

    assert campaign.daily_target == 3
    assert campaign.bundle_min_lessons == 5
    assert Decimal(campaign.bundle_total_price) == Decimal("2500.00")
    assert Decimal(campaign.revenue_projection) == Decimal("62500.00")
    assert Decimal(campaign.partner_percentage) == Decimal("20")
    assert campaign.whatsapp_number == partner.phone
    assert campaign.status == CampaignStatus.DRAFT
    assert seeded.query(Notification).filter(Notification.title == "Campaign Created").count() == 1


def test_single_day_program(seeded):
    partner, _, _ = make_partner(seeded)
    program = make_program(seeded, start=date(2026, 2, 1), end=date(2026, 2, 1))

    campaign = create_campaign(
        seeded,
        CampaignCreate(name="Flash", program_id=program.id, target_signups=7),
        partner_id=partner.id,
    )

    assert campaign.daily_target == 7
    assert campaign.promo_code.startswith("FLASH")


def test_duplicate_promo_code(seeded):
    partner, _, _ = make_partner(seeded)
    program = make_program(seeded)
    payload = CampaignCreate(name="Term One", program_id=program.id, promo_code="TERM1", target_signups=10)
    create_campaign(seeded, payload, partner_id=partner.id)

    with pytest.raises(Conflict):
        create_campaign(seeded, payload, partner_id=partner.id)


def test_settled_campaign_cannot_be_deleted(seeded):
    partner, _, _ = make_partner(seeded)
    make_wallet(seeded, partner.id)
    program = make_program(seeded)
    campaign = create_campaign(
        seeded,
        CampaignCreate(
            name="Term One",
            program_id=program.id,
            promo_code="TERM1",
            target_signups=10,
            revenue_share=RevenueShare(partner_percentage=Decimal("30"), sqooli_percentage=Decimal("70")),
        ),
        partner_id=partner.id,
    )
    update_campaign_status(seeded, campaign.id, CampaignStatus.ACTIVE)
    settle_transaction(seeded, make_transaction(seeded, partner.id, campaign_code="TERM1").id)

    with pytest.raises(PolicyViolation):
        delete_campaign(seeded, campaign.id)
