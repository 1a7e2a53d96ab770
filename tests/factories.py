"""Builders for test data. Every helper commits, so rows are visible to the API client."""
from datetime import date, datetime, timezone
from decimal import Decimal

from partner_portal.models import Campaign, CampaignStatus, Program, Transaction, TransactionStatus
from partner_portal.schemas.partner import PartnerCreate
from partner_portal.schemas.wallet import WalletCreate
from partner_portal.services.partners import create_partner_organization, create_super_admin
from partner_portal.services.sessions import create_session
from partner_portal.services.users import get_user_by_email
from partner_portal.services.wallet import create_wallet


def make_partner(db, name="Acme Schools", email="partner@example.com", phone="+254700000001"):
    """Partner plus its partner_admin user. Returns (partner, admin_user, password)."""
    created = create_partner_organization(db, PartnerCreate(name=name, email=email, phone=phone))
    credentials = created["credentials"]
    return created["partner"], credentials["user"], credentials["password"]


def make_super_admin(db, email="root@example.com"):
    credentials = create_super_admin(db, email=email, name="Platform Root")
    return get_user_by_email(db, email), credentials["password"]


def make_wallet(db, partner_id, pin="1234"):
    return create_wallet(db, WalletCreate(account_number="0712345678", pin=pin), partner_id=partner_id)


def make_program(db, pricing="500.00", start=date(2026, 1, 1), end=date(2026, 1, 10)):
    program = Program(name="Math Booster", start_date=start, end_date=end, pricing=Decimal(pricing), is_active=True)
    db.add(program)
    db.commit()
    db.refresh(program)
    return program


def make_campaign(db, partner_id, program, promo_code="SAVE10", partner_percentage="25"):
    campaign = Campaign(
        name="Back to school",
        program_id=program.id,
        partner_id=partner_id,
        promo_code=promo_code,
        target_signups=100,
        daily_target=10,
        bundle_min_lessons=5,
        bundle_total_price=Decimal(program.pricing) * 5,
        price_per_lesson=Decimal(program.pricing),
        revenue_projection=Decimal(program.pricing) * 500,
        partner_percentage=Decimal(partner_percentage),
        sqooli_percentage=Decimal("100") - Decimal(partner_percentage),
        whatsapp_number="+254700000001",
        duration_start=program.start_date,
        duration_end=program.end_date,
        status=CampaignStatus.ACTIVE,
    )
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return campaign


def make_transaction(
    db,
    partner_id,
    amount="1000.00",
    campaign_code=None,
    mpesa_code="QWE123RTY",
    status=TransactionStatus.SUCCESS.value,
    created_at=None,
):
    transaction = Transaction(
        student_name="Jane Student",
        phone_number="+254711111111",
        mpesa_code=mpesa_code,
        amount=Decimal(amount),
        campaign_code=campaign_code,
        partner_id=partner_id,
        status=status,
        created_at=created_at or datetime.now(timezone.utc),
    )
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    return transaction


def auth_headers(db, user):
    session = create_session(db, user)
    return {"Authorization": f"Bearer {session.token}"}
