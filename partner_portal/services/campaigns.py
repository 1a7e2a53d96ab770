from decimal import Decimal
import logging
import math
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core.config import get_settings
from partner_portal.core.errors import Conflict, NotFound, PolicyViolation
from partner_portal.models import Campaign, CampaignStatus, PartnerRevenueLog, ProgramEnrollment
from partner_portal.schemas.campaign import CampaignCreate
from partner_portal.services.notifications import create_notification
from partner_portal.services.partners import require_partner
from partner_portal.services.programs import require_program

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE_LESSONS = 5
DEFAULT_PARTNER_PERCENTAGE = Decimal("20")
DEFAULT_SQOOLI_PERCENTAGE = Decimal("80")


def get_campaign(db: Session, campaign_id: int) -> Optional[Campaign]:
    return db.query(Campaign).filter(Campaign.id == campaign_id).first()


def require_campaign(db: Session, campaign_id: int) -> Campaign:
    campaign = get_campaign(db, campaign_id)
    if not campaign:
        raise NotFound("Campaign not found")
    return campaign


def get_campaign_by_promo_code(db: Session, promo_code: str) -> Optional[Campaign]:
    # Exact match. Campaign codes are not case-folded.
    return db.query(Campaign).filter(Campaign.promo_code == promo_code).first()


def list_campaigns(db: Session, status: Optional[CampaignStatus] = None) -> list[Campaign]:
    query = db.query(Campaign)
    if status is not None:
        query = query.filter(Campaign.status == status)
    return query.order_by(Campaign.id.desc()).all()


def get_campaigns_by_partner(db: Session, partner_id: int) -> list[Campaign]:
    return db.query(Campaign).filter(Campaign.partner_id == partner_id).order_by(Campaign.id.desc()).all()


def get_campaigns_by_program(db: Session, program_id: int) -> list[Campaign]:
    return db.query(Campaign).filter(Campaign.program_id == program_id).order_by(Campaign.id.desc()).all()


def generate_promo_code(db: Session, name: str) -> str:
    stem = "".join(name.split()).upper()[:8]
    while True:
        code = f"{stem}{100 + secrets.randbelow(900)}"
        if not get_campaign_by_promo_code(db, code):
            return code


def create_campaign(db: Session, payload: CampaignCreate, *, partner_id: int, user_id: Optional[int] = None) -> Campaign:
    settings = get_settings()
    partner = require_partner(db, partner_id)
    program = require_program(db, payload.program_id)

    if payload.promo_code:
        promo_code = payload.promo_code.strip()
        if get_campaign_by_promo_code(db, promo_code):
            raise Conflict(f"Promo code {promo_code} already exists")
    else:
        promo_code = generate_promo_code(db, payload.name)

    duration_days = max(1, (program.end_date - program.start_date).days + 1)
    daily_target = math.ceil(payload.target_signups / duration_days)

    pricing = Decimal(program.pricing)
    bundle = payload.bundled_offers
    min_lessons = bundle.min_lessons if bundle else DEFAULT_BUNDLE_LESSONS
    total_price = bundle.total_price if bundle else pricing * DEFAULT_BUNDLE_LESSONS
    discount = payload.discount_rule
    share = payload.revenue_share
    partner_pct = share.partner_percentage if share else DEFAULT_PARTNER_PERCENTAGE
    sqooli_pct = share.sqooli_percentage if share else DEFAULT_SQOOLI_PERCENTAGE
    if partner_pct + sqooli_pct != 100:
        # Stored as given; settlement only reads partner_percentage.
        logger.warning(
            "Campaign %s revenue share does not sum to 100: partner=%s sqooli=%s",
            promo_code,
            partner_pct,
            sqooli_pct,
        )

    campaign = Campaign(
        name=payload.name.strip(),
        description=payload.description,
        program_id=program.id,
        partner_id=partner.id,
        user_id=user_id,
        promo_code=promo_code,
        target_signups=payload.target_signups,
        daily_target=daily_target,
        bundle_min_lessons=min_lessons,
        bundle_total_price=total_price,
        price_per_lesson=discount.price_per_lesson if discount else pricing,
        discount_min_amount=discount.min_amount if discount else None,
        revenue_projection=Decimal(payload.target_signups) * Decimal(total_price),
        partner_percentage=partner_pct,
        sqooli_percentage=sqooli_pct,
        whatsapp_number=payload.whatsapp_number or partner.phone or settings.default_whatsapp_number,
        duration_start=program.start_date,
        duration_end=program.end_date,
        status=CampaignStatus.DRAFT,
    )
    db.add(campaign)
    db.flush()
    create_notification(
        db,
        partner_id=partner.id,
        type="success",
        title="Campaign Created",
        message=f'Campaign "{campaign.name}" was created with promo code {promo_code}.',
        commit=False,
    )
    db.commit()
    db.refresh(campaign)
    logger.info("Created campaign id=%s partner_id=%s code=%s", campaign.id, partner.id, promo_code)
    return campaign


def update_campaign_status(db: Session, campaign_id: int, status: CampaignStatus) -> Campaign:
    campaign = require_campaign(db, campaign_id)
    campaign.status = status
    db.commit()
    db.refresh(campaign)
    return campaign


def delete_campaign(db: Session, campaign_id: int) -> dict:
    campaign = require_campaign(db, campaign_id)
    enrollments = db.query(ProgramEnrollment.id).filter(ProgramEnrollment.campaign_id == campaign_id).count()
    revenue_logs = db.query(PartnerRevenueLog.id).filter(PartnerRevenueLog.campaign_id == campaign_id).count()
    if enrollments or revenue_logs:
        raise PolicyViolation(
            "Cannot delete a campaign with settled revenue or enrollments",
            blocking_enrollments=enrollments,
            blocking_revenue_logs=revenue_logs,
        )
    db.delete(campaign)
    db.commit()
    return {"success": True, "message": "Campaign deleted successfully"}
