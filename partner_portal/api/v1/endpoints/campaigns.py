from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import ensure_partner_access, is_platform_user, require_permission, resolve_partner_id
from partner_portal.models import CampaignStatus, User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.campaign import CampaignCreate, CampaignOut, CampaignStatusUpdate
from partner_portal.schemas.revenue import CampaignEarnings, EnrollmentDetail
from partner_portal.services import campaigns as campaign_service
from partner_portal.services.enrollments import list_enrollments_by_campaign
from partner_portal.services.revenue import get_campaign_earnings

router = APIRouter()


def _visible(user: User, campaigns):
    if is_platform_user(user):
        return campaigns
    return [c for c in campaigns if c.partner_id == user.partner_id]


@router.get("", response_model=list[CampaignOut])
def list_campaigns(
    status: Optional[CampaignStatus] = None,
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    if partner_id is not None or not is_platform_user(user):
        campaigns = campaign_service.get_campaigns_by_partner(db, resolve_partner_id(user, partner_id))
        if status is not None:
            campaigns = [c for c in campaigns if c.status == status]
    else:
        campaigns = campaign_service.list_campaigns(db, status=status)
    return [CampaignOut.from_campaign(c) for c in campaigns]


@router.post("", response_model=CampaignOut, status_code=201)
def create_campaign(
    payload: CampaignCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.write")),
):
    partner_id = resolve_partner_id(user, payload.partner_id)
    campaign = campaign_service.create_campaign(db, payload, partner_id=partner_id, user_id=user.id)
    return CampaignOut.from_campaign(campaign)


@router.get("/earnings", response_model=list[CampaignEarnings])
def campaign_earnings(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    return get_campaign_earnings(db, resolve_partner_id(user, partner_id))


@router.get("/by-code/{promo_code}", response_model=CampaignOut)
def get_campaign_by_code(
    promo_code: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    campaign = campaign_service.get_campaign_by_promo_code(db, promo_code)
    if not campaign:
        raise NotFound("Campaign not found")
    ensure_partner_access(user, campaign.partner_id)
    return CampaignOut.from_campaign(campaign)


@router.get("/by-program/{program_id}", response_model=list[CampaignOut])
def get_campaigns_by_program(
    program_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    campaigns = _visible(user, campaign_service.get_campaigns_by_program(db, program_id))
    return [CampaignOut.from_campaign(c) for c in campaigns]


@router.get("/{campaign_id}", response_model=CampaignOut)
def get_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    campaign = campaign_service.require_campaign(db, campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return CampaignOut.from_campaign(campaign)


@router.get("/{campaign_id}/enrollments", response_model=list[EnrollmentDetail])
def get_campaign_enrollments(
    campaign_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    campaign = campaign_service.require_campaign(db, campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return list_enrollments_by_campaign(db, campaign_id)


@router.patch("/{campaign_id}/status", response_model=CampaignOut)
def update_status(
    campaign_id: int,
    payload: CampaignStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.admin")),
):
    campaign = campaign_service.require_campaign(db, campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return CampaignOut.from_campaign(campaign_service.update_campaign_status(db, campaign_id, payload.status))


@router.delete("/{campaign_id}", response_model=SoftResult)
def delete_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.admin")),
):
    campaign = campaign_service.require_campaign(db, campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return campaign_service.delete_campaign(db, campaign_id)
