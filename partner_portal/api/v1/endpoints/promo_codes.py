from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import ensure_partner_access, require_permission
from partner_portal.models import PromoCode, User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.campaign import PromoCodeCreate, PromoCodeOut, PromoCodeUpdate
from partner_portal.services import promo_codes as promo_service
from partner_portal.services.campaigns import require_campaign

router = APIRouter()


def _owned(db: Session, user: User, promo_code_id: int) -> PromoCode:
    promo = promo_service.require_promo_code(db, promo_code_id)
    ensure_partner_access(user, promo.campaign.partner_id)
    return promo


@router.post("", response_model=PromoCodeOut, status_code=201)
def create_promo_code(
    payload: PromoCodeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.write")),
):
    campaign = require_campaign(db, payload.campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return promo_service.create_promo_code(db, payload)


@router.get("/lookup/{code}", response_model=PromoCodeOut)
def lookup_promo_code(
    code: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    promo = promo_service.get_promo_code_by_code(db, code)
    if not promo:
        raise NotFound("Promo code not found")
    ensure_partner_access(user, promo.campaign.partner_id)
    return promo


@router.get("/campaign/{campaign_id}", response_model=list[PromoCodeOut])
def list_for_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    campaign = require_campaign(db, campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return promo_service.get_promo_codes_by_campaign(db, campaign_id)


@router.post("/{promo_code_id}/toggle", response_model=PromoCodeOut)
def toggle_promo_code(
    promo_code_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.write")),
):
    _owned(db, user, promo_code_id)
    return promo_service.toggle_promo_code_status(db, promo_code_id)


@router.patch("/{promo_code_id}", response_model=PromoCodeOut)
def update_promo_code(
    promo_code_id: int,
    payload: PromoCodeUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.write")),
):
    _owned(db, user, promo_code_id)
    return promo_service.update_promo_code(db, promo_code_id, payload)


@router.delete("/{promo_code_id}", response_model=SoftResult)
def delete_promo_code(
    promo_code_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.admin")),
):
    _owned(db, user, promo_code_id)
    return promo_service.delete_promo_code(db, promo_code_id)
