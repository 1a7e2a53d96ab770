"""Promo codes attached to campaigns.

Codes are upper-cased on write and on lookup. They are a separate code space
from ``Campaign.promo_code``, which settlement matches exactly.
"""
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core.errors import Conflict, NotFound
from partner_portal.models import PromoCode
from partner_portal.schemas.campaign import PromoCodeCreate, PromoCodeUpdate
from partner_portal.services.campaigns import require_campaign


def canonical_code(code: str) -> str:
    return (code or "").strip().upper()


def get_promo_code_by_code(db: Session, code: str) -> Optional[PromoCode]:
    return db.query(PromoCode).filter(PromoCode.code == canonical_code(code)).first()


def get_promo_codes_by_campaign(db: Session, campaign_id: int) -> list[PromoCode]:
    return db.query(PromoCode).filter(PromoCode.campaign_id == campaign_id).order_by(PromoCode.id.asc()).all()


def require_promo_code(db: Session, promo_code_id: int) -> PromoCode:
    promo = db.query(PromoCode).filter(PromoCode.id == promo_code_id).first()
    if not promo:
        raise NotFound("Promo code not found")
    return promo


def create_promo_code(db: Session, payload: PromoCodeCreate) -> PromoCode:
    require_campaign(db, payload.campaign_id)
    code = canonical_code(payload.code)
    if get_promo_code_by_code(db, code):
        raise Conflict(f"Promo code {code} already exists")

    promo = PromoCode(
        campaign_id=payload.campaign_id,
        code=code,
        label=payload.label,
        description=payload.description,
        is_active=True,
    )
    db.add(promo)
    db.commit()
    db.refresh(promo)
    return promo


def toggle_promo_code_status(db: Session, promo_code_id: int) -> PromoCode:
    promo = require_promo_code(db, promo_code_id)
    promo.is_active = not promo.is_active
    db.commit()
    db.refresh(promo)
    return promo


def update_promo_code(db: Session, promo_code_id: int, payload: PromoCodeUpdate) -> PromoCode:
    promo = require_promo_code(db, promo_code_id)
    fields_set = payload.model_fields_set
    if "label" in fields_set:
        promo.label = payload.label
    if "description" in fields_set:
        promo.description = payload.description
    db.commit()
    db.refresh(promo)
    return promo


def delete_promo_code(db: Session, promo_code_id: int) -> dict:
    promo = require_promo_code(db, promo_code_id)
    db.delete(promo)
    db.commit()
    return {"success": True}
