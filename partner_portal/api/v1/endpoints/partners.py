from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import ensure_partner_access, is_platform_user, require_permission, require_platform_admin
from partner_portal.models import User
from partner_portal.schemas.partner import (
    PartnerCreate,
    PartnerCreated,
    PartnerOut,
    PartnerSummary,
    PartnerUpdate,
    StatusToggleResult,
)
from partner_portal.services import partners as partner_service
from partner_portal.services.audit import create_audit_log

router = APIRouter()


@router.get("", response_model=list[PartnerSummary])
def list_partners(
    include_system: bool = False,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return partner_service.list_partners(db, include_system=include_system)


@router.post("", response_model=PartnerCreated, status_code=201)
def create_partner(
    payload: PartnerCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    return partner_service.create_partner_organization(db, payload, created_by=admin.id)


@router.get("/{partner_id}", response_model=PartnerSummary)
def get_partner(
    partner_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("settings.read")),
):
    ensure_partner_access(user, partner_id)
    return partner_service.get_partner_details(db, partner_id)


@router.patch("/{partner_id}", response_model=PartnerOut)
def update_partner(
    partner_id: int,
    payload: PartnerUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("settings.write")),
):
    ensure_partner_access(user, partner_id)
    if "permission_ids" in payload.model_fields_set and not is_platform_user(user):
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    partner = partner_service.update_partner(db, partner_id, payload)
    create_audit_log(
        db,
        action="partner.update",
        entity_type="partner",
        entity_id=partner.id,
        user_id=user.id,
        partner_id=partner.id,
        details=",".join(sorted(payload.model_fields_set)),
        ip_address=request.client.host if request.client else None,
    )
    return partner


@router.post("/{partner_id}/complete-onboarding", response_model=PartnerOut)
def complete_onboarding(
    partner_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("settings.write")),
):
    ensure_partner_access(user, partner_id)
    return partner_service.complete_onboarding(db, partner_id)


@router.post("/{partner_id}/toggle-status", response_model=StatusToggleResult)
def toggle_status(
    partner_id: int,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    result = partner_service.toggle_partner_status(db, partner_id)
    create_audit_log(
        db,
        action="partner.activate" if result["is_active"] else "partner.deactivate",
        entity_type="partner",
        entity_id=partner_id,
        user_id=admin.id,
        partner_id=partner_id,
        details=f"users_affected={result['users_affected']}",
        ip_address=request.client.host if request.client else None,
    )
    return result
