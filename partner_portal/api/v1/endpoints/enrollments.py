from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.core.errors import NotFound
from partner_portal.dependencies import ensure_partner_access, require_permission, require_platform_admin, resolve_partner_id
from partner_portal.models import User
from partner_portal.schemas.revenue import EnrollmentCreate, EnrollmentDetail, EnrollmentOut, EnrollmentStatusUpdate
from partner_portal.services import enrollments as enrollment_service
from partner_portal.services.campaigns import require_campaign

router = APIRouter()


@router.post("", response_model=EnrollmentOut, status_code=201)
def create_enrollment(
    payload: EnrollmentCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return enrollment_service.create_enrollment(db, **payload.model_dump())


@router.get("", response_model=list[EnrollmentDetail])
def list_enrollments(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    return enrollment_service.list_enrollments_by_partner(db, resolve_partner_id(user, partner_id))


@router.get("/by-transaction/{transaction_id}", response_model=EnrollmentOut)
def get_by_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    enrollment = enrollment_service.get_enrollment_by_transaction_id(db, transaction_id)
    if not enrollment:
        raise NotFound("Enrollment not found")
    ensure_partner_access(user, enrollment.campaign.partner_id)
    return enrollment


@router.get("/campaign/{campaign_id}", response_model=list[EnrollmentDetail])
def list_for_campaign(
    campaign_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("campaigns.read")),
):
    campaign = require_campaign(db, campaign_id)
    ensure_partner_access(user, campaign.partner_id)
    return enrollment_service.list_enrollments_by_campaign(db, campaign_id)


@router.patch("/{enrollment_id}/status", response_model=EnrollmentOut)
def update_status(
    enrollment_id: int,
    payload: EnrollmentStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_platform_admin),
):
    _ = admin
    return enrollment_service.update_enrollment_status(db, enrollment_id, payload.status)
