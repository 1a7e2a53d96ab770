from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core.errors import NotFound
from partner_portal.models import Campaign, EnrollmentStatus, Partner, ProgramEnrollment
from partner_portal.services.campaigns import require_campaign
from partner_portal.services.programs import require_program


def create_enrollment(
    db: Session,
    *,
    program_id: int,
    campaign_id: int,
    redeem_code: str,
    status: EnrollmentStatus = EnrollmentStatus.PENDING,
    transaction_id: Optional[int] = None,
    user_id: Optional[int] = None,
    meta: Optional[dict] = None,
    commit: bool = True,
) -> ProgramEnrollment:
    """Insert an enrollment.

    ``transaction_id`` is unique at the database level; callers settling a
    transaction check ``get_enrollment_by_transaction_id`` first.
    """
    require_program(db, program_id)
    require_campaign(db, campaign_id)
    enrollment = ProgramEnrollment(
        program_id=program_id,
        campaign_id=campaign_id,
        user_id=user_id,
        redeem_code=redeem_code,
        transaction_id=transaction_id,
        status=status,
        meta=meta,
    )
    db.add(enrollment)
    if commit:
        db.commit()
        db.refresh(enrollment)
    else:
        db.flush()
    return enrollment


def get_enrollment_by_transaction_id(db: Session, transaction_id: int) -> Optional[ProgramEnrollment]:
    return db.query(ProgramEnrollment).filter(ProgramEnrollment.transaction_id == transaction_id).first()


def _detail(enrollment: ProgramEnrollment, campaign_name: Optional[str], partner_name: Optional[str]) -> dict:
    return {
        "id": enrollment.id,
        "program_id": enrollment.program_id,
        "campaign_id": enrollment.campaign_id,
        "user_id": enrollment.user_id,
        "redeem_code": enrollment.redeem_code,
        "transaction_id": enrollment.transaction_id,
        "status": enrollment.status,
        "meta": enrollment.meta,
        "created_at": enrollment.created_at,
        "campaign_name": campaign_name,
        "partner_name": partner_name,
    }


def _with_names(query) -> list[dict]:
    rows = (
        query.join(Campaign, Campaign.id == ProgramEnrollment.campaign_id)
        .join(Partner, Partner.id == Campaign.partner_id)
        .add_columns(Campaign.name, Partner.name)
        .order_by(ProgramEnrollment.id.desc())
        .all()
    )
    return [_detail(enrollment, campaign_name, partner_name) for enrollment, campaign_name, partner_name in rows]


def list_enrollments_by_campaign(db: Session, campaign_id: int) -> list[dict]:
    return _with_names(db.query(ProgramEnrollment).filter(ProgramEnrollment.campaign_id == campaign_id))


def list_enrollments_by_partner(db: Session, partner_id: int) -> list[dict]:
    return _with_names(db.query(ProgramEnrollment).filter(Campaign.partner_id == partner_id))


def update_enrollment_status(db: Session, enrollment_id: int, status: EnrollmentStatus) -> ProgramEnrollment:
    enrollment = db.query(ProgramEnrollment).filter(ProgramEnrollment.id == enrollment_id).first()
    if not enrollment:
        raise NotFound("Enrollment not found")
    enrollment.status = status
    db.commit()
    db.refresh(enrollment)
    return enrollment
