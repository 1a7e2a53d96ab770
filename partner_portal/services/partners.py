import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core.errors import Conflict, NotFound, UserAlreadyExists
from partner_portal.models import Campaign, Partner, Permission, User, Wallet
from partner_portal.schemas.partner import PartnerCreate, PartnerUpdate
from partner_portal.services.audit import create_audit_log
from partner_portal.services.batch import run_batch
from partner_portal.services.email import deliver_credentials, mask_email
from partner_portal.services.permissions import resolve_permission_ids
from partner_portal.services.roles import PARTNER_ADMIN_ROLE, SUPER_ADMIN_ROLE, get_role_by_name
from partner_portal.services.sessions import delete_user_sessions
from partner_portal.services.users import create_user, credentials_payload, get_user_by_email, normalize_email

logger = logging.getLogger(__name__)

SYSTEM_PARTNER_EMAIL = "system@sqooli.org"
SYSTEM_PARTNER_NAME = "System"


def get_partner(db: Session, partner_id: int) -> Optional[Partner]:
    return db.query(Partner).filter(Partner.id == partner_id).first()


def require_partner(db: Session, partner_id: int) -> Partner:
    partner = get_partner(db, partner_id)
    if not partner:
        raise NotFound("Partner not found")
    return partner


def get_partner_by_email(db: Session, email: str) -> Optional[Partner]:
    return db.query(Partner).filter(Partner.email == normalize_email(email)).first()


def create_partner_organization(db: Session, payload: PartnerCreate, *, created_by: Optional[int] = None) -> dict:
    """Create a partner with its first partner_admin user.

    The generated password is returned here and e-mailed; it is not stored.
    """
    email = normalize_email(payload.email)
    admin_email = normalize_email(payload.admin_email or payload.email)
    if get_partner_by_email(db, email):
        raise Conflict(f"Partner with email {email} already exists")
    if get_user_by_email(db, admin_email):
        raise UserAlreadyExists("User with this email already exists")

    if payload.permission_ids is not None:
        permissions = resolve_permission_ids(db, payload.permission_ids)
    else:
        role = get_role_by_name(db, PARTNER_ADMIN_ROLE)
        if not role:
            raise NotFound(f'Role "{PARTNER_ADMIN_ROLE}" not found')
        permissions = list(role.permissions)

    partner = Partner(
        name=payload.name.strip(),
        email=email,
        phone=payload.phone,
        username=payload.username,
        is_first_login=True,
        is_active=True,
        permissions=permissions,
    )
    db.add(partner)
    db.flush()

    user, password = create_user(
        db,
        partner_id=partner.id,
        email=admin_email,
        name=payload.admin_name or payload.name,
        phone=payload.phone,
        role=PARTNER_ADMIN_ROLE,
        permission_ids=[p.id for p in permissions],
        commit=False,
    )
    create_audit_log(
        db,
        action="partner.create",
        entity_type="partner",
        entity_id=partner.id,
        user_id=created_by,
        partner_id=partner.id,
        details=f"Partner {partner.name} created with admin {mask_email(admin_email)}",
        commit=False,
    )
    db.commit()
    db.refresh(partner)
    db.refresh(user)
    logger.info("Created partner id=%s with admin user id=%s", partner.id, user.id)

    deliver_credentials(user.email, user.name, user.extension, password)
    return {"partner": partner, "credentials": credentials_payload(user, password)}


def _summary(db: Session, partner: Partner) -> dict:
    users_count = db.query(func.count(User.id)).filter(User.partner_id == partner.id).scalar() or 0
    campaigns_count = db.query(func.count(Campaign.id)).filter(Campaign.partner_id == partner.id).scalar() or 0
    has_wallet = db.query(Wallet.id).filter(Wallet.partner_id == partner.id).first() is not None
    return {
        "id": partner.id,
        "name": partner.name,
        "email": partner.email,
        "phone": partner.phone,
        "username": partner.username,
        "is_first_login": partner.is_first_login,
        "is_active": partner.is_active,
        "permissions": partner.permissions,
        "created_at": partner.created_at,
        "users_count": users_count,
        "campaigns_count": campaigns_count,
        "has_wallet": has_wallet,
    }


def list_partners(db: Session, include_system: bool = False) -> list[dict]:
    query = db.query(Partner)
    if not include_system:
        query = query.filter(Partner.email != SYSTEM_PARTNER_EMAIL)
    return [_summary(db, partner) for partner in query.order_by(Partner.id.asc()).all()]


def get_partner_details(db: Session, partner_id: int) -> dict:
    return _summary(db, require_partner(db, partner_id))


def update_partner(db: Session, partner_id: int, payload: PartnerUpdate) -> Partner:
    partner = require_partner(db, partner_id)
    fields_set = payload.model_fields_set

    if "email" in fields_set and payload.email is not None:
        email = normalize_email(payload.email)
        other = get_partner_by_email(db, email)
        if other and other.id != partner.id:
            raise Conflict(f"Partner with email {email} already exists")
    permissions = None
    if "permission_ids" in fields_set and payload.permission_ids is not None:
        permissions = resolve_permission_ids(db, payload.permission_ids)

    if "name" in fields_set and payload.name is not None:
        partner.name = payload.name.strip()
    if "email" in fields_set and payload.email is not None:
        partner.email = normalize_email(payload.email)
    if "phone" in fields_set:
        partner.phone = payload.phone
    if "username" in fields_set:
        partner.username = payload.username
    if permissions is not None:
        partner.permissions = permissions

    db.commit()
    db.refresh(partner)
    return partner


def complete_onboarding(db: Session, partner_id: int) -> Partner:
    partner = require_partner(db, partner_id)
    partner.is_first_login = False
    db.commit()
    db.refresh(partner)
    return partner


def toggle_partner_status(db: Session, partner_id: int) -> dict:
    """Flip the partner's active flag and fan it out to every partner user."""
    partner = require_partner(db, partner_id)
    partner.is_active = not partner.is_active
    db.commit()
    is_active = partner.is_active

    users = db.query(User).filter(User.partner_id == partner_id).order_by(User.id.asc()).all()

    def _apply(user: User) -> None:
        user.is_active = is_active
        if not is_active:
            delete_user_sessions(db, user.id, commit=False)

    result = run_batch(db, users, _apply)
    logger.info(
        "Partner id=%s is_active=%s, users updated %s/%s",
        partner_id,
        is_active,
        result["count"],
        len(users),
    )
    return {
        "partner_id": partner_id,
        "is_active": is_active,
        "users_affected": result["count"],
        "items": result["items"],
    }


def get_or_create_system_partner(db: Session) -> Partner:
    partner = get_partner_by_email(db, SYSTEM_PARTNER_EMAIL)
    if partner:
        return partner
    partner = Partner(
        name=SYSTEM_PARTNER_NAME,
        email=SYSTEM_PARTNER_EMAIL,
        is_first_login=False,
        is_active=True,
        permissions=db.query(Permission).order_by(Permission.id.asc()).all(),
    )
    db.add(partner)
    db.flush()
    return partner


def create_super_admin(db: Session, *, email: str, name: str, phone: Optional[str] = None) -> dict:
    if get_user_by_email(db, email):
        raise UserAlreadyExists("User with this email already exists")
    partner = get_or_create_system_partner(db)
    all_ids = [p.id for p in db.query(Permission).order_by(Permission.id.asc()).all()]
    user, password = create_user(
        db,
        partner_id=partner.id,
        email=email,
        name=name,
        phone=phone,
        role=SUPER_ADMIN_ROLE,
        permission_ids=all_ids,
        super_admin=True,
        commit=False,
    )
    db.commit()
    db.refresh(user)
    logger.info("Created super admin user id=%s", user.id)
    return credentials_payload(user, password)
