import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from partner_portal.core import clock
from partner_portal.core.errors import NotFound, UserAlreadyExists, ValidationFailed
from partner_portal.core.security import generate_extension, generate_password, hash_password, verify_password
from partner_portal.models import Permission, User
from partner_portal.schemas.user import UserUpdate
from partner_portal.services.email import build_login_url
from partner_portal.services.permissions import get_default_permissions, resolve_permission_ids
from partner_portal.services.roles import get_role_by_name
from partner_portal.services.sessions import delete_user_sessions

logger = logging.getLogger(__name__)


def normalize_email(value: str) -> str:
    return (value or "").strip().lower()


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def require_user(db: Session, user_id: int) -> User:
    user = get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def list_users(db: Session, partner_id: Optional[int] = None) -> list[User]:
    query = db.query(User)
    if partner_id is not None:
        query = query.filter(User.partner_id == partner_id)
    return query.order_by(User.id.asc()).all()


def _unique_extension(db: Session, super_admin: bool = False) -> str:
    while True:
        extension = generate_extension(super_admin=super_admin)
        if not db.query(User.id).filter(User.extension == extension).first():
            return extension


def initial_permissions(db: Session, role_name: str, permission_ids: Optional[list[int]]) -> list[Permission]:
    """Capability set for a new user.

    Explicit ids win. Otherwise the role's permissions are copied once; the
    user keeps that copy even if the role is edited later.
    """
    role = get_role_by_name(db, role_name)
    if not role:
        raise NotFound(f'Role "{role_name}" not found')
    if permission_ids is not None:
        return resolve_permission_ids(db, permission_ids)
    if role.permissions:
        return list(role.permissions)
    return get_default_permissions(db)


def create_user(
    db: Session,
    *,
    partner_id: int,
    email: str,
    name: str,
    phone: Optional[str] = None,
    role: str = "viewer",
    permission_ids: Optional[list[int]] = None,
    super_admin: bool = False,
    commit: bool = True,
) -> tuple[User, str]:
    """Create a user with a generated password and extension.

    Returns the user and the plaintext password. The password is not stored
    and cannot be recovered later.
    """
    email = normalize_email(email)
    if get_user_by_email(db, email):
        raise UserAlreadyExists("User with this email already exists")
    permissions = initial_permissions(db, role, permission_ids)

    password = generate_password()
    user = User(
        partner_id=partner_id,
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        phone=phone,
        role=role,
        extension=_unique_extension(db, super_admin=super_admin),
        is_active=True,
        is_account_activated=True,
        is_first_login=True,
        permissions=permissions,
    )
    db.add(user)
    if commit:
        db.commit()
        db.refresh(user)
    else:
        db.flush()
    logger.info("Created user id=%s partner_id=%s role=%s", user.id, partner_id, role)
    return user, password


def update_user(db: Session, user_id: int, payload: UserUpdate) -> User:
    user = require_user(db, user_id)
    fields_set = payload.model_fields_set

    permissions = None
    if "permission_ids" in fields_set and payload.permission_ids is not None:
        permissions = resolve_permission_ids(db, payload.permission_ids)
    if "role" in fields_set and payload.role is not None and not get_role_by_name(db, payload.role):
        raise NotFound(f'Role "{payload.role}" not found')

    if "name" in fields_set and payload.name is not None:
        user.name = payload.name.strip()
    if "phone" in fields_set:
        user.phone = payload.phone
    if "role" in fields_set and payload.role is not None:
        # Changing the role label does not touch permissions.
        user.role = payload.role
    if "is_active" in fields_set and payload.is_active is not None:
        user.is_active = payload.is_active
        if not payload.is_active:
            delete_user_sessions(db, user.id, commit=False)
    if "is_account_activated" in fields_set and payload.is_account_activated is not None:
        user.is_account_activated = payload.is_account_activated
    if permissions is not None:
        user.permissions = permissions

    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: int) -> dict:
    user = require_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user id=%s", user_id)
    return {"success": True, "message": "User deleted successfully"}


def reset_user_password(db: Session, user_id: int) -> tuple[User, str]:
    user = require_user(db, user_id)
    password = generate_password()
    user.password_hash = hash_password(password)
    user.is_first_login = True
    delete_user_sessions(db, user.id, commit=False)
    db.commit()
    db.refresh(user)
    return user, password


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValidationFailed("Current password is incorrect")
    user.password_hash = hash_password(new_password)
    user.is_first_login = False
    db.commit()


def authenticate(db: Session, identifier: str, password: str) -> Optional[User]:
    """Resolve a login by e-mail or extension. Returns None on any mismatch."""
    raw = (identifier or "").strip()
    user = (
        db.query(User)
        .filter(or_(User.email == raw.lower(), User.extension == raw))
        .first()
    )
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def record_login(db: Session, user: User) -> None:
    user.last_login = clock.utcnow()
    user.is_first_login = False
    db.commit()


def credentials_payload(user: User, password: str) -> dict:
    return {
        "user": user,
        "email": user.email,
        "extension": user.extension,
        "password": password,
        "login_url": build_login_url(user.extension),
    }
