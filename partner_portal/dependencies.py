from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.models import User, UserSession
from partner_portal.services.permissions import ALL_ACCESS_ADMIN, has_all_access, has_permission, permission_keys
from partner_portal.services.sessions import validate_session

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> tuple[User, UserSession]:
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    resolved = validate_session(db, credentials.credentials)
    if not resolved:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired session")
    user, session = resolved
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is inactive")
    return user, session


def get_current_user(resolved: tuple[User, UserSession] = Depends(get_current_session)) -> User:
    return resolved[0]


def user_permission_keys(user: User) -> set[str]:
    return permission_keys(user.permissions)


def require_permission(required: str):
    def _dependency(user: User = Depends(get_current_user)) -> User:
        if not has_permission(user_permission_keys(user), required):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return _dependency


require_platform_admin = require_permission(ALL_ACCESS_ADMIN)


def is_platform_user(user: User) -> bool:
    return has_all_access(user_permission_keys(user))


def ensure_partner_access(user: User, partner_id: int) -> None:
    if partner_id != user.partner_id and not is_platform_user(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access to this partner is not allowed")


def resolve_partner_id(user: User, partner_id: Optional[int]) -> int:
    if partner_id is None:
        return user.partner_id
    ensure_partner_access(user, partner_id)
    return partner_id
