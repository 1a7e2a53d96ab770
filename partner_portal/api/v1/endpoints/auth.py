import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import bearer_scheme, get_current_session, get_current_user
from partner_portal.middlewares.rate_limit import limiter
from partner_portal.models import User, UserSession
from partner_portal.schemas.auth import LoginRequest, Message, SessionOut, SoftResult
from partner_portal.schemas.user import ChangePasswordRequest, UserOut
from partner_portal.services import users as user_service
from partner_portal.services.audit import create_audit_log
from partner_portal.services.sessions import create_session, delete_session, delete_user_sessions

router = APIRouter()
logger = logging.getLogger(__name__)


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


@router.post("/login", response_model=SessionOut)
@limiter.limit("10/minute")
def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, payload.identifier, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User is inactive")

    user_service.record_login(db, user)
    session = create_session(db, user)
    create_audit_log(
        db,
        action="auth.login",
        entity_type="user",
        entity_id=user.id,
        user_id=user.id,
        partner_id=user.partner_id,
        ip_address=client_ip(request),
    )
    return SessionOut(token=session.token, expires_at=session.expires_at, user=UserOut.model_validate(user))


@router.post("/logout", response_model=SoftResult)
def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    if not credentials or not credentials.credentials:
        return SoftResult(success=False, message="Session not found")
    return delete_session(db, credentials.credentials)


@router.get("/session", response_model=SessionOut)
def current_session(resolved: tuple[User, UserSession] = Depends(get_current_session)):
    user, session = resolved
    return SessionOut(token=session.token, expires_at=session.expires_at, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user


@router.post("/change-password", response_model=Message)
@limiter.limit("5/minute")
def change_password(
    request: Request,
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    resolved: tuple[User, UserSession] = Depends(get_current_session),
):
    user, session = resolved
    user_service.change_password(db, user, payload.current_password, payload.new_password)
    # Other devices sign in again; the caller keeps its session.
    revoked = delete_user_sessions(db, user.id, keep_token=session.token)
    logger.info("Password changed for user id=%s, %s other session(s) revoked", user.id, revoked)
    return Message(message="Password updated successfully")
