"""Opaque bearer sessions with a fixed TTL.

Expiry is checked when a session is read: an expired row is deleted and the
lookup reports no session. There is no background sweeper.
"""
from datetime import timedelta
import logging
from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.core import clock
from partner_portal.core.config import get_settings
from partner_portal.core.security import generate_session_token
from partner_portal.models import User, UserSession

logger = logging.getLogger(__name__)


def create_session(db: Session, user: User) -> UserSession:
    settings = get_settings()
    now = clock.utcnow()
    session = UserSession(
        user_id=user.id,
        token=generate_session_token(),
        created_at=now,
        expires_at=now + timedelta(minutes=settings.session_ttl_minutes),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def validate_session(db: Session, token: str) -> Optional[tuple[User, UserSession]]:
    if not token:
        return None
    session = db.query(UserSession).filter(UserSession.token == token).first()
    if not session:
        return None

    if clock.utcnow() > clock.as_utc(session.expires_at):
        db.delete(session)
        db.commit()
        logger.info("Expired session removed for user_id=%s", session.user_id)
        return None

    user = db.query(User).filter(User.id == session.user_id).first()
    if not user:
        return None
    return user, session


def delete_session(db: Session, token: str) -> dict:
    session = db.query(UserSession).filter(UserSession.token == token).first()
    if not session:
        return {"success": False, "message": "Session not found"}
    db.delete(session)
    db.commit()
    return {"success": True}


def delete_user_sessions(db: Session, user_id: int, *, keep_token: Optional[str] = None, commit: bool = True) -> int:
    query = db.query(UserSession).filter(UserSession.user_id == user_id)
    if keep_token:
        query = query.filter(UserSession.token != keep_token)
    deleted = query.delete(synchronize_session=False)
    if commit:
        db.commit()
    return deleted
