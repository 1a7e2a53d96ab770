from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from partner_portal.core.database import get_db
from partner_portal.dependencies import ensure_partner_access, get_current_user, resolve_partner_id
from partner_portal.models import Notification, User
from partner_portal.schemas.auth import SoftResult
from partner_portal.schemas.notification import BatchResult, NotificationOut, UnreadCount
from partner_portal.services import notifications as notification_service

router = APIRouter()


def _owned(db: Session, user: User, notification_id: int) -> Notification:
    notification = notification_service.get_notification(db, notification_id)
    ensure_partner_access(user, notification.partner_id)
    return notification


@router.get("", response_model=list[NotificationOut])
def list_notifications(
    unread_only: bool = False,
    limit: int = Query(default=notification_service.DEFAULT_LIMIT, ge=1, le=200),
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return notification_service.get_notifications(
        db,
        resolve_partner_id(user, partner_id),
        unread_only=unread_only,
        limit=limit,
    )


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return UnreadCount(count=notification_service.get_unread_count(db, resolve_partner_id(user, partner_id)))


@router.post("/read-all", response_model=BatchResult)
def mark_all_read(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return notification_service.mark_all_as_read(db, resolve_partner_id(user, partner_id))


@router.delete("/read", response_model=BatchResult)
def delete_read(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return notification_service.delete_read_notifications(db, resolve_partner_id(user, partner_id))


@router.delete("", response_model=BatchResult)
def delete_all(
    partner_id: Optional[int] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return notification_service.delete_all_notifications(db, resolve_partner_id(user, partner_id))


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _owned(db, user, notification_id)
    return notification_service.mark_as_read(db, notification_id)


@router.delete("/{notification_id}", response_model=SoftResult)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _owned(db, user, notification_id)
    return notification_service.delete_notification(db, notification_id)
