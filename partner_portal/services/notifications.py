from sqlalchemy import func
from sqlalchemy.orm import Session

from partner_portal.core.errors import NotFound
from partner_portal.models import Notification
from partner_portal.services.batch import run_batch

DEFAULT_LIMIT = 50


def create_notification(
    db: Session,
    *,
    partner_id: int,
    title: str,
    message: str,
    type: str = "info",
    commit: bool = True,
) -> Notification:
    notification = Notification(partner_id=partner_id, type=type, title=title, message=message, is_read=False)
    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    return notification


def get_notifications(
    db: Session,
    partner_id: int,
    unread_only: bool = False,
    limit: int = DEFAULT_LIMIT,
) -> list[Notification]:
    query = db.query(Notification).filter(Notification.partner_id == partner_id)
    if unread_only:
        query = query.filter(Notification.is_read.is_(False))
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit).all()


def get_unread_count(db: Session, partner_id: int) -> int:
    return (
        db.query(func.count(Notification.id))
        .filter(Notification.partner_id == partner_id, Notification.is_read.is_(False))
        .scalar()
        or 0
    )


def get_notification(db: Session, notification_id: int) -> Notification:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        raise NotFound("Notification not found")
    return notification


def mark_as_read(db: Session, notification_id: int) -> Notification:
    notification = get_notification(db, notification_id)
    notification.is_read = True
    db.commit()
    db.refresh(notification)
    return notification


def mark_all_as_read(db: Session, partner_id: int) -> dict:
    rows = (
        db.query(Notification)
        .filter(Notification.partner_id == partner_id, Notification.is_read.is_(False))
        .order_by(Notification.id.asc())
        .all()
    )

    def _mark(row: Notification) -> None:
        row.is_read = True

    return run_batch(db, rows, _mark)


def delete_notification(db: Session, notification_id: int) -> dict:
    notification = get_notification(db, notification_id)
    db.delete(notification)
    db.commit()
    return {"success": True}


def _delete_rows(db: Session, rows: list[Notification]) -> dict:
    return run_batch(db, rows, db.delete)


def delete_all_notifications(db: Session, partner_id: int) -> dict:
    rows = db.query(Notification).filter(Notification.partner_id == partner_id).order_by(Notification.id.asc()).all()
    return _delete_rows(db, rows)


def delete_read_notifications(db: Session, partner_id: int) -> dict:
    rows = (
        db.query(Notification)
        .filter(Notification.partner_id == partner_id, Notification.is_read.is_(True))
        .order_by(Notification.id.asc())
        .all()
    )
    return _delete_rows(db, rows)
