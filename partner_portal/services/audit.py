from typing import Optional

from sqlalchemy.orm import Session

from partner_portal.models import AuditLog


def create_audit_log(
    db: Session,
    *,
    action: str,
    entity_type: str,
    entity_id=None,
    user_id: Optional[int] = None,
    partner_id: Optional[int] = None,
    details: Optional[str] = None,
    ip_address: Optional[str] = None,
    commit: bool = True,
) -> AuditLog:
    entry = AuditLog(
        user_id=user_id,
        partner_id=partner_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        details=details,
        ip_address=ip_address,
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    return entry


def get_audit_logs(
    db: Session,
    user_id: Optional[int] = None,
    partner_id: Optional[int] = None,
    limit: int = 100,
) -> list[AuditLog]:
    query = db.query(AuditLog)
    if user_id is not None:
        query = query.filter(AuditLog.user_id == user_id)
    if partner_id is not None:
        query = query.filter(AuditLog.partner_id == partner_id)
    return query.order_by(AuditLog.id.desc()).limit(limit).all()


def get_audit_logs_by_action(db: Session, action: str, limit: int = 100) -> list[AuditLog]:
    return (
        db.query(AuditLog)
        .filter(AuditLog.action == action)
        .order_by(AuditLog.id.desc())
        .limit(limit)
        .all()
    )
