from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class NotificationOut(BaseModel):
    id: int
    partner_id: int
    type: str
    title: str
    message: str
    is_read: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UnreadCount(BaseModel):
    count: int


class BatchItem(BaseModel):
    id: int
    success: bool
    error: Optional[str] = None


class BatchResult(BaseModel):
    """Outcome of a bulk update. Rows are applied one by one; earlier rows stay applied."""

    success: bool
    count: int
    items: list[BatchItem] = []


class AuditLogOut(BaseModel):
    id: int
    user_id: Optional[int] = None
    partner_id: Optional[int] = None
    action: str
    entity_type: str
    entity_id: Optional[str] = None
    details: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
