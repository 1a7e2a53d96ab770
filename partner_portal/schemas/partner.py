from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from partner_portal.schemas.notification import BatchItem
from partner_portal.schemas.role import PermissionOut
from partner_portal.schemas.user import UserCredentials


class PartnerOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    phone: Optional[str] = None
    username: Optional[str] = None
    is_first_login: bool
    is_active: bool
    permissions: list[PermissionOut] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PartnerSummary(PartnerOut):
    users_count: int = 0
    campaigns_count: int = 0
    has_wallet: bool = False


class PartnerCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=32)
    username: Optional[str] = Field(default=None, max_length=128)
    admin_name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    # Login e-mail of the first partner admin; defaults to the partner e-mail.
    admin_email: Optional[EmailStr] = None
    permission_ids: Optional[list[int]] = None


class PartnerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=32)
    username: Optional[str] = Field(default=None, max_length=128)
    permission_ids: Optional[list[int]] = None


class PartnerCreated(BaseModel):
    partner: PartnerOut
    credentials: UserCredentials


class StatusToggleResult(BaseModel):
    partner_id: int
    is_active: bool
    users_affected: int
    items: list[BatchItem] = []
