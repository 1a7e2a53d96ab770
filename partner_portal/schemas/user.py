from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from partner_portal.schemas.role import PermissionOut


def _validate_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > 72:
        raise ValueError("Password too long (max 72 bytes)")
    return value


class UserOut(BaseModel):
    id: int
    partner_id: int
    email: EmailStr
    name: str
    phone: Optional[str] = None
    role: str
    extension: str
    is_active: bool
    is_account_activated: bool
    is_first_login: bool
    last_login: Optional[datetime] = None
    permissions: list[PermissionOut] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    role: str = "viewer"
    # Omit to start from the role's permissions.
    permission_ids: Optional[list[int]] = None
    partner_id: Optional[int] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    role: Optional[str] = None
    permission_ids: Optional[list[int]] = None
    is_active: Optional[bool] = None
    is_account_activated: Optional[bool] = None


class UserCredentials(BaseModel):
    """Generated credentials. Only ever returned once."""

    user: UserOut
    email: EmailStr
    extension: str
    password: str
    login_url: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)

    @field_validator("new_password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _validate_password_length(value)
