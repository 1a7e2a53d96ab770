from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from partner_portal.schemas.user import UserOut


class LoginRequest(BaseModel):
    # E-mail address or extension.
    identifier: str = Field(..., min_length=3, max_length=255)
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 72:
            raise ValueError("Password too long (max 72 bytes)")
        return value


class SessionOut(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserOut


class Message(BaseModel):
    message: str


class SoftResult(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
