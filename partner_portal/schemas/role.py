from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from partner_portal.models.permission import PermissionCategory, PermissionLevel


class PermissionOut(BaseModel):
    id: int
    key: str
    name: str
    description: Optional[str] = None
    category: PermissionCategory
    level: PermissionLevel
    is_default: bool

    model_config = ConfigDict(from_attributes=True)


class RoleOut(BaseModel):
    id: int
    name: str
    display_name: str
    description: Optional[str] = None
    is_system_role: bool
    is_active: bool
    permissions: list[PermissionOut] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=64)
    display_name: str = Field(..., min_length=2, max_length=128)
    description: Optional[str] = None
    permission_ids: list[int] = []
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        name = value.strip().lower().replace(" ", "_")
        if not name:
            raise ValueError("Role name is required")
        return name


class RoleUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, min_length=2, max_length=128)
    description: Optional[str] = None
    permission_ids: Optional[list[int]] = None
    is_active: Optional[bool] = None


class RolePermissionsAssign(BaseModel):
    permission_ids: list[int]


class SeedResult(BaseModel):
    message: str
    existing_count: int = 0
    created: int = 0
