from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChannelOut(BaseModel):
    id: int
    partner_id: int
    name: str
    code: str
    subchannels: list[str] = []
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChannelCreate(BaseModel):
    # Defaults to the caller's partner.
    partner_id: Optional[int] = None
    name: str = Field(..., min_length=2, max_length=255)
    code: str = Field(..., min_length=2, max_length=64)
    subchannels: list[str] = []
    description: Optional[str] = None


class ChannelUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    code: Optional[str] = Field(default=None, min_length=2, max_length=64)
    subchannels: Optional[list[str]] = None
    description: Optional[str] = None
