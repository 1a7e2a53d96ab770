from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CurriculumOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CurriculumCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None


class CurriculumUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None


class SubjectOut(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SubjectCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=128)


class SubjectUpdate(BaseModel):
    name: str = Field(..., min_length=2, max_length=128)
