"""Task domain models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, field_validator


class TaskCreate(BaseModel):
    """Data required to create a task."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class TaskUpdate(BaseModel):
    """Partial update. Only fields that are set get written."""

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1)
    status: StrictBool | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class Task(BaseModel):
    """Full task entity as stored."""

    id: UUID
    account_id: UUID
    title: str
    description: str
    status: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
