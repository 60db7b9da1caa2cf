"""Topic-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TopicCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None


class TopicUpdate(BaseModel):
    title: str | None = Field(None, max_length=200)
    description: str | None = None


class TopicLock(BaseModel):
    locked: bool = True


class TopicRead(BaseModel):
    """Schema for topic information returned by the API."""

    id: int
    title: str
    description: str | None
    is_locked: bool
    is_banned: bool
    created_at: datetime
    last_activity_at: datetime
    created_by_id: int | None

    model_config = ConfigDict(from_attributes=True)
