"""Report-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from level_forum.models import ContentType, ReportStatus


class ReportCreate(BaseModel):
    """Schema for reporting a post or comment."""

    target_type: ContentType
    target_id: int
    reason: str = Field(..., min_length=1, max_length=2000)


class ReportDecision(BaseModel):
    note: str | None = Field(None, max_length=2000)


class ReportRead(BaseModel):
    """Schema for report information returned by the API."""

    id: int
    target_type: ContentType
    target_id: int
    reason: str
    status: ReportStatus
    reporter_id: int
    reviewed_by_id: int | None
    review_note: str | None
    created_at: datetime
    reviewed_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class ReportTargetInfo(BaseModel):
    """Where a reported item lives, with a short excerpt."""

    post_id: int
    topic_id: int
    snippet: str
