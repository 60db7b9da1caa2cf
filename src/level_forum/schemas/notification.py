"""Notification Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from level_forum.models import ContentType


class NotificationRead(BaseModel):
    id: int
    target_type: ContentType
    target_id: int
    user_id: int
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
