"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from level_forum.models import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    """Schema for registering a user record.

    Password hashing happens upstream; only the hash is ever received.
    """

    username: str = Field(..., min_length=1, max_length=64)
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password_hash: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Partial profile update."""

    email: str | None = Field(None, max_length=255, pattern=EMAIL_PATTERN)
    avatar_url: str | None = Field(None, max_length=2000)


class UsernameChange(BaseModel):
    username: str = Field(..., max_length=64)


class ExperienceGrant(BaseModel):
    delta: int


class UserPublicRead(BaseModel):
    """What anyone may see about a user, with derived level and progress."""

    id: int
    username: str
    global_role: Role
    experience: int
    avatar_url: str | None
    created_at: datetime
    level: int = Field(..., description="Derived from experience; never stored")
    progress: float = Field(..., ge=0.0, le=1.0, description="Progress to the next level")

    model_config = ConfigDict(from_attributes=True)


class UserRead(UserPublicRead):
    """Full view of a user, shown to the user themselves and to admins."""

    email: str


class TopicRoleAssignment(BaseModel):
    """Role granted to one user inside a topic."""

    user_id: int
    topic_role: Role


class TopicRoleRead(TopicRoleAssignment):
    topic_id: int
    username: str | None = None

    model_config = ConfigDict(from_attributes=True)
