"""Post and comment Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PostSort = Literal["new", "top", "active"]


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=300)
    body: str = Field("", max_length=20000)


class PostUpdate(BaseModel):
    title: str | None = Field(None, max_length=300)
    body: str | None = Field(None, max_length=20000)


class PostRead(BaseModel):
    """Post as seen by a (possibly anonymous) viewer."""

    id: int
    topic_id: int
    author_id: int
    title: str
    body: str
    created_at: datetime
    updated_at: datetime | None
    score: int = 0
    my_vote: int = 0

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1, max_length=10000)
    parent_comment_id: int | None = None


class CommentReply(BaseModel):
    body: str = Field(..., min_length=1, max_length=10000)


class CommentUpdate(BaseModel):
    body: str = Field(..., min_length=1, max_length=10000)


class CommentRead(BaseModel):
    """Comment as seen by a (possibly anonymous) viewer."""

    id: int
    post_id: int
    author_id: int
    author_username: str | None = None
    parent_comment_id: int | None
    body: str
    created_at: datetime
    updated_at: datetime | None
    score: int = 0
    my_vote: int = 0

    model_config = ConfigDict(from_attributes=True)
