# src/level_forum/models/comment.py
"""SQLAlchemy model for comments and replies."""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from level_forum.db.session import Base
from level_forum.db.time import utcnow


class Comment(Base):
    """Comment on a post.

    Root comments have ``parent_comment_id = NULL``; replies point at a root
    comment of the same post, so the tree is never deeper than one level.
    """

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("post.id"), nullable=False, index=True)
    author_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    parent_comment_id: Mapped[int | None] = mapped_column(
        ForeignKey("comment.id"),
        nullable=True,
        index=True,
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(nullable=True)
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)
