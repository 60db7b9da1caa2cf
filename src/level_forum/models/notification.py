# src/level_forum/models/notification.py
"""Write-once notifications shown to users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from level_forum.db.session import Base
from level_forum.db.time import utcnow
from level_forum.models.enums import ContentType

SNIPPET_LENGTH = 100


def _snippet(text: str | None, limit: int = SNIPPET_LENGTH) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "…"


class Notification(Base):
    """Message addressed to one user about a post or comment."""

    __tablename__ = "notification"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[ContentType] = mapped_column(
        Enum(ContentType, native_enum=False, length=16),
        nullable=False,
    )
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)

    @classmethod
    def for_post_comment(
        cls,
        post_id: int,
        post_author_id: int,
        post_title: str,
        comment_body: str,
    ) -> Notification:
        """Notify a post author that someone commented."""
        return cls(
            target_type=ContentType.POST,
            target_id=post_id,
            user_id=post_author_id,
            message=f'New comment on your post "{post_title}": {_snippet(comment_body)}',
            created_at=utcnow(),
        )

    @classmethod
    def for_comment_reply(
        cls,
        parent_comment_id: int,
        parent_author_id: int,
        reply_body: str,
    ) -> Notification:
        """Notify a comment author that someone replied."""
        return cls(
            target_type=ContentType.COMMENT,
            target_id=parent_comment_id,
            user_id=parent_author_id,
            message=f"New reply to your comment: {_snippet(reply_body)}",
            created_at=utcnow(),
        )
