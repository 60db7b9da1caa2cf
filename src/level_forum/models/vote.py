# src/level_forum/models/vote.py
"""Vote ledger rows."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Enum,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from level_forum.db.session import Base
from level_forum.db.time import utcnow
from level_forum.models.enums import ContentType


class Vote(Base):
    """Per-user vote on a post or comment.

    Removing a vote deletes the row, so a stored value is always 1 or -1.
    """

    __tablename__ = "vote"
    __table_args__ = (
        CheckConstraint("value IN (1, -1)", name="ck_vote_value"),
        # One vote per (user, target); changing a vote updates this row.
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_vote_user_target"),
        Index("ix_vote_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[ContentType] = mapped_column(
        Enum(ContentType, native_enum=False, length=16),
        nullable=False,
    )
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    # 1 = upvote, -1 = downvote.
    value: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
