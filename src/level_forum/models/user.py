# src/level_forum/models/user.py
"""SQLAlchemy models for user accounts and per-topic roles."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Update,
    case,
    update,
)
from sqlalchemy.orm import Mapped, mapped_column

from level_forum.db.session import Base
from level_forum.db.time import utcnow
from level_forum.models.enums import Role


class User(Base):
    """Forum account. Level and progress are derived from ``experience``."""

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    global_role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16),
        nullable=False,
        default=Role.USER,
    )
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    is_deleted: Mapped[bool] = mapped_column(default=False, nullable=False)

    @classmethod
    def experience_adjustment(cls, user_id: int, delta: int) -> Update:
        """Build ``experience += delta`` clamped at zero as one statement.

        The arithmetic runs in the database so simultaneous adjustments of
        the same user never overwrite each other.
        """
        total = cls.experience + delta
        return (
            update(cls)
            .where(cls.id == user_id)
            .values(experience=case((total < 0, 0), else_=total))
            .execution_options(synchronize_session=False)
        )


class UserTopicRole(Base):
    """Role a user holds inside a single topic."""

    __tablename__ = "app_user_topic_role"
    __table_args__ = (
        UniqueConstraint("user_id", "topic_id", name="uq_topic_role_user_topic"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    topic_id: Mapped[int] = mapped_column(
        ForeignKey("topic.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    topic_role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, length=16),
        nullable=False,
        default=Role.USER,
    )
