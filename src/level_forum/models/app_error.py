# src/level_forum/models/app_error.py
"""Error sink rows written by the safe execution wrapper."""

from datetime import datetime

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from level_forum.db.session import Base
from level_forum.db.time import utcnow


class AppError(Base):
    """One failed operation."""

    __tablename__ = "app_error"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Operation name, e.g. "VoteService.toggle_vote".
    source: Mapped[str] = mapped_column(String(200), nullable=False)
    error_type: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    message: Mapped[str] = mapped_column(Text, nullable=False, default="")
    stack_trace: Mapped[str | None] = mapped_column(Text, nullable=True)
    # JSON snapshot of the call parameters.
    context: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
