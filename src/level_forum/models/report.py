# src/level_forum/models/report.py
"""Models tracking user reports against content."""

from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from level_forum.db.session import Base
from level_forum.db.time import utcnow
from level_forum.models.enums import ContentType, ReportStatus


class Report(Base):
    """A user's complaint about a post or comment.

    Several reports may point at the same target; removing the target closes
    all of them.
    """

    __tablename__ = "report"
    __table_args__ = (Index("ix_report_target", "target_type", "target_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target_type: Mapped[ContentType] = mapped_column(
        Enum(ContentType, native_enum=False, length=16),
        nullable=False,
    )
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus, native_enum=False, length=16),
        nullable=False,
        default=ReportStatus.OPEN,
    )
    reporter_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    reviewed_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("app_user.id"),
        nullable=True,
    )
    review_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def stamp_review(self, status: ReportStatus, reviewer_id: int, note: str | None) -> None:
        """Record a moderator decision."""
        self.status = status
        self.reviewed_by_id = reviewer_id
        self.reviewed_at = utcnow()
        self.review_note = note
