"""Report workflow: Open -> Closed, with cascading closes on target removal."""

from __future__ import annotations

import logging

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from level_forum.core.errors import NotFoundError
from level_forum.db.time import utcnow
from level_forum.models import Comment, ContentType, Post, Report, ReportStatus, Target
from level_forum.schemas.common import Page
from level_forum.schemas.report import ReportRead, ReportTargetInfo
from level_forum.services.base import ForumService
from level_forum.services.content import (
    parse_target,
    require_active_user,
    soft_delete_target,
)
from level_forum.services.safe_execution import safe_operation

logger = logging.getLogger(__name__)

ELLIPSIS = "…"


def target_removed_note(report_id: int) -> str:
    """Review note stamped on reports closed because their target was removed."""
    return f"Target removed via report #{report_id}."


class ReportService(ForumService):
    """Service handling moderation reports."""

    @staticmethod
    async def _get_report(db: AsyncSession, report_id: int) -> Report:
        report = await db.get(Report, report_id)
        if report is None:
            raise NotFoundError("Report not found.")
        return report

    @staticmethod
    async def _target_is_live(db: AsyncSession, target: Target) -> bool:
        if target.type is ContentType.POST:
            clause = exists().where(Post.id == target.id, Post.is_deleted.is_(False))
        elif target.type is ContentType.COMMENT:
            clause = exists().where(Comment.id == target.id, Comment.is_deleted.is_(False))
        else:
            return False
        return bool(await db.scalar(select(clause)))

    def _snippet(self, text: str | None) -> str:
        text = text or ""
        limit = self.settings.report_snippet_length
        return text[:limit] + ELLIPSIS if len(text) > limit else text

    @safe_operation("ReportService.create_report")
    async def create_report(
        self,
        reporter_id: int,
        target_type: ContentType | str,
        target_id: int,
        reason: str,
    ) -> ReportRead:
        """File an open report against a live post or comment.

        Raises:
            InvalidInputError: If ``target_type`` is unknown.
            NotFoundError: If the reporter or the target is missing or deleted.
        """
        target = parse_target(target_type, target_id)
        async with self.session_factory() as db, db.begin():
            await require_active_user(db, reporter_id, "Reporter")
            if not await self._target_is_live(db, target):
                raise NotFoundError("Target not found.")
            report = Report(
                reporter_id=reporter_id,
                target_type=target.type,
                target_id=target.id,
                reason=reason,
                status=ReportStatus.OPEN,
                created_at=utcnow(),
            )
            db.add(report)
            await db.flush()
            return ReportRead.model_validate(report)

    @safe_operation("ReportService.query_reports")
    async def query_reports(
        self,
        status: str | ReportStatus | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page[ReportRead]:
        """Reports newest first, optionally filtered by status and reason text.

        ``status`` of ``None``, ``"All"`` or an unrecognised value applies no
        status filter.
        """
        page, page_size = self.page_bounds(page, page_size)
        stmt = select(Report)
        if isinstance(status, ReportStatus):
            wanted = status
        elif status and status.strip() and status.strip().lower() != "all":
            wanted = ReportStatus.parse(status)
        else:
            wanted = None
        if wanted is not None:
            stmt = stmt.where(Report.status == wanted)
        if search and search.strip():
            stmt = stmt.where(Report.reason.ilike(f"%{search.strip()}%"))

        async with self.session_factory() as db:
            total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
            rows = await db.scalars(
                stmt.order_by(Report.created_at.desc(), Report.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            return Page[ReportRead](
                items=[ReportRead.model_validate(r) for r in rows],
                total=total or 0,
                page=page,
                page_size=page_size,
            )

    @safe_operation("ReportService.get_report")
    async def get_report(self, report_id: int) -> ReportRead | None:
        async with self.session_factory() as db:
            report = await db.get(Report, report_id)
            return ReportRead.model_validate(report) if report else None

    @safe_operation("ReportService.review_report")
    async def review_report(
        self,
        report_id: int,
        reviewer_id: int,
        note: str | None = None,
    ) -> ReportRead:
        """Acknowledge a report without closing it.

        The status is set to ``OPEN`` (even on a closed report) while the
        reviewer, time and note are stamped.
        """
        async with self.session_factory() as db, db.begin():
            report = await self._get_report(db, report_id)
            report.stamp_review(ReportStatus.OPEN, reviewer_id, note)
            await db.flush()
            return ReportRead.model_validate(report)

    @safe_operation("ReportService.close_report")
    async def close_report(
        self,
        report_id: int,
        reviewer_id: int,
        note: str | None = None,
    ) -> ReportRead:
        async with self.session_factory() as db, db.begin():
            report = await self._get_report(db, report_id)
            report.stamp_review(ReportStatus.CLOSED, reviewer_id, note)
            await db.flush()
            return ReportRead.model_validate(report)

    @safe_operation("ReportService.delete_report_target")
    async def delete_report_target(self, report_id: int, reviewer_id: int) -> int:
        """Remove the reported item and close every open report on it.

        The target is soft-deleted with the usual cascade (a post takes its
        comments along, a comment its replies); a target that is already gone
        is left alone. Target removal and report closures commit together.

        Returns:
            The number of reports closed by this call.
        """
        async with self.session_factory() as db, db.begin():
            report = await self._get_report(db, report_id)
            target = Target(report.target_type, report.target_id)

            if await soft_delete_target(db, target):
                logger.info("Report %s removed %s", report_id, target)

            related = await db.scalars(
                select(Report).where(
                    Report.target_type == target.type,
                    Report.target_id == target.id,
                    Report.status != ReportStatus.CLOSED,
                )
            )
            closed = 0
            note = target_removed_note(report_id)
            for other in related:
                other.stamp_review(ReportStatus.CLOSED, reviewer_id, note)
                closed += 1
            return closed

    @safe_operation("ReportService.get_report_target_info")
    async def get_report_target_info(self, report_id: int) -> ReportTargetInfo | None:
        """Locate the live target of a report; None if the report or target is gone."""
        async with self.session_factory() as db:
            report = await db.get(Report, report_id)
            if report is None:
                return None

            if report.target_type is ContentType.POST:
                post = await db.scalar(
                    select(Post).where(Post.id == report.target_id, Post.is_deleted.is_(False))
                )
                if post is None:
                    return None
                text = post.body if post.body and post.body.strip() else post.title
                return ReportTargetInfo(
                    post_id=post.id,
                    topic_id=post.topic_id,
                    snippet=self._snippet(text),
                )

            if report.target_type is ContentType.COMMENT:
                row = (
                    await db.execute(
                        select(Comment, Post.topic_id)
                        .join(Post, Post.id == Comment.post_id)
                        .where(Comment.id == report.target_id, Comment.is_deleted.is_(False))
                    )
                ).first()
                if row is None:
                    return None
                comment, topic_id = row
                return ReportTargetInfo(
                    post_id=comment.post_id,
                    topic_id=topic_id,
                    snippet=self._snippet(comment.body),
                )

            return None
