"""Read side of the notification feed."""

from __future__ import annotations

from sqlalchemy import select

from level_forum.db.time import days_ago
from level_forum.models import Notification
from level_forum.schemas.notification import NotificationRead
from level_forum.services.base import ForumService
from level_forum.services.safe_execution import safe_operation


class NotificationService(ForumService):
    """Notifications are written by the comment service and only read here."""

    @safe_operation("NotificationService.get_user_notifications")
    async def get_user_notifications(self, user_id: int) -> list[NotificationRead]:
        """Notifications from the configured recent window, newest first."""
        since = days_ago(self.settings.notification_window_days)
        async with self.session_factory() as db:
            rows = await db.scalars(
                select(Notification)
                .where(Notification.user_id == user_id, Notification.created_at >= since)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
            )
            return [NotificationRead.model_validate(n) for n in rows]
