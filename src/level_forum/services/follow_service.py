"""Topic follow bookkeeping."""

from __future__ import annotations

from sqlalchemy import exists, select

from level_forum.core.errors import NotFoundError
from level_forum.db.time import utcnow
from level_forum.models import Topic, TopicFollow
from level_forum.services.base import ForumService
from level_forum.services.content import user_is_active
from level_forum.services.safe_execution import safe_operation


class FollowService(ForumService):
    """Follow and unfollow topics."""

    @safe_operation("FollowService.follow_topic")
    async def follow_topic(self, user_id: int, topic_id: int) -> bool:
        """Follow a topic; False if the user already follows it."""
        async with self.session_factory() as db, db.begin():
            if await self._follow_row(db, user_id, topic_id) is not None:
                return False
            topic_ok = await db.scalar(
                select(exists().where(Topic.id == topic_id, Topic.is_deleted.is_(False)))
            )
            if not topic_ok or not await user_is_active(db, user_id):
                raise NotFoundError("User or topic not found.")
            db.add(TopicFollow(user_id=user_id, topic_id=topic_id, created_at=utcnow()))
            return True

    @safe_operation("FollowService.unfollow_topic")
    async def unfollow_topic(self, user_id: int, topic_id: int) -> bool:
        """Stop following; False if the user was not following."""
        async with self.session_factory() as db, db.begin():
            follow = await self._follow_row(db, user_id, topic_id)
            if follow is None:
                return False
            await db.delete(follow)
            return True

    @safe_operation("FollowService.is_following")
    async def is_following(self, user_id: int, topic_id: int) -> bool:
        async with self.session_factory() as db:
            return await self._follow_row(db, user_id, topic_id) is not None

    @safe_operation("FollowService.get_followed_topic_ids")
    async def get_followed_topic_ids(self, user_id: int) -> list[int]:
        async with self.session_factory() as db:
            rows = await db.scalars(
                select(TopicFollow.topic_id)
                .where(TopicFollow.user_id == user_id)
                .order_by(TopicFollow.topic_id)
            )
            return list(rows)

    @staticmethod
    async def _follow_row(db, user_id: int, topic_id: int) -> TopicFollow | None:
        return await db.scalar(
            select(TopicFollow).where(
                TopicFollow.user_id == user_id, TopicFollow.topic_id == topic_id
            )
        )
