"""Topic lifecycle, search and sidebar suggestions."""

from __future__ import annotations

from sqlalchemy import func, select

from level_forum.db.time import utcnow
from level_forum.models import Role, Topic, TopicFollow, UserTopicRole
from level_forum.schemas.common import Page
from level_forum.schemas.topic import TopicRead
from level_forum.services.base import ForumService
from level_forum.services.content import get_live_topic, require_active_user
from level_forum.services.safe_execution import safe_operation


class TopicService(ForumService):
    """Service handling topics."""

    @safe_operation("TopicService.create_topic")
    async def create_topic(
        self,
        title: str,
        description: str | None,
        creator_id: int,
    ) -> TopicRead:
        """Create a topic owned and followed by its creator, atomically."""
        async with self.session_factory() as db, db.begin():
            await require_active_user(db, creator_id, "Creator")
            now = utcnow()
            topic = Topic(
                title=title,
                description=description,
                created_by_id=creator_id,
                created_at=now,
                last_activity_at=now,
            )
            db.add(topic)
            await db.flush()

            db.add(UserTopicRole(user_id=creator_id, topic_id=topic.id, topic_role=Role.OWNER))
            db.add(TopicFollow(user_id=creator_id, topic_id=topic.id, created_at=now))
            await db.flush()
            return TopicRead.model_validate(topic)

    @safe_operation("TopicService.get_topic")
    async def get_topic(self, topic_id: int) -> TopicRead | None:
        async with self.session_factory() as db:
            topic = await db.scalar(
                select(Topic).where(Topic.id == topic_id, Topic.is_deleted.is_(False))
            )
            return TopicRead.model_validate(topic) if topic else None

    @safe_operation("TopicService.search_topics")
    async def search_topics(
        self,
        title_query: str | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page[TopicRead]:
        """Live topics whose title contains ``title_query``, ordered by title."""
        page, page_size = self.page_bounds(page, page_size)
        stmt = select(Topic).where(Topic.is_deleted.is_(False))
        if title_query and title_query.strip():
            stmt = stmt.where(Topic.title.ilike(f"%{title_query.strip()}%"))

        async with self.session_factory() as db:
            total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
            rows = await db.scalars(
                stmt.order_by(Topic.title, Topic.id)
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            return Page[TopicRead](
                items=[TopicRead.model_validate(t) for t in rows],
                total=total or 0,
                page=page,
                page_size=page_size,
            )

    @safe_operation("TopicService.get_followed_topics")
    async def get_followed_topics(self, user_id: int) -> list[TopicRead]:
        """Active topics the user follows, most recently active first."""
        async with self.session_factory() as db:
            rows = await db.scalars(
                select(Topic)
                .join(TopicFollow, TopicFollow.topic_id == Topic.id)
                .where(
                    TopicFollow.user_id == user_id,
                    Topic.is_deleted.is_(False),
                    Topic.is_banned.is_(False),
                )
                .order_by(Topic.last_activity_at.desc(), Topic.title)
            )
            return [TopicRead.model_validate(t) for t in rows]

    @safe_operation("TopicService.get_sidebar_suggestions")
    async def get_sidebar_suggestions(self, user_id: int | None = None) -> list[TopicRead]:
        """Most-followed active topics; with ``user_id``, only ones they don't follow."""
        followers = (
            select(TopicFollow.topic_id, func.count(TopicFollow.id).label("followers"))
            .group_by(TopicFollow.topic_id)
            .subquery()
        )
        stmt = (
            select(Topic)
            .outerjoin(followers, followers.c.topic_id == Topic.id)
            .where(Topic.is_deleted.is_(False), Topic.is_banned.is_(False))
        )
        if user_id is not None:
            followed = select(TopicFollow.topic_id).where(TopicFollow.user_id == user_id)
            stmt = stmt.where(Topic.id.not_in(followed))
        stmt = stmt.order_by(
            func.coalesce(followers.c.followers, 0).desc(),
            Topic.last_activity_at.desc(),
            Topic.title,
        ).limit(self.settings.sidebar_topic_limit)

        async with self.session_factory() as db:
            rows = await db.scalars(stmt)
            return [TopicRead.model_validate(t) for t in rows]

    @safe_operation("TopicService.update_topic")
    async def update_topic(
        self,
        topic_id: int,
        title: str | None = None,
        description: str | None = None,
    ) -> TopicRead:
        """Blank titles are ignored; ``None`` leaves a field unchanged."""
        async with self.session_factory() as db, db.begin():
            topic = await get_live_topic(db, topic_id)
            if title and title.strip():
                topic.title = title
            if description is not None:
                topic.description = description
            await db.flush()
            return TopicRead.model_validate(topic)

    @safe_operation("TopicService.lock_topic")
    async def lock_topic(self, topic_id: int, locked: bool = True) -> TopicRead:
        async with self.session_factory() as db, db.begin():
            topic = await get_live_topic(db, topic_id)
            topic.is_locked = locked
            await db.flush()
            return TopicRead.model_validate(topic)

    @safe_operation("TopicService.soft_delete_topic")
    async def soft_delete_topic(self, topic_id: int) -> None:
        async with self.session_factory() as db, db.begin():
            topic = await get_live_topic(db, topic_id)
            topic.is_deleted = True
