"""Post lifecycle and read-side queries."""
from __future__ import annotations

import logging

from sqlalchemy import Select, func, select

from level_forum.db.time import utcnow
from level_forum.models import ContentType, Post, Target, Topic
from level_forum.schemas.common import Page
from level_forum.schemas.content import PostRead
from level_forum.services.base import ForumService
from level_forum.services.content import (
    get_live_post,
    get_open_topic,
    require_active_user,
    score_of,
    soft_delete_post_tree,
    target_score,
    touch_topic,
    vote_of,
)
from level_forum.services.safe_execution import safe_operation

logger = logging.getLogger(__name__)


def _with_votes(stmt: Select, user_id: int | None) -> Select:
    return stmt.add_columns(
        score_of(ContentType.POST, Post.id).label("score"),
        vote_of(ContentType.POST, Post.id, user_id).label("my_vote"),
    )


def to_post_read(post: Post, score: int = 0, my_vote: int = 0) -> PostRead:
    """Convert a Post ORM instance plus vote aggregates to its read model."""
    return PostRead(
        id=post.id,
        topic_id=post.topic_id,
        author_id=post.author_id,
        title=post.title,
        body=post.body,
        created_at=post.created_at,
        updated_at=post.updated_at,
        score=int(score or 0),
        my_vote=int(my_vote or 0),
    )


class PostService(ForumService):
    """Service handling posts."""

    @safe_operation("PostService.create_post")
    async def create_post(self, topic_id: int, author_id: int, title: str, body: str) -> PostRead:
        """Create a post in an unlocked topic and bump the topic's activity.

        Raises:
            NotFoundError: If the topic or author is missing or deleted.
            ConflictError: If the topic is locked.
        """
        async with self.session_factory() as db, db.begin():
            topic = await get_open_topic(db, topic_id)
            await require_active_user(db, author_id, "Author")

            post = Post(
                topic_id=topic_id,
                author_id=author_id,
                title=title,
                body=body,
                created_at=utcnow(),
            )
            db.add(post)
            topic.touch()
            await db.flush()
            return to_post_read(post)

    @safe_operation("PostService.get_post")
    async def get_post(self, post_id: int, user_id: int | None = None) -> PostRead | None:
        stmt = _with_votes(
            select(Post).where(Post.id == post_id, Post.is_deleted.is_(False)),
            user_id,
        )
        async with self.session_factory() as db:
            row = (await db.execute(stmt)).first()
            if row is None:
                return None
            return to_post_read(row[0], row.score, row.my_vote)

    async def _page(
        self,
        stmt: Select,
        sort: str,
        page: int,
        page_size: int | None,
        user_id: int | None,
    ) -> Page[PostRead]:
        page, page_size = self.page_bounds(page, page_size)
        if sort == "top":
            order = (score_of(ContentType.POST, Post.id).desc(), Post.created_at.desc())
        elif sort == "active":
            order = (func.coalesce(Post.updated_at, Post.created_at).desc(),)
        else:
            order = (Post.created_at.desc(),)

        async with self.session_factory() as db:
            total = await db.scalar(select(func.count()).select_from(stmt.subquery()))
            rows = await db.execute(
                _with_votes(stmt, user_id)
                .order_by(*order, Post.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            )
            return Page[PostRead](
                items=[to_post_read(row[0], row.score, row.my_vote) for row in rows],
                total=total or 0,
                page=page,
                page_size=page_size,
            )

    @safe_operation("PostService.query_posts_by_topic")
    async def query_posts_by_topic(
        self,
        topic_id: int,
        title_query: str | None = None,
        sort: str = "new",
        page: int = 1,
        page_size: int | None = None,
        user_id: int | None = None,
    ) -> Page[PostRead]:
        """Live posts of one topic; ``sort`` is ``new``, ``top`` or ``active``."""
        stmt = select(Post).where(Post.topic_id == topic_id, Post.is_deleted.is_(False))
        if title_query and title_query.strip():
            stmt = stmt.where(Post.title.ilike(f"%{title_query.strip()}%"))
        return await self._page(stmt, sort, page, page_size, user_id)

    @safe_operation("PostService.query_posts")
    async def query_posts(
        self,
        title_query: str | None = None,
        author_id: int | None = None,
        sort: str = "new",
        page: int = 1,
        page_size: int | None = None,
        user_id: int | None = None,
    ) -> Page[PostRead]:
        """Live posts across all live topics, optionally by one author."""
        stmt = (
            select(Post)
            .join(Topic, Topic.id == Post.topic_id)
            .where(Post.is_deleted.is_(False), Topic.is_deleted.is_(False))
        )
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)
        if title_query and title_query.strip():
            stmt = stmt.where(Post.title.ilike(f"%{title_query.strip()}%"))
        return await self._page(stmt, sort, page, page_size, user_id)

    @safe_operation("PostService.update_post")
    async def update_post(
        self,
        post_id: int,
        title: str | None = None,
        body: str | None = None,
    ) -> PostRead:
        """Edit a live post. Blank titles are ignored; deleted posts stay deleted."""
        async with self.session_factory() as db, db.begin():
            post = await get_live_post(db, post_id)
            if title and title.strip():
                post.title = title
            if body is not None:
                post.body = body
            post.updated_at = utcnow()
            await touch_topic(db, post.topic_id)
            await db.flush()
            score = await target_score(db, Target(ContentType.POST, post.id))
            return to_post_read(post, score)

    @safe_operation("PostService.soft_delete_post")
    async def soft_delete_post(self, post_id: int) -> None:
        """Delete a post together with all of its comments and replies."""
        async with self.session_factory() as db, db.begin():
            post = await get_live_post(db, post_id)
            removed = await soft_delete_post_tree(db, post)
            logger.info("Post %s deleted with %d comment(s)", post_id, removed)
