"""Comment lifecycle: one level of nesting, cascading soft delete, notifications."""
from __future__ import annotations

import logging

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from level_forum.core.errors import ConflictError
from level_forum.db.time import utcnow
from level_forum.models import Comment, ContentType, Notification, Post, Target, Topic, User
from level_forum.schemas.content import CommentRead
from level_forum.services.base import ForumService
from level_forum.services.content import (
    get_live_comment,
    get_live_post,
    get_open_topic,
    require_active_user,
    score_of,
    soft_delete_comment_tree,
    target_score,
    touch_topic,
    vote_of,
)
from level_forum.services.safe_execution import safe_operation

logger = logging.getLogger(__name__)


def to_comment_read(
    comment: Comment,
    score: int = 0,
    my_vote: int = 0,
    author_username: str | None = None,
) -> CommentRead:
    """Convert a Comment ORM instance plus vote aggregates to its read model."""
    return CommentRead(
        id=comment.id,
        post_id=comment.post_id,
        author_id=comment.author_id,
        author_username=author_username,
        parent_comment_id=comment.parent_comment_id,
        body=comment.body,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        score=int(score or 0),
        my_vote=int(my_vote or 0),
    )


def _read_query(user_id: int | None) -> Select:
    return (
        select(
            Comment,
            score_of(ContentType.COMMENT, Comment.id).label("score"),
            vote_of(ContentType.COMMENT, Comment.id, user_id).label("my_vote"),
            User.username.label("author_username"),
        )
        .outerjoin(User, User.id == Comment.author_id)
        .where(Comment.is_deleted.is_(False))
    )


class CommentService(ForumService):
    """Service handling comments and replies."""

    async def _insert_comment(
        self,
        db: AsyncSession,
        post: Post,
        topic: Topic,
        author_id: int,
        body: str,
        parent: Comment | None,
    ) -> Comment:
        comment = Comment(
            post_id=post.id,
            author_id=author_id,
            parent_comment_id=parent.id if parent is not None else None,
            body=body,
            created_at=utcnow(),
        )
        db.add(comment)

        if parent is None:
            if post.author_id != author_id:
                db.add(Notification.for_post_comment(post.id, post.author_id, post.title, body))
        elif parent.author_id != author_id:
            db.add(Notification.for_comment_reply(parent.id, parent.author_id, body))

        topic.touch()
        await db.flush()
        return comment

    @safe_operation("CommentService.create_comment")
    async def create_comment(
        self,
        post_id: int,
        author_id: int,
        body: str,
        parent_comment_id: int | None = None,
    ) -> CommentRead:
        """Comment on a post, optionally as a reply to one of its root comments.

        Raises:
            NotFoundError: If the post, its topic, the author or the parent is gone.
            ConflictError: If the topic is locked, the parent belongs to another
                post, or the parent is itself a reply.
        """
        async with self.session_factory() as db, db.begin():
            post = await get_live_post(db, post_id)
            topic = await get_open_topic(db, post.topic_id)
            await require_active_user(db, author_id, "Author")

            parent = None
            if parent_comment_id is not None:
                parent = await get_live_comment(db, parent_comment_id, "Parent comment")
                if parent.post_id != post_id:
                    raise ConflictError("Parent must belong to the same post.")
                if parent.parent_comment_id is not None:
                    raise ConflictError("Only one nested level is allowed.")

            comment = await self._insert_comment(db, post, topic, author_id, body, parent)
            return to_comment_read(comment)

    @safe_operation("CommentService.reply_to_comment")
    async def reply_to_comment(
        self,
        parent_comment_id: int,
        author_id: int,
        body: str,
    ) -> CommentRead:
        """Reply to a root comment; replies to replies are rejected."""
        async with self.session_factory() as db, db.begin():
            parent = await get_live_comment(db, parent_comment_id, "Parent comment")
            post = await get_live_post(db, parent.post_id)
            topic = await get_open_topic(db, post.topic_id)
            await require_active_user(db, author_id, "Author")
            if parent.parent_comment_id is not None:
                raise ConflictError("Only one nested level is allowed.")

            comment = await self._insert_comment(db, post, topic, author_id, body, parent)
            return to_comment_read(comment)

    @safe_operation("CommentService.get_comment")
    async def get_comment(self, comment_id: int, user_id: int | None = None) -> CommentRead | None:
        async with self.session_factory() as db:
            row = (await db.execute(_read_query(user_id).where(Comment.id == comment_id))).first()
            if row is None:
                return None
            return to_comment_read(row[0], row.score, row.my_vote, row.author_username)

    @safe_operation("CommentService.get_flat_comments_for_post")
    async def get_flat_comments_for_post(
        self,
        post_id: int,
        take: int | None = None,
        skip: int = 0,
        user_id: int | None = None,
    ) -> list[CommentRead]:
        """All live comments and replies of a post, oldest first."""
        take = self.settings.comment_page_size if take is None else max(take, 0)
        stmt = (
            _read_query(user_id)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at, Comment.id)
            .offset(max(skip, 0))
            .limit(take)
        )
        async with self.session_factory() as db:
            rows = await db.execute(stmt)
            return [
                to_comment_read(row[0], row.score, row.my_vote, row.author_username)
                for row in rows
            ]

    @safe_operation("CommentService.get_comment_children")
    async def get_comment_children(
        self,
        parent_comment_id: int,
        user_id: int | None = None,
    ) -> list[CommentRead]:
        """Live direct replies of a comment, oldest first."""
        stmt = (
            _read_query(user_id)
            .where(Comment.parent_comment_id == parent_comment_id)
            .order_by(Comment.created_at, Comment.id)
        )
        async with self.session_factory() as db:
            rows = await db.execute(stmt)
            return [
                to_comment_read(row[0], row.score, row.my_vote, row.author_username)
                for row in rows
            ]

    @safe_operation("CommentService.update_comment")
    async def update_comment(self, comment_id: int, body: str) -> CommentRead:
        """Edit a live comment and bump its topic's activity."""
        async with self.session_factory() as db, db.begin():
            comment = await get_live_comment(db, comment_id)
            comment.body = body
            comment.updated_at = utcnow()

            topic_id = await db.scalar(select(Post.topic_id).where(Post.id == comment.post_id))
            if topic_id is not None:
                await touch_topic(db, topic_id)
            await db.flush()
            score = await target_score(db, Target(ContentType.COMMENT, comment.id))
            return to_comment_read(comment, score)

    @safe_operation("CommentService.soft_delete_comment")
    async def soft_delete_comment(self, comment_id: int) -> None:
        """Delete a comment and its direct replies; siblings and the post stay."""
        async with self.session_factory() as db, db.begin():
            comment = await get_live_comment(db, comment_id)
            removed = await soft_delete_comment_tree(db, comment)
            logger.info("Comment %s deleted with %d reply(ies)", comment_id, removed)
