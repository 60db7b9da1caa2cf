"""Content tree rules shared by the post, comment, vote and report services.

All helpers run inside the caller's unit of work and never commit.
"""

from __future__ import annotations

from sqlalchemy import ColumnElement, and_, exists, func, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from level_forum.core.errors import ConflictError, InvalidInputError, NotFoundError
from level_forum.models import Comment, ContentType, Post, Target, Topic, User, Vote


def parse_target(target_type: ContentType | str, target_id: int) -> Target:
    """Build a :class:`Target`, rejecting unknown type tags."""
    try:
        return Target(ContentType.parse(target_type), int(target_id))
    except ValueError as err:
        raise InvalidInputError(str(err)) from err


async def user_is_active(db: AsyncSession, user_id: int) -> bool:
    return bool(
        await db.scalar(
            select(exists().where(User.id == user_id, User.is_deleted.is_(False)))
        )
    )


async def require_active_user(db: AsyncSession, user_id: int, role: str = "User") -> None:
    if not await user_is_active(db, user_id):
        raise NotFoundError(f"{role} not found.")


async def get_live_topic(db: AsyncSession, topic_id: int) -> Topic:
    topic = await db.scalar(
        select(Topic).where(Topic.id == topic_id, Topic.is_deleted.is_(False))
    )
    if topic is None:
        raise NotFoundError("Topic not found.")
    return topic


async def get_open_topic(db: AsyncSession, topic_id: int) -> Topic:
    """Return a topic that accepts new content."""
    topic = await get_live_topic(db, topic_id)
    if topic.is_locked:
        raise ConflictError("Topic is locked.")
    return topic


async def get_live_post(db: AsyncSession, post_id: int) -> Post:
    post = await db.scalar(select(Post).where(Post.id == post_id, Post.is_deleted.is_(False)))
    if post is None:
        raise NotFoundError("Post not found.")
    return post


async def get_live_comment(db: AsyncSession, comment_id: int, label: str = "Comment") -> Comment:
    comment = await db.scalar(
        select(Comment).where(Comment.id == comment_id, Comment.is_deleted.is_(False))
    )
    if comment is None:
        raise NotFoundError(f"{label} not found.")
    return comment


async def touch_topic(db: AsyncSession, topic_id: int) -> None:
    topic = await db.get(Topic, topic_id)
    if topic is not None:
        topic.touch()


async def resolve_target_author(db: AsyncSession, target: Target) -> int | None:
    """Return the author of a live target, or ``None`` if it is gone."""
    if target.type is ContentType.POST:
        stmt = select(Post.author_id).where(Post.id == target.id, Post.is_deleted.is_(False))
    elif target.type is ContentType.COMMENT:
        stmt = select(Comment.author_id).where(
            Comment.id == target.id, Comment.is_deleted.is_(False)
        )
    else:
        raise InvalidInputError(f"Unsupported target type: {target.type!r}")
    return await db.scalar(stmt)


async def soft_delete_post_tree(db: AsyncSession, post: Post) -> int:
    """Mark ``post`` and every live comment under it deleted.

    Returns the number of comments that were deleted along with the post.
    """
    post.is_deleted = True
    result = await db.execute(
        update(Comment)
        .where(Comment.post_id == post.id, Comment.is_deleted.is_(False))
        .values(is_deleted=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


async def soft_delete_comment_tree(db: AsyncSession, comment: Comment) -> int:
    """Mark ``comment`` and its direct replies deleted.

    Depth is capped at one, so direct replies are the whole subtree.
    """
    comment.is_deleted = True
    result = await db.execute(
        update(Comment)
        .where(Comment.parent_comment_id == comment.id, Comment.is_deleted.is_(False))
        .values(is_deleted=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0


async def soft_delete_target(db: AsyncSession, target: Target) -> bool:
    """Soft-delete a live target with its cascade; False if already gone."""
    if target.type is ContentType.POST:
        post = await db.scalar(
            select(Post).where(Post.id == target.id, Post.is_deleted.is_(False))
        )
        if post is None:
            return False
        await soft_delete_post_tree(db, post)
        return True
    if target.type is ContentType.COMMENT:
        comment = await db.scalar(
            select(Comment).where(Comment.id == target.id, Comment.is_deleted.is_(False))
        )
        if comment is None:
            return False
        await soft_delete_comment_tree(db, comment)
        return True
    raise InvalidInputError(f"Unsupported target type: {target.type!r}")


def score_of(content_type: ContentType, id_column: ColumnElement[int]) -> ColumnElement[int]:
    """Correlated signed vote sum for rows of ``content_type``."""
    return (
        select(func.coalesce(func.sum(Vote.value), 0))
        .where(Vote.target_type == content_type, Vote.target_id == id_column)
        .scalar_subquery()
    )


def vote_of(
    content_type: ContentType,
    id_column: ColumnElement[int],
    user_id: int | None,
) -> ColumnElement[int]:
    """Correlated vote value of ``user_id`` (0 when absent or anonymous)."""
    if user_id is None:
        return literal(0)
    return func.coalesce(
        select(Vote.value)
        .where(
            and_(
                Vote.target_type == content_type,
                Vote.target_id == id_column,
                Vote.user_id == user_id,
            )
        )
        .limit(1)
        .scalar_subquery(),
        0,
    )


async def target_score(db: AsyncSession, target: Target) -> int:
    total = await db.scalar(
        select(func.coalesce(func.sum(Vote.value), 0)).where(
            Vote.target_type == target.type, Vote.target_id == target.id
        )
    )
    return int(total or 0)
