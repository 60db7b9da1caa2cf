# src/level_forum/api/v1/endpoints/comments.py
"""Comment endpoints for the Level Forum API."""

from fastapi import APIRouter, Query, status

from level_forum.api.v1.dependencies import ActorDep, OptionalActorDep, ServicesDep, viewer_id
from level_forum.core.errors import NotFoundError
from level_forum.schemas.content import CommentCreate, CommentRead, CommentReply, CommentUpdate

router = APIRouter(tags=["comments"])


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    comment: CommentCreate,
    actor: ActorDep,
    services: ServicesDep,
) -> CommentRead:
    return await services.comments.create_comment(
        post_id, actor.user_id, comment.body, comment.parent_comment_id
    )


@router.get("/posts/{post_id}/comments", response_model=list[CommentRead])
async def list_post_comments(
    post_id: int,
    services: ServicesDep,
    actor: OptionalActorDep,
    take: int | None = Query(None, ge=1, le=500),
    skip: int = Query(0, ge=0),
) -> list[CommentRead]:
    """Flat list of comments and replies, oldest first."""
    return await services.comments.get_flat_comments_for_post(
        post_id, take, skip, user_id=viewer_id(actor)
    )


@router.post(
    "/comments/{comment_id}/replies",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_comment(
    comment_id: int,
    reply: CommentReply,
    actor: ActorDep,
    services: ServicesDep,
) -> CommentRead:
    return await services.comments.reply_to_comment(comment_id, actor.user_id, reply.body)


@router.get("/comments/{comment_id}", response_model=CommentRead)
async def get_comment(
    comment_id: int,
    services: ServicesDep,
    actor: OptionalActorDep,
) -> CommentRead:
    comment = await services.comments.get_comment(comment_id, user_id=viewer_id(actor))
    if comment is None:
        raise NotFoundError("Comment not found.")
    return comment


@router.get("/comments/{comment_id}/children", response_model=list[CommentRead])
async def list_comment_children(
    comment_id: int,
    services: ServicesDep,
    actor: OptionalActorDep,
) -> list[CommentRead]:
    return await services.comments.get_comment_children(comment_id, user_id=viewer_id(actor))


@router.patch("/comments/{comment_id}", response_model=CommentRead)
async def update_comment(
    comment_id: int,
    update: CommentUpdate,
    actor: ActorDep,
    services: ServicesDep,
) -> CommentRead:
    existing = await get_comment(comment_id, services, actor)
    actor.require_owner_or(existing.author_id)
    return await services.comments.update_comment(comment_id, update.body)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: int, actor: ActorDep, services: ServicesDep) -> None:
    existing = await get_comment(comment_id, services, actor)
    actor.require_owner_or(existing.author_id)
    await services.comments.soft_delete_comment(comment_id)
