# src/level_forum/api/v1/endpoints/posts.py
"""Post-related endpoints for the Level Forum API."""

from typing import Literal

from fastapi import APIRouter, Query, status

from level_forum.api.v1.dependencies import ActorDep, OptionalActorDep, ServicesDep, viewer_id
from level_forum.core.errors import NotFoundError
from level_forum.schemas.common import Page
from level_forum.schemas.content import PostCreate, PostRead, PostUpdate

router = APIRouter(tags=["posts"])

SortQuery = Literal["new", "top", "active"]


@router.post(
    "/topics/{topic_id}/posts",
    response_model=PostRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    topic_id: int,
    post: PostCreate,
    actor: ActorDep,
    services: ServicesDep,
) -> PostRead:
    """Create a new post in a topic."""
    return await services.posts.create_post(topic_id, actor.user_id, post.title, post.body)


@router.get("/topics/{topic_id}/posts", response_model=Page[PostRead])
async def list_topic_posts(
    topic_id: int,
    services: ServicesDep,
    actor: OptionalActorDep,
    q: str | None = Query(None, description="Title substring"),
    sort: SortQuery = Query("new"),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
) -> Page[PostRead]:
    return await services.posts.query_posts_by_topic(
        topic_id, q, sort, page, page_size, user_id=viewer_id(actor)
    )


@router.get("/posts", response_model=Page[PostRead])
async def list_posts(
    services: ServicesDep,
    actor: OptionalActorDep,
    q: str | None = Query(None, description="Title substring"),
    author_id: int | None = Query(None),
    sort: SortQuery = Query("new"),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
) -> Page[PostRead]:
    return await services.posts.query_posts(
        q, author_id, sort, page, page_size, user_id=viewer_id(actor)
    )


@router.get("/posts/{post_id}", response_model=PostRead)
async def get_post(post_id: int, services: ServicesDep, actor: OptionalActorDep) -> PostRead:
    post = await services.posts.get_post(post_id, user_id=viewer_id(actor))
    if post is None:
        raise NotFoundError("Post not found.")
    return post


@router.patch("/posts/{post_id}", response_model=PostRead)
async def update_post(
    post_id: int,
    update: PostUpdate,
    actor: ActorDep,
    services: ServicesDep,
) -> PostRead:
    """Edit a post; authors and moderators only."""
    existing = await get_post(post_id, services, actor)
    actor.require_owner_or(existing.author_id)
    return await services.posts.update_post(post_id, update.title, update.body)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, actor: ActorDep, services: ServicesDep) -> None:
    """Delete a post and its comments; authors and moderators only."""
    existing = await get_post(post_id, services, actor)
    actor.require_owner_or(existing.author_id)
    await services.posts.soft_delete_post(post_id)
