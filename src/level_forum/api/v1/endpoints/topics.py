# src/level_forum/api/v1/endpoints/topics.py
"""Topic, follow and topic-role endpoints for the Level Forum API."""

from fastapi import APIRouter, Query, status

from level_forum.api.v1.dependencies import (
    ActorDep,
    ModeratorDep,
    OptionalActorDep,
    ServicesDep,
    viewer_id,
)
from level_forum.core.errors import NotFoundError
from level_forum.models import Role
from level_forum.schemas.common import Page
from level_forum.schemas.topic import TopicCreate, TopicLock, TopicRead, TopicUpdate
from level_forum.schemas.user import TopicRoleAssignment, TopicRoleRead

router = APIRouter(prefix="/topics", tags=["topics"])


@router.post("/", response_model=TopicRead, status_code=status.HTTP_201_CREATED)
async def create_topic(topic: TopicCreate, actor: ActorDep, services: ServicesDep) -> TopicRead:
    """Create a topic; the creator becomes its owner and follower."""
    return await services.topics.create_topic(topic.title, topic.description, actor.user_id)


@router.get("/", response_model=Page[TopicRead])
async def search_topics(
    services: ServicesDep,
    q: str | None = Query(None, description="Title substring"),
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
) -> Page[TopicRead]:
    return await services.topics.search_topics(q, page, page_size)


@router.get("/following", response_model=list[TopicRead])
async def followed_topics(actor: ActorDep, services: ServicesDep) -> list[TopicRead]:
    return await services.topics.get_followed_topics(actor.user_id)


@router.get("/following/ids", response_model=list[int])
async def followed_topic_ids(actor: ActorDep, services: ServicesDep) -> list[int]:
    return await services.follows.get_followed_topic_ids(actor.user_id)


@router.get("/sidebar", response_model=list[TopicRead])
async def sidebar_topics(services: ServicesDep, actor: OptionalActorDep) -> list[TopicRead]:
    """Popular topics; for signed-in users, ones they don't follow yet."""
    return await services.topics.get_sidebar_suggestions(viewer_id(actor))


@router.get("/{topic_id}", response_model=TopicRead)
async def get_topic(topic_id: int, services: ServicesDep) -> TopicRead:
    topic = await services.topics.get_topic(topic_id)
    if topic is None:
        raise NotFoundError("Topic not found.")
    return topic


@router.patch("/{topic_id}", response_model=TopicRead)
async def update_topic(
    topic_id: int,
    update: TopicUpdate,
    actor: ActorDep,
    services: ServicesDep,
) -> TopicRead:
    """Edit a topic; its creator and moderators only."""
    topic = await get_topic(topic_id, services)
    if topic.created_by_id is None:
        actor.require(Role.MODERATOR)
    else:
        actor.require_owner_or(topic.created_by_id)
    return await services.topics.update_topic(topic_id, update.title, update.description)


@router.post("/{topic_id}/lock", response_model=TopicRead)
async def lock_topic(
    topic_id: int,
    lock: TopicLock,
    moderator: ModeratorDep,
    services: ServicesDep,
) -> TopicRead:
    return await services.topics.lock_topic(topic_id, lock.locked)


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(topic_id: int, moderator: ModeratorDep, services: ServicesDep) -> None:
    await services.topics.soft_delete_topic(topic_id)


@router.get("/{topic_id}/follow")
async def is_following(topic_id: int, actor: ActorDep, services: ServicesDep) -> dict[str, bool]:
    return {"following": await services.follows.is_following(actor.user_id, topic_id)}


@router.post("/{topic_id}/follow")
async def follow_topic(topic_id: int, actor: ActorDep, services: ServicesDep) -> dict[str, bool]:
    changed = await services.follows.follow_topic(actor.user_id, topic_id)
    return {"following": True, "changed": changed}


@router.delete("/{topic_id}/follow")
async def unfollow_topic(topic_id: int, actor: ActorDep, services: ServicesDep) -> dict[str, bool]:
    changed = await services.follows.unfollow_topic(actor.user_id, topic_id)
    return {"following": False, "changed": changed}


@router.get("/{topic_id}/roles", response_model=list[TopicRoleRead])
async def get_topic_roles(topic_id: int, services: ServicesDep) -> list[TopicRoleRead]:
    return await services.users.get_topic_roles(topic_id)


@router.put("/{topic_id}/roles", response_model=list[TopicRoleRead])
async def define_topic_roles(
    topic_id: int,
    roles: list[TopicRoleAssignment],
    actor: ActorDep,
    services: ServicesDep,
) -> list[TopicRoleRead]:
    """Replace the topic's role table; topic owners and admins only."""
    if not actor.has_role(Role.ADMIN):
        current = await services.users.get_topic_roles(topic_id)
        if not any(r.user_id == actor.user_id and r.topic_role.at_least(Role.OWNER) for r in current):
            actor.require(Role.ADMIN)
    return await services.users.define_topic_roles(topic_id, roles)
