# src/level_forum/api/v1/endpoints/users.py
"""User and notification endpoints for the Level Forum API."""

from fastapi import APIRouter, status

from level_forum.api.v1.dependencies import ActorDep, AdminDep, ServicesDep
from level_forum.core.errors import NotFoundError
from level_forum.schemas.notification import NotificationRead
from level_forum.schemas.user import (
    ExperienceGrant,
    UserCreate,
    UsernameChange,
    UserPublicRead,
    UserRead,
    UserUpdate,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate, services: ServicesDep) -> UserRead:
    """Create the forum record for an account registered by the identity provider."""
    return await services.users.create_user(user.username, user.email, user.password_hash)


@router.get("/me", response_model=UserRead)
async def read_me(actor: ActorDep, services: ServicesDep) -> UserRead:
    user = await services.users.get_user_by_id(actor.user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return user


@router.patch("/me", response_model=UserRead)
async def update_me(update: UserUpdate, actor: ActorDep, services: ServicesDep) -> UserRead:
    return await services.users.update_user(actor.user_id, update.email, update.avatar_url)


@router.put("/me/username", response_model=UserRead)
async def change_username(
    change: UsernameChange,
    actor: ActorDep,
    services: ServicesDep,
) -> UserRead:
    return await services.users.change_username(actor.user_id, change.username)


@router.get("/me/notifications", response_model=list[NotificationRead])
async def my_notifications(actor: ActorDep, services: ServicesDep) -> list[NotificationRead]:
    """Notifications from the recent window, newest first."""
    return await services.notifications.get_user_notifications(actor.user_id)


@router.get("/by-username/{username}", response_model=UserPublicRead)
async def get_user_by_username(username: str, services: ServicesDep) -> UserPublicRead:
    user = await services.users.get_user_by_username(username)
    if user is None:
        raise NotFoundError("User not found.")
    return UserPublicRead.model_validate(user.model_dump())


@router.get("/{user_id}", response_model=UserPublicRead)
async def get_user(user_id: int, services: ServicesDep) -> UserPublicRead:
    """Profile visible to anyone; the email address is left out."""
    user = await services.users.get_user_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found.")
    return UserPublicRead.model_validate(user.model_dump())


@router.post("/{user_id}/experience", response_model=UserRead)
async def grant_experience(
    user_id: int,
    grant: ExperienceGrant,
    admin: AdminDep,
    services: ServicesDep,
) -> UserRead:
    return await services.users.add_experience(user_id, grant.delta)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, admin: AdminDep, services: ServicesDep) -> None:
    await services.users.soft_delete_user(user_id)
