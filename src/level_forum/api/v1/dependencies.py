"""Shared API dependencies for identity and service access.

Authentication happens in front of this service: a gateway resolves the
session and forwards the acting user's id and global role as the
``X-User-Id`` and ``X-User-Role`` headers.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from level_forum.core.errors import PermissionDeniedError
from level_forum.models import Role
from level_forum.services.container import ForumServices


@dataclass(frozen=True)
class Actor:
    """Already-authenticated caller."""

    user_id: int
    role: Role

    def has_role(self, minimum: Role) -> bool:
        return self.role.at_least(minimum)

    def require(self, minimum: Role) -> None:
        """Raise unless the actor holds ``minimum`` or a higher role."""
        if not self.has_role(minimum):
            raise PermissionDeniedError(f"{minimum.value} role required.")

    def require_owner_or(self, owner_id: int, minimum: Role = Role.MODERATOR) -> None:
        """Allow the content owner or anyone holding ``minimum``."""
        if self.user_id != owner_id:
            self.require(minimum)


def get_services(request: Request) -> ForumServices:
    """Return the services composed at startup."""
    return request.app.state.services


def get_optional_actor(
    x_user_id: Annotated[int | None, Header()] = None,
    x_user_role: Annotated[str | None, Header()] = None,
) -> Actor | None:
    """Return the caller, or None for anonymous requests."""
    if x_user_id is None:
        return None
    return Actor(user_id=x_user_id, role=Role.parse(x_user_role) if x_user_role else Role.USER)


def get_current_actor(actor: Annotated[Actor | None, Depends(get_optional_actor)]) -> Actor:
    """Return the caller or reject the request as unauthenticated."""
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return actor


def require_moderator(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
    actor.require(Role.MODERATOR)
    return actor


def require_admin(actor: Annotated[Actor, Depends(get_current_actor)]) -> Actor:
    actor.require(Role.ADMIN)
    return actor


ServicesDep = Annotated[ForumServices, Depends(get_services)]
ActorDep = Annotated[Actor, Depends(get_current_actor)]
OptionalActorDep = Annotated[Actor | None, Depends(get_optional_actor)]
ModeratorDep = Annotated[Actor, Depends(require_moderator)]
AdminDep = Annotated[Actor, Depends(require_admin)]


def viewer_id(actor: Actor | None) -> int | None:
    return actor.user_id if actor is not None else None
