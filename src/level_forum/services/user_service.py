"""Account management and per-topic roles."""
from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from level_forum.core.errors import ConflictError, InvalidInputError, NotFoundError
from level_forum.core.settings import Settings
from level_forum.db.time import utcnow
from level_forum.models import Role, User, UserTopicRole
from level_forum.schemas.user import TopicRoleAssignment, TopicRoleRead, UserRead
from level_forum.services.base import ForumService
from level_forum.services.content import get_live_topic
from level_forum.services.leveling import LevelCurve
from level_forum.services.safe_execution import SafeExecutor, safe_operation

__all__ = ["UserService", "to_user_read"]


def to_user_read(user: User, curve: LevelCurve) -> UserRead:
    """Convert a User ORM instance to its read model with derived level."""
    return UserRead(
        id=user.id,
        username=user.username,
        email=user.email,
        global_role=user.global_role,
        experience=user.experience,
        avatar_url=user.avatar_url,
        created_at=user.created_at,
        level=curve.level(user.experience),
        progress=curve.progress_to_next(user.experience),
    )


class UserService(ForumService):
    """CRUD-style operations on users."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        safe: SafeExecutor,
        settings: Settings | None = None,
        curve: LevelCurve | None = None,
    ) -> None:
        super().__init__(session_factory, safe, settings)
        self.curve = curve or LevelCurve.from_settings(self.settings)

    @staticmethod
    async def _get_active(db: AsyncSession, user_id: int) -> User:
        user = await db.scalar(select(User).where(User.id == user_id, User.is_deleted.is_(False)))
        if user is None:
            raise NotFoundError("User not found.")
        return user

    @staticmethod
    async def _roles_for(db: AsyncSession, topic_id: int) -> list[TopicRoleRead]:
        rows = await db.execute(
            select(UserTopicRole, User.username)
            .join(User, User.id == UserTopicRole.user_id)
            .where(UserTopicRole.topic_id == topic_id)
            .order_by(UserTopicRole.id)
        )
        return [
            TopicRoleRead(
                user_id=role.user_id,
                topic_id=role.topic_id,
                topic_role=role.topic_role,
                username=username,
            )
            for role, username in rows
        ]

    @staticmethod
    async def _taken(db: AsyncSession, column, value: str, exclude_id: int | None = None) -> bool:
        clause = column == value
        if exclude_id is not None:
            clause = clause & (User.id != exclude_id)
        return bool(await db.scalar(select(exists().where(clause))))

    def _clean_username(self, username: str) -> str:
        cleaned = (username or "").strip()
        if len(cleaned) < self.settings.min_username_length:
            raise InvalidInputError(
                f"Username must be at least {self.settings.min_username_length} characters."
            )
        return cleaned

    @safe_operation("UserService.create_user")
    async def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> UserRead:
        """Register a user with zero experience.

        Raises:
            InvalidInputError: If the username is too short.
            ConflictError: If the username or email is already taken.
        """
        username = self._clean_username(username)
        async with self.session_factory() as db, db.begin():
            if await self._taken(db, User.username, username):
                raise ConflictError("Username already taken.")
            if await self._taken(db, User.email, email):
                raise ConflictError("Email already in use.")
            user = User(
                username=username,
                email=email,
                password_hash=password_hash,
                global_role=role,
                experience=0,
                created_at=utcnow(),
                is_deleted=False,
            )
            db.add(user)
            await db.flush()
            return to_user_read(user, self.curve)

    @safe_operation("UserService.get_user_by_id")
    async def get_user_by_id(self, user_id: int) -> UserRead | None:
        async with self.session_factory() as db:
            user = await db.scalar(
                select(User).where(User.id == user_id, User.is_deleted.is_(False))
            )
            return to_user_read(user, self.curve) if user else None

    @safe_operation("UserService.get_user_by_username")
    async def get_user_by_username(self, username: str) -> UserRead | None:
        async with self.session_factory() as db:
            user = await db.scalar(
                select(User).where(User.username == username, User.is_deleted.is_(False))
            )
            return to_user_read(user, self.curve) if user else None

    @safe_operation("UserService.update_user")
    async def update_user(
        self,
        user_id: int,
        email: str | None = None,
        avatar_url: str | None = None,
    ) -> UserRead:
        """Update profile fields; ``None`` leaves a field unchanged."""
        async with self.session_factory() as db, db.begin():
            user = await self._get_active(db, user_id)
            if email and email.strip():
                if await self._taken(db, User.email, email, exclude_id=user_id):
                    raise ConflictError("Email already in use.")
                user.email = email
            if avatar_url is not None:
                user.avatar_url = avatar_url
            await db.flush()
            return to_user_read(user, self.curve)

    @safe_operation("UserService.change_username")
    async def change_username(self, user_id: int, new_username: str) -> UserRead:
        new_username = self._clean_username(new_username)
        async with self.session_factory() as db, db.begin():
            user = await self._get_active(db, user_id)
            if await self._taken(db, User.username, new_username, exclude_id=user_id):
                raise ConflictError("Username already taken.")
            user.username = new_username
            await db.flush()
            return to_user_read(user, self.curve)

    @safe_operation("UserService.set_password_hash")
    async def set_password_hash(self, user_id: int, new_password_hash: str) -> None:
        async with self.session_factory() as db, db.begin():
            user = await self._get_active(db, user_id)
            user.password_hash = new_password_hash

    @safe_operation("UserService.add_experience")
    async def add_experience(self, user_id: int, delta: int) -> UserRead:
        """Adjust experience by ``delta``, flooring the total at zero."""
        async with self.session_factory() as db, db.begin():
            user = await self._get_active(db, user_id)
            await db.execute(User.experience_adjustment(user_id, delta))
            await db.refresh(user, ["experience"])
            return to_user_read(user, self.curve)

    @safe_operation("UserService.soft_delete_user")
    async def soft_delete_user(self, user_id: int) -> None:
        """Deactivate the account. Content and created topics stay in place."""
        async with self.session_factory() as db, db.begin():
            user = await self._get_active(db, user_id)
            user.is_deleted = True

    @safe_operation("UserService.get_topic_roles")
    async def get_topic_roles(self, topic_id: int) -> list[TopicRoleRead]:
        async with self.session_factory() as db:
            return await self._roles_for(db, topic_id)

    @safe_operation("UserService.define_topic_roles")
    async def define_topic_roles(
        self,
        topic_id: int,
        roles: Iterable[TopicRoleAssignment],
    ) -> list[TopicRoleRead]:
        """Replace the topic's role table.

        Entries are de-duplicated per user (first wins) and entries with a
        non-positive user id are dropped.

        Raises:
            NotFoundError: If the topic is missing or deleted.
            ConflictError: If any referenced user is missing or deleted.
        """
        wanted: dict[int, Role] = {}
        for entry in roles:
            if entry.user_id > 0 and entry.user_id not in wanted:
                wanted[entry.user_id] = entry.topic_role

        async with self.session_factory() as db, db.begin():
            await get_live_topic(db, topic_id)
            if wanted:
                found = await db.scalar(
                    select(func.count(User.id)).where(
                        User.id.in_(list(wanted)), User.is_deleted.is_(False)
                    )
                )
                if found != len(wanted):
                    raise ConflictError("Some users do not exist.")

            await db.execute(delete(UserTopicRole).where(UserTopicRole.topic_id == topic_id))
            db.add_all(
                UserTopicRole(user_id=user_id, topic_id=topic_id, topic_role=role)
                for user_id, role in wanted.items()
            )
            await db.flush()

            return await self._roles_for(db, topic_id)
