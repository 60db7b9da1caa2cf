# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from level_forum.api.v1.dependencies import get_services
from level_forum.core.settings import Settings
from level_forum.db.session import build_engine, build_session_factory, create_tables
from level_forum.main import app as fastapi_app
from level_forum.models import Role
from level_forum.schemas.content import PostRead
from level_forum.schemas.topic import TopicRead
from level_forum.schemas.user import UserRead
from level_forum.services import ForumServices, build_services

_USER_COUNTER = count(1)


@pytest.fixture()
def test_settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None, exp_per_upvote=100, level_base=2.0, level_scale=100.0)


@pytest.fixture()
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'forum.db'}")
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return build_session_factory(engine)


@pytest.fixture()
def services(session_factory: async_sessionmaker, test_settings: Settings) -> ForumServices:
    return build_services(session_factory, test_settings)


UserFactory = Callable[..., Awaitable[UserRead]]


@pytest.fixture()
def make_user(services: ForumServices) -> UserFactory:
    """Create users with unique names and e-mail addresses."""

    async def _make(name: str | None = None, role: Role = Role.USER) -> UserRead:
        n = next(_USER_COUNTER)
        username = name or f"user{n:04d}"
        return await services.users.create_user(
            username, f"{username}.{n}@example.com", "hash", role=role
        )

    return _make


@pytest.fixture()
async def alice(make_user: UserFactory) -> UserRead:
    return await make_user("alice")


@pytest.fixture()
async def bob(make_user: UserFactory) -> UserRead:
    return await make_user("bobby")


@pytest.fixture()
async def moderator(make_user: UserFactory) -> UserRead:
    return await make_user("modder", role=Role.MODERATOR)


@pytest.fixture()
async def topic(services: ForumServices, alice: UserRead) -> TopicRead:
    return await services.topics.create_topic("General", "Anything goes", alice.id)


@pytest.fixture()
async def post(services: ForumServices, topic: TopicRead, alice: UserRead) -> PostRead:
    return await services.posts.create_post(topic.id, alice.id, "Hello", "First post body")


@pytest.fixture()
def app(services: ForumServices) -> Iterator[FastAPI]:
    fastapi_app.dependency_overrides[get_services] = lambda: services
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.pop(get_services, None)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> Callable[..., dict[str, str]]:
    """Build identity headers as forwarded by the gateway."""

    def _headers(user: UserRead, role: Role | None = None) -> dict[str, str]:
        return {
            "X-User-Id": str(user.id),
            "X-User-Role": (role or user.global_role).value,
        }

    return _headers
