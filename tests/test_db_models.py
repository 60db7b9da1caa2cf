"""Unit tests for the ORM models and shared enumerations.

These tests verify mapping details the services rely on: table names, the
one-vote-per-target constraint, the vote value check and enum parsing.
"""

import pytest
from sqlalchemy import UniqueConstraint, select
from sqlalchemy.exc import IntegrityError

from level_forum.db.time import utcnow
from level_forum.models import (
    ContentType,
    Report,
    ReportStatus,
    Role,
    User,
    UserTopicRole,
    Vote,
)


def test_table_names() -> None:
    assert User.__tablename__ == "app_user"
    assert UserTopicRole.__tablename__ == "app_user_topic_role"
    assert Report.__tablename__ == "report"


def test_vote_unique_per_user_and_target() -> None:
    uniques = [c for c in Vote.__table__.constraints if isinstance(c, UniqueConstraint)]
    assert any(
        {col.name for col in c.columns} == {"user_id", "target_type", "target_id"}
        for c in uniques
    )


async def test_vote_value_check(session_factory, alice, post) -> None:
    with pytest.raises(IntegrityError):
        async with session_factory() as db, db.begin():
            db.add(
                Vote(
                    target_type=ContentType.POST,
                    target_id=post.id,
                    user_id=alice.id,
                    value=3,
                    created_at=utcnow(),
                )
            )


def test_role_ordering() -> None:
    assert Role.NONE < Role.USER < Role.MODERATOR < Role.ADMIN < Role.OWNER
    assert Role.ADMIN.at_least(Role.MODERATOR)
    assert not Role.USER.at_least(Role.MODERATOR)
    assert Role.parse("moderator") is Role.MODERATOR
    assert Role.parse("superuser") is Role.NONE
    assert Role.parse(None) is Role.NONE


def test_content_type_parse() -> None:
    assert ContentType.parse("post") is ContentType.POST
    assert ContentType.parse("COMMENT") is ContentType.COMMENT
    with pytest.raises(ValueError):
        ContentType.parse("Topic")


def test_report_status_parse() -> None:
    assert ReportStatus.parse("Closed") is ReportStatus.CLOSED
    assert ReportStatus.parse("nope") is None
    assert ReportStatus.parse(None) is None


async def test_experience_adjustment_clamps_at_zero(session_factory, alice) -> None:
    async with session_factory() as db, db.begin():
        await db.execute(User.experience_adjustment(alice.id, 50))
        await db.execute(User.experience_adjustment(alice.id, -80))
        assert await db.scalar(select(User.experience).where(User.id == alice.id)) == 0

        await db.execute(User.experience_adjustment(alice.id, 25))
        assert await db.scalar(select(User.experience).where(User.id == alice.id)) == 25
