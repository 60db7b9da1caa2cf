"""Composition root: build every service once around one store handle."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import async_sessionmaker

from level_forum.core.settings import Settings
from level_forum.core.settings import settings as default_settings
from level_forum.services.comment_service import CommentService
from level_forum.services.follow_service import FollowService
from level_forum.services.leveling import LevelCurve
from level_forum.services.notification_service import NotificationService
from level_forum.services.post_service import PostService
from level_forum.services.report_service import ReportService
from level_forum.services.safe_execution import SafeExecutor
from level_forum.services.topic_service import TopicService
from level_forum.services.user_service import UserService
from level_forum.services.vote_service import VoteService


@dataclass(frozen=True)
class ForumServices:
    """All services sharing one session factory and one error sink."""

    safe: SafeExecutor
    curve: LevelCurve
    users: UserService
    topics: TopicService
    follows: FollowService
    posts: PostService
    comments: CommentService
    votes: VoteService
    reports: ReportService
    notifications: NotificationService


def build_services(
    session_factory: async_sessionmaker,
    settings: Settings | None = None,
) -> ForumServices:
    """Wire the services explicitly; called once at process start."""
    settings = settings or default_settings
    safe = SafeExecutor(session_factory)
    curve = LevelCurve.from_settings(settings)
    return ForumServices(
        safe=safe,
        curve=curve,
        users=UserService(session_factory, safe, settings, curve=curve),
        topics=TopicService(session_factory, safe, settings),
        follows=FollowService(session_factory, safe, settings),
        posts=PostService(session_factory, safe, settings),
        comments=CommentService(session_factory, safe, settings),
        votes=VoteService(session_factory, safe, settings),
        reports=ReportService(session_factory, safe, settings),
        notifications=NotificationService(session_factory, safe, settings),
    )
