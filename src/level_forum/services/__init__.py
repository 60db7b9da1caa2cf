# src/level_forum/services/__init__.py
"""Business logic services for the Level Forum application."""

from .comment_service import CommentService
from .container import ForumServices, build_services
from .follow_service import FollowService
from .leveling import LevelCurve
from .notification_service import NotificationService
from .post_service import PostService
from .report_service import ReportService
from .safe_execution import SafeExecutor, safe_operation
from .topic_service import TopicService
from .user_service import UserService
from .vote_service import VoteService

__all__ = [
    "CommentService",
    "FollowService",
    "ForumServices",
    "LevelCurve",
    "NotificationService",
    "PostService",
    "ReportService",
    "SafeExecutor",
    "TopicService",
    "UserService",
    "VoteService",
    "build_services",
    "safe_operation",
]
