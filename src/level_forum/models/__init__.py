# src/level_forum/models/__init__.py
"""SQLAlchemy models for the Level Forum application."""

from .enums import ContentType, ReportStatus, Role, Target
from .user import User, UserTopicRole
from .topic import Topic, TopicFollow
from .post import Post
from .comment import Comment
from .vote import Vote
from .report import Report
from .notification import Notification
from .app_error import AppError

__all__ = [
    "ContentType", "ReportStatus", "Role", "Target",
    "User", "UserTopicRole",
    "Topic", "TopicFollow",
    "Post",
    "Comment",
    "Vote",
    "Report",
    "Notification",
    "AppError",
]
