"""
Pydantic schemas for service read models and API request bodies.

Derived values (level, progress, score, my_vote) only exist here; the ORM
models never store them.
"""

from .common import Page
from .content import (
    CommentCreate,
    CommentRead,
    CommentReply,
    CommentUpdate,
    PostCreate,
    PostRead,
    PostUpdate,
)
from .notification import NotificationRead
from .report import ReportCreate, ReportDecision, ReportRead, ReportTargetInfo
from .topic import TopicCreate, TopicLock, TopicRead, TopicUpdate
from .user import (
    TopicRoleAssignment,
    TopicRoleRead,
    UserCreate,
    UserPublicRead,
    UserRead,
    UserUpdate,
)
from .vote import MyVoteResponse, ScoreResponse, VoteCast

__all__ = [
    "Page",
    "CommentCreate", "CommentRead", "CommentReply", "CommentUpdate",
    "PostCreate", "PostRead", "PostUpdate",
    "NotificationRead",
    "ReportCreate", "ReportDecision", "ReportRead", "ReportTargetInfo",
    "TopicCreate", "TopicLock", "TopicRead", "TopicUpdate",
    "TopicRoleAssignment", "TopicRoleRead", "UserCreate", "UserPublicRead", "UserRead", "UserUpdate",
    "MyVoteResponse", "ScoreResponse", "VoteCast",
]
