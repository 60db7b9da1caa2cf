# src/level_forum/models/enums.py
"""Enumerations shared by the forum models."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import total_ordering


class ContentType(str, enum.Enum):
    """Kinds of content that can be voted on, reported or notified about."""

    POST = "Post"
    COMMENT = "Comment"

    @classmethod
    def parse(cls, raw: str | ContentType) -> ContentType:
        """Resolve ``raw`` by value or name, case-insensitively.

        Raises:
            ValueError: If ``raw`` names no known content type.
        """
        if isinstance(raw, cls):
            return raw
        needle = str(raw).strip().lower()
        for member in cls:
            if needle in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown content type: {raw!r}")


@dataclass(frozen=True)
class Target:
    """A votable/reportable item: a post or a comment, by id."""

    type: ContentType
    id: int


class ReportStatus(str, enum.Enum):
    """Report lifecycle; ``CLOSED`` is terminal."""

    OPEN = "Open"
    CLOSED = "Closed"

    @classmethod
    def parse(cls, raw: str | None) -> ReportStatus | None:
        """Parse a user-supplied filter; ``None`` means no filter."""
        if raw is None:
            return None
        needle = raw.replace(" ", "").lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return None


@total_ordering
class Role(enum.Enum):
    """Global or per-topic role.

    Members are ordered by declaration; new roles may only be appended.
    """

    NONE = "None"
    USER = "User"
    MODERATOR = "Moderator"
    ADMIN = "Admin"
    OWNER = "Owner"

    @property
    def rank(self) -> int:
        return _ROLE_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def at_least(self, minimum: Role) -> bool:
        """Return True when this role is ``minimum`` or higher."""
        return self >= minimum

    @classmethod
    def parse(cls, raw: str | None) -> Role:
        """Parse a role claim; unknown or missing claims become ``NONE``."""
        if not raw:
            return cls.NONE
        needle = raw.strip().lower()
        for member in cls:
            if member.value.lower() == needle:
                return member
        return cls.NONE


_ROLE_ORDER: tuple[Role, ...] = tuple(Role)
