"""Vote ledger: one vote per (user, target) and reputation side effects."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from level_forum.core.errors import InvalidInputError, NotFoundError
from level_forum.core.settings import Settings
from level_forum.db.time import utcnow
from level_forum.models import ContentType, Target, User, Vote
from level_forum.services.base import ForumService
from level_forum.services.content import parse_target, resolve_target_author, target_score
from level_forum.services.safe_execution import SafeExecutor, safe_operation

logger = logging.getLogger(__name__)

VALID_VOTES = frozenset({-1, 0, 1})


def upvoted(value: int | None) -> int:
    """1 for an upvote, 0 for anything else (downvote or no vote)."""
    return 1 if value == 1 else 0


class VoteService(ForumService):
    """Toggle votes and read scores."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        safe: SafeExecutor,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(session_factory, safe, settings)
        self.exp_per_upvote = self.settings.exp_per_upvote

    @staticmethod
    async def _find_vote(db: AsyncSession, target: Target, user_id: int) -> Vote | None:
        return await db.scalar(
            select(Vote).where(
                Vote.target_type == target.type,
                Vote.target_id == target.id,
                Vote.user_id == user_id,
            )
        )

    @safe_operation("VoteService.toggle_vote")
    async def toggle_vote(
        self,
        target_type: ContentType | str,
        target_id: int,
        user_id: int,
        new_value: int,
    ) -> int:
        """Set the caller's vote on a target and return the target's new score.

        ``new_value`` of 0 removes the vote. The author gains
        ``exp_per_upvote`` when an upvote appears and loses it when one goes
        away, unless the voter is the author; experience never drops below 0.

        Raises:
            InvalidInputError: If ``new_value`` is not -1, 0 or 1.
            NotFoundError: If the target does not exist or is deleted.
        """
        if new_value not in VALID_VOTES:
            raise InvalidInputError("Vote must be -1, 0 or +1.")
        target = parse_target(target_type, target_id)

        async with self.session_factory() as db, db.begin():
            author_id = await resolve_target_author(db, target)
            if author_id is None:
                raise NotFoundError("Target not found.")

            vote = await self._find_vote(db, target, user_id)
            old_value = vote.value if vote is not None else 0

            if vote is None:
                if new_value != 0:
                    db.add(
                        Vote(
                            target_type=target.type,
                            target_id=target.id,
                            user_id=user_id,
                            value=new_value,
                            created_at=utcnow(),
                        )
                    )
            elif new_value == 0:
                await db.delete(vote)
            else:
                vote.value = new_value

            delta = upvoted(new_value) - upvoted(old_value)
            if delta and author_id != user_id:
                await db.execute(
                    User.experience_adjustment(author_id, delta * self.exp_per_upvote)
                )
                logger.debug(
                    "User %s experience changed by %s after vote on %s",
                    author_id,
                    delta * self.exp_per_upvote,
                    target,
                )

            await db.flush()
            return await target_score(db, target)

    @safe_operation("VoteService.get_score")
    async def get_score(self, target_type: ContentType | str, target_id: int) -> int:
        """Signed sum of all votes on the target (0 without votes)."""
        target = parse_target(target_type, target_id)
        async with self.session_factory() as db:
            return await target_score(db, target)

    @safe_operation("VoteService.get_user_vote")
    async def get_user_vote(
        self,
        target_type: ContentType | str,
        target_id: int,
        user_id: int,
    ) -> int | None:
        """The user's stored vote, or None when there is none."""
        target = parse_target(target_type, target_id)
        async with self.session_factory() as db:
            vote = await self._find_vote(db, target, user_id)
            return vote.value if vote is not None else None
