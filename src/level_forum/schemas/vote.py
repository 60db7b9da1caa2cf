"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field

from level_forum.models import ContentType


class VoteCast(BaseModel):
    """Schema for setting, changing or clearing a vote.

    The range of ``value`` is enforced by the vote ledger itself.
    """

    target_type: ContentType
    target_id: int
    value: int = Field(..., description="1 for upvote, -1 for downvote, 0 to clear")


class ScoreResponse(BaseModel):
    target_type: ContentType
    target_id: int
    score: int


class MyVoteResponse(BaseModel):
    target_type: ContentType
    target_id: int
    value: int | None = Field(None, description="None when the user has not voted")
