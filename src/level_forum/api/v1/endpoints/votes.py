# src/level_forum/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Level Forum API."""

from fastapi import APIRouter

from level_forum.api.v1.dependencies import ActorDep, ServicesDep
from level_forum.models import ContentType
from level_forum.schemas.vote import MyVoteResponse, ScoreResponse, VoteCast

router = APIRouter(prefix="/votes", tags=["votes"])


@router.put("/", response_model=ScoreResponse)
async def cast_vote(vote: VoteCast, actor: ActorDep, services: ServicesDep) -> ScoreResponse:
    """Set, change (1 / -1) or clear (0) the caller's vote."""
    score = await services.votes.toggle_vote(
        vote.target_type, vote.target_id, actor.user_id, vote.value
    )
    return ScoreResponse(target_type=vote.target_type, target_id=vote.target_id, score=score)


@router.get("/{target_type}/{target_id}", response_model=ScoreResponse)
async def get_score(
    target_type: ContentType,
    target_id: int,
    services: ServicesDep,
) -> ScoreResponse:
    """Get the signed vote total of a post or comment."""
    score = await services.votes.get_score(target_type, target_id)
    return ScoreResponse(target_type=target_type, target_id=target_id, score=score)


@router.get("/{target_type}/{target_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    target_type: ContentType,
    target_id: int,
    actor: ActorDep,
    services: ServicesDep,
) -> MyVoteResponse:
    """Get current user's vote on a specific post or comment."""
    value = await services.votes.get_user_vote(target_type, target_id, actor.user_id)
    return MyVoteResponse(target_type=target_type, target_id=target_id, value=value)
