from fastapi import APIRouter, Depends, Query
from app.api.deps import get_repository
from app.core.config import settings
from app.schemas.stats import RankingSet, ParticipantsResponse, ScoringStats
from app.services.gateway import ContestRepository, load_user_scores
from app.services.rankings import build_rankings, scoring_summary

router = APIRouter()

@router.get("", response_model=RankingSet)
def rankings(
    limit: int = Query(settings.ranking_limit, ge=1, le=100, description="Max entries per leaderboard"),
    repo: ContestRepository = Depends(get_repository),
):
    return build_rankings(load_user_scores(repo), limit=limit)

@router.get("/users", response_model=ParticipantsResponse)
def participants(repo: ContestRepository = Depends(get_repository)):
    """
    Every user who has submitted at least one forecast, ordered by points.
    """
    ranked = build_rankings(load_user_scores(repo))
    users = sorted(ranked.all_users, key=lambda s: (-s.total_points, s.user_id))
    return {"count": len(users), "users": users}

@router.get("/summary", response_model=ScoringStats)
def summary(repo: ContestRepository = Depends(get_repository)):
    return scoring_summary(build_rankings(load_user_scores(repo)).all_users)
