from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from app.api.deps import get_repository
from app.schemas.contest import Event
from app.schemas.stats import RaceStats, RaceVotesResponse, ScoreBreakdown
from app.services.aggregator import is_voting_closed, score_forecast
from app.services.gateway import ContestRepository
from app.services.rankings import race_stats
from app.services.scoring import merge_policy

router = APIRouter()

def _ensure_race(repo: ContestRepository, race_id: str) -> Event:
    event = repo.get_event(race_id)
    if event is None:
        raise HTTPException(404, detail=f"Race '{race_id}' not found")
    return event

@router.get("/stats", response_model=RaceStats)
def races_stats(repo: ContestRepository = Depends(get_repository)):
    return race_stats(repo.list_events(), repo.list_results())

@router.get("/{race_id}/votes", response_model=RaceVotesResponse)
def race_votes(
    race_id: str,
    viewer: Optional[str] = Query(None, description="User id asking; sees votes early once they voted"),
    repo: ContestRepository = Depends(get_repository),
):
    """
    Every forecast for a race with the voter's name and email.
    Hidden until voting closes, except for a viewer who already voted.
    """
    event = _ensure_race(repo, race_id)
    forecasts = repo.list_forecasts_for_event(race_id)
    if not is_voting_closed(event):
        if viewer is None or viewer not in {f.user_id for f in forecasts}:
            raise HTTPException(403, detail=f"Voting for race '{race_id}' is still open")

    users = {u.uid: u for u in repo.list_users()}
    votes = []
    for f in forecasts:
        user = users.get(f.user_id)
        votes.append({
            "user_id": f.user_id,
            "display_name": user.display_name if user else None,
            "email": user.email if user else None,
            "pole": f.pole,
            "positions": f.positions,
            "crash_pilot": f.crash_pilot,
        })
    return {"race_id": race_id, "count": len(votes), "votes": votes}

@router.get("/{race_id}/votes/{user_id}/breakdown", response_model=ScoreBreakdown)
def vote_breakdown(race_id: str, user_id: str, repo: ContestRepository = Depends(get_repository)):
    event = _ensure_race(repo, race_id)
    if not is_voting_closed(event):
        raise HTTPException(403, detail=f"Voting for race '{race_id}' is still open")
    forecast = repo.get_forecast(race_id, user_id)
    if forecast is None:
        raise HTTPException(404, detail=f"No vote from '{user_id}' for race '{race_id}'")
    result = repo.get_result(race_id)
    if result is None:
        raise HTTPException(404, detail=f"Race '{race_id}' has no published result")
    return score_forecast(forecast, result, merge_policy(repo.get_scoring_policy_overrides()))
