from fastapi import APIRouter, Depends
from app.api.deps import get_repository
from app.schemas.scoring import ScoringPolicyResponse, ScoringPolicyUpdate
from app.services.gateway import ContestRepository
from app.services.scoring import DEFAULT_POLICY, max_points_per_race, merge_policy

router = APIRouter()

def _policy_response(overrides):
    policy = merge_policy(overrides)
    return {
        "policy": policy,
        "defaults": DEFAULT_POLICY,
        "max_points_per_race": max_points_per_race(policy),
    }

@router.get("", response_model=ScoringPolicyResponse)
def get_scoring(repo: ContestRepository = Depends(get_repository)):
    return _policy_response(repo.get_scoring_policy_overrides())

@router.put("", response_model=ScoringPolicyResponse)
def update_scoring(update: ScoringPolicyUpdate, repo: ContestRepository = Depends(get_repository)):
    repo.save_scoring_overrides(update.model_dump(exclude_none=True))
    return _policy_response(repo.get_scoring_policy_overrides())
