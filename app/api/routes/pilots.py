from fastapi import APIRouter, Depends
from app.api.deps import get_repository
from app.schemas.stats import PilotStats
from app.services.gateway import ContestRepository
from app.services.rankings import pilot_stats

router = APIRouter()

@router.get("/stats", response_model=PilotStats)
def pilots_stats(repo: ContestRepository = Depends(get_repository)):
    return pilot_stats(repo.list_pilots())
