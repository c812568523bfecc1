from typing import List, Optional
from pydantic import BaseModel

class UserScore(BaseModel):
    user_id: str
    display_name: str = "User"
    email: str = ""
    total_points: int = 0

    pole_hits: int = 0
    crash_hits: int = 0
    position_hits: int = 0
    total_pole_votes: int = 0
    total_crash_votes: int = 0
    total_position_votes: int = 0

    # Percentages in [0, 100]; 0 when there were no attempts
    pole_accuracy: float = 0.0
    crash_accuracy: float = 0.0
    position_accuracy: float = 0.0

    races_participated: int = 0
    has_voted: bool = False

class RankingSet(BaseModel):
    top_overall: List[UserScore]
    top_pole_accuracy: List[UserScore]
    top_crash_accuracy: List[UserScore]
    top_position_accuracy: List[UserScore]
    all_users: List[UserScore]

class ScoringStats(BaseModel):
    total_users: int
    average_score: float
    highest_score: int

class RaceStats(BaseModel):
    total: int
    upcoming: int
    active: int
    completed: int
    races_with_results: int
    completion_rate: float

class PilotStats(BaseModel):
    total: int
    active: int
    inactive: int

class PickBreakdown(BaseModel):
    predicted: str
    actual: str
    hit: bool
    points: int

class PositionBreakdown(PickBreakdown):
    position: int             # 1-based slot of the prediction

class ScoreBreakdown(BaseModel):
    race_id: str
    user_id: str
    pole: PickBreakdown
    positions: List[PositionBreakdown]
    crash: PickBreakdown
    total_points: int

class ParticipantsResponse(BaseModel):
    count: int
    users: List[UserScore]

class RaceVote(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    pole: str
    positions: List[Optional[str]]
    crash_pilot: str

class RaceVotesResponse(BaseModel):
    race_id: str
    count: int
    votes: List[RaceVote]
