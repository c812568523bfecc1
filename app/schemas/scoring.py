from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class ScoringPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    pole: int = 5
    position1: int = 5
    position2: int = 3
    position3: int = 2
    position4to10: int = 1
    crash: int = 1

class ScoringPolicyUpdate(BaseModel):
    """Editor payload; omitted fields keep their current value."""
    pole: Optional[int] = Field(None, ge=0)
    position1: Optional[int] = Field(None, ge=0)
    position2: Optional[int] = Field(None, ge=0)
    position3: Optional[int] = Field(None, ge=0)
    position4to10: Optional[int] = Field(None, ge=0)
    crash: Optional[int] = Field(None, ge=0)

class ScoringPolicyResponse(BaseModel):
    policy: ScoringPolicy
    defaults: ScoringPolicy
    max_points_per_race: int
