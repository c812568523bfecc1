from typing import Any, Mapping, Optional

from app.schemas.scoring import ScoringPolicy

DEFAULT_POLICY = ScoringPolicy()

# Number of scoreable finishing slots in a forecast
TOP_N = 10

def merge_policy(overrides: Optional[Mapping[str, Any]] = None) -> ScoringPolicy:
    """Overlay administrator overrides on the default policy.

    Keys that are not policy fields (row ids, timestamps) are ignored, and a
    missing or None value keeps the default.
    """
    if not overrides:
        return DEFAULT_POLICY
    values = DEFAULT_POLICY.model_dump()
    for field, value in overrides.items():
        if field in values and value is not None:
            values[field] = value
    return ScoringPolicy(**values)

def points_for_slot(policy: ScoringPolicy, index: int) -> int:
    """Points for an exact hit at 0-based finishing index."""
    if index == 0:
        return policy.position1
    if index == 1:
        return policy.position2
    if index == 2:
        return policy.position3
    if 3 <= index < TOP_N:
        return policy.position4to10
    return 0

def max_points_per_race(policy: ScoringPolicy) -> int:
    return policy.pole + policy.crash + sum(points_for_slot(policy, i) for i in range(TOP_N))
