from typing import Callable, Iterable, List, Sequence

from app.schemas.contest import Event, OfficialResult, Pilot
from app.schemas.stats import PilotStats, RaceStats, RankingSet, ScoringStats, UserScore

DEFAULT_LIMIT = 10


def _top(scores: Sequence[UserScore], key: Callable[[UserScore], float], limit: int) -> List[UserScore]:
    # Highest metric first, then user id ascending on ties
    return sorted(scores, key=lambda s: (-key(s), s.user_id))[:limit]

def build_rankings(scores: Iterable[UserScore], limit: int = DEFAULT_LIMIT) -> RankingSet:
    """Turn aggregated scores into the public leaderboards.

    Users who never submitted a forecast are left out of every view. Accuracy
    boards only include users with at least one attempt in that category.
    """
    participants = [s for s in scores if s.has_voted]
    return RankingSet(
        top_overall=_top(participants, lambda s: s.total_points, limit),
        top_pole_accuracy=_top([s for s in participants if s.total_pole_votes >= 1],
                               lambda s: s.pole_accuracy, limit),
        top_crash_accuracy=_top([s for s in participants if s.total_crash_votes >= 1],
                                lambda s: s.crash_accuracy, limit),
        top_position_accuracy=_top([s for s in participants if s.total_position_votes >= 1],
                                   lambda s: s.position_accuracy, limit),
        all_users=participants,
    )

def scoring_summary(participants: Sequence[UserScore]) -> ScoringStats:
    if not participants:
        return ScoringStats(total_users=0, average_score=0.0, highest_score=0)
    points = [s.total_points for s in participants]
    return ScoringStats(
        total_users=len(points),
        average_score=round(sum(points) / len(points), 2),
        highest_score=max(points),
    )

def race_stats(events: Sequence[Event], results: Iterable[OfficialResult]) -> RaceStats:
    with_result = {r.race_id for r in results}
    total = len(events)
    races_with_results = sum(1 for e in events if e.id in with_result)
    return RaceStats(
        total=total,
        upcoming=sum(1 for e in events if e.status == "upcoming"),
        active=sum(1 for e in events if e.status == "active"),
        completed=sum(1 for e in events if e.status == "completed"),
        races_with_results=races_with_results,
        completion_rate=round(races_with_results / total * 100, 1) if total else 0.0,
    )

def pilot_stats(pilots: Sequence[Pilot]) -> PilotStats:
    active = sum(1 for p in pilots if p.active)
    return PilotStats(total=len(pilots), active=active, inactive=len(pilots) - active)
