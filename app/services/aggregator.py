import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from app.schemas.contest import Event, Forecast, OfficialResult, User
from app.schemas.scoring import ScoringPolicy
from app.schemas.stats import PickBreakdown, PositionBreakdown, ScoreBreakdown, UserScore
from app.services.scoring import TOP_N, points_for_slot

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    # Naive datetimes coming out of the database are stored in UTC
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt

def is_voting_closed(event: Event, now: Optional[datetime] = None) -> bool:
    now = _as_utc(now) if now else datetime.now(timezone.utc)
    return now > _as_utc(event.voting_deadline)

def decided_events(events: Iterable[Event], results: Iterable[OfficialResult],
                   now: Optional[datetime] = None) -> List[Event]:
    """Events whose deadline has passed and that have a published result."""
    with_result = {r.race_id for r in results}
    return [e for e in events if e.id in with_result and is_voting_closed(e, now)]

def group_by_race(forecasts: Iterable[Forecast]) -> Dict[str, List[Forecast]]:
    grouped: Dict[str, List[Forecast]] = defaultdict(list)
    for f in forecasts:
        grouped[f.race_id].append(f)
    return grouped

def score_forecast(forecast: Forecast, result: OfficialResult, policy: ScoringPolicy) -> ScoreBreakdown:
    """Score one forecast against the official result, pick by pick.

    Positions use the exact-slot rule: a pick only scores when the pilot
    finished in the very slot that was predicted.
    """
    pole_hit = forecast.pole == result.pole
    pole = PickBreakdown(predicted=forecast.pole, actual=result.pole,
                         hit=pole_hit, points=policy.pole if pole_hit else 0)

    # Both picks empty counts as a hit (plain equality)
    crash_hit = forecast.crash_pilot == result.crash_pilot
    crash = PickBreakdown(predicted=forecast.crash_pilot, actual=result.crash_pilot,
                          hit=crash_hit, points=policy.crash if crash_hit else 0)

    positions: List[PositionBreakdown] = []
    for i, predicted in enumerate(forecast.positions[:TOP_N]):
        actual = result.positions[i] if i < len(result.positions) else None
        hit = False
        if predicted:
            try:
                hit = result.positions.index(predicted) == i
            except ValueError:
                hit = False
        positions.append(PositionBreakdown(
            position=i + 1,
            predicted=predicted or "",
            actual=actual or "",
            hit=hit,
            points=points_for_slot(policy, i) if hit else 0,
        ))

    total = pole.points + crash.points + sum(p.points for p in positions)
    return ScoreBreakdown(race_id=forecast.race_id, user_id=forecast.user_id,
                          pole=pole, positions=positions, crash=crash, total_points=total)

def _accuracy(hits: int, attempts: int) -> float:
    return hits / attempts * 100 if attempts > 0 else 0.0

def aggregate(users: Iterable[User], events: Iterable[Event], forecasts: Iterable[Forecast],
              results: Iterable[OfficialResult], policy: ScoringPolicy,
              now: Optional[datetime] = None) -> List[UserScore]:
    """Build one UserScore per known user from a snapshot of contest data.

    Every forecast marks its owner as a participant; only forecasts for
    decided events (deadline passed and result published) earn points and
    count towards accuracy.
    """
    events = list(events)
    results = list(results)
    by_race = group_by_race(forecasts)
    result_by_race = {r.race_id: r for r in results}

    scores: Dict[str, UserScore] = {}
    for u in users:
        scores[u.uid] = UserScore(user_id=u.uid, display_name=u.display_name or "User", email=u.email)

    # Participation pass: any forecast, decided or not
    for event in events:
        for f in by_race.get(event.id, []):
            if f.user_id in scores:
                scores[f.user_id].has_voted = True

    decided = decided_events(events, results, now)
    for event in decided:
        result = result_by_race.get(event.id)
        if result is None:
            logger.debug("No result for decided race %s, skipping", event.id)
            continue

        for f in by_race.get(event.id, []):
            score = scores.get(f.user_id)
            if score is None:
                continue

            score.races_participated += 1
            score.total_pole_votes += 1
            score.total_crash_votes += 1
            score.total_position_votes += TOP_N

            breakdown = score_forecast(f, result, policy)
            score.pole_hits += breakdown.pole.hit
            score.crash_hits += breakdown.crash.hit
            score.position_hits += sum(p.hit for p in breakdown.positions)
            score.total_points += breakdown.total_points

    for score in scores.values():
        score.pole_accuracy = _accuracy(score.pole_hits, score.total_pole_votes)
        score.crash_accuracy = _accuracy(score.crash_hits, score.total_crash_votes)
        score.position_accuracy = _accuracy(score.position_hits, score.total_position_votes)

    logger.info("Aggregated %d users over %d decided of %d races", len(scores), len(decided), len(events))
    return list(scores.values())
