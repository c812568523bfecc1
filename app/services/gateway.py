import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import contest as m
from app.schemas.contest import Event, Forecast, OfficialResult, Pilot, User
from app.schemas.stats import UserScore
from app.services.aggregator import aggregate
from app.services.scoring import merge_policy

logger = logging.getLogger(__name__)

# ScoringPolicy field -> scoring_config column
_POLICY_COLUMNS = {
    "pole": "pole_points",
    "position1": "position1_points",
    "position2": "position2_points",
    "position3": "position3_points",
    "position4to10": "position4to10_points",
    "crash": "crash_points",
}


class GatewayError(Exception):
    """Contest data could not be read or written."""


@contextmanager
def _reading(what: str):
    try:
        yield
    except SQLAlchemyError as e:
        logger.error("Failed to load %s: %s", what, e)
        raise GatewayError(f"Could not load {what}") from e


class ContestRepository:
    """Read access to contest data for the scoring engine."""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self) -> List[User]:
        with _reading("users"):
            rows = self.db.execute(select(m.UserProfile).order_by(m.UserProfile.uid)).scalars().all()
        return [User.model_validate(r, from_attributes=True) for r in rows]

    def list_pilots(self) -> List[Pilot]:
        with _reading("pilots"):
            rows = self.db.execute(select(m.Pilot).order_by(m.Pilot.id)).scalars().all()
        return [Pilot.model_validate(r, from_attributes=True) for r in rows]

    def list_events(self) -> List[Event]:
        with _reading("races"):
            rows = self.db.execute(select(m.Race).order_by(m.Race.voting_deadline, m.Race.id)).scalars().all()
        return [Event.model_validate(r, from_attributes=True) for r in rows]

    def get_event(self, event_id: str) -> Optional[Event]:
        with _reading(f"race {event_id}"):
            row = self.db.get(m.Race, event_id)
        return Event.model_validate(row, from_attributes=True) if row else None

    def list_forecasts_for_event(self, event_id: str) -> List[Forecast]:
        with _reading(f"votes for race {event_id}"):
            rows = self.db.execute(
                select(m.Vote).where(m.Vote.race_id == event_id).order_by(m.Vote.id)
            ).scalars().all()
        return [Forecast.model_validate(r, from_attributes=True) for r in rows]

    def list_all_forecasts(self) -> List[Forecast]:
        with _reading("votes"):
            rows = self.db.execute(select(m.Vote).order_by(m.Vote.id)).scalars().all()
        return [Forecast.model_validate(r, from_attributes=True) for r in rows]

    def get_forecast(self, event_id: str, user_id: str) -> Optional[Forecast]:
        with _reading(f"vote of {user_id} for race {event_id}"):
            row = self.db.execute(
                select(m.Vote).where(m.Vote.race_id == event_id, m.Vote.user_id == user_id)
            ).scalar_one_or_none()
        return Forecast.model_validate(row, from_attributes=True) if row else None

    def list_results(self) -> List[OfficialResult]:
        with _reading("results"):
            rows = self.db.execute(select(m.RaceResult).order_by(m.RaceResult.id)).scalars().all()
        return [OfficialResult.model_validate(r, from_attributes=True) for r in rows]

    def get_result(self, event_id: str) -> Optional[OfficialResult]:
        with _reading(f"result for race {event_id}"):
            row = self.db.execute(
                select(m.RaceResult).where(m.RaceResult.race_id == event_id)
            ).scalar_one_or_none()
        return OfficialResult.model_validate(row, from_attributes=True) if row else None

    def get_scoring_policy_overrides(self) -> Optional[Dict[str, Any]]:
        with _reading("scoring config"):
            row = self.db.get(m.ScoringConfig, m.SCORING_CONFIG_ID)
        if row is None:
            return None
        return {field: getattr(row, col) for field, col in _POLICY_COLUMNS.items()}

    def save_scoring_overrides(self, values: Mapping[str, Any]) -> None:
        """Upsert the single scoring config row; None values are left untouched."""
        try:
            row = self.db.get(m.ScoringConfig, m.SCORING_CONFIG_ID)
            if row is None:
                row = m.ScoringConfig(id=m.SCORING_CONFIG_ID)
                self.db.add(row)
            for field, value in values.items():
                if field in _POLICY_COLUMNS and value is not None:
                    setattr(row, _POLICY_COLUMNS[field], value)
            row.updated_at = datetime.now(timezone.utc).replace(tzinfo=None)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to save scoring config: %s", e)
            raise GatewayError("Could not save scoring config") from e


def load_user_scores(repo: ContestRepository, now: Optional[datetime] = None) -> List[UserScore]:
    """Fetch a full snapshot, then aggregate it.

    All reads happen before aggregation so a failed read never yields a
    partial ranking.
    """
    users = repo.list_users()
    events = repo.list_events()
    forecasts = repo.list_all_forecasts()
    results = repo.list_results()
    policy = merge_policy(repo.get_scoring_policy_overrides())
    return aggregate(users, events, forecasts, results, policy, now=now)
