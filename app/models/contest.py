from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Boolean, JSON, Index
from sqlalchemy.orm import relationship
from app.db.base import Base


class UserProfile(Base):
    __tablename__ = "users"
    uid = Column(String, primary_key=True)
    email = Column(String, nullable=False, default="")
    display_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="user")  # "admin" | "user"
    created_at = Column(DateTime, nullable=True)

class Pilot(Base):
    __tablename__ = "pilots"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    team = Column(String, nullable=True)
    number = Column(Integer, nullable=True)
    country = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)

class Race(Base):
    __tablename__ = "races"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=True)
    date = Column(DateTime, nullable=True)
    status = Column(String, nullable=False, default="upcoming")  # upcoming | active | completed
    voting_deadline = Column(DateTime, nullable=False)

class Vote(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("user_id", "race_id", name="unique_vote_user_race"),
        Index("ix_votes_race", "race_id"),
    )
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.uid", ondelete="CASCADE"), nullable=False)
    race_id = Column(String, ForeignKey("races.id", ondelete="CASCADE"), nullable=False)

    # Pilot ids; empty string means "no pick"
    pole = Column(String, nullable=False, default="")
    positions = Column(JSON, nullable=False, default=list)   # ordered, nominally 10 ids
    crash_pilot = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=True)

    race = relationship("Race")
    user = relationship("UserProfile")

class RaceResult(Base):
    __tablename__ = "results"
    __table_args__ = (UniqueConstraint("race_id", name="unique_result_race"),)
    id = Column(Integer, primary_key=True, autoincrement=True)
    race_id = Column(String, ForeignKey("races.id", ondelete="CASCADE"), nullable=False)
    pole = Column(String, nullable=False, default="")
    positions = Column(JSON, nullable=False, default=list)   # actual finishing order
    crash_pilot = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=True)

    race = relationship("Race")

class ScoringConfig(Base):
    """Administrator overrides; a single row keyed by SCORING_CONFIG_ID."""
    __tablename__ = "scoring_config"
    id = Column(String, primary_key=True)
    pole_points = Column(Integer, nullable=True)
    position1_points = Column(Integer, nullable=True)
    position2_points = Column(Integer, nullable=True)
    position3_points = Column(Integer, nullable=True)
    position4to10_points = Column(Integer, nullable=True)
    crash_points = Column(Integer, nullable=True)
    updated_at = Column(DateTime, nullable=True)

SCORING_CONFIG_ID = "points"
