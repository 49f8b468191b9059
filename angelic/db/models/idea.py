"""Idea ranking models: Idea, IdeaEval, Rating, Match."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from angelic.db.base import Base


class Idea(Base):
    __tablename__ = "ideas"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    text = Column(Text, nullable=False)
    category = Column(String(100), nullable=True)
    stage = Column(String(100), nullable=True)
    user_id = Column(String(36), nullable=True, index=True)
    conversation_id = Column(String(36), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    ai_summary = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))


class IdeaEval(Base):
    __tablename__ = "idea_evals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    idea_id = Column(String(36), ForeignKey("ideas.id"), nullable=False, index=True)
    viability_score = Column(Integer, nullable=False)
    excellence_score = Column(Integer, nullable=False)
    decision = Column(String(20), nullable=False)
    uncertainty = Column(String(10), nullable=False)
    top_risks = Column(JSON, nullable=False, default=list)
    key_enablers = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))


class Rating(Base):
    __tablename__ = "ratings"

    idea_id = Column(String(36), ForeignKey("ideas.id"), primary_key=True)
    elo_score = Column(Integer, nullable=False, default=1500)
    match_count = Column(Integer, nullable=False, default=0)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    idea_a_id = Column(String(36), ForeignKey("ideas.id"), nullable=False, index=True)
    idea_b_id = Column(String(36), ForeignKey("ideas.id"), nullable=False, index=True)
    winner = Column(String(5), nullable=False)  # A | B | Tie
    reasons = Column(JSON, nullable=False, default=list)
    confidence = Column(String(10), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC))
