"""
SQLAlchemy ORM models for the scoreboard.

Tables:
- stats: single-row scoreboard (wins / losses / draws, per-difficulty counters)
- results: one row per finished match, newest 50 kept

Matches themselves live in memory only (see store.py).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base
from .types import Difficulty, Mode, Winner

# Player 1's scoreboard. For simplicity: store exactly one row with id=1.
class Stats(Base):
    __tablename__ = "stats"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)

    games_played: Mapped[int] = mapped_column(Integer, default=0)
    wins: Mapped[int] = mapped_column(Integer, default=0)
    losses: Mapped[int] = mapped_column(Integer, default=0)
    draws: Mapped[int] = mapped_column(Integer, default=0)

    # per-difficulty counters (ai matches only)
    easy_played: Mapped[int] = mapped_column(Integer, default=0)
    medium_played: Mapped[int] = mapped_column(Integer, default=0)
    hard_played: Mapped[int] = mapped_column(Integer, default=0)
    easy_wins: Mapped[int] = mapped_column(Integer, default=0)
    medium_wins: Mapped[int] = mapped_column(Integer, default=0)
    hard_wins: Mapped[int] = mapped_column(Integer, default=0)


class Result(Base):
    __tablename__ = "results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    winner: Mapped[Winner] = mapped_column(
        Enum("player", "opponent", "draw", name="winner"), nullable=False,
    )
    reason: Mapped[str] = mapped_column(
        Enum("solved", "guess_limit", "timeout", name="end_reason"), nullable=False,
    )
    mode: Mapped[Mode] = mapped_column(Enum("ai", "friend", name="mode"), nullable=False)
    difficulty: Mapped[Difficulty] = mapped_column(
        Enum("easy", "medium", "hard", name="difficulty"), nullable=False,
    )

    digits: Mapped[int] = mapped_column(Integer, nullable=False)
    allow_duplicates: Mapped[bool] = mapped_column(Boolean, nullable=False)
    total_guesses: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, index=True)
