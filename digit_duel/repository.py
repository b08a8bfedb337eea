"""
DB-backed scoreboard.

Public methods:
- record_result(match) -> StatsOut
- get_stats() -> StatsOut
- reset_stats() -> None

Results are counted from player 1's side: "player" is a win, "opponent" a
loss. Only the newest HISTORY_LIMIT results are kept.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .match import Match
from .models import Result as ResultORM, Stats as StatsORM
from .schemas import ResultOut, StatsOut

HISTORY_LIMIT = 50


def _to_result_out(r: ResultORM) -> ResultOut:
    return ResultOut(
        winner=r.winner,
        reason=r.reason,
        mode=r.mode,
        difficulty=r.difficulty,
        digits=r.digits,
        allow_duplicates=r.allow_duplicates,
        total_guesses=r.total_guesses,
        timestamp=r.created_at.timestamp(),
    )


class DBStatsStore:
    def __init__(self, db: Session):
        self.db = db

    def _get_or_create_stats(self) -> StatsORM:
        stats = self.db.get(StatsORM, 1)
        if not stats:
            stats = StatsORM(
                id=1, games_played=0, wins=0, losses=0, draws=0,
                easy_played=0, medium_played=0, hard_played=0,
                easy_wins=0, medium_wins=0, hard_wins=0,
            )
            self.db.add(stats)
            self.db.commit()
            self.db.refresh(stats)
        return stats

    def _recent(self) -> list[ResultORM]:
        return list(
            self.db.execute(
                select(ResultORM).order_by(ResultORM.created_at.desc(), ResultORM.id.desc())
            )
            .scalars()
            .all()
        )

    # --- Public API ---

    def record_result(self, match: Match) -> StatsOut:
        """Store a finished match. Call once per match (see Match.recorded)."""
        outcome = match.outcome
        if outcome is None:
            raise ValueError("Match is still in progress.")

        stats = self._get_or_create_stats()
        stats.games_played += 1
        if outcome.winner == "player":
            stats.wins += 1
        elif outcome.winner == "opponent":
            stats.losses += 1
        else:
            stats.draws += 1

        # per-difficulty counters only mean something against the computer
        if match.mode == "ai":
            played = f"{match.difficulty}_played"
            setattr(stats, played, getattr(stats, played) + 1)
            if outcome.winner == "player":
                won = f"{match.difficulty}_wins"
                setattr(stats, won, getattr(stats, won) + 1)

        self.db.add(
            ResultORM(
                winner=outcome.winner,
                reason=outcome.reason,
                mode=match.mode,
                difficulty=match.difficulty,
                digits=match.digits,
                allow_duplicates=match.allow_duplicates,
                total_guesses=outcome.total_guesses,
                created_at=datetime.utcnow(),
            )
        )
        self.db.flush()

        # Keep only the newest HISTORY_LIMIT rows
        stale = [r.id for r in self._recent()[HISTORY_LIMIT:]]
        if stale:
            self.db.execute(delete(ResultORM).where(ResultORM.id.in_(stale)))

        self.db.commit()
        match.recorded = True
        return self.get_stats()

    def get_stats(self) -> StatsOut:
        stats = self._get_or_create_stats()
        win_rate = (stats.wins / stats.games_played) if stats.games_played > 0 else None
        return StatsOut(
            games_played=stats.games_played,
            wins=stats.wins,
            losses=stats.losses,
            draws=stats.draws,
            win_rate=win_rate,
            easy_played=stats.easy_played,
            medium_played=stats.medium_played,
            hard_played=stats.hard_played,
            easy_wins=stats.easy_wins,
            medium_wins=stats.medium_wins,
            hard_wins=stats.hard_wins,
            history=[_to_result_out(r) for r in self._recent()],
        )

    def reset_stats(self) -> None:
        stats = self._get_or_create_stats()
        stats.games_played = 0
        stats.wins = 0
        stats.losses = 0
        stats.draws = 0
        stats.easy_played = 0
        stats.medium_played = 0
        stats.hard_played = 0
        stats.easy_wins = 0
        stats.medium_wins = 0
        stats.hard_wins = 0
        self.db.execute(delete(ResultORM))
        self.db.commit()
