'''
Digit Duel API

Endpoints:
POST /match          -> start a match (replaces any current one)
GET  /match          -> read state & history
POST /match/guess    -> submit a guess (the computer replies in ai mode)

Extras:
GET  /stats          -> scoreboard
POST /stats/reset    -> reset scoreboard

One match lives in memory at a time; only finished results go to the database.
'''

import logging
import math
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .db import create_all, get_db
from .match import Match, Outcome, TurnResult
from .random_client import fetch_secret
from .repository import DBStatsStore
from .schemas import (
    GuessRequest,
    GuessResponse,
    MatchState,
    NewMatchRequest,
    OutcomeOut,
    StatsOut,
    TurnOut,
)
from .store import MatchStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Digit Duel API", version="1.0.0")

# Allow everything in dev so the docs and a front-end work easily
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# --- Dev convenience: auto-create tables locally ---
if config.APP_ENV == "local":
    @app.on_event("startup")
    def _dev_create_tables():
        create_all()

# The single in-process match
match_store = MatchStore()

def get_match_store() -> MatchStore:
    return match_store

def get_stats_store(session = Depends(get_db)) -> DBStatsStore:
    return DBStatsStore(session)

# ---------------- DTO builders ----------------

def _to_turn_out(turn: TurnResult) -> TurnOut:
    return TurnOut(
        side=turn.side,
        guess=turn.guess,
        feedback=turn.signature.kind,
        correct=turn.signature.correct,
        message=turn.message,
        guess_number=turn.guess_number,
        thinking_delay=turn.thinking_delay,
        timestamp=turn.timestamp,
    )

def _to_outcome_out(outcome: Optional[Outcome]) -> Optional[OutcomeOut]:
    if outcome is None:
        return None
    return OutcomeOut(
        winner=outcome.winner,
        reason=outcome.reason,
        player_secret=outcome.player_secret,
        opponent_secret=outcome.opponent_secret,
        total_guesses=outcome.total_guesses,
    )

def _to_match_state(match: Match) -> MatchState:
    return MatchState(
        mode=match.mode,
        digits=match.digits,
        difficulty=match.difficulty,
        allow_duplicates=match.allow_duplicates,
        status=match.status,
        current_player=match.current_player,
        player_guesses=match.player_guesses,
        opponent_guesses=match.opponent_guesses,
        max_guesses=match.max_guesses,
        time_remaining=math.ceil(match.time_remaining()),
        history=[_to_turn_out(t) for t in match.history],
        outcome=_to_outcome_out(match.outcome),
    )

def _record_if_finished(match: Match, stats: DBStatsStore) -> None:
    # Stats change exactly once, on the transition to finished
    if match.outcome is not None and not match.recorded:
        stats.record_result(match)

# ---------------- Routes ----------------

@app.post("/match", response_model=MatchState, summary="Start a new match")
def start_match(
    payload: NewMatchRequest,
    matches: MatchStore = Depends(get_match_store),
) -> MatchState:
    """
    Match clock: 2 minutes per digit, x1.2 on easy, x0.8 on hard.
    In ai mode the computer's secret comes from random.org (local fallback).
    """
    opponent_secret = payload.opponent_secret
    if payload.mode == "ai":
        try:
            opponent_secret = fetch_secret(payload.digits, payload.allow_duplicates)
        except ValueError as ve:
            raise HTTPException(status_code=400, detail=str(ve))

    # InvalidConfiguration is a ValueError too: reject the setup before any play
    try:
        match = Match(
            mode=payload.mode,
            digits=payload.digits,
            difficulty=payload.difficulty,
            allow_duplicates=payload.allow_duplicates,
            player_secret=payload.player_secret,
            opponent_secret=opponent_secret,
        )
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    matches.start(match)
    logger.info("Started %s match: %d digits, %s", match.mode, match.digits, match.difficulty)
    return _to_match_state(match)

@app.get("/match", response_model=MatchState, summary="Get current match state")
def get_match(
    matches: MatchStore = Depends(get_match_store),
    stats: DBStatsStore = Depends(get_stats_store),
) -> MatchState:
    match = matches.get()
    if match is None:
        raise HTTPException(status_code=404, detail="No match in progress")
    _record_if_finished(match, stats)
    return _to_match_state(match)

@app.post("/match/guess", response_model=GuessResponse, summary="Submit a guess")
def submit_guess(
    payload: GuessRequest,
    matches: MatchStore = Depends(get_match_store),
    stats: DBStatsStore = Depends(get_stats_store),
) -> GuessResponse:
    # Match.submit_guess performs the length check & runs the computer's reply
    try:
        played = matches.guess(payload.guess)
    except ValueError as ve:
        current = matches.get()
        if current is not None:
            # A timeout may have been noticed by this very call
            _record_if_finished(current, stats)
        raise HTTPException(status_code=400, detail=str(ve))
    if played is None:
        raise HTTPException(status_code=404, detail="No match in progress")

    match, turns = played
    _record_if_finished(match, stats)

    return GuessResponse(
        turns=[_to_turn_out(t) for t in turns],
        status=match.status,
        outcome=_to_outcome_out(match.outcome),
        note=("Match over. No more guesses allowed." if match.outcome is not None else None),
    )

@app.get("/stats", response_model=StatsOut, summary="Get scoreboard")
def get_stats(stats: DBStatsStore = Depends(get_stats_store)) -> StatsOut:
    return stats.get_stats()

@app.post("/stats/reset", summary="Reset the scoreboard")
def reset_stats(stats: DBStatsStore = Depends(get_stats_store)) -> dict:
    stats.reset_stats()
    return {"message": "Stats reset."}
