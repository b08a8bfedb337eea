"""
Testing in-memory store
- One match at a time; a new match replaces the old one.
"""

import random

from digit_duel.match import Match
from digit_duel.store import MatchStore

def new_match(player_secret="123", opponent_secret="456") -> Match:
    return Match(
        mode="ai",
        digits=3,
        difficulty="easy",
        allow_duplicates=False,
        player_secret=player_secret,
        opponent_secret=opponent_secret,
        rng=random.Random(0),
    )

def test_store_without_match():
    store = MatchStore()
    assert store.get() is None
    assert store.guess("123") is None

def test_store_start_and_guess():
    store = MatchStore()
    match = store.start(new_match())
    assert store.get() is match

    played = store.guess("789")
    assert played is not None
    same_match, turns = played
    assert same_match is match
    assert len(turns) == 2
    assert match.player_guesses == 1

def test_new_match_replaces_old_one():
    store = MatchStore()
    first = store.start(new_match())
    second = store.start(new_match(opponent_secret="789"))
    assert store.get() is second
    assert store.get() is not first

    store.clear()
    assert store.get() is None
