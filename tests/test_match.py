"""
Testing the match engine: turns, wins, draws and the clock.
Secrets are fixed so every outcome is known in advance.
"""

import random

import pytest

from digit_duel.errors import InvalidConfiguration
from digit_duel.match import Match, game_time, thinking_delay


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def make_match(**overrides) -> Match:
    settings = dict(
        mode="ai",
        digits=4,
        difficulty="medium",
        allow_duplicates=False,
        player_secret="1234",
        opponent_secret="5678",
        rng=random.Random(1),
    )
    settings.update(overrides)
    return Match(**settings)


def test_player_wins_on_first_guess():
    match = make_match()
    turns = match.submit_guess("5678")

    assert len(turns) == 1
    assert turns[0].side == "player"
    assert turns[0].signature.is_exact
    assert turns[0].message == "Correct!"
    assert match.status == "finished"
    assert match.outcome.winner == "player"
    assert match.outcome.reason == "solved"
    assert match.outcome.total_guesses == 1

    # No more guesses once the match is over
    with pytest.raises(ValueError):
        match.submit_guess("5678")

def test_computer_replies_after_a_wrong_guess():
    match = make_match()
    turns = match.submit_guess("8765")

    assert [t.side for t in turns] == ["player", "opponent"]
    assert turns[0].message == "All digits correct but wrong arrangement."
    reply = turns[1]
    assert reply.guess_number == 1
    assert 1.0 <= reply.thinking_delay <= 2.5
    assert len(reply.guess) == 4
    assert match.player_guesses == 1
    assert match.opponent_guesses == 1
    assert len(match.history) == 2

def test_computer_eventually_cracks_the_player():
    match = make_match(digits=3, player_secret="123", opponent_secret="987", max_guesses=100)
    while match.outcome is None:
        match.submit_guess("000")

    assert match.outcome.winner == "opponent"
    assert match.history[-1].side == "opponent"
    assert match.history[-1].guess == "123"
    assert match.outcome.player_secret == "123"
    assert match.outcome.opponent_secret == "987"

def test_ai_match_draws_when_both_sides_run_out():
    # Hard always opens with "1234", which misses "5670"
    match = make_match(difficulty="hard", player_secret="5670", max_guesses=1)
    turns = match.submit_guess("0000")

    assert turns[1].guess == "1234"
    assert match.outcome.winner == "draw"
    assert match.outcome.reason == "guess_limit"
    assert match.outcome.total_guesses == 2

def test_friend_mode_alternates_and_draws():
    match = make_match(mode="friend", max_guesses=2)
    assert match.solver is None

    assert match.current_player == 1
    match.submit_guess("1111")
    assert match.current_player == 2
    match.submit_guess("2222")
    assert match.current_player == 1
    match.submit_guess("3333")
    turns = match.submit_guess("4444")

    assert [t.side for t in match.history] == ["player", "opponent", "player", "opponent"]
    assert turns[0].guess_number == 2
    assert match.outcome.winner == "draw"
    assert match.outcome.total_guesses == 4

def test_friend_mode_player_two_wins():
    match = make_match(mode="friend")
    match.submit_guess("0000")            # player 1 misses "5678"
    turns = match.submit_guess("1234")    # player 2 finds "1234"

    assert turns[0].side == "opponent"
    assert match.outcome.winner == "opponent"
    assert match.outcome.reason == "solved"

def test_timeout_loses_for_the_side_to_move():
    clock = FakeClock()
    match = make_match(clock=clock)
    assert match.time_remaining() == match.total_time == 8 * 60

    clock.now += 60
    assert match.time_remaining() == 7 * 60
    assert not match.check_timeout()

    clock.now += match.total_time
    with pytest.raises(ValueError):
        match.submit_guess("0000")
    assert match.outcome.winner == "opponent"
    assert match.outcome.reason == "timeout"

def test_timeout_in_friend_mode_on_player_two_turn():
    clock = FakeClock()
    match = make_match(mode="friend", clock=clock)
    match.submit_guess("0000")
    clock.now += match.total_time + 1
    assert match.check_timeout()
    assert match.outcome.winner == "player"

def test_guess_and_secret_validation():
    match = make_match()
    with pytest.raises(ValueError):
        match.submit_guess("123")
    with pytest.raises(ValueError):
        match.submit_guess("12a4")
    assert match.player_guesses == 0

    with pytest.raises(ValueError):
        make_match(player_secret="1123")
    with pytest.raises(ValueError):
        make_match(opponent_secret="567")
    # Repeats are fine when the match allows them
    make_match(allow_duplicates=True, player_secret="1123")

def test_invalid_match_configuration():
    with pytest.raises(InvalidConfiguration):
        make_match(mode="online")
    with pytest.raises(InvalidConfiguration):
        make_match(difficulty="expert")
    with pytest.raises(InvalidConfiguration):
        make_match(digits=11, player_secret="01234567890", opponent_secret="01234567891")

def test_game_time():
    assert game_time(5, "medium") == 600
    assert game_time(5, "easy") == 720
    assert game_time(5, "hard") == 480
    assert game_time(3, "easy") == 420   # 7.2 minutes rounds to 7
    assert game_time(4, "easy") == 600   # 9.6 rounds to 10
    assert game_time(3, "hard") == 300   # 4.8 rounds to 5

def test_thinking_delay_range():
    rng = random.Random(0)
    delays = [thinking_delay(rng) for _ in range(200)]
    assert all(1.0 <= d <= 2.5 for d in delays)
