"""
Match engine: secrets, turns, guess limits, draws and the match clock.

Two modes:
- ai      the player guesses the computer's secret, then the computer replies
          right away with its own guess at the player's secret
- friend  two people on one device take turns; player 1 guesses player 2's
          secret and player 2 guesses player 1's

Whoever hits the other secret first wins. When both sides have used every
guess it is a draw. When the clock runs out, the side whose turn it is loses.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from time import monotonic, time
from typing import Callable, List, Literal, Optional

from . import config
from .engine import Signature, check_configuration, feedback, feedback_message, is_legal
from .errors import InvalidConfiguration
from .solver import Solver
from .types import DIFFICULTIES, DIGITS, Difficulty, DigitString, MatchStatus, Mode, Winner

logger = logging.getLogger(__name__)

Side = Literal["player", "opponent"]
EndReason = Literal["solved", "guess_limit", "timeout"]

# Minutes per digit before the difficulty multiplier
MINUTES_PER_DIGIT = 2
TIME_MULTIPLIERS = {"easy": 1.2, "medium": 1.0, "hard": 0.8}


@dataclass
class TurnResult:
    side: Side          # "player" = you / player 1, "opponent" = computer / player 2
    guess: DigitString
    signature: Signature
    message: str
    guess_number: int
    thinking_delay: Optional[float] = None  # computer turns only; UX pacing hint in seconds
    timestamp: float = field(default_factory=time)


@dataclass
class Outcome:
    winner: Winner
    reason: EndReason
    player_secret: DigitString
    opponent_secret: DigitString
    total_guesses: int


def game_time(digits: int, difficulty: Difficulty) -> int:
    """
    Match length in seconds:
      5 digits, medium -> 10 min; easy -> 12 min; hard -> 8 min
    """
    minutes = digits * MINUTES_PER_DIGIT * TIME_MULTIPLIERS[difficulty]
    return int(math.floor(minutes + 0.5)) * 60


def thinking_delay(rng: random.Random) -> float:
    """How long a client should pretend the computer is thinking (1 to 2.5 s)."""
    return 1.0 + rng.random() * 1.5


class Match:
    def __init__(
        self,
        mode: Mode,
        digits: int,
        difficulty: Difficulty,
        allow_duplicates: bool,
        player_secret: DigitString,
        opponent_secret: DigitString,
        max_guesses: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        if mode not in ("ai", "friend"):
            raise InvalidConfiguration(f"Unknown mode {mode!r}.")
        if difficulty not in DIFFICULTIES:
            raise InvalidConfiguration(f"Unknown difficulty {difficulty!r}.")
        check_configuration(digits, allow_duplicates)

        # --- secret guard ---
        for label, secret in (("Player", player_secret), ("Opponent", opponent_secret)):
            if not is_legal(secret, digits, allow_duplicates):
                rule = "digits" if allow_duplicates else "distinct digits"
                raise ValueError(f"{label} secret must be exactly {digits} {rule}.")

        self.mode = mode
        self.digits = digits
        self.difficulty = difficulty
        self.allow_duplicates = allow_duplicates
        self.player_secret = player_secret
        self.opponent_secret = opponent_secret
        self.max_guesses = config.MAX_GUESSES if max_guesses is None else max_guesses
        self.rng = rng if rng is not None else random.Random()
        self._clock = clock

        self.solver: Optional[Solver] = None
        if mode == "ai":
            self.solver = Solver(digits, allow_duplicates, difficulty, rng=self.rng)

        self.player_guesses = 0
        self.opponent_guesses = 0
        self.current_player = 1  # friend mode only; in ai mode the player always acts next
        self.history: List[TurnResult] = []
        self.outcome: Optional[Outcome] = None
        # Set by whoever persists the result so it is stored exactly once
        self.recorded = False

        self.total_time = game_time(digits, difficulty)
        self.started_at = clock()

    # --- Clock ---

    def time_remaining(self) -> float:
        return max(0.0, self.total_time - (self._clock() - self.started_at))

    def check_timeout(self) -> bool:
        """End the match if time is up. Returns True if the match is over."""
        if self.outcome is None and self.time_remaining() <= 0:
            # The side that was supposed to guess loses
            if self.mode == "ai" or self.current_player == 1:
                winner: Winner = "opponent"
            else:
                winner = "player"
            self._finish(winner, "timeout")
        return self.outcome is not None

    @property
    def status(self) -> MatchStatus:
        return "in_progress" if self.outcome is None else "finished"

    # --- Turns ---

    def submit_guess(self, guess: DigitString) -> List[TurnResult]:
        if self.check_timeout():
            raise ValueError("Match is over. No more guesses allowed.")

        # --- guess guard ---
        if len(guess) != self.digits or not all(ch in DIGITS for ch in guess):
            raise ValueError(f"Guess must have exactly {self.digits} digits.")

        if self.mode == "friend":
            return [self._friend_turn(guess)]
        return self._ai_round(guess)

    def _ai_round(self, guess: DigitString) -> List[TurnResult]:
        self.player_guesses += 1
        turn = self._record("player", guess, feedback(guess, self.opponent_secret), self.player_guesses)
        if turn.signature.is_exact:
            self._finish("player", "solved")
            return [turn]
        return [turn, self._opponent_turn()]

    def _opponent_turn(self) -> TurnResult:
        self.opponent_guesses += 1
        delay = thinking_delay(self.rng)

        guess = self.solver.make_guess()
        signature = feedback(guess, self.player_secret)
        self.solver.update_knowledge(guess, signature)

        turn = self._record("opponent", guess, signature, self.opponent_guesses, thinking_delay=delay)
        if signature.is_exact:
            self._finish("opponent", "solved")
        elif self._out_of_guesses():
            self._finish("draw", "guess_limit")
        return turn

    def _friend_turn(self, guess: DigitString) -> TurnResult:
        if self.current_player == 1:
            self.player_guesses += 1
            side: Side = "player"
            turn = self._record(side, guess, feedback(guess, self.opponent_secret), self.player_guesses)
        else:
            self.opponent_guesses += 1
            side = "opponent"
            turn = self._record(side, guess, feedback(guess, self.player_secret), self.opponent_guesses)

        if turn.signature.is_exact:
            self._finish(side, "solved")
        elif self._out_of_guesses():
            self._finish("draw", "guess_limit")
        else:
            self.current_player = 2 if self.current_player == 1 else 1
        return turn

    def _out_of_guesses(self) -> bool:
        return self.player_guesses >= self.max_guesses and self.opponent_guesses >= self.max_guesses

    def _record(
        self,
        side: Side,
        guess: DigitString,
        signature: Signature,
        number: int,
        thinking_delay: Optional[float] = None,
    ) -> TurnResult:
        turn = TurnResult(
            side=side,
            guess=guess,
            signature=signature,
            message=feedback_message(signature),
            guess_number=number,
            thinking_delay=thinking_delay,
        )
        self.history.append(turn)
        return turn

    def _finish(self, winner: Winner, reason: EndReason) -> None:
        self.outcome = Outcome(
            winner=winner,
            reason=reason,
            player_secret=self.player_secret,
            opponent_secret=self.opponent_secret,
            total_guesses=self.player_guesses + self.opponent_guesses,
        )
        logger.info(
            "Match over (%s mode, %d digits): winner=%s reason=%s after %d guesses",
            self.mode, self.digits, winner, reason, self.outcome.total_guesses,
        )
