"""
Computer opponent: picks guesses and learns from the feedback they get.

Difficulty presets:
  easy   -> 30% of the time a random legal string, otherwise a random candidate
  medium -> a random candidate
  hard   -> fixed opener, then minimax over a sample of candidates once the
            space is small enough to score every outcome

All randomness comes from the random.Random handed in, so a seeded
generator replays the same match.
"""

import logging
import random
from collections import Counter
from typing import Iterable, List, Optional, Tuple

from .candidates import CandidateSpace
from .engine import OPENING_DIGITS, Signature, check_configuration, feedback, opening_guess, random_legal
from .errors import InvalidConfiguration
from .types import DIFFICULTIES, Difficulty, DigitString

logger = logging.getLogger(__name__)

EASY_RANDOM_RATE = 0.3
OPENING_MIN_SPACE = 100   # hard opens with the fixed guess above this size
MINIMAX_MAX_SPACE = 500   # ...and only runs minimax at or below this size
MINIMAX_SAMPLE = 50       # candidate guesses scored per minimax turn

HistoryEntry = Tuple[DigitString, Signature]


def worst_case(guess: DigitString, space: Iterable[DigitString]) -> int:
    """
    Largest group of candidates that would all answer `guess` the same way,
    i.e. how many could remain after the worst possible feedback.
    """
    tally = Counter(feedback(guess, candidate) for candidate in space)
    return max(tally.values()) if tally else 0


class GuessSelector:
    def __init__(
        self,
        difficulty: Difficulty,
        digits: int,
        allow_duplicates: bool,
        rng: random.Random,
    ) -> None:
        if difficulty not in DIFFICULTIES:
            raise InvalidConfiguration(f"Unknown difficulty {difficulty!r}.")
        check_configuration(digits, allow_duplicates)
        if difficulty == "hard" and digits > len(OPENING_DIGITS):
            raise InvalidConfiguration(
                f"Hard difficulty supports at most {len(OPENING_DIGITS)} digits."
            )
        self.difficulty = difficulty
        self.digits = digits
        self.allow_duplicates = allow_duplicates
        self.rng = rng

    def choose(self, space: CandidateSpace, history: List[HistoryEntry]) -> DigitString:
        if len(space) == 0:
            return self._random_legal("candidate space is empty")
        if self.difficulty == "easy":
            return self._easy(space)
        if self.difficulty == "hard":
            return self._hard(space, history)
        return self._medium(space)

    def _random_legal(self, reason: str) -> DigitString:
        logger.debug("Random legal guess: %s", reason)
        return random_legal(self.digits, self.allow_duplicates, self.rng)

    def _easy(self, space: CandidateSpace) -> DigitString:
        if len(space) == 1:
            only = space.first()
            if only is not None:
                return only
        if self.rng.random() < EASY_RANDOM_RATE:
            return self._random_legal("easy difficulty plays loose")
        return self._medium(space)

    def _medium(self, space: CandidateSpace) -> DigitString:
        guess = space.choice(self.rng)
        if guess is None:
            logger.warning("Could not draw a candidate from %s space; guessing at random", space.mode)
            return self._random_legal("no candidate drawn")
        return guess

    def _hard(self, space: CandidateSpace, history: List[HistoryEntry]) -> DigitString:
        size = len(space)
        if size == 1:
            only = space.first()
            if only is not None:
                return only
        if not history and size > OPENING_MIN_SPACE:
            return opening_guess(self.digits)
        if size <= MINIMAX_MAX_SPACE and space.mode != "constraints":
            return self._minimax(space)
        return self._medium(space)

    def _minimax(self, space: CandidateSpace) -> DigitString:
        """
        Score each sampled guess by its worst-case bucket against the whole
        space and keep the smallest. Ties go to the earlier guess in the sample.
        """
        candidates = list(space)
        pool = space.sample(MINIMAX_SAMPLE, self.rng)

        best_guess = pool[0]
        best_score: Optional[int] = None
        for guess in pool:
            score = worst_case(guess, candidates)
            if best_score is None or score < best_score:
                best_score = score
                best_guess = guess

        logger.debug(
            "Minimax picked %s (worst case %s of %d) from %d sampled guesses",
            best_guess, best_score, len(candidates), len(pool),
        )
        return best_guess


class Solver:
    """One computer opponent for one match, holding its candidate space and guess history."""

    def __init__(
        self,
        digits: int,
        allow_duplicates: bool,
        difficulty: Difficulty,
        rng: Optional[random.Random] = None,
        max_materialized: Optional[int] = None,
    ) -> None:
        self.rng = rng if rng is not None else random.Random()
        # Build the selector first so a bad configuration fails before any big allocation
        self.selector = GuessSelector(difficulty, digits, allow_duplicates, self.rng)
        self.space = CandidateSpace(digits, allow_duplicates, max_materialized)
        self.history: List[HistoryEntry] = []

    @property
    def difficulty(self) -> Difficulty:
        return self.selector.difficulty

    def make_guess(self) -> DigitString:
        return self.selector.choose(self.space, self.history)

    def update_knowledge(self, guess: DigitString, signature: Signature) -> None:
        self.history.append((guess, signature))
        if signature.is_exact:
            # Match is over; nothing to narrow
            return

        before = len(self.space)
        self.space.update(guess, signature)
        logger.debug(
            "After %s (%s) %d -> %d candidates remain",
            guess, signature.kind, before, len(self.space),
        )
