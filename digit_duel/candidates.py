"""
Candidate space: every digit-string still consistent with the feedback seen so far.

The full space is 10^N strings (duplicates allowed) or 10*9*...*(10-N+1)
(distinct digits), which stops fitting in memory around N=7. The space picks
one of three representations when it is built and logs the choice:

- "materialized"  a plain list of strings, filtered on every update
- "multiset"      feedback only depends on WHICH digits a string holds, not
                  their order, so we keep the digit-count vectors that are
                  still consistent plus the strings already guessed. Size and
                  uniform sampling stay exact without listing every string.
- "constraints"   even the multisets are too many (N >= 16 with duplicates).
                  Only the (guess, signature) pairs are kept and sampling is
                  rejection sampling over random legal strings.

A "multiset" space turns into a "materialized" one as soon as it is small
enough. The space never grows back.
"""

import logging
import math
import random
from itertools import combinations, combinations_with_replacement
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from . import config
from .engine import (
    Signature,
    arrangements,
    check_configuration,
    count_digits,
    feedback,
    is_legal,
    random_legal,
    shared_digits,
    space_size,
)
from .types import DIGITS, DigitCounts, DigitString

logger = logging.getLogger(__name__)

# Random legal strings tried before rejection sampling gives up
REJECTION_ATTEMPTS = 20_000


def iter_arrangements(counts: DigitCounts, length: int) -> Iterator[DigitString]:
    """
    Every distinct string of `length` digits drawn from `counts`, in
    lexicographic order. Each position picks the next digit still available.

    (1,) * 10 with length 3 -> "012", "013", ..., "987"  (distinct digits)
    (0, 2, 0, 0, 0, 1, 0, 0, 0, 0) with length 3 -> "115", "151", "511"
    """
    if length == 0:
        yield ""
        return

    remaining = list(counts)
    prefix: List[int] = []
    # next_digit[depth] = smallest digit value not yet tried at that depth
    next_digit = [0]

    while next_digit:
        depth = len(next_digit) - 1
        d = next_digit[depth]
        while d < 10 and remaining[d] == 0:
            d += 1

        if d == 10:
            # Nothing left to try here; undo the choice made one level up
            next_digit.pop()
            if prefix:
                remaining[prefix.pop()] += 1
            continue

        next_digit[depth] = d + 1
        remaining[d] -= 1
        prefix.append(d)

        if len(prefix) == length:
            yield "".join(DIGITS[x] for x in prefix)
            remaining[prefix.pop()] += 1
        else:
            next_digit.append(0)


def iter_multisets(digits: int, allow_duplicates: bool) -> Iterator[DigitCounts]:
    """Digit-count vectors of every multiset of `digits` digits."""
    if allow_duplicates:
        picks = combinations_with_replacement(range(10), digits)
    else:
        picks = combinations(range(10), digits)
    for pick in picks:
        counts = [0] * 10
        for d in pick:
            counts[d] += 1
        yield tuple(counts)


def multiset_count(digits: int, allow_duplicates: bool) -> int:
    if allow_duplicates:
        return math.comb(digits + 9, 9)
    return math.comb(10, digits)


class CandidateSpace:
    def __init__(
        self,
        digits: int,
        allow_duplicates: bool,
        max_materialized: Optional[int] = None,
        candidates: Optional[Iterable[DigitString]] = None,
    ) -> None:
        """
        `candidates` restricts the space to the given strings (e.g. to resume
        from a known position) instead of every legal string.
        """
        check_configuration(digits, allow_duplicates)
        self.digits = digits
        self.allow_duplicates = allow_duplicates
        self.max_materialized = (
            config.MAX_MATERIALIZED_CANDIDATES if max_materialized is None else max_materialized
        )
        # Set when an update empties a non-empty space (feedback disagreed with itself)
        self.inconsistent = False

        self._candidates: Optional[List[DigitString]] = None
        self._multisets: Optional[List[DigitCounts]] = None
        self._weights: List[int] = []
        self._excluded: Set[DigitString] = set()
        self._constraints: List[Tuple[DigitString, Signature]] = []

        total = space_size(digits, allow_duplicates)
        self._size = total

        if candidates is not None:
            self.mode = "materialized"
            self._candidates = sorted(set(candidates))
            for value in self._candidates:
                if not is_legal(value, digits, allow_duplicates):
                    raise ValueError(f"{value!r} is not a legal {digits}-digit candidate.")
            self._size = len(self._candidates)
        elif total <= self.max_materialized:
            self.mode = "materialized"
            self._candidates = self._generate_all()
        elif multiset_count(digits, allow_duplicates) <= self.max_materialized:
            self.mode = "multiset"
            self._multisets = list(iter_multisets(digits, allow_duplicates))
            self._weights = [arrangements(m) for m in self._multisets]
        else:
            self.mode = "constraints"

        logger.info(
            "Candidate space for %d digits (duplicates=%s): %d strings, %s mode",
            digits, allow_duplicates, total, self.mode,
        )

    def _generate_all(self) -> List[DigitString]:
        if self.allow_duplicates:
            return [str(i).zfill(self.digits) for i in range(10 ** self.digits)]
        return list(iter_arrangements((1,) * 10, self.digits))

    # --- Queries ---

    def __len__(self) -> int:
        """Exact size, except in "constraints" mode where it is an upper bound."""
        return self._size

    def __iter__(self) -> Iterator[DigitString]:
        if self.mode == "materialized":
            return iter(self._candidates)
        if self.mode == "multiset":
            return self._iter_multisets()
        raise TypeError("A constraints-only candidate space cannot be enumerated.")

    def _iter_multisets(self) -> Iterator[DigitString]:
        for counts in self._multisets:
            for value in iter_arrangements(counts, self.digits):
                if value not in self._excluded:
                    yield value

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, str) or not is_legal(value, self.digits, self.allow_duplicates):
            return False
        if self.mode == "materialized":
            return value in self._candidates
        if value in self._excluded:
            return False
        if self.mode == "multiset":
            return count_digits(value) in self._multisets
        return self._satisfies(value)

    def _satisfies(self, value: DigitString) -> bool:
        for guess, observed in self._constraints:
            if feedback(guess, value) != observed:
                return False
        return True

    def first(self) -> Optional[DigitString]:
        """First candidate in iteration order, or None when empty."""
        if self._size == 0:
            return None
        if self.mode == "constraints":
            return None
        return next(iter(self), None)

    def choice(self, rng: random.Random) -> Optional[DigitString]:
        """One candidate, uniformly at random. None if nothing could be found."""
        if self._size == 0:
            return None

        if self.mode == "materialized":
            return rng.choice(self._candidates)

        for _ in range(REJECTION_ATTEMPTS):
            if self.mode == "multiset":
                counts = rng.choices(self._multisets, weights=self._weights)[0]
                digits = [DIGITS[d] for d, c in enumerate(counts) for _ in range(c)]
                rng.shuffle(digits)
                value = "".join(digits)
            else:
                value = random_legal(self.digits, self.allow_duplicates, rng)
                if not self._satisfies(value):
                    continue
            if value not in self._excluded:
                return value

        logger.warning(
            "No consistent candidate found after %d random draws (%s mode)",
            REJECTION_ATTEMPTS, self.mode,
        )
        return None

    def sample(self, k: int, rng: random.Random) -> List[DigitString]:
        """
        Up to k distinct candidates drawn without replacement.
        When the space holds k or fewer, all of them in iteration order.
        """
        if self.mode != "constraints" and self._size <= k:
            return list(self)
        if self.mode == "materialized":
            return rng.sample(self._candidates, k)

        picked: List[DigitString] = []
        seen: Set[DigitString] = set()
        attempts = 0
        while len(picked) < k and attempts < REJECTION_ATTEMPTS:
            attempts += 1
            value = self.choice(rng)
            if value is None:
                break
            if value not in seen:
                seen.add(value)
                picked.append(value)
        return picked

    # --- Narrowing ---

    def update(self, guess: DigitString, observed: Signature) -> None:
        """
        Keep only the strings that would have produced `observed` had they
        been the secret. The guess itself always goes: it was not the secret.
        """
        if observed.is_exact:
            raise ValueError("An exact match ends the match; there is nothing left to narrow.")
        if len(guess) != self.digits or not all(ch in DIGITS for ch in guess):
            raise ValueError(f"Guess must have exactly {self.digits} digits.")

        before = self._size

        if self.mode == "materialized":
            self._candidates = [
                c for c in self._candidates
                if c != guess and feedback(guess, c) == observed
            ]
            self._size = len(self._candidates)

        elif self.mode == "multiset":
            guess_counts = count_digits(guess)
            kept = [
                (m, w) for m, w in zip(self._multisets, self._weights)
                if shared_digits(guess_counts, m) == observed.correct
            ]
            self._multisets = [m for m, _ in kept]
            self._weights = [w for _, w in kept]
            self._excluded.add(guess)
            self._size = self._multiset_size()
            if self._size <= self.max_materialized:
                self._materialize()

        else:
            self._constraints.append((guess, observed))
            if guess not in self._excluded and is_legal(guess, self.digits, self.allow_duplicates):
                self._excluded.add(guess)
                self._size -= 1

        if before > 0 and self._size == 0:
            self.inconsistent = True
            logger.warning(
                "Candidate space emptied by guess %s with feedback %s; "
                "the reported feedback disagrees with earlier turns",
                guess, observed.kind,
            )

    def _multiset_size(self) -> int:
        live = set(self._multisets)
        guessed = sum(1 for g in self._excluded if count_digits(g) in live)
        return sum(self._weights) - guessed

    def _materialize(self) -> None:
        candidates = sorted(self._iter_multisets())
        logger.debug("Materializing %d candidates from %d multisets", len(candidates), len(self._multisets))
        self._candidates = candidates
        self._multisets = None
        self._weights = []
        self._excluded = set()
        self.mode = "materialized"
