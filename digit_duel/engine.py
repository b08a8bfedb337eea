"""
Pure game logic (no HTTP, no storage).

Feedback in Digit Duel never says WHERE a digit is right. For a guess and a
secret we count how many digits they share by value, counting repeats with the
smaller frequency of the two strings:
  guess "511", secret "115" -> '1': min(2, 2) + '5': min(1, 1) = 3

The result is a Signature:
- exact            the strings are identical (game over)
- all_wrong_order  every digit is shared, but the order differs
- partial          1..N-1 digits shared
- none             no digit shared

The match engine scores human guesses with `feedback` and the solver uses the
very same function to simulate hypothetical guesses, so the two never disagree.
"""

import math
import random
from collections import Counter
from dataclasses import dataclass

from .errors import InvalidConfiguration
from .types import DIGITS, DigitCounts, DigitString, SignatureKind

OPENING_DIGITS = "1234567890"


@dataclass(frozen=True)
class Signature:
    kind: SignatureKind
    correct: int  # digits shared by value; N for exact and all_wrong_order

    @property
    def is_exact(self) -> bool:
        return self.kind == "exact"


def signature_for(correct: int, digits: int) -> Signature:
    """Build the non-exact signature for a shared-digit count `correct`."""
    if correct < 0 or correct > digits:
        raise ValueError(f"Shared digit count must be between 0 and {digits}.")
    if correct == digits:
        return Signature("all_wrong_order", correct)
    if correct == 0:
        return Signature("none", 0)
    return Signature("partial", correct)


def count_digits(value: DigitString) -> DigitCounts:
    """Frequency of each digit 0..9 in `value`."""
    counts = [0] * 10
    for ch in value:
        counts[ord(ch) - 48] += 1
    return tuple(counts)


def shared_digits(a: DigitCounts, b: DigitCounts) -> int:
    """Multiset intersection size of two digit-count vectors."""
    return sum(min(x, y) for x, y in zip(a, b))


def feedback(guess: DigitString, secret: DigitString) -> Signature:
    """
    Example:
      guess  = "1243"
      secret = "1234"
      every digit is shared but the order differs -> all_wrong_order (4)
    """
    n = len(secret)
    if n == 0 or len(guess) != n:
        raise ValueError("Secret and guess must be the same non-zero length.")

    # 1. Identical strings end the game
    if guess == secret:
        return Signature("exact", n)

    # 2. Sum the smaller count of every digit that appears in the guess
    guess_counts = Counter(guess)
    secret_counts = Counter(secret)
    k = 0
    for digit, count in guess_counts.items():
        k += min(count, secret_counts.get(digit, 0))

    # 3. Categorize
    return signature_for(k, n)


def feedback_message(signature: Signature) -> str:
    """The wording shown to players for a signature."""
    if signature.kind == "exact":
        return "Correct!"
    if signature.kind == "all_wrong_order":
        return "All digits correct but wrong arrangement."
    if signature.kind == "none":
        return "No correct digits."
    plural = "s" if signature.correct > 1 else ""
    return f"{signature.correct} digit{plural} correct."


def is_win(secret: DigitString, guess: DigitString) -> bool:
    """
    Win = all digits match in order, for all positions.
    """
    return len(secret) > 0 and secret == guess


def check_configuration(digits: int, allow_duplicates: bool) -> None:
    if digits < 1:
        raise InvalidConfiguration("A digit-string needs at least 1 digit.")
    if not allow_duplicates and digits > 10:
        raise InvalidConfiguration(
            f"Only 10 distinct digits exist; {digits} digits need duplicates allowed."
        )


def is_legal(value: str, digits: int, allow_duplicates: bool) -> bool:
    """Right length, digits only, and no repeats unless the match allows them."""
    if len(value) != digits:
        return False
    if not all(ch in DIGITS for ch in value):
        return False
    if not allow_duplicates and len(set(value)) != len(value):
        return False
    return True


def random_legal(digits: int, allow_duplicates: bool, rng: random.Random) -> DigitString:
    """Uniformly random legal digit-string, ignoring any feedback."""
    check_configuration(digits, allow_duplicates)
    if allow_duplicates:
        return "".join(rng.choice(DIGITS) for _ in range(digits))
    return "".join(rng.sample(DIGITS, digits))


def opening_guess(digits: int) -> DigitString:
    """
    Fixed opener picked for digit diversity, not computed:
      4 -> "1234", 10 -> "1234567890"
    """
    if digits < 1 or digits > len(OPENING_DIGITS):
        raise InvalidConfiguration(
            f"No opening guess exists for {digits} digits (supported: 1..{len(OPENING_DIGITS)})."
        )
    return OPENING_DIGITS[:digits]


def space_size(digits: int, allow_duplicates: bool) -> int:
    """How many legal digit-strings exist: 10^N, or 10*9*...*(10-N+1) without repeats."""
    check_configuration(digits, allow_duplicates)
    if allow_duplicates:
        return 10 ** digits
    return math.perm(10, digits)


def arrangements(counts: DigitCounts) -> int:
    """Number of distinct strings that use exactly these digit counts."""
    total = math.factorial(sum(counts))
    for count in counts:
        total //= math.factorial(count)
    return total
