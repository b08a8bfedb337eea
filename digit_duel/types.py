"""
Labels for clarity.
"""

from typing import List, Literal, Tuple

DigitString = str  # "0"..."9" repeated N times, e.g. "0427"
Difficulty = Literal["easy", "medium", "hard"]
Mode = Literal["ai", "friend"]
Winner = Literal["player", "opponent", "draw"]
MatchStatus = Literal["in_progress", "finished"]
SignatureKind = Literal["exact", "all_wrong_order", "partial", "none"]

# One entry per digit 0..9: how many times it appears in a digit-string
DigitCounts = Tuple[int, ...]
DIGITS = "0123456789"
DIFFICULTIES: List[str] = ["easy", "medium", "hard"]
