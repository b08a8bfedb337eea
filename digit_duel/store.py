"""
In-memory store
Holds the one active match in memory. Starting a new match replaces it;
nothing survives a restart.
"""

from threading import RLock
from typing import List, Optional, Tuple

from .match import Match, TurnResult


class MatchStore:
    def __init__(self) -> None:
        self._match: Optional[Match] = None
        self._lock = RLock()

    def start(self, match: Match) -> Match:
        with self._lock:
            self._match = match
        return match

    def get(self) -> Optional[Match]:
        with self._lock:
            if self._match is not None:
                # A read is enough to notice the clock ran out
                self._match.check_timeout()
            return self._match

    def guess(self, attempt: str) -> Optional[Tuple[Match, List[TurnResult]]]:
        with self._lock:
            match = self._match
            if match is None:
                return None
            # submit_guess raises ValueError for bad guesses or a finished match
            turns = match.submit_guess(attempt)
            return match, turns

    def clear(self) -> None:
        with self._lock:
            self._match = None
