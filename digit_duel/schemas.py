"""
Explicit validation & Pydantic models
- Models are used to validate and serialize/deserialize data
  exchanged between the client and server.
- Defines the structure of API requests and responses.
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from .types import DIGITS


def _digits_only(value: str) -> str:
    if value == "" or not all(ch in DIGITS for ch in value):
        raise ValueError("Must contain only the digits 0-9.")
    return value


# 1. Settings chosen on the setup screen
class NewMatchRequest(BaseModel):
    mode: Literal["ai", "friend"] = Field("ai", description="Play the computer or a friend on this device")
    digits: int = Field(5, ge=3, le=10, description="Length of every secret and guess")
    difficulty: Literal["easy", "medium", "hard"] = Field("medium", description="Computer strength and clock")
    allow_duplicates: bool = Field(True, description="Whether a secret may repeat a digit")
    player_secret: str = Field(..., description="Your secret (player 1's in friend mode)")
    opponent_secret: Optional[str] = Field(
        None, description="Player 2's secret; friend mode only, the computer picks its own"
    )

    @field_validator("player_secret", "opponent_secret")
    @classmethod
    def validate_digits(cls, value: Optional[str]) -> Optional[str]:
        """
        Only checks characters. Length and repeats depend on the other
        settings, so the match engine checks those.
        """
        if value is None:
            return value
        return _digits_only(value)

    @model_validator(mode="after")
    def friend_needs_two_secrets(self) -> "NewMatchRequest":
        if self.mode == "friend" and self.opponent_secret is None:
            raise ValueError("Friend mode needs opponent_secret for player 2.")
        if self.mode == "ai" and self.opponent_secret is not None:
            raise ValueError("The computer picks its own secret; leave opponent_secret empty.")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"mode": "ai", "digits": 4, "difficulty": "hard", "allow_duplicates": False, "player_secret": "4071"},
                {"mode": "friend", "digits": 3, "player_secret": "115", "opponent_secret": "902"},
            ]
        }
    }

# 2. Validates a guess
class GuessRequest(BaseModel):
    guess: str = Field(..., description="Digits only; the length must match the match settings")

    @field_validator("guess")
    @classmethod
    def validate_digits(cls, value: str) -> str:
        return _digits_only(value)

# 3. Feedback for a single guess
class TurnOut(BaseModel):
    side: Literal["player", "opponent"] = Field(..., description="Who guessed (player 1 or computer / player 2)")
    guess: str = Field(..., description="The guess")
    feedback: Literal["exact", "all_wrong_order", "partial", "none"] = Field(..., description="Feedback category")
    correct: int = Field(..., description="How many digits are shared with the secret (any position)")
    message: str = Field(..., description="Feedback message")
    guess_number: int = Field(..., description="Guess count for this side")
    thinking_delay: Optional[float] = Field(
        None, description="Seconds a client may wait before showing a computer guess"
    )
    timestamp: float = Field(..., description="When the guess was made")

# 4. End of a match; secrets are only revealed here
class OutcomeOut(BaseModel):
    winner: Literal["player", "opponent", "draw"]
    reason: Literal["solved", "guess_limit", "timeout"]
    player_secret: str
    opponent_secret: str
    total_guesses: int

# 5. Overall state of the match (no secrets while in progress)
class MatchState(BaseModel):
    mode: Literal["ai", "friend"]
    digits: int
    difficulty: Literal["easy", "medium", "hard"]
    allow_duplicates: bool
    status: Literal["in_progress", "finished"]
    current_player: int = Field(..., description="Whose turn it is in friend mode (1 or 2)")
    player_guesses: int
    opponent_guesses: int
    max_guesses: int
    time_remaining: int = Field(..., description="Seconds left on the match clock")
    history: List[TurnOut]
    outcome: Optional[OutcomeOut] = None

# 6. Result of a guess: your turn, plus the computer's reply in ai mode
class GuessResponse(BaseModel):
    turns: List[TurnOut]
    status: Literal["in_progress", "finished"]
    outcome: Optional[OutcomeOut] = None
    note: Optional[str] = Field(None, description="Extra note (ex. 'Match over. No more guesses allowed.')")

# 7. One finished match on the scoreboard
class ResultOut(BaseModel):
    winner: Literal["player", "opponent", "draw"]
    reason: Literal["solved", "guess_limit", "timeout"]
    mode: Literal["ai", "friend"]
    difficulty: Literal["easy", "medium", "hard"]
    digits: int
    allow_duplicates: bool
    total_guesses: int
    timestamp: float

# 8. Scoreboard
class StatsOut(BaseModel):
    games_played: int = Field(..., description="Finished matches")
    wins: int = Field(..., description="Matches player 1 won")
    losses: int = Field(..., description="Matches player 1 lost")
    draws: int = Field(..., description="Matches nobody cracked")
    win_rate: Optional[float] = Field(None, description="wins / games_played")

    easy_played: int = Field(..., description="Computer matches on Easy")
    medium_played: int = Field(..., description="Computer matches on Medium")
    hard_played: int = Field(..., description="Computer matches on Hard")
    easy_wins: int = Field(..., description="Computer matches won on Easy")
    medium_wins: int = Field(..., description="Computer matches won on Medium")
    hard_wins: int = Field(..., description="Computer matches won on Hard")

    history: List[ResultOut] = Field(..., description="Most recent results, newest first")
