"""
Stored Records - Pydantic models for the persisted shape of a game.

One GameRecord holds the whole aggregate: players, rounds, decks and
the card table the other records reference by id. Saving a single
document per game keeps every save atomic.
"""

from typing import Optional
from pydantic import BaseModel, Field


RECORD_VERSION = 1


class CardRecord(BaseModel):
    """A card, referenced by id from hands, decks and rounds."""
    card_id: str
    text: str
    kind: str = Field(description="prompt or response")
    secondary_text: Optional[str] = None
    created_at: float


class PlayerRecord(BaseModel):
    player_id: str
    nickname: str
    score: int = Field(ge=0)
    role: str
    hand: list[str] = Field(default_factory=list, description="Card ids in hand order")
    is_connected: bool = True
    is_host: bool = False
    joined_at: float
    last_activity_at: float


class RoundRecord(BaseModel):
    round_id: str
    number: int = Field(gt=0)
    judge_id: str
    prompt_card_id: str
    submissions: dict[str, str] = Field(
        default_factory=dict, description="Player id -> submitted card id"
    )
    winner_id: Optional[str] = None
    winning_card_id: Optional[str] = None
    started_at: float
    ended_at: Optional[float] = None
    all_cards_submitted: bool = False


class GameRecord(BaseModel):
    version: int = RECORD_VERSION
    game_id: str
    code: str
    phase: str
    status: str
    winning_score: int = Field(ge=1, le=20)
    winner_id: Optional[str] = None
    created_at: float
    started_at: Optional[float] = None
    ended_at: Optional[float] = None
    next_judge_id: Optional[str] = None
    players: list[PlayerRecord] = Field(default_factory=list)
    rounds: list[RoundRecord] = Field(default_factory=list)
    current_round_id: Optional[str] = None
    response_deck: list[str] = Field(default_factory=list)
    prompt_deck: list[str] = Field(default_factory=list)
    cards: list[CardRecord] = Field(default_factory=list)
