"""
Player - A participant in one game.

Players are created and removed only through the Game aggregate.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable
import time
import uuid

from .errors import InvalidArgument, RoleDenied
from .hand import Hand
from .values import Score, STANDARD_WINNING_SCORE

if TYPE_CHECKING:
    from .cards import Card


MAX_NICKNAME_LENGTH = 20


class PlayerRole(Enum):
    """Role a player holds in the current round."""
    PLAYER = "player"
    JUDGE = "judge"
    SPECTATOR = "spectator"


def validate_nickname(nickname: str | None) -> str:
    """Return the trimmed nickname or raise InvalidArgument."""
    if nickname is None or not nickname.strip():
        raise InvalidArgument("Nickname cannot be empty.")
    nickname = nickname.strip()
    if len(nickname) > MAX_NICKNAME_LENGTH:
        raise InvalidArgument(f"Nickname cannot exceed {MAX_NICKNAME_LENGTH} characters.")
    return nickname


@dataclass(eq=False)
class Player:
    """
    State for a single player.

    Identity is player_id. The hand is owned by the player and never
    shared with another player.
    """
    nickname: str
    game_id: str
    player_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    score: Score = field(default_factory=lambda: Score.ZERO)
    role: PlayerRole = PlayerRole.PLAYER
    hand: Hand = field(default_factory=Hand)
    is_connected: bool = True
    is_host: bool = False
    joined_at: float = field(default_factory=time.time)
    last_activity_at: float = field(default_factory=time.time)

    def __post_init__(self):
        self.nickname = validate_nickname(self.nickname)

    # Role

    def is_judge(self) -> bool:
        return self.role == PlayerRole.JUDGE

    def is_spectator(self) -> bool:
        return self.role == PlayerRole.SPECTATOR

    def become_judge(self):
        if self.is_spectator():
            raise RoleDenied("Spectators cannot become judges.")
        self._set_role(PlayerRole.JUDGE)

    def become_player(self):
        if self.is_spectator():
            raise RoleDenied("Spectators cannot become players.")
        self._set_role(PlayerRole.PLAYER)

    def _set_role(self, role: PlayerRole):
        self.role = role
        self.touch()

    def can_play_cards(self) -> bool:
        return self.role == PlayerRole.PLAYER and self.is_connected

    def can_select_winner(self) -> bool:
        return self.role == PlayerRole.JUDGE and self.is_connected

    # Cards

    def play_card(self, card_id: str) -> Card:
        if not self.can_play_cards():
            raise RoleDenied(
                f"Player '{self.nickname}' cannot play cards (role: {self.role.value}, "
                f"connected: {self.is_connected})."
            )
        card = self.hand.play(card_id)
        self.touch()
        return card

    def draw_cards(self, cards: Iterable[Card]):
        self.hand.add_many(cards)
        self.touch()

    def clear_hand(self):
        self.hand.clear()
        self.touch()

    # Score

    def award_point(self):
        self.score = self.score.increment()
        self.touch()

    def has_won(self, winning_score: int = STANDARD_WINNING_SCORE) -> bool:
        return self.score.has_reached(winning_score)

    # Connection / activity

    def disconnect(self):
        self.is_connected = False
        self.touch()

    def reconnect(self):
        self.is_connected = True
        self.touch()

    def touch(self):
        self.last_activity_at = time.time()

    def is_inactive(self, timeout_seconds: float, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now - self.last_activity_at > timeout_seconds

    def change_nickname(self, nickname: str):
        """Set the nickname. Uniqueness is checked by Game.rename_player()."""
        self.nickname = validate_nickname(nickname)
        self.touch()

    def is_valid(self) -> bool:
        return bool(self.nickname) and self.hand.is_valid() and self.score.value >= 0

    def __hash__(self):
        return hash(self.player_id)

    def __eq__(self, other):
        if not isinstance(other, Player):
            return False
        return self.player_id == other.player_id

    def __str__(self):
        return (
            f"Player '{self.nickname}' (role: {self.role.value}, "
            f"score: {self.score}, cards: {self.hand.count})"
        )
