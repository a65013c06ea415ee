"""
Engine Core - Rules and state for one game.

The engine:
1. Validates every operation against the current phase
2. Deals cards and rotates the judge
3. Collects one submission per non-judge player each round
4. Scores the judge's pick and detects the game winner
"""

from .errors import (
    ErrorCode,
    GameError,
    InvalidArgument,
    IllegalStateTransition,
    RoleDenied,
    CapacityExceeded,
    Conflict,
    NotFound,
    ResourceExhausted,
)
from .values import Score, GameCode, STANDARD_WINNING_SCORE, FAST_GAME_WINNING_SCORE
from .player import Player, PlayerRole
from .cards import Card, CardKind
from .hand import Hand, HAND_SIZE
from .round import Round
from .phases import GamePhase, GameStatus, Capability, allows, transition
from .game import Game, MIN_PLAYERS, MAX_PLAYERS

__all__ = [
    "ErrorCode",
    "GameError",
    "InvalidArgument",
    "IllegalStateTransition",
    "RoleDenied",
    "CapacityExceeded",
    "Conflict",
    "NotFound",
    "ResourceExhausted",
    "Score",
    "GameCode",
    "STANDARD_WINNING_SCORE",
    "FAST_GAME_WINNING_SCORE",
    "Player",
    "PlayerRole",
    "Card",
    "CardKind",
    "Hand",
    "HAND_SIZE",
    "Round",
    "GamePhase",
    "GameStatus",
    "Capability",
    "allows",
    "transition",
    "Game",
    "MIN_PLAYERS",
    "MAX_PLAYERS",
]
