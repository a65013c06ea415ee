"""
Game Phases - The turn-taking state machine.

Phases are passive: a lookup table says which operations each phase
allows, and transition() moves between phases. Only the Game calls
transition(); nothing else changes a game's phase.

    WAITING_FOR_PLAYERS -> PLAYING_CARDS -> JUDGING -> ROUND_END
                               ^                          |
                               +--------------------------+
                                                          |
                                                          v
                                                      GAME_OVER
"""

from __future__ import annotations
from enum import Enum
import logging

from .errors import IllegalStateTransition

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Phases of play."""
    WAITING_FOR_PLAYERS = "waiting_for_players"
    PLAYING_CARDS = "playing_cards"
    JUDGING = "judging"
    ROUND_END = "round_end"
    GAME_OVER = "game_over"


class GameStatus(Enum):
    """Coarse lifecycle status, as stored and listed."""
    WAITING_FOR_PLAYERS = "waiting_for_players"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Capability(Enum):
    """Operations gated by the current phase."""
    JOIN = "join"
    LEAVE = "leave"
    START_GAME = "start_game"
    PLAY_CARD = "play_card"
    SELECT_WINNER = "select_winner"
    START_NEW_ROUND = "start_new_round"


PERMISSIONS: dict[GamePhase, frozenset[Capability]] = {
    GamePhase.WAITING_FOR_PLAYERS: frozenset({
        Capability.JOIN, Capability.LEAVE, Capability.START_GAME,
    }),
    GamePhase.PLAYING_CARDS: frozenset({
        Capability.JOIN, Capability.LEAVE, Capability.PLAY_CARD,
    }),
    GamePhase.JUDGING: frozenset({
        Capability.JOIN, Capability.LEAVE, Capability.SELECT_WINNER,
    }),
    GamePhase.ROUND_END: frozenset({
        Capability.JOIN, Capability.LEAVE, Capability.START_NEW_ROUND,
    }),
    GamePhase.GAME_OVER: frozenset({
        Capability.LEAVE,
    }),
}

TRANSITIONS: dict[GamePhase, frozenset[GamePhase]] = {
    GamePhase.WAITING_FOR_PLAYERS: frozenset({GamePhase.PLAYING_CARDS}),
    # PLAYING_CARDS -> ROUND_END only when the judge leaves mid-round
    GamePhase.PLAYING_CARDS: frozenset({GamePhase.JUDGING, GamePhase.ROUND_END}),
    # Back to PLAYING_CARDS when a departure leaves the round short again
    GamePhase.JUDGING: frozenset({
        GamePhase.ROUND_END, GamePhase.GAME_OVER, GamePhase.PLAYING_CARDS,
    }),
    GamePhase.ROUND_END: frozenset({GamePhase.PLAYING_CARDS}),
    GamePhase.GAME_OVER: frozenset(),
}

STATUS_BY_PHASE = {
    GamePhase.WAITING_FOR_PLAYERS: GameStatus.WAITING_FOR_PLAYERS,
    GamePhase.PLAYING_CARDS: GameStatus.IN_PROGRESS,
    GamePhase.JUDGING: GameStatus.IN_PROGRESS,
    GamePhase.ROUND_END: GameStatus.IN_PROGRESS,
    GamePhase.GAME_OVER: GameStatus.COMPLETED,
}


def allows(phase: GamePhase, capability: Capability) -> bool:
    return capability in PERMISSIONS[phase]


def require(phase: GamePhase, capability: Capability, message: str | None = None):
    """Raise IllegalStateTransition unless the phase allows the operation."""
    if not allows(phase, capability):
        raise IllegalStateTransition(
            message or f"Cannot {capability.value.replace('_', ' ')} in {phase.value} phase."
        )


def status_of(phase: GamePhase) -> GameStatus:
    return STATUS_BY_PHASE[phase]


def can_transition(current: GamePhase, target: GamePhase) -> bool:
    return target in TRANSITIONS[current]


def transition(game_id: str, current: GamePhase, target: GamePhase) -> GamePhase:
    """
    Validate a phase change and return the new phase.

    The log record stands in for per-phase enter/exit hooks.
    """
    if not can_transition(current, target):
        raise IllegalStateTransition(
            f"Cannot move from {current.value} to {target.value}."
        )
    logger.info("game %s: %s -> %s", game_id, current.value, target.value)
    return target
