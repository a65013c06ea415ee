"""
Value Objects - Immutable primitives used across the engine.

- Score: non-negative point total, every change returns a new instance
- GameCode: 6-character join code without ambiguous glyphs
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import total_ordering
import random

from .errors import InvalidArgument


STANDARD_WINNING_SCORE = 7
FAST_GAME_WINNING_SCORE = 4
MIN_WINNING_SCORE = 1
MAX_WINNING_SCORE = 20


@total_ordering
@dataclass(frozen=True)
class Score:
    """A player's score."""
    value: int = 0

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgument("Score must be an integer.")
        if self.value < 0:
            raise InvalidArgument("Score cannot be negative.")

    @classmethod
    def of(cls, value: int) -> Score:
        return cls(value)

    def increment(self) -> Score:
        """Return a score one point higher (player won a round)."""
        return Score(self.value + 1)

    def add(self, points: int) -> Score:
        if points < 0:
            raise InvalidArgument("Cannot add negative points.")
        return Score(self.value + points)

    def has_reached(self, threshold: int = STANDARD_WINNING_SCORE) -> bool:
        return self.value >= threshold

    def is_higher_than(self, other: Score) -> bool:
        return self.value > other.value

    def __lt__(self, other):
        if not isinstance(other, Score):
            return NotImplemented
        return self.value < other.value

    def __int__(self):
        return self.value

    def __str__(self):
        return str(self.value)


Score.ZERO = Score(0)


# Excluded: I, O, 0, 1
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6


@dataclass(frozen=True)
class GameCode:
    """
    Short code players type to find a game.

    Build through generate() or from_string(); the constructor
    validates as well, so a GameCode is always well-formed.
    """
    value: str

    def __post_init__(self):
        if (
            not isinstance(self.value, str)
            or self.value != self.value.strip().upper()
            or not GameCode.is_valid(self.value)
        ):
            raise InvalidArgument(
                f"Game code must be exactly {CODE_LENGTH} characters "
                f"from {CODE_ALPHABET}."
            )

    @classmethod
    def generate(cls, rng: random.Random | None = None) -> GameCode:
        """Generate a uniformly random code."""
        rng = rng or random.SystemRandom()
        return cls("".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH)))

    @classmethod
    def from_string(cls, code: str) -> GameCode:
        """Parse a user-supplied code, normalizing whitespace and case."""
        if code is None or not code.strip():
            raise InvalidArgument("Game code cannot be empty.")
        normalized = code.strip().upper()
        if len(normalized) != CODE_LENGTH:
            raise InvalidArgument(f"Game code must be exactly {CODE_LENGTH} characters.")
        if any(c not in CODE_ALPHABET for c in normalized):
            raise InvalidArgument("Game code contains invalid characters.")
        return cls(normalized)

    @staticmethod
    def is_valid(code: str | None) -> bool:
        if not code or not code.strip():
            return False
        normalized = code.strip().upper()
        return len(normalized) == CODE_LENGTH and all(c in CODE_ALPHABET for c in normalized)

    def __str__(self):
        return self.value
