"""
Cards - Prompt and response cards as one tagged type.

A Card is either:
- PROMPT: drawn by the game each round, held by the judge (<= 50 chars)
- RESPONSE: dealt into hands and played by everyone else (<= 100 chars)

Both kinds share one field set. The kind-specific secondary text is
`synonyms` on a prompt and `description` on a response.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import time
import uuid

from .errors import InvalidArgument
from .player import PlayerRole


class CardKind(Enum):
    """Discriminant for the card variant."""
    PROMPT = "prompt"
    RESPONSE = "response"


MAX_TEXT_LENGTH = {
    CardKind.PROMPT: 50,
    CardKind.RESPONSE: 100,
}


@dataclass(eq=False)
class Card:
    """
    A single card.

    Identity is the card_id; two cards with equal text are still
    different cards. Text is fixed after construction, the secondary
    text may be filled in later through set_secondary_text().
    """
    text: str
    kind: CardKind
    card_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    secondary_text: str | None = None
    created_at: float = field(default_factory=time.time)

    def __post_init__(self):
        if not isinstance(self.kind, CardKind):
            raise InvalidArgument(f"Unknown card kind: {self.kind!r}")
        if self.text is None or not self.text.strip():
            raise InvalidArgument("Card text cannot be empty.")
        self.text = self.text.strip()
        limit = MAX_TEXT_LENGTH[self.kind]
        if len(self.text) > limit:
            raise InvalidArgument(
                f"{self.kind.value.capitalize()} card text cannot exceed {limit} characters."
            )
        if self.secondary_text is not None:
            self.secondary_text = self.secondary_text.strip() or None

    @classmethod
    def prompt(cls, text: str, synonyms: str | None = None, **kwargs) -> Card:
        """Factory for a prompt card."""
        return cls(text=text, kind=CardKind.PROMPT, secondary_text=synonyms, **kwargs)

    @classmethod
    def response(cls, text: str, description: str | None = None, **kwargs) -> Card:
        """Factory for a response card."""
        return cls(text=text, kind=CardKind.RESPONSE, secondary_text=description, **kwargs)

    @property
    def is_prompt(self) -> bool:
        return self.kind == CardKind.PROMPT

    @property
    def is_response(self) -> bool:
        return self.kind == CardKind.RESPONSE

    @property
    def synonyms(self) -> str | None:
        return self.secondary_text if self.is_prompt else None

    @property
    def description(self) -> str | None:
        return self.secondary_text if self.is_response else None

    def set_secondary_text(self, value: str | None):
        """Fill in synonyms/description. Blank values are ignored."""
        if value and value.strip():
            self.secondary_text = value.strip()

    def can_be_played_by(self, role: PlayerRole) -> bool:
        if self.kind == CardKind.PROMPT:
            return role == PlayerRole.JUDGE
        return role == PlayerRole.PLAYER

    def display_text(self) -> str:
        if not self.secondary_text:
            return self.text
        if self.is_prompt:
            return f"{self.text}\n({self.secondary_text})"
        return f"{self.text}\n{self.secondary_text}"

    def __hash__(self):
        return hash(self.card_id)

    def __eq__(self, other):
        if not isinstance(other, Card):
            return False
        return self.card_id == other.card_id

    def __str__(self):
        return f"{self.kind.value} card: {self.text}"
