"""
Hand - The response cards a player currently holds.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable

from .errors import CapacityExceeded, Conflict, InvalidArgument, NotFound

if TYPE_CHECKING:
    from .cards import Card


HAND_SIZE = 7


@dataclass
class Hand:
    """
    Ordered, bounded collection of distinct response cards.

    Created empty, grows through draws and shrinks when a card is
    played or the hand is cleared.
    """
    cards: list[Card] = field(default_factory=list)

    def __post_init__(self):
        if len(self.cards) > HAND_SIZE:
            raise CapacityExceeded(f"Cannot create hand with more than {HAND_SIZE} cards.")
        ids = [c.card_id for c in self.cards]
        if len(set(ids)) != len(ids):
            raise Conflict("Hand cannot contain the same card twice.")

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def is_full(self) -> bool:
        return self.count >= HAND_SIZE

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    @property
    def cards_needed_to_fill(self) -> int:
        return HAND_SIZE - self.count

    def add(self, card: Card):
        if card is None or not card.is_response:
            raise InvalidArgument("Only response cards can be held in a hand.")
        if self.has_card(card.card_id):
            raise Conflict(f"Card {card.card_id} is already in hand.")
        if self.is_full:
            raise CapacityExceeded(f"Hand is full (max {HAND_SIZE} cards).")
        self.cards.append(card)

    def add_many(self, cards: Iterable[Card]):
        """Add several cards; checked up front so a failure adds nothing."""
        cards = list(cards)
        seen = {c.card_id for c in self.cards}
        for card in cards:
            if card is None or not card.is_response:
                raise InvalidArgument("Only response cards can be held in a hand.")
            if card.card_id in seen:
                raise Conflict(f"Card {card.card_id} is already in hand.")
            seen.add(card.card_id)
        if self.count + len(cards) > HAND_SIZE:
            raise CapacityExceeded(f"Hand is full (max {HAND_SIZE} cards).")
        self.cards.extend(cards)

    def get_card(self, card_id: str) -> Card | None:
        for card in self.cards:
            if card.card_id == card_id:
                return card
        return None

    def has_card(self, card_id: str) -> bool:
        return self.get_card(card_id) is not None

    def remove(self, card_id: str) -> Card:
        """Remove and return a card; NotFound if it is not held."""
        card = self.get_card(card_id)
        if card is None:
            raise NotFound(f"Card {card_id} not found in hand.")
        self.cards.remove(card)
        return card

    def play(self, card_id: str) -> Card:
        return self.remove(card_id)

    def clear(self):
        self.cards.clear()

    def is_valid(self) -> bool:
        return 0 <= self.count <= HAND_SIZE and all(c.is_response for c in self.cards)

    def __len__(self):
        return self.count

    def __iter__(self):
        return iter(self.cards)

    def __str__(self):
        return f"Hand: {self.count}/{HAND_SIZE} cards"
