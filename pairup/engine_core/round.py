"""
Round - One judging cycle.

A round starts with a prompt card and a judge, collects exactly one
response card from each other player, and ends when the judge picks
a winner. Players are referenced by id only; the Game owns them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import random
import time
import uuid

from .cards import Card
from .errors import Conflict, IllegalStateTransition, InvalidArgument, NotFound, RoleDenied


@dataclass(eq=False)
class Round:
    """
    A single round of play.

    A round is complete once it has both a winner and an end time;
    after that, no submission may be added or retracted.
    """
    game_id: str
    number: int
    judge_id: str
    prompt_card: Card
    round_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    submissions: dict[str, Card] = field(default_factory=dict)
    winner_id: str | None = None
    winning_card: Card | None = None
    started_at: float = field(default_factory=time.time)
    ended_at: float | None = None
    all_cards_submitted: bool = False

    def __post_init__(self):
        if self.number is None or self.number <= 0:
            raise InvalidArgument("Round number must be positive.")
        if self.prompt_card is None or not self.prompt_card.is_prompt:
            raise InvalidArgument("A round needs a prompt card.")

    @property
    def is_complete(self) -> bool:
        return self.winner_id is not None and self.ended_at is not None

    @property
    def submission_count(self) -> int:
        return len(self.submissions)

    def submit(self, player_id: str, card: Card):
        """Record a player's response card."""
        if card is None or not card.is_response:
            raise InvalidArgument("Only response cards can be submitted.")
        if self.is_complete:
            raise IllegalStateTransition("Cannot play a card in a completed round.")
        if player_id == self.judge_id:
            raise RoleDenied("The judge cannot play cards.")
        if player_id in self.submissions:
            raise Conflict(f"Player {player_id} has already played a card this round.")
        self.submissions[player_id] = card

    def has_submitted(self, player_id: str) -> bool:
        return player_id in self.submissions

    def get_submission(self, player_id: str) -> Card | None:
        return self.submissions.get(player_id)

    def all_submitted(self, total_players: int) -> bool:
        """True once every player except the judge has submitted."""
        return self.submission_count >= total_players - 1

    def mark_all_submitted(self):
        self.all_cards_submitted = True

    def retract_submission(self, player_id: str) -> Card | None:
        """Withdraw a submission (the player left). Returns the card, if any."""
        if self.is_complete:
            raise IllegalStateTransition("Cannot remove cards from a completed round.")
        self.all_cards_submitted = False
        return self.submissions.pop(player_id, None)

    def select_winner(self, winner_id: str, acting_judge_id: str):
        if self.is_complete:
            raise IllegalStateTransition("A winner has already been selected for this round.")
        if acting_judge_id != self.judge_id:
            raise RoleDenied("Only the judge can select a winner.")
        if winner_id == self.judge_id:
            raise InvalidArgument("The judge cannot select themselves as winner.")
        if winner_id not in self.submissions:
            raise NotFound(f"Player {winner_id} did not play a card this round.")
        self.winner_id = winner_id
        self.winning_card = self.submissions[winner_id]
        self.ended_at = time.time()

    def shuffled_submissions(self, rng: random.Random | None = None) -> list[Card]:
        """Submitted cards in random order, for an anonymous reveal."""
        cards = list(self.submissions.values())
        (rng or random.Random()).shuffle(cards)
        return cards

    def duration(self, now: float | None = None) -> float:
        end = self.ended_at if self.ended_at is not None else (now or time.time())
        return end - self.started_at

    def is_valid(self) -> bool:
        return (
            self.number > 0
            and self.prompt_card is not None
            and bool(self.judge_id)
            and self.judge_id not in self.submissions
            and (not self.is_complete or self.winning_card is not None)
        )

    def __str__(self):
        if self.is_complete:
            status = "completed"
        elif self.all_cards_submitted:
            status = "judging"
        else:
            status = "playing"
        return f"Round {self.number} - {status} ({self.submission_count} cards played)"
