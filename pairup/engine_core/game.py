"""
Game - Aggregate root for one game.

The Game is the single point of state mutation: it owns the players,
the round history and both decks, and every change to them goes
through one of its operations.

Design principles:
- All-or-nothing: every precondition is checked before the first
  mutation, so a raised error leaves the game exactly as it was
- Phase-gated: each operation asks the phase table first
- No I/O: callers serialize access per game and handle persistence
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable
import logging
import random
import time
import uuid

from .cards import Card, CardKind
from .errors import (
    CapacityExceeded,
    Conflict,
    IllegalStateTransition,
    InvalidArgument,
    NotFound,
    ResourceExhausted,
    RoleDenied,
)
from .hand import HAND_SIZE
from .phases import Capability, GamePhase, GameStatus, require, status_of, transition
from .player import Player, validate_nickname
from .round import Round
from .values import (
    GameCode,
    MAX_WINNING_SCORE,
    MIN_WINNING_SCORE,
    STANDARD_WINNING_SCORE,
)

logger = logging.getLogger(__name__)


MIN_PLAYERS = 4
MAX_PLAYERS = 8
MIN_PLAYERS_PER_ROUND = 2


def validate_winning_score(winning_score: int) -> int:
    if (
        isinstance(winning_score, bool)
        or not isinstance(winning_score, int)
        or not MIN_WINNING_SCORE <= winning_score <= MAX_WINNING_SCORE
    ):
        raise InvalidArgument(
            f"Winning score must be between {MIN_WINNING_SCORE} and {MAX_WINNING_SCORE}."
        )
    return winning_score


@dataclass(eq=False)
class Game:
    """
    Complete state of one game.

    Build new games with Game.create(); the plain constructor is used
    when a stored game is rebuilt.
    """
    game_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    code: GameCode = field(default_factory=GameCode.generate)
    phase: GamePhase = GamePhase.WAITING_FOR_PLAYERS
    winning_score: int = STANDARD_WINNING_SCORE

    # Players, in join order
    players: list[Player] = field(default_factory=list)

    # Rounds, oldest first
    rounds: list[Round] = field(default_factory=list)
    current_round: Round | None = None

    # Decks, drawn from the front
    response_deck: list[Card] = field(default_factory=list)
    prompt_deck: list[Card] = field(default_factory=list)

    winner_id: str | None = None
    created_at: float = field(default_factory=time.time)
    started_at: float | None = None
    ended_at: float | None = None

    # Player who judges next when no one currently holds the role
    next_judge_id: str | None = None

    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self):
        validate_winning_score(self.winning_score)

    @classmethod
    def create(
        cls,
        host_nickname: str,
        winning_score: int = STANDARD_WINNING_SCORE,
        rng: random.Random | None = None,
    ) -> Game:
        """Create a game waiting for players, with the host seated first."""
        host_nickname = validate_nickname(host_nickname)
        validate_winning_score(winning_score)
        rng = rng or random.Random()

        game = cls(code=GameCode.generate(rng), winning_score=winning_score, rng=rng)
        game.players.append(Player(nickname=host_nickname, game_id=game.game_id, is_host=True))
        logger.info("game %s created by %s (code %s)", game.game_id, host_nickname, game.code)
        return game

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def status(self) -> GameStatus:
        return status_of(self.phase)

    @property
    def is_in_progress(self) -> bool:
        return self.status == GameStatus.IN_PROGRESS

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def response_deck_size(self) -> int:
        return len(self.response_deck)

    @property
    def prompt_deck_size(self) -> int:
        return len(self.prompt_deck)

    def get_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.player_id == player_id:
                return p
        return None

    def find_player_by_nickname(self, nickname: str) -> Player | None:
        wanted = nickname.strip().casefold()
        for p in self.players:
            if p.nickname.casefold() == wanted:
                return p
        return None

    def current_judge(self) -> Player | None:
        for p in self.players:
            if p.is_judge():
                return p
        return None

    def get_winner(self) -> Player | None:
        if self.winner_id is None:
            return None
        return self.get_player(self.winner_id)

    def leaderboard(self) -> list[Player]:
        """Players by score, highest first; ties keep join order."""
        return sorted(self.players, key=lambda p: p.score.value, reverse=True)

    def is_valid(self) -> bool:
        """
        Structural checks only.

        The player count is not held to MIN_PLAYERS once the game is
        running: four are needed to start, after that play continues
        while at least MIN_PLAYERS_PER_ROUND remain.
        """
        return (
            GameCode.is_valid(self.code.value)
            and 0 <= len(self.players) <= MAX_PLAYERS
            and all(p.is_valid() for p in self.players)
            and sum(1 for p in self.players if p.is_judge()) <= 1
        )

    # =========================================================================
    # Players
    # =========================================================================

    def add_player(self, nickname: str) -> Player:
        """Seat a new player. Joiners in a running game are dealt a hand."""
        require(self.phase, Capability.JOIN, f"Cannot join game in {self.phase.value} phase.")
        if len(self.players) >= MAX_PLAYERS:
            raise CapacityExceeded(f"Game is full (max {MAX_PLAYERS} players).")
        nickname = validate_nickname(nickname)
        if self.find_player_by_nickname(nickname) is not None:
            raise Conflict(f"Player with nickname '{nickname}' already exists.")

        player = Player(nickname=nickname, game_id=self.game_id)
        if self.is_in_progress:
            self._refill(player)
        self.players.append(player)
        logger.info("game %s: %s joined (%d players)", self.game_id, nickname, len(self.players))
        return player

    def remove_player(self, player_id: str):
        """
        Remove a player.

        A submission in the current round is retracted and completeness
        is re-evaluated against the smaller roster. If the judge of an
        unfinished round leaves, that round is voided.
        """
        require(self.phase, Capability.LEAVE, f"Cannot leave game in {self.phase.value} phase.")
        player = self._require_player(player_id)

        index = self.players.index(player)
        active = self._active_round()
        judged_active_round = active is not None and active.judge_id == player_id

        self.players.remove(player)

        if player.is_judge() or player.player_id == self.next_judge_id:
            self.next_judge_id = (
                self.players[index % len(self.players)].player_id if self.players else None
            )
        if player.is_host and self.players:
            self.players[0].is_host = True

        if judged_active_round:
            self._void_current_round()
        elif active is not None:
            if active.has_submitted(player_id):
                active.retract_submission(player_id)
            self._recheck_submissions()

        logger.info(
            "game %s: %s left (%d players)", self.game_id, player.nickname, len(self.players)
        )

    def disconnect_player(self, player_id: str):
        self._require_player(player_id).disconnect()

    def reconnect_player(self, player_id: str):
        self._require_player(player_id).reconnect()

    def rename_player(self, player_id: str, nickname: str):
        """Change a nickname, keeping nicknames unique within the game."""
        player = self._require_player(player_id)
        nickname = validate_nickname(nickname)
        other = self.find_player_by_nickname(nickname)
        if other is not None and other is not player:
            raise Conflict(f"Player with nickname '{nickname}' already exists.")
        player.change_nickname(nickname)

    # =========================================================================
    # Decks
    # =========================================================================

    def initialize_decks(self, response_cards: Iterable[Card], prompt_cards: Iterable[Card]):
        """Replace both decks and shuffle them in place."""
        if self.phase != GamePhase.WAITING_FOR_PLAYERS:
            raise IllegalStateTransition("Decks can only be set before the game starts.")
        responses = list(response_cards)
        prompts = list(prompt_cards)
        _check_deck(responses, CardKind.RESPONSE)
        _check_deck(prompts, CardKind.PROMPT)

        self.rng.shuffle(responses)
        self.rng.shuffle(prompts)
        self.response_deck = responses
        self.prompt_deck = prompts
        logger.debug(
            "game %s: decks set (%d responses, %d prompts)",
            self.game_id, len(responses), len(prompts),
        )

    def _draw_responses(self, count: int) -> list[Card]:
        """Draw up to count cards from the front; may return fewer."""
        drawn = self.response_deck[:count]
        del self.response_deck[:count]
        return drawn

    def _refill(self, player: Player):
        needed = player.hand.cards_needed_to_fill
        if needed <= 0:
            return
        cards = self._draw_responses(needed)
        if len(cards) < needed:
            logger.warning(
                "game %s: response deck exhausted, %s holds %d cards",
                self.game_id, player.nickname, player.hand.count + len(cards),
            )
        player.draw_cards(cards)

    # =========================================================================
    # Game flow
    # =========================================================================

    def start_game(self):
        """Deal hands and begin the first round."""
        require(self.phase, Capability.START_GAME, f"Cannot start game in {self.phase.value} phase.")
        if len(self.players) < MIN_PLAYERS:
            raise IllegalStateTransition(
                f"Need at least {MIN_PLAYERS} players to start (current: {len(self.players)})."
            )
        if not self.response_deck or not self.prompt_deck:
            raise ResourceExhausted("Card decks must be initialized before starting.")

        self.phase = transition(self.game_id, self.phase, GamePhase.PLAYING_CARDS)
        self.started_at = time.time()
        for player in self.players:
            self._refill(player)
        self._begin_round()

    def start_new_round(self) -> Round:
        require(
            self.phase,
            Capability.START_NEW_ROUND,
            f"Cannot start new round in {self.phase.value} phase.",
        )
        if len(self.players) < MIN_PLAYERS_PER_ROUND:
            raise IllegalStateTransition(
                f"Need at least {MIN_PLAYERS_PER_ROUND} players to play a round."
            )
        return self._begin_round()

    def _begin_round(self) -> Round:
        if not self.prompt_deck:
            raise ResourceExhausted("No prompt cards available.")

        judge = self._rotate_judge()
        prompt = self.prompt_deck.pop(0)
        round_ = Round(
            game_id=self.game_id,
            number=len(self.rounds) + 1,
            judge_id=judge.player_id,
            prompt_card=prompt,
        )
        self.rounds.append(round_)
        self.current_round = round_
        if self.phase != GamePhase.PLAYING_CARDS:
            self.phase = transition(self.game_id, self.phase, GamePhase.PLAYING_CARDS)
        logger.info(
            "game %s: round %d started, judge %s", self.game_id, round_.number, judge.nickname
        )
        return round_

    def play_card(self, player_id: str, card_id: str):
        require(self.phase, Capability.PLAY_CARD, f"Cannot play cards in {self.phase.value} phase.")
        round_ = self._require_active_round()
        player = self._require_player(player_id)
        if not player.can_play_cards():
            raise RoleDenied(
                f"Player {player.nickname} cannot play cards (role: {player.role.value})."
            )
        if round_.has_submitted(player_id):
            raise Conflict(f"Player {player.nickname} has already played a card this round.")
        if not player.hand.has_card(card_id):
            raise NotFound(f"Card {card_id} not found in hand.")

        card = player.play_card(card_id)
        round_.submit(player_id, card)
        self._recheck_submissions()

    def select_winner(self, judge_id: str, winner_id: str):
        """Judge picks the winning submission; may end the game."""
        require(
            self.phase, Capability.SELECT_WINNER, f"Cannot select winner in {self.phase.value} phase."
        )
        round_ = self._require_active_round()
        judge = self.get_player(judge_id)
        if judge is None or judge_id != round_.judge_id or not judge.can_select_winner():
            raise RoleDenied("Only the judge can select a winner.")
        if winner_id == round_.judge_id:
            raise InvalidArgument("The judge cannot select themselves as winner.")
        winner = self.get_player(winner_id)
        if winner is None or not round_.has_submitted(winner_id):
            raise NotFound(f"Player {winner_id} did not play a card this round.")

        round_.select_winner(winner_id, judge_id)
        winner.award_point()
        logger.info(
            "game %s: %s wins round %d (score %s)",
            self.game_id, winner.nickname, round_.number, winner.score,
        )

        if winner.has_won(self.winning_score):
            self._end_game(winner)
            return

        self.phase = transition(self.game_id, self.phase, GamePhase.ROUND_END)
        self._refill(winner)
        for player in self.players:
            if player is not winner and round_.has_submitted(player.player_id):
                self._refill(player)

    def _end_game(self, winner: Player):
        self.winner_id = winner.player_id
        self.ended_at = time.time()
        self.phase = transition(self.game_id, self.phase, GamePhase.GAME_OVER)
        logger.info("game %s: %s won the game", self.game_id, winner.nickname)

    # =========================================================================
    # Judge rotation
    # =========================================================================

    def _rotate_judge(self) -> Player:
        """Pass the judge role to the next player in join order."""
        current = self.current_judge()
        if current is None:
            successor = self.get_player(self.next_judge_id) if self.next_judge_id else None
            index = self.players.index(successor) if successor is not None else 0
            self.next_judge_id = None
        else:
            current.become_player()
            index = (self.players.index(current) + 1) % len(self.players)
        judge = self.players[index]
        judge.become_judge()
        return judge

    # =========================================================================
    # Round bookkeeping
    # =========================================================================

    def _active_round(self) -> Round | None:
        if self.current_round is None or self.current_round.is_complete:
            return None
        return self.current_round

    def _require_active_round(self) -> Round:
        round_ = self._active_round()
        if round_ is None:
            raise IllegalStateTransition("No active round.")
        return round_

    def _require_player(self, player_id: str) -> Player:
        player = self.get_player(player_id)
        if player is None:
            raise NotFound(f"Player {player_id} not found.")
        return player

    def _recheck_submissions(self):
        """Move between PLAYING_CARDS and JUDGING to match the submissions."""
        round_ = self._active_round()
        if round_ is None:
            return
        complete = round_.submission_count > 0 and round_.all_submitted(len(self.players))
        if complete:
            round_.mark_all_submitted()
            if self.phase == GamePhase.PLAYING_CARDS:
                self.phase = transition(self.game_id, self.phase, GamePhase.JUDGING)
        else:
            round_.all_cards_submitted = False
            if self.phase == GamePhase.JUDGING:
                self.phase = transition(self.game_id, self.phase, GamePhase.PLAYING_CARDS)

    def _void_current_round(self):
        """Abandon the unfinished round: cards go back, the prompt goes under the deck."""
        round_ = self.current_round
        for player_id, card in list(round_.submissions.items()):
            owner = self.get_player(player_id)
            round_.retract_submission(player_id)
            if owner is not None:
                owner.hand.add(card)
        self.prompt_deck.append(round_.prompt_card)
        self.rounds.remove(round_)
        self.current_round = None
        self.phase = transition(self.game_id, self.phase, GamePhase.ROUND_END)
        logger.info("game %s: round %d voided, judge left", self.game_id, round_.number)

    def __str__(self):
        return (
            f"Game {self.code} - {self.phase.value} "
            f"({len(self.players)} players, round {len(self.rounds)})"
        )


def _check_deck(cards: list[Card], kind: CardKind):
    ids = set()
    for card in cards:
        if not isinstance(card, Card) or card.kind != kind:
            raise InvalidArgument(f"The {kind.value} deck only accepts {kind.value} cards.")
        if card.card_id in ids:
            raise Conflict(f"Card {card.card_id} appears twice in the {kind.value} deck.")
        ids.add(card.card_id)
