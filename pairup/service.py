"""
Game Service - Application layer between callers and the engine.

The service:
1. Looks games up by id or join code
2. Runs each operation inside a per-game transaction
3. Seeds decks from the card catalog when a game starts
4. Returns pydantic views instead of live engine objects

This layer is framework-agnostic: an HTTP or socket transport would
call it, but none is part of this package. Engine errors propagate to
the caller unchanged.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import random

from .catalog import CardCatalog
from .engine_core.errors import NotFound, ResourceExhausted
from .engine_core.game import Game
from .engine_core.values import GameCode, STANDARD_WINNING_SCORE
from .session import SessionManager
from .views import GameView, HandView, LeaderboardEntry

logger = logging.getLogger(__name__)


MAX_CODE_ATTEMPTS = 20


@dataclass
class GameService:
    """
    Main entry point for running games.

    Usage:
        service = GameService(catalog=catalog)
        view = service.create_game("Ada")
        service.join_game(view.code, "Bo")
        ...
        service.start_game(view.game_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    catalog: CardCatalog | None = None
    default_winning_score: int = STANDARD_WINNING_SCORE
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def create_game(self, host_nickname: str, winning_score: int | None = None) -> GameView:
        score = self.default_winning_score if winning_score is None else winning_score
        game = Game.create(host_nickname, winning_score=score, rng=self.rng)
        attempts = 1
        while self.session_manager.store.exists_by_code(game.code):
            if attempts >= MAX_CODE_ATTEMPTS:
                raise ResourceExhausted("Could not allocate a unique game code.")
            game.code = GameCode.generate(self.rng)
            attempts += 1
        self.session_manager.register(game)
        return GameView.of(game)

    def find_by_code(self, code: str) -> GameView:
        game_id = self.session_manager.resolve_code(code)
        return self.get_game(game_id)

    def get_game(self, game_id: str) -> GameView:
        with self.session_manager.transaction(game_id, readonly=True) as game:
            return GameView.of(game)

    def get_hand(self, game_id: str, player_id: str) -> HandView:
        with self.session_manager.transaction(game_id, readonly=True) as game:
            player = game.get_player(player_id)
            if player is None:
                raise NotFound(f"Player {player_id} not found.")
            return HandView.of(game, player)

    def leaderboard(self, game_id: str) -> list[LeaderboardEntry]:
        with self.session_manager.transaction(game_id, readonly=True) as game:
            return [
                LeaderboardEntry(
                    rank=i + 1,
                    player_id=p.player_id,
                    nickname=p.nickname,
                    score=p.score.value,
                )
                for i, p in enumerate(game.leaderboard())
            ]

    def join_game(self, code: str, nickname: str) -> tuple[str, GameView]:
        """Join by code. Returns the new player's id and the game view."""
        game_id = self.session_manager.resolve_code(code)
        with self.session_manager.transaction(game_id) as game:
            player = game.add_player(nickname)
            return player.player_id, GameView.of(game)

    def leave_game(self, game_id: str, player_id: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.remove_player(player_id)
            return GameView.of(game)

    def disconnect(self, game_id: str, player_id: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.disconnect_player(player_id)
            return GameView.of(game)

    def reconnect(self, game_id: str, player_id: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.reconnect_player(player_id)
            return GameView.of(game)

    def rename_player(self, game_id: str, player_id: str, nickname: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.rename_player(player_id, nickname)
            return GameView.of(game)

    def start_game(self, game_id: str) -> GameView:
        """Seed the decks from the catalog (if the game has none) and start."""
        with self.session_manager.transaction(game_id) as game:
            if not game.response_deck and not game.prompt_deck:
                if self.catalog is None:
                    raise ResourceExhausted("No card catalog configured to seed the decks.")
                game.initialize_decks(self.catalog.response_cards(), self.catalog.prompt_cards())
            game.start_game()
            return GameView.of(game)

    def play_card(self, game_id: str, player_id: str, card_id: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.play_card(player_id, card_id)
            return GameView.of(game)

    def select_winner(self, game_id: str, judge_id: str, winner_id: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.select_winner(judge_id, winner_id)
            view = GameView.of(game)
        if view.winner_id is not None:
            self.session_manager.evict(game_id)
        return view

    def start_new_round(self, game_id: str) -> GameView:
        with self.session_manager.transaction(game_id) as game:
            game.start_new_round()
            return GameView.of(game)
