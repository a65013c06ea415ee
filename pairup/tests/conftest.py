"""
Pytest fixtures for pairup tests.
"""

import random

import pytest

from ..engine_core.cards import Card
from ..engine_core.game import Game


def _responses(count: int) -> list[Card]:
    return [Card.response(f"Response {i}") for i in range(1, count + 1)]


def _prompts(count: int) -> list[Card]:
    return [Card.prompt(f"Prompt {i}") for i in range(1, count + 1)]


@pytest.fixture
def response_cards() -> list[Card]:
    """50 response cards."""
    return _responses(50)


@pytest.fixture
def prompt_cards() -> list[Card]:
    """20 prompt cards."""
    return _prompts(20)


@pytest.fixture
def new_game() -> Game:
    """A game with only the host seated."""
    return Game.create("Host", rng=random.Random(1234))


@pytest.fixture
def four_player_game(new_game: Game, response_cards, prompt_cards) -> Game:
    """Host plus three players, decks ready, not started."""
    for name in ("Bea", "Cal", "Dee"):
        new_game.add_player(name)
    new_game.initialize_decks(response_cards, prompt_cards)
    return new_game


@pytest.fixture
def started_game(four_player_game: Game) -> Game:
    """Four-player game in the first round."""
    four_player_game.start_game()
    return four_player_game


@pytest.fixture
def play_all():
    """Return a helper that makes every non-judge play their first card."""
    def _play_all(game: Game, skip: tuple = ()):
        judge = game.current_judge()
        for player in list(game.players):
            if player is judge or player.player_id in skip:
                continue
            game.play_card(player.player_id, player.hand.cards[0].card_id)
    return _play_all


@pytest.fixture
def make_game():
    """Return a factory for started games with custom size and decks."""
    def _make_game(
        players: int = 4,
        winning_score: int = 7,
        responses: int = 50,
        prompts: int = 20,
        seed: int = 99,
    ) -> Game:
        game = Game.create("P1", winning_score=winning_score, rng=random.Random(seed))
        for i in range(2, players + 1):
            game.add_player(f"P{i}")
        game.initialize_decks(_responses(responses), _prompts(prompts))
        game.start_game()
        return game
    return _make_game
