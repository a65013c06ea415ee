"""
Tests for the game service and its views.
"""

import random

import pytest

from ..catalog import placeholder_catalog
from ..engine_core.errors import (
    Conflict,
    IllegalStateTransition,
    NotFound,
    ResourceExhausted,
    RoleDenied,
)
from ..service import GameService
from ..session import SessionManager
from ..store import GameNotFound


@pytest.fixture
def service():
    return GameService(
        session_manager=SessionManager(),
        catalog=placeholder_catalog(),
        rng=random.Random(3),
    )


@pytest.fixture
def lobby(service):
    """A game with four seated players; returns (view, player ids)."""
    view = service.create_game("Ada")
    ids = [view.players[0].player_id]
    for name in ("Bo", "Cy", "Di"):
        player_id, view = service.join_game(view.code, name)
        ids.append(player_id)
    return view, ids


def _play_everyone(service, game_id):
    view = service.get_game(game_id)
    for player in view.players:
        if player.player_id == view.judge_id or player.has_submitted:
            continue
        hand = service.get_hand(game_id, player.player_id)
        view = service.play_card(game_id, player.player_id, hand.cards[0].card_id)
    return view


class TestLobby:
    """Creating and joining games."""

    def test_create_game(self, service):
        view = service.create_game("Ada")
        assert view.phase == "waiting_for_players"
        assert view.status == "waiting_for_players"
        assert view.winning_score == 7
        assert len(view.players) == 1
        assert view.players[0].is_host

    def test_create_with_winning_score(self, service):
        assert service.create_game("Ada", winning_score=4).winning_score == 4

    def test_join_by_code(self, service):
        view = service.create_game("Ada")
        player_id, joined = service.join_game(view.code.lower(), "Bo")
        assert [p.nickname for p in joined.players] == ["Ada", "Bo"]
        assert joined.players[1].player_id == player_id

    def test_join_duplicate(self, service):
        view = service.create_game("Ada")
        with pytest.raises(Conflict):
            service.join_game(view.code, "ada")

    def test_unknown_code(self, service):
        with pytest.raises(GameNotFound):
            service.join_game("ZZZZZZ", "Bo")

    def test_find_by_code(self, service):
        view = service.create_game("Ada")
        assert service.find_by_code(view.code).game_id == view.game_id

    def test_codes_are_unique(self):
        """A colliding code is regenerated."""
        manager = SessionManager()
        first = GameService(session_manager=manager, rng=random.Random(1)).create_game("Ada")
        second = GameService(session_manager=manager, rng=random.Random(1)).create_game("Bo")
        assert first.code != second.code


class TestPlay:
    """Running a game through the service."""

    def test_start_seeds_decks(self, service, lobby):
        view, ids = lobby
        view = service.start_game(view.game_id)
        assert view.phase == "playing_cards"
        assert view.judge_id == ids[0]
        assert view.current_round.number == 1
        assert view.response_deck_size == 50 - 4 * 7
        assert view.prompt_deck_size == 19
        assert all(p.card_count == 7 for p in view.players)

    def test_start_without_catalog(self):
        bare = GameService(session_manager=SessionManager())
        view = bare.create_game("Ada")
        for name in ("Bo", "Cy", "Di"):
            bare.join_game(view.code, name)
        with pytest.raises(ResourceExhausted):
            bare.start_game(view.game_id)
        assert bare.get_game(view.game_id).phase == "waiting_for_players"

    def test_get_hand(self, service, lobby):
        view, ids = lobby
        service.start_game(view.game_id)
        hand = service.get_hand(view.game_id, ids[1])
        assert len(hand.cards) == 7
        assert all(c.kind == "response" for c in hand.cards)
        with pytest.raises(NotFound):
            service.get_hand(view.game_id, "nobody")

    def test_cards_hidden_until_all_played(self, service, lobby):
        view, ids = lobby
        service.start_game(view.game_id)
        hand = service.get_hand(view.game_id, ids[1])
        view = service.play_card(view.game_id, ids[1], hand.cards[0].card_id)
        assert view.current_round.submission_count == 1
        assert view.current_round.revealed_cards == []
        assert [p.has_submitted for p in view.players] == [False, True, False, False]

        view = _play_everyone(service, view.game_id)
        assert view.phase == "judging"
        assert len(view.current_round.revealed_cards) == 3

    def test_judge_cannot_play(self, service, lobby):
        view, ids = lobby
        service.start_game(view.game_id)
        hand = service.get_hand(view.game_id, ids[0])
        with pytest.raises(RoleDenied):
            service.play_card(view.game_id, ids[0], hand.cards[0].card_id)

    def test_full_round(self, service, lobby):
        view, ids = lobby
        service.start_game(view.game_id)
        _play_everyone(service, view.game_id)
        view = service.select_winner(view.game_id, ids[0], ids[2])
        assert view.phase == "round_end"
        assert view.rounds_played == 1
        assert view.current_round.winner_id == ids[2]
        assert service.leaderboard(view.game_id)[0].player_id == ids[2]

        view = service.start_new_round(view.game_id)
        assert view.judge_id == ids[1]
        assert view.current_round.number == 2

    def test_failed_call_keeps_saved_state(self, service, lobby):
        view, ids = lobby
        service.start_game(view.game_id)
        with pytest.raises(IllegalStateTransition):
            service.start_new_round(view.game_id)
        assert service.get_game(view.game_id).phase == "playing_cards"

    def test_finished_game_is_evicted(self, service):
        view = service.create_game("Ada", winning_score=1)
        for name in ("Bo", "Cy", "Di"):
            service.join_game(view.code, name)
        view = service.start_game(view.game_id)
        view = _play_everyone(service, view.game_id)
        winner = next(p.player_id for p in view.players if p.has_submitted)

        view = service.select_winner(view.game_id, view.judge_id, winner)

        assert view.winner_id == winner
        assert view.status == "completed"
        assert not service.session_manager.is_live(view.game_id)
        board = service.leaderboard(view.game_id)
        assert board[0].player_id == winner
        assert board[0].rank == 1
        assert board[0].score == 1


class TestMembership:
    """Leaving and connection changes."""

    def test_leave(self, service, lobby):
        view, ids = lobby
        view = service.leave_game(view.game_id, ids[0])
        assert len(view.players) == 3
        assert view.players[0].is_host

    def test_rename(self, service, lobby):
        view, ids = lobby
        view = service.rename_player(view.game_id, ids[1], "Bob")
        assert view.players[1].nickname == "Bob"
        with pytest.raises(Conflict):
            service.rename_player(view.game_id, ids[2], "BOB")
        assert service.get_game(view.game_id).players[2].nickname == "Cy"

    def test_disconnect_and_reconnect(self, service, lobby):
        view, ids = lobby
        view = service.disconnect(view.game_id, ids[1])
        assert not view.players[1].is_connected
        view = service.reconnect(view.game_id, ids[1])
        assert view.players[1].is_connected

