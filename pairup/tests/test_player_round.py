"""
Tests for players and rounds in isolation.
"""

import pytest

from ..engine_core.cards import Card
from ..engine_core.errors import (
    Conflict,
    IllegalStateTransition,
    InvalidArgument,
    NotFound,
    RoleDenied,
)
from ..engine_core.player import MAX_NICKNAME_LENGTH, Player, PlayerRole, validate_nickname
from ..engine_core.round import Round


@pytest.fixture
def player():
    return Player(nickname="Ada", game_id="g1")


@pytest.fixture
def round_():
    return Round(game_id="g1", number=1, judge_id="judge", prompt_card=Card.prompt("Spooky"))


class TestPlayer:
    """Tests for Player."""

    def test_defaults(self, player):
        assert player.score.value == 0
        assert player.role == PlayerRole.PLAYER
        assert player.hand.is_empty
        assert player.is_connected

    def test_nickname_trimmed(self):
        assert Player(nickname="  Ada ", game_id="g1").nickname == "Ada"

    def test_nickname_limits(self):
        validate_nickname("x" * MAX_NICKNAME_LENGTH)
        with pytest.raises(InvalidArgument):
            validate_nickname("x" * (MAX_NICKNAME_LENGTH + 1))
        with pytest.raises(InvalidArgument):
            validate_nickname("   ")

    def test_judge_cannot_play(self, player):
        """Judges select, they do not play."""
        card = Card.response("Toast")
        player.draw_cards([card])
        player.become_judge()
        with pytest.raises(RoleDenied):
            player.play_card(card.card_id)
        assert player.hand.has_card(card.card_id)

    def test_disconnected_cannot_play(self, player):
        card = Card.response("Toast")
        player.draw_cards([card])
        player.disconnect()
        assert not player.can_play_cards()
        player.reconnect()
        assert player.play_card(card.card_id) is card

    def test_spectator_cannot_become_judge(self):
        spectator = Player(nickname="Eve", game_id="g1", role=PlayerRole.SPECTATOR)
        with pytest.raises(RoleDenied):
            spectator.become_judge()

    def test_award_point_and_has_won(self, player):
        for _ in range(3):
            player.award_point()
        assert player.score.value == 3
        assert player.has_won(3)
        assert not player.has_won()

    def test_is_inactive(self, player):
        assert not player.is_inactive(60, now=player.last_activity_at + 30)
        assert player.is_inactive(60, now=player.last_activity_at + 61)

    def test_identity_is_player_id(self, player):
        twin = Player(nickname="Ada", game_id="g1")
        assert player != twin
        assert player == Player(nickname="Other", game_id="g1", player_id=player.player_id)


class TestRound:
    """Tests for Round."""

    def test_requires_prompt(self):
        with pytest.raises(InvalidArgument):
            Round(game_id="g1", number=1, judge_id="j", prompt_card=Card.response("Toast"))

    def test_requires_positive_number(self):
        with pytest.raises(InvalidArgument):
            Round(game_id="g1", number=0, judge_id="j", prompt_card=Card.prompt("Spooky"))

    def test_submit(self, round_):
        card = Card.response("Toast")
        round_.submit("p1", card)
        assert round_.has_submitted("p1")
        assert round_.get_submission("p1") is card

    def test_judge_cannot_submit(self, round_):
        with pytest.raises(RoleDenied):
            round_.submit("judge", Card.response("Toast"))

    def test_double_submit(self, round_):
        round_.submit("p1", Card.response("Toast"))
        with pytest.raises(Conflict):
            round_.submit("p1", Card.response("Jam"))

    def test_submit_prompt_rejected(self, round_):
        with pytest.raises(InvalidArgument):
            round_.submit("p1", Card.prompt("Other"))

    def test_all_submitted(self, round_):
        """Everyone but the judge must submit."""
        round_.submit("p1", Card.response("A"))
        round_.submit("p2", Card.response("B"))
        assert not round_.all_submitted(4)
        round_.submit("p3", Card.response("C"))
        assert round_.all_submitted(4)

    def test_select_winner(self, round_):
        card = Card.response("Toast")
        round_.submit("p1", card)
        round_.select_winner("p1", "judge")
        assert round_.is_complete
        assert round_.winning_card is card
        assert round_.ended_at is not None

    def test_select_winner_checks(self, round_):
        round_.submit("p1", Card.response("Toast"))
        with pytest.raises(RoleDenied):
            round_.select_winner("p1", "p1")
        with pytest.raises(InvalidArgument):
            round_.select_winner("judge", "judge")
        with pytest.raises(NotFound):
            round_.select_winner("p2", "judge")

    def test_completed_round_is_frozen(self, round_):
        round_.submit("p1", Card.response("Toast"))
        round_.select_winner("p1", "judge")
        with pytest.raises(IllegalStateTransition):
            round_.submit("p2", Card.response("Jam"))
        with pytest.raises(IllegalStateTransition):
            round_.select_winner("p1", "judge")
        with pytest.raises(IllegalStateTransition):
            round_.retract_submission("p1")

    def test_retract_clears_flag(self, round_):
        card = Card.response("Toast")
        round_.submit("p1", card)
        round_.mark_all_submitted()
        assert round_.retract_submission("p1") is card
        assert not round_.all_cards_submitted
        assert round_.retract_submission("p1") is None

    def test_shuffled_submissions_has_every_card(self, round_):
        cards = [Card.response(f"R{i}") for i in range(3)]
        for i, card in enumerate(cards):
            round_.submit(f"p{i}", card)
        assert set(round_.shuffled_submissions()) == set(cards)

    def test_duration(self, round_):
        assert round_.duration(now=round_.started_at + 5) == pytest.approx(5)
