"""
Views - Pydantic read models handed to callers of GameService.

Views are projections: building one never changes the game. A player's
hand only appears in HandView, which is requested per player.
"""

from __future__ import annotations
from typing import Optional

from pydantic import BaseModel, Field

from .engine_core.cards import Card
from .engine_core.game import Game
from .engine_core.player import Player
from .engine_core.round import Round


class CardView(BaseModel):
    card_id: str
    text: str
    kind: str
    secondary_text: Optional[str] = None
    display_text: str

    @classmethod
    def of(cls, card: Card) -> CardView:
        return cls(
            card_id=card.card_id,
            text=card.text,
            kind=card.kind.value,
            secondary_text=card.secondary_text,
            display_text=card.display_text(),
        )


class PlayerView(BaseModel):
    player_id: str
    nickname: str
    score: int = 0
    role: str
    is_host: bool = False
    is_connected: bool = True
    card_count: int = 0
    has_submitted: bool = False

    @classmethod
    def of(cls, player: Player, round_: Round | None = None) -> PlayerView:
        return cls(
            player_id=player.player_id,
            nickname=player.nickname,
            score=player.score.value,
            role=player.role.value,
            is_host=player.is_host,
            is_connected=player.is_connected,
            card_count=player.hand.count,
            has_submitted=bool(round_ and round_.has_submitted(player.player_id)),
        )


class RoundView(BaseModel):
    round_id: str
    number: int
    judge_id: str
    prompt: CardView
    submission_count: int = 0
    all_submitted: bool = False
    is_complete: bool = False
    # Cards are revealed only while judging and after; owners stay hidden until the end
    revealed_cards: list[CardView] = Field(default_factory=list)
    winner_id: Optional[str] = None
    winning_card: Optional[CardView] = None

    @classmethod
    def of(cls, round_: Round, reveal: bool = False) -> RoundView:
        revealed = []
        if reveal:
            revealed = [CardView.of(c) for c in round_.shuffled_submissions()]
        return cls(
            round_id=round_.round_id,
            number=round_.number,
            judge_id=round_.judge_id,
            prompt=CardView.of(round_.prompt_card),
            submission_count=round_.submission_count,
            all_submitted=round_.all_cards_submitted,
            is_complete=round_.is_complete,
            revealed_cards=revealed,
            winner_id=round_.winner_id,
            winning_card=CardView.of(round_.winning_card) if round_.winning_card else None,
        )


class GameView(BaseModel):
    game_id: str
    code: str
    phase: str
    status: str
    winning_score: int
    players: list[PlayerView] = Field(default_factory=list)
    judge_id: Optional[str] = None
    current_round: Optional[RoundView] = None
    rounds_played: int = 0
    winner_id: Optional[str] = None
    response_deck_size: int = 0
    prompt_deck_size: int = 0

    @classmethod
    def of(cls, game: Game) -> GameView:
        round_ = game.current_round
        judge = game.current_judge()
        reveal = round_ is not None and round_.all_cards_submitted
        return cls(
            game_id=game.game_id,
            code=game.code.value,
            phase=game.phase.value,
            status=game.status.value,
            winning_score=game.winning_score,
            players=[PlayerView.of(p, round_) for p in game.players],
            judge_id=judge.player_id if judge else None,
            current_round=RoundView.of(round_, reveal=reveal) if round_ else None,
            rounds_played=sum(1 for r in game.rounds if r.is_complete),
            winner_id=game.winner_id,
            response_deck_size=game.response_deck_size,
            prompt_deck_size=game.prompt_deck_size,
        )


class HandView(BaseModel):
    game_id: str
    player_id: str
    cards: list[CardView] = Field(default_factory=list)

    @classmethod
    def of(cls, game: Game, player: Player) -> HandView:
        return cls(
            game_id=game.game_id,
            player_id=player.player_id,
            cards=[CardView.of(c) for c in player.hand],
        )


class LeaderboardEntry(BaseModel):
    rank: int
    player_id: str
    nickname: str
    score: int
