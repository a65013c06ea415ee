"""
Record Mapping - Converts a Game aggregate to and from its GameRecord.

to_record() walks every card the game can reach (decks, hands, round
prompts and submissions) into one card table; from_record() rebuilds
the objects so that cards shared between places stay one object.
"""

from __future__ import annotations

from ..engine_core.cards import Card, CardKind
from ..engine_core.game import Game
from ..engine_core.hand import Hand
from ..engine_core.phases import GamePhase
from ..engine_core.player import Player, PlayerRole
from ..engine_core.round import Round
from ..engine_core.values import GameCode, Score
from .exceptions import CorruptRecord
from .records import CardRecord, GameRecord, PlayerRecord, RoundRecord


def card_to_record(card: Card) -> CardRecord:
    return CardRecord(
        card_id=card.card_id,
        text=card.text,
        kind=card.kind.value,
        secondary_text=card.secondary_text,
        created_at=card.created_at,
    )


def card_from_record(record: CardRecord) -> Card:
    return Card(
        text=record.text,
        kind=CardKind(record.kind),
        card_id=record.card_id,
        secondary_text=record.secondary_text,
        created_at=record.created_at,
    )


def _collect_cards(game: Game) -> list[Card]:
    table: dict[str, Card] = {}

    def keep(card: Card | None):
        if card is not None and card.card_id not in table:
            table[card.card_id] = card

    for card in game.response_deck:
        keep(card)
    for card in game.prompt_deck:
        keep(card)
    for player in game.players:
        for card in player.hand:
            keep(card)
    for round_ in game.rounds:
        keep(round_.prompt_card)
        for card in round_.submissions.values():
            keep(card)
        keep(round_.winning_card)
    if game.current_round is not None:
        keep(game.current_round.prompt_card)
    return list(table.values())


def to_record(game: Game) -> GameRecord:
    """Snapshot a game as a GameRecord."""
    players = [
        PlayerRecord(
            player_id=p.player_id,
            nickname=p.nickname,
            score=p.score.value,
            role=p.role.value,
            hand=[c.card_id for c in p.hand],
            is_connected=p.is_connected,
            is_host=p.is_host,
            joined_at=p.joined_at,
            last_activity_at=p.last_activity_at,
        )
        for p in game.players
    ]
    rounds = [
        RoundRecord(
            round_id=r.round_id,
            number=r.number,
            judge_id=r.judge_id,
            prompt_card_id=r.prompt_card.card_id,
            submissions={pid: c.card_id for pid, c in r.submissions.items()},
            winner_id=r.winner_id,
            winning_card_id=r.winning_card.card_id if r.winning_card else None,
            started_at=r.started_at,
            ended_at=r.ended_at,
            all_cards_submitted=r.all_cards_submitted,
        )
        for r in game.rounds
    ]
    return GameRecord(
        game_id=game.game_id,
        code=game.code.value,
        phase=game.phase.value,
        status=game.status.value,
        winning_score=game.winning_score,
        winner_id=game.winner_id,
        created_at=game.created_at,
        started_at=game.started_at,
        ended_at=game.ended_at,
        next_judge_id=game.next_judge_id,
        players=players,
        rounds=rounds,
        current_round_id=game.current_round.round_id if game.current_round else None,
        response_deck=[c.card_id for c in game.response_deck],
        prompt_deck=[c.card_id for c in game.prompt_deck],
        cards=[card_to_record(c) for c in _collect_cards(game)],
    )


def from_record(record: GameRecord) -> Game:
    """Rebuild a Game from its record."""
    cards = {c.card_id: card_from_record(c) for c in record.cards}

    def card(card_id: str | None) -> Card | None:
        if card_id is None:
            return None
        try:
            return cards[card_id]
        except KeyError:
            raise CorruptRecord(
                f"Game {record.game_id} references unknown card {card_id}"
            ) from None

    players = [
        Player(
            nickname=p.nickname,
            game_id=record.game_id,
            player_id=p.player_id,
            score=Score(p.score),
            role=PlayerRole(p.role),
            hand=Hand([card(cid) for cid in p.hand]),
            is_connected=p.is_connected,
            is_host=p.is_host,
            joined_at=p.joined_at,
            last_activity_at=p.last_activity_at,
        )
        for p in record.players
    ]
    rounds = [
        Round(
            game_id=record.game_id,
            number=r.number,
            judge_id=r.judge_id,
            prompt_card=card(r.prompt_card_id),
            round_id=r.round_id,
            submissions={pid: card(cid) for pid, cid in r.submissions.items()},
            winner_id=r.winner_id,
            winning_card=card(r.winning_card_id),
            started_at=r.started_at,
            ended_at=r.ended_at,
            all_cards_submitted=r.all_cards_submitted,
        )
        for r in record.rounds
    ]

    current_round = None
    if record.current_round_id is not None:
        current_round = next((r for r in rounds if r.round_id == record.current_round_id), None)
        if current_round is None:
            raise CorruptRecord(
                f"Game {record.game_id} references unknown round {record.current_round_id}"
            )

    return Game(
        game_id=record.game_id,
        code=GameCode(record.code),
        phase=GamePhase(record.phase),
        winning_score=record.winning_score,
        players=players,
        rounds=rounds,
        current_round=current_round,
        response_deck=[card(cid) for cid in record.response_deck],
        prompt_deck=[card(cid) for cid in record.prompt_deck],
        winner_id=record.winner_id,
        created_at=record.created_at,
        started_at=record.started_at,
        ended_at=record.ended_at,
        next_judge_id=record.next_judge_id,
    )
