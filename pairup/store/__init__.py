"""
Store Module - Persistence for game aggregates.

A game is saved and loaded as a whole; players, rounds and hands are
never written on their own.
"""

from .records import CardRecord, PlayerRecord, RoundRecord, GameRecord
from .mapping import to_record, from_record
from .game_store import GameStore, MemoryGameStore, FileGameStore
from .exceptions import StoreError, GameNotFound, CorruptRecord

__all__ = [
    "CardRecord",
    "PlayerRecord",
    "RoundRecord",
    "GameRecord",
    "to_record",
    "from_record",
    "GameStore",
    "MemoryGameStore",
    "FileGameStore",
    "StoreError",
    "GameNotFound",
    "CorruptRecord",
]
