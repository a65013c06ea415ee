"""
Session Module - Live games and per-game serialization.

Each live game is touched by one call at a time. The store holds the
last successfully applied state of every game.
"""

from .manager import SessionManager

__all__ = [
    "SessionManager",
]
