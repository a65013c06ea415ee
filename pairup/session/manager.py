"""
Session Manager - Serializes access to live games.

LIFECYCLE:
1. A game is created and registered (saved, kept live in memory)
2. Every call against the game runs inside transaction(game_id):
   - the game's lock is held for the whole call
   - the live aggregate is loaded from the store on first use
   - on success the aggregate is saved
   - on failure the live copy is dropped, so the next call starts
     again from the last saved state
3. Finished games are evicted from memory; the store keeps them

Calls for the same game run one at a time, in lock order. Calls for
different games never wait on each other.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator
import logging
import threading
import time

from ..engine_core.game import Game
from ..engine_core.phases import GameStatus
from ..engine_core.values import GameCode
from ..store import GameStore, MemoryGameStore, GameNotFound

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Owns the live Game instances and their locks.

    Usage:
        manager = SessionManager(store)
        manager.register(game)

        with manager.transaction(game.game_id) as game:
            game.add_player("Bo")
    """

    def __init__(self, store: GameStore | None = None):
        self.store = store or MemoryGameStore()
        self._games: dict[str, Game] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._lock_users: dict[str, int] = {}
        self._last_used: dict[str, float] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def _locked(self, game_id: str) -> Iterator[None]:
        """
        Hold the game's lock.

        Locks are counted while in use and dropped by the last user once
        the game is no longer live, so unknown or evicted ids leave
        nothing behind.
        """
        with self._registry_lock:
            lock = self._locks.get(game_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[game_id] = lock
            self._lock_users[game_id] = self._lock_users.get(game_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._registry_lock:
                users = self._lock_users[game_id] - 1
                if users == 0 and game_id not in self._games:
                    del self._lock_users[game_id]
                    del self._locks[game_id]
                else:
                    self._lock_users[game_id] = users

    def register(self, game: Game) -> Game:
        """Save a new game and keep it live."""
        with self._locked(game.game_id):
            self.store.save(game)
            self._games[game.game_id] = game
            self._last_used[game.game_id] = time.time()
        logger.info("session opened for game %s", game.game_id)
        return game

    @contextmanager
    def transaction(self, game_id: str, readonly: bool = False) -> Iterator[Game]:
        """
        Run one call against a game with exclusive access.

        Raises GameNotFound if the game is neither live nor stored.
        """
        with self._locked(game_id):
            game = self._games.get(game_id)
            if game is None:
                game = self.store.get(game_id)
                if game is None:
                    raise GameNotFound(f"Game {game_id} not found.")
                self._games[game_id] = game
            self._last_used[game_id] = time.time()
            try:
                yield game
                if not readonly:
                    self.store.save(game)
            except BaseException:
                self._games.pop(game_id, None)
                self._last_used.pop(game_id, None)
                raise

    def resolve_code(self, code: GameCode | str) -> str:
        """Game id for a join code."""
        game = self.store.get_by_code(code)
        if game is None:
            raise GameNotFound(f"No game with code {code}.")
        return game.game_id

    def is_live(self, game_id: str) -> bool:
        return game_id in self._games

    def evict(self, game_id: str):
        """Drop a game from memory and release its lock. The stored copy stays."""
        with self._locked(game_id):
            self._games.pop(game_id, None)
            self._last_used.pop(game_id, None)

    def list_active_sessions(self) -> list[str]:
        """Ids of live games that are not over."""
        return [
            game_id for game_id, game in list(self._games.items())
            if game.status != GameStatus.COMPLETED
        ]

    def cleanup_stale_sessions(self, max_idle_seconds: int = 3600) -> list[str]:
        """
        Evict finished games and games idle for longer than max_idle_seconds.

        Called periodically to free memory.
        """
        now = time.time()
        to_remove = [
            game_id for game_id, game in list(self._games.items())
            if game.status == GameStatus.COMPLETED
            or now - self._last_used.get(game_id, now) > max_idle_seconds
        ]
        for game_id in to_remove:
            self.evict(game_id)
        return to_remove
