"""
Tests for the session manager.

Tests:
- Transactions load, save and roll back
- Concurrent calls against one game are serialized
- Stale session cleanup
"""

import threading

import pytest

from ..engine_core.errors import CapacityExceeded
from ..engine_core.phases import GamePhase
from ..session import SessionManager
from ..store import GameNotFound, MemoryGameStore


@pytest.fixture
def manager():
    return SessionManager(MemoryGameStore())


class TestTransaction:
    """Tests for SessionManager.transaction."""

    def test_register_saves(self, manager, new_game):
        manager.register(new_game)
        assert manager.is_live(new_game.game_id)
        assert manager.store.get(new_game.game_id) is not None

    def test_changes_are_saved(self, manager, new_game):
        manager.register(new_game)
        with manager.transaction(new_game.game_id) as game:
            game.add_player("Bea")
        assert manager.store.get(new_game.game_id).player_count == 2

    def test_failure_drops_live_copy(self, manager, new_game):
        """After an error the next call sees the last saved state."""
        manager.register(new_game)
        with pytest.raises(RuntimeError):
            with manager.transaction(new_game.game_id) as game:
                game.add_player("Bea")
                raise RuntimeError("boom")
        assert not manager.is_live(new_game.game_id)
        with manager.transaction(new_game.game_id, readonly=True) as game:
            assert game.player_count == 1

    def test_loads_from_store(self, new_game):
        store = MemoryGameStore()
        store.save(new_game)
        manager = SessionManager(store)
        with manager.transaction(new_game.game_id) as game:
            assert game.game_id == new_game.game_id
            assert game is not new_game
        assert manager.is_live(new_game.game_id)

    def test_unknown_game(self, manager):
        with pytest.raises(GameNotFound):
            with manager.transaction("missing"):
                pass

    def test_resolve_code(self, manager, new_game):
        manager.register(new_game)
        assert manager.resolve_code(new_game.code.value.lower()) == new_game.game_id
        with pytest.raises(GameNotFound):
            manager.resolve_code("ZZZZZZ")


class TestConcurrency:
    """Calls for one game run one at a time."""

    def test_concurrent_plays(self, manager, started_game):
        """Three players submit at once; every card lands exactly once."""
        manager.register(started_game)
        judge = started_game.current_judge()
        players = [p for p in started_game.players if p is not judge]
        barrier = threading.Barrier(len(players))
        errors = []

        def play(player_id, card_id):
            barrier.wait()
            try:
                with manager.transaction(started_game.game_id) as game:
                    game.play_card(player_id, card_id)
            except Exception as e:
                errors.append(e)

        threads = [
            threading.Thread(target=play, args=(p.player_id, p.hand.cards[0].card_id))
            for p in players
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        stored = manager.store.get(started_game.game_id)
        assert stored.phase == GamePhase.JUDGING
        assert stored.current_round.submission_count == 3

    def test_concurrent_joins_respect_capacity(self, manager, new_game):
        """Ten joiners race for seven seats."""
        manager.register(new_game)
        results = []
        lock = threading.Lock()

        def join(name):
            try:
                with manager.transaction(new_game.game_id) as game:
                    game.add_player(name)
                outcome = "ok"
            except CapacityExceeded:
                outcome = "full"
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=join, args=(f"J{i}",)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 7
        assert results.count("full") == 3
        assert manager.store.get(new_game.game_id).player_count == 8


class TestCleanup:
    """Tests for eviction."""

    def test_evict_keeps_stored_copy(self, manager, new_game):
        manager.register(new_game)
        manager.evict(new_game.game_id)
        assert not manager.is_live(new_game.game_id)
        with manager.transaction(new_game.game_id, readonly=True) as game:
            assert game.game_id == new_game.game_id

    def test_cleanup_idle_sessions(self, manager, new_game, make_game):
        manager.register(new_game)
        other = make_game()
        manager.register(other)
        manager._last_used[new_game.game_id] -= 7200
        assert manager.cleanup_stale_sessions(max_idle_seconds=3600) == [new_game.game_id]
        assert manager.list_active_sessions() == [other.game_id]

    def test_cleanup_finished_games(self, manager, make_game, play_all):
        game = make_game(winning_score=1)
        manager.register(game)
        with manager.transaction(game.game_id) as live:
            play_all(live)
            live.select_winner(
                live.current_judge().player_id, next(iter(live.current_round.submissions))
            )
        assert manager.list_active_sessions() == []
        assert manager.cleanup_stale_sessions() == [game.game_id]


class TestLocks:
    """Per-game locks do not outlive their games."""

    def test_unknown_ids_leave_no_lock(self, manager):
        for i in range(1000):
            with pytest.raises(GameNotFound):
                with manager.transaction(f"bogus-{i}"):
                    pass
        assert manager._locks == {}
        assert manager._lock_users == {}

    def test_live_game_keeps_lock(self, manager, new_game):
        manager.register(new_game)
        with manager.transaction(new_game.game_id):
            pass
        assert list(manager._locks) == [new_game.game_id]

    def test_evict_releases_lock(self, manager, new_game):
        manager.register(new_game)
        manager.evict(new_game.game_id)
        assert manager._locks == {}

    def test_failed_transaction_releases_lock(self, manager, new_game):
        manager.register(new_game)
        with pytest.raises(RuntimeError):
            with manager.transaction(new_game.game_id):
                raise RuntimeError("boom")
        assert manager._locks == {}

    def test_cleanup_releases_locks(self, manager, make_game):
        game = make_game()
        manager.register(game)
        manager._last_used[game.game_id] -= 7200
        manager.cleanup_stale_sessions(max_idle_seconds=3600)
        assert manager._locks == {}
        assert manager._lock_users == {}

    def test_lock_held_across_eviction(self, manager, new_game):
        """An evict from another thread waits for the running transaction."""
        manager.register(new_game)
        entered = threading.Event()
        release = threading.Event()

        def hold():
            with manager.transaction(new_game.game_id):
                entered.set()
                release.wait(5)

        holder = threading.Thread(target=hold)
        holder.start()
        entered.wait(5)
        evictor = threading.Thread(target=manager.evict, args=(new_game.game_id,))
        evictor.start()
        evictor.join(0.1)
        assert evictor.is_alive()
        assert manager.is_live(new_game.game_id)
        release.set()
        holder.join(5)
        evictor.join(5)
        assert not manager.is_live(new_game.game_id)
        assert manager._locks == {}
