"""
Game Stores - Load and save whole Game aggregates.

Each game is stored as one serialized GameRecord document:
- MemoryGameStore keeps documents in a dict (tests, single process)
- FileGameStore writes one JSON file per game under a directory

Loading always rebuilds fresh objects from the document, so a loaded
game never shares state with the instance that was saved.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
import logging
import os
import tempfile
import threading
import uuid

from pydantic import ValidationError

from ..engine_core.errors import InvalidArgument
from ..engine_core.game import Game
from ..engine_core.phases import GameStatus
from ..engine_core.values import GameCode
from .exceptions import CorruptRecord, GameNotFound
from .mapping import from_record, to_record
from .records import GameRecord

logger = logging.getLogger(__name__)


ACTIVE_STATUSES = {GameStatus.WAITING_FOR_PLAYERS.value, GameStatus.IN_PROGRESS.value}


def _normalize_code(code: GameCode | str) -> str:
    if isinstance(code, GameCode):
        return code.value
    return GameCode.from_string(code).value


def _parse(document: str) -> GameRecord:
    try:
        return GameRecord.model_validate_json(document)
    except ValidationError as e:
        raise CorruptRecord(f"Stored game is not a valid record: {e}") from e


class GameStore(ABC):
    """
    Interface for game persistence.

    save() must be atomic per game: a concurrent reader sees either the
    previous document or the new one, never a mix.
    """

    @abstractmethod
    def get(self, game_id: str) -> Game | None:
        """Load a game by id, or None."""

    @abstractmethod
    def get_by_code(self, code: GameCode | str) -> Game | None:
        """Load a game by join code, or None."""

    @abstractmethod
    def save(self, game: Game):
        """Insert or replace a game."""

    @abstractmethod
    def delete(self, game_id: str) -> bool:
        """Remove a game; returns whether it existed."""

    @abstractmethod
    def list_active(self) -> list[str]:
        """Ids of games that are waiting for players or in progress."""

    def require(self, game_id: str) -> Game:
        game = self.get(game_id)
        if game is None:
            raise GameNotFound(f"Game {game_id} not found.")
        return game

    def exists_by_code(self, code: GameCode | str) -> bool:
        return self.get_by_code(code) is not None


class MemoryGameStore(GameStore):
    """In-process store holding serialized documents."""

    def __init__(self):
        self._documents: dict[str, str] = {}
        self._codes: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, game_id: str) -> Game | None:
        with self._lock:
            document = self._documents.get(game_id)
        if document is None:
            return None
        return from_record(_parse(document))

    def get_by_code(self, code: GameCode | str) -> Game | None:
        with self._lock:
            game_id = self._codes.get(_normalize_code(code))
        if game_id is None:
            return None
        return self.get(game_id)

    def save(self, game: Game):
        document = to_record(game).model_dump_json()
        with self._lock:
            self._documents[game.game_id] = document
            self._codes[game.code.value] = game.game_id
        logger.debug("saved game %s (%d bytes)", game.game_id, len(document))

    def delete(self, game_id: str) -> bool:
        with self._lock:
            document = self._documents.pop(game_id, None)
            if document is None:
                return False
            self._codes = {c: gid for c, gid in self._codes.items() if gid != game_id}
        return True

    def list_active(self) -> list[str]:
        with self._lock:
            documents = list(self._documents.items())
        return [
            game_id for game_id, document in documents
            if _parse(document).status in ACTIVE_STATUSES
        ]


class FileGameStore(GameStore):
    """
    One JSON file per game.

    Usage:
        store = FileGameStore("~/.pairup/games")
        store.save(game)
        game = store.get_by_code("ABCDEF")
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory).expanduser()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, game_id: str) -> Path:
        """File for a game id; only canonical uuid strings are accepted."""
        try:
            canonical = str(uuid.UUID(game_id))
        except (TypeError, ValueError):
            canonical = None
        if canonical != game_id:
            raise InvalidArgument(f"Invalid game id: {game_id!r}")
        return self.directory / f"{game_id}.json"

    def _read(self, path: Path) -> GameRecord | None:
        try:
            document = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return _parse(document)

    def get(self, game_id: str) -> Game | None:
        record = self._read(self._path(game_id))
        return from_record(record) if record else None

    def get_by_code(self, code: GameCode | str) -> Game | None:
        wanted = _normalize_code(code)
        for path in self.directory.glob("*.json"):
            record = self._read(path)
            if record is not None and record.code == wanted:
                return from_record(record)
        return None

    def save(self, game: Game):
        document = to_record(game).model_dump_json(indent=2)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
            os.replace(tmp_name, self._path(game.game_id))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("saved game %s to %s", game.game_id, self.directory)

    def delete(self, game_id: str) -> bool:
        path = self._path(game_id)
        if not path.exists():
            return False
        path.unlink(missing_ok=True)
        return True

    def list_active(self) -> list[str]:
        active = []
        for path in sorted(self.directory.glob("*.json")):
            record = self._read(path)
            if record is not None and record.status in ACTIVE_STATUSES:
                active.append(record.game_id)
        return active
