"""
Configuration - Settings read from the environment.

Variables:
    PAIRUP_ENV            deployment name (default: development)
    PAIRUP_STORE_DIR      directory for FileGameStore; unset uses memory
    PAIRUP_CARDS_FILE     catalog JSON file; unset means no catalog
    PAIRUP_LOG_LEVEL      logging level name (default: INFO)
    PAIRUP_WINNING_SCORE  default points to win (default: 7)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping
import logging
import os

from .engine_core.errors import InvalidArgument
from .engine_core.game import validate_winning_score
from .engine_core.values import STANDARD_WINNING_SCORE


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    store_dir: str | None = None
    cards_file: str | None = None
    log_level: str = "INFO"
    default_winning_score: int = STANDARD_WINNING_SCORE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        environ = os.environ if environ is None else environ
        raw_score = environ.get("PAIRUP_WINNING_SCORE", str(STANDARD_WINNING_SCORE))
        try:
            score = int(raw_score)
        except ValueError:
            raise InvalidArgument(f"PAIRUP_WINNING_SCORE must be an integer, got {raw_score!r}")
        return cls(
            env=environ.get("PAIRUP_ENV", "development"),
            store_dir=environ.get("PAIRUP_STORE_DIR") or None,
            cards_file=environ.get("PAIRUP_CARDS_FILE") or None,
            log_level=environ.get("PAIRUP_LOG_LEVEL", "INFO").upper(),
            default_winning_score=validate_winning_score(score),
        )

    def build_store(self):
        from .store import FileGameStore, MemoryGameStore
        if self.store_dir:
            return FileGameStore(self.store_dir)
        return MemoryGameStore()

    def build_catalog(self):
        if not self.cards_file:
            return None
        from .catalog import JsonCardCatalog
        return JsonCardCatalog(self.cards_file)


def configure_logging(level: str = "INFO"):
    """Set up root logging once, for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
