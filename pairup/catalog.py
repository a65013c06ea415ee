"""
Card Catalog - Supplies the card content used to build a game's decks.

The engine only cares about card identity, text and kind. Where the
text comes from is up to the catalog:
- StaticCardCatalog: content passed in code
- JsonCardCatalog: content read from a JSON file

Each call returns fresh Card objects so that two games never share
a card instance.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union
import json

from pydantic import BaseModel, Field, ValidationError

from .engine_core.cards import Card
from .engine_core.errors import InvalidArgument


class PromptEntry(BaseModel):
    text: str = Field(min_length=1, max_length=50)
    synonyms: Optional[str] = None


class ResponseEntry(BaseModel):
    text: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class CatalogFile(BaseModel):
    """Shape of a catalog JSON file."""
    prompts: list[PromptEntry] = Field(default_factory=list)
    responses: list[ResponseEntry] = Field(default_factory=list)


class CardCatalog(ABC):
    """Source of prompt and response card content."""

    @abstractmethod
    def prompt_cards(self) -> list[Card]:
        """Fresh prompt cards."""

    @abstractmethod
    def response_cards(self) -> list[Card]:
        """Fresh response cards."""


EntryLike = Union[str, tuple]


def _split(entry: EntryLike) -> tuple[str, str | None]:
    if isinstance(entry, str):
        return entry, None
    text, secondary = entry
    return text, secondary


class StaticCardCatalog(CardCatalog):
    """
    Catalog over in-memory text.

    Entries are either plain text or (text, secondary text) pairs.
    """

    def __init__(self, prompts: Sequence[EntryLike], responses: Sequence[EntryLike]):
        self._prompts = [_split(e) for e in prompts]
        self._responses = [_split(e) for e in responses]

    def prompt_cards(self) -> list[Card]:
        return [Card.prompt(text, synonyms) for text, synonyms in self._prompts]

    def response_cards(self) -> list[Card]:
        return [Card.response(text, description) for text, description in self._responses]

    @property
    def prompt_count(self) -> int:
        return len(self._prompts)

    @property
    def response_count(self) -> int:
        return len(self._responses)


class JsonCardCatalog(StaticCardCatalog):
    """
    Catalog loaded from a JSON file.

    File format:
        {"prompts": [{"text": "Spooky", "synonyms": "eerie, creepy"}],
         "responses": [{"text": "My Neighbor", "description": "..."}]}
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        model = load_catalog_file(self.path)
        super().__init__(
            prompts=[(e.text, e.synonyms) for e in model.prompts],
            responses=[(e.text, e.description) for e in model.responses],
        )


def load_catalog_file(path: str | Path) -> CatalogFile:
    """Read and validate a catalog file; raises InvalidArgument on bad content."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidArgument(f"Catalog file {path} is not valid JSON: {e}") from e
    try:
        return CatalogFile.model_validate(raw)
    except ValidationError as e:
        raise InvalidArgument(f"Catalog file {path} is invalid: {e}") from e


def placeholder_catalog(prompts: int = 20, responses: int = 50) -> StaticCardCatalog:
    """Numbered stand-in cards for simulations and tests."""
    return StaticCardCatalog(
        prompts=[f"Prompt {i}" for i in range(1, prompts + 1)],
        responses=[f"Response {i}" for i in range(1, responses + 1)],
    )
