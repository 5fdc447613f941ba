"""Interpretation catalog: per-card keywords and position-aware meanings.

- Loads the catalog JSON from tarot_reader/data/card_meanings.json (or a
  caller-supplied path)
- Provides: meaning_for(), keywords_for(), name_for(), card_for()
- get_catalog() caches the default catalog for the life of the process
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .cards import Card
from .errors import InvalidArgument, NotFound, NotReady

log = logging.getLogger("tarot_reader.catalog")

DATA_PATH = Path(__file__).resolve().parent / "data" / "card_meanings.json"
EXPECTED_CARD_COUNT = 22


class Position(str, Enum):
    PAST = "past"
    PRESENT = "present"
    FUTURE = "future"
    GENERAL = "general"

    @property
    def label(self) -> str:
        return self.value.capitalize()


SPREAD_POSITIONS = (Position.PAST, Position.PRESENT, Position.FUTURE)


class OrientationMeaning(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    keywords: List[str] = Field(default_factory=list)
    general: str
    past: str = Field(..., alias="pastContext")
    present: str = Field(..., alias="presentContext")
    future: str = Field(..., alias="futureContext")

    def for_position(self, position: Position) -> str:
        if position is Position.PAST:
            return self.past
        if position is Position.PRESENT:
            return self.present
        if position is Position.FUTURE:
            return self.future
        return self.general


class CardMeaning(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    upright: OrientationMeaning
    reversed: OrientationMeaning

    def orientation(self, reversed_: bool) -> OrientationMeaning:
        return self.reversed if reversed_ else self.upright


class CatalogFile(BaseModel):
    major_arcana: List[CardMeaning] = Field(..., alias="majorArcana")


def _load_entries(path: Path) -> List[CardMeaning]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise NotReady(f"Card meanings file not found at: {path}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise NotReady(f"Invalid JSON in {path}: {e}") from e

    try:
        return CatalogFile.model_validate(data).major_arcana
    except ValidationError as e:
        raise NotReady(f"Card meanings in {path} do not match the expected schema: {e}") from e


class InterpretationCatalog:
    """Read-only lookup over the loaded card meanings."""

    def __init__(self, entries: Iterable[CardMeaning], source: Optional[Path] = None) -> None:
        self.source = source
        self._entries: Dict[int, CardMeaning] = {}
        for entry in entries:
            if entry.id in self._entries:
                raise NotReady(f"Duplicate card id in catalog: {entry.id}")
            self._entries[entry.id] = entry

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "InterpretationCatalog":
        p = Path(path) if path is not None else DATA_PATH
        catalog = cls(_load_entries(p), source=p)
        log.info("Loaded %d card meanings from %s", catalog.loaded_count, p)
        return catalog

    @property
    def loaded_count(self) -> int:
        return len(self._entries)

    def is_ready(self) -> bool:
        return (
            len(self._entries) == EXPECTED_CARD_COUNT
            and set(self._entries) == set(range(EXPECTED_CARD_COUNT))
        )

    def entry(self, identity: int) -> CardMeaning:
        try:
            return self._entries[identity]
        except (KeyError, TypeError):
            raise NotFound(f"No meaning found for arcana number: {identity}") from None

    def meaning_for(self, identity: int, reversed_: bool, position: Position = Position.GENERAL) -> str:
        try:
            pos = Position(position)
        except ValueError:
            raise InvalidArgument(f"Unknown position: {position!r}") from None
        return self.entry(identity).orientation(reversed_).for_position(pos)

    def keywords_for(self, identity: int, reversed_: bool) -> List[str]:
        return list(self.entry(identity).orientation(reversed_).keywords)

    def name_for(self, identity: int) -> str:
        return self.entry(identity).name

    def card_for(self, identity: int) -> Card:
        e = self.entry(identity)
        return Card(e.id, e.name, e.upright.general, e.reversed.general)

    def all_cards(self) -> List[Card]:
        return [self.card_for(i) for i in sorted(self._entries)]

    def entries(self) -> List[CardMeaning]:
        return [self._entries[i] for i in sorted(self._entries)]

    def status(self) -> str:
        return f"Interpretation catalog: {self.loaded_count} cards loaded, Ready: {self.is_ready()}"


_CATALOG_CACHE: Optional[InterpretationCatalog] = None


def get_catalog() -> InterpretationCatalog:
    global _CATALOG_CACHE
    if _CATALOG_CACHE is None:
        _CATALOG_CACHE = InterpretationCatalog.load()
    return _CATALOG_CACHE
