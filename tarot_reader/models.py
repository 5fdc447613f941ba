from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, computed_field

from .cards import REVERSED_SUFFIX, Card
from .catalog import SPREAD_POSITIONS, Position
from .narrative import IntensityTier, Theme

BORDER = "═" * 39


class DrawnCard(BaseModel):
    """Snapshot of a card as it lay in a spread; later flips of the Card do not reach it."""

    model_config = ConfigDict(frozen=True)

    identity: int
    name: str
    reversed: bool = False
    meaning: str
    position: Position

    @classmethod
    def from_card(cls, card: Card, position: Position) -> "DrawnCard":
        return cls(
            identity=card.identity,
            name=card.name,
            reversed=card.reversed,
            meaning=card.current_meaning(),
            position=position,
        )

    @computed_field
    @property
    def display_name(self) -> str:
        return self.name + REVERSED_SUFFIX if self.reversed else self.name


class ReadingInterpretation(BaseModel):
    model_config = ConfigDict(frozen=True)

    card_names: Tuple[str, str, str]
    interpretations: Tuple[str, str, str]
    overall: str
    dominant_theme: Optional[Theme] = None
    intensity: IntensityTier = IntensityTier.GENTLE

    def __str__(self) -> str:
        blocks = [
            f"{pos.label.upper()}: {name}\n{text}"
            for pos, name, text in zip(SPREAD_POSITIONS, self.card_names, self.interpretations)
        ]
        return "\n\n".join(blocks) + "\n\nOVERALL READING:\n\n" + self.overall


class Reading(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: datetime
    cards: Tuple[DrawnCard, DrawnCard, DrawnCard]
    interpretation: ReadingInterpretation

    def card(self, position: Position) -> DrawnCard:
        return self.cards[SPREAD_POSITIONS.index(Position(position))]

    def formatted_timestamp(self) -> str:
        ts = self.timestamp
        hour = ts.hour % 12 or 12
        return f"{ts:%B} {ts.day}, {ts:%Y} at {hour}:{ts:%M %p}"

    def short_timestamp(self) -> str:
        return f"{self.timestamp:%m/%d/%Y %H:%M}"

    def summary(self) -> str:
        return " | ".join(f"{c.position.label}: {c.display_name}" for c in self.cards)

    def formatted_reading(self) -> str:
        lines = [
            BORDER,
            "           TAROT READING",
            BORDER,
            f"Reading ID: {self.id}",
            f"Date: {self.formatted_timestamp()}",
            BORDER,
            "",
        ]
        for c, text in zip(self.cards, self.interpretation.interpretations):
            lines.append(f"【 {c.position.label.upper()} 】")
            lines.append(f"Card: {c.display_name}")
            lines.append(text)
            lines.append("")
        lines.extend([
            BORDER,
            "OVERALL READING:",
            "",
            self.interpretation.overall,
            BORDER,
        ])
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return f"Reading[{self.id}] - {self.summary()}"


class OperationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
    reading: Optional[Reading] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, reading: Optional[Reading] = None) -> "OperationResult":
        return cls(success=True, message=message, reading=reading)

    @classmethod
    def failure(cls, message: str, error: Optional[BaseException] = None) -> "OperationResult":
        detail = f"{type(error).__name__}: {error}" if error is not None else None
        return cls(success=False, message=message, error=detail)

    @property
    def has_reading(self) -> bool:
        return self.reading is not None


class SessionStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_readings: int
    readings_in_history: int
    deck_resets: int
    session_start: datetime
    uptime: str
    uptime_seconds: float

    def __str__(self) -> str:
        return (
            f"SessionStats[readings={self.total_readings}, history={self.readings_in_history}, "
            f"resets={self.deck_resets}, uptime={self.uptime}]"
        )
