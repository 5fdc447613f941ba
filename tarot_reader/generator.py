"""Turns a Past/Present/Future spread into per-card interpretations and an overall narrative.

Generation is a pure function of the three (card, orientation) pairs and the
static tables; every random choice happens upstream, in the deck and the
reversal step.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from .cards import Card
from .catalog import SPREAD_POSITIONS, InterpretationCatalog
from .errors import InvalidArgument
from .models import DrawnCard, Reading, ReadingInterpretation
from .narrative import compose_overall, dominant_theme, intensity_score, intensity_tier

SPREAD_SIZE = len(SPREAD_POSITIONS)


def _validate_spread(cards: Optional[Sequence[Card]]) -> Sequence[Card]:
    if cards is None:
        raise InvalidArgument("Reading requires exactly 3 cards for Past/Present/Future, got None")
    try:
        count = len(cards)
    except TypeError:
        raise InvalidArgument(f"Expected a sequence of 3 cards, got {cards!r}") from None
    if count != SPREAD_SIZE:
        raise InvalidArgument(
            f"Reading requires exactly 3 cards for Past/Present/Future, got {count}"
        )
    for i, card in enumerate(cards):
        if not isinstance(card, Card):
            raise InvalidArgument(f"Spread position {i} holds {card!r}, not a Card")
    return cards


class ReadingGenerator:
    def __init__(self, catalog: InterpretationCatalog) -> None:
        self.catalog = catalog

    def generate(self, cards: Optional[Sequence[Card]]) -> ReadingInterpretation:
        spread = _validate_spread(cards)
        past, present, future = spread

        interpretations = tuple(
            self.catalog.meaning_for(card.identity, card.reversed, position)
            for card, position in zip(spread, SPREAD_POSITIONS)
        )
        return ReadingInterpretation(
            card_names=tuple(card.display_name() for card in spread),
            interpretations=interpretations,
            overall=compose_overall(past, present, future),
            dominant_theme=dominant_theme(spread),
            intensity=intensity_tier(intensity_score(spread)),
        )

    def create_reading(self, cards: Optional[Sequence[Card]], *, reading_id: str, timestamp: datetime) -> Reading:
        """Generate the interpretation and package it with snapshots of the cards."""
        interpretation = self.generate(cards)
        return Reading(
            id=reading_id,
            timestamp=timestamp,
            cards=tuple(DrawnCard.from_card(c, p) for c, p in zip(cards, SPREAD_POSITIONS)),
            interpretation=interpretation,
        )
