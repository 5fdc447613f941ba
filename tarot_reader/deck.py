"""Working deck of Major Arcana cards with draw / shuffle / auto-reshuffle."""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from .cards import MAJOR_ARCANA, ArcanaDefinition, Card
from .errors import InvalidArgument
from .utils.rng import Seed, fisher_yates, seeded_random

log = logging.getLogger("tarot_reader.deck")

MINIMUM_CARDS_FOR_READING = 3


class Deck:
    """Shuffled pool of unique cards, consumed as they are drawn.

    Whenever fewer than three cards remain the deck refills itself to the full
    set before handing out the next card, so a three-card reading can always
    be completed. That refill is silent; it is not an error and is not
    counted as a session reset.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        seed: Optional[Seed] = None,
        definitions: Sequence[ArcanaDefinition] = MAJOR_ARCANA,
    ) -> None:
        if rng is None:
            rng = seeded_random(seed)
        self._rng = rng
        self._full_set = tuple(definitions)
        self._available: List[Card] = []
        self.reset()

    @property
    def capacity(self) -> int:
        return len(self._full_set)

    @property
    def drawn_count(self) -> int:
        return self.capacity - len(self._available)

    def size(self) -> int:
        return len(self._available)

    def __len__(self) -> int:
        return len(self._available)

    def is_empty(self) -> bool:
        return not self._available

    def has_enough_for_reading(self) -> bool:
        return len(self._available) >= MINIMUM_CARDS_FOR_READING

    def draw(self) -> Card:
        if len(self._available) < MINIMUM_CARDS_FOR_READING:
            log.debug("auto-reshuffle: %d cards left", len(self._available))
            self.reset()
        return self._available.pop()

    def draw_many(self, count: int) -> List[Card]:
        """Draw count cards in order.

        For batches that fit in a full deck the refill check runs once up
        front, so the returned cards always come from the same shuffle.
        Larger batches fall back to repeated single draws.
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidArgument(f"Card count must be an integer, got {count!r}")
        if count < 0:
            raise InvalidArgument(f"Cannot draw negative number of cards: {count}")
        if count == 0:
            return []

        if count > self.capacity:
            return [self.draw() for _ in range(count)]

        if len(self._available) < max(count, MINIMUM_CARDS_FOR_READING):
            log.debug("auto-reshuffle before drawing %d: %d cards left", count, len(self._available))
            self.reset()
        return [self._available.pop() for _ in range(count)]

    def shuffle(self) -> None:
        fisher_yates(self._available, self._rng)

    def reset(self) -> None:
        self._available = [Card.from_definition(d) for d in self._full_set]
        self.shuffle()

    def peek(self) -> Optional[Card]:
        if not self._available:
            return None
        return self._available[-1]

    def available_cards(self) -> List[Card]:
        return list(self._available)

    def status(self) -> str:
        return f"Deck Status: {self.size()}/{self.capacity} cards available ({self.drawn_count} drawn)"

    def __repr__(self) -> str:
        return f"Deck[{self.size()}/{self.capacity} cards available]"
