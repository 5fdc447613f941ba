"""Session engine: owns the deck, runs readings, keeps history and recovers from errors.

State machine::

    INITIALIZING -> READY <-> PERFORMING_READING
    any state    -> ERROR    (failed reading / deck operation)
    ERROR        -> READY    (reset_deck, create_new_deck, recover_from_error)
    any state    -> SHUTDOWN (terminal)

A single engine assumes one caller at a time. Callers that share it across
threads (the HTTP layer does) must serialise access themselves.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .cards import Card
from .catalog import InterpretationCatalog, get_catalog
from .config import DEFAULT_REVERSAL_PROBABILITY
from .deck import Deck
from .errors import InvalidArgument, NotReady, OperationFailed
from .generator import SPREAD_SIZE, ReadingGenerator
from .models import OperationResult, Reading, SessionStats
from .utils.ids import ReadingIdGenerator
from .utils.rng import Seed, roll_reversals, seeded_random

log = logging.getLogger("tarot_reader.session")

STATUS_RULE = "═══"


class EngineState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    PERFORMING_READING = "performing_reading"
    ERROR = "error"
    SHUTDOWN = "shutdown"

    @property
    def description(self) -> str:
        return _STATE_DESCRIPTIONS[self]


_STATE_DESCRIPTIONS = {
    EngineState.INITIALIZING: "Initializing services...",
    EngineState.READY: "Ready for readings",
    EngineState.PERFORMING_READING: "Performing reading...",
    EngineState.ERROR: "Error occurred",
    EngineState.SHUTDOWN: "Engine shutdown",
}


def apply_reversals(cards: Sequence[Card], rng: random.Random, probability: float) -> Sequence[Card]:
    """Flip each card to reversed independently with the given probability."""
    for card, reversed_ in zip(cards, roll_reversals(len(cards), rng, probability)):
        if reversed_:
            card.set_orientation(True)
    return cards


def _check_probability(probability: float) -> float:
    if isinstance(probability, bool) or not isinstance(probability, (int, float)):
        raise InvalidArgument(f"Reversal probability must be a number, got {probability!r}")
    if not 0.0 <= probability <= 1.0:
        raise InvalidArgument(f"Probability must be between 0.0 and 1.0, got {probability}")
    return float(probability)


def format_uptime(seconds: float) -> str:
    minutes = int(seconds // 60)
    if minutes < 60:
        return f"{minutes} minutes"
    return f"{minutes // 60}h {minutes % 60}m"


class SessionOrchestrator:
    def __init__(
        self,
        catalog: Optional[InterpretationCatalog] = None,
        *,
        seed: Optional[Seed] = None,
        reversal_probability: float = DEFAULT_REVERSAL_PROBABILITY,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._reversal_probability = _check_probability(reversal_probability)
        self._clock = clock or datetime.now
        self.session_start = self._clock()
        self._seed = seed
        self._reversal_rng = seeded_random(seed, "reversal")
        self._ids = ReadingIdGenerator(clock=self._clock)
        self._history: List[Reading] = []
        self._total_readings = 0
        self._deck_resets = 0
        self._deck_generation = 0
        self._deck: Optional[Deck] = None
        self._state = EngineState.INITIALIZING
        self._last_error: Optional[str] = None

        try:
            self.catalog = catalog if catalog is not None else get_catalog()
            if not self.catalog.is_ready():
                raise NotReady(
                    f"Interpretation catalog failed to load properly "
                    f"({self.catalog.loaded_count} of 22 cards)"
                )
            self.generator = ReadingGenerator(self.catalog)
            self._deck = self._build_deck()
        except Exception as e:
            self._state = EngineState.ERROR
            self._last_error = f"Engine initialization failed: {e}"
            log.error("%s", self._last_error)
            if isinstance(e, NotReady):
                raise
            raise NotReady("Failed to initialize session engine") from e

        self._state = EngineState.READY
        log.info("Session engine ready (seed=%s, reversal_probability=%.2f)", seed, self._reversal_probability)

    def _build_deck(self) -> Deck:
        self._deck_generation += 1
        salt = "deck" if self._deck_generation == 1 else f"deck:{self._deck_generation}"
        return Deck(seeded_random(self._seed, salt))

    def _fail(self, last_error: str, message: str, error: Exception) -> OperationResult:
        self._state = EngineState.ERROR
        self._last_error = last_error
        return OperationResult.failure(message, error)

    def _clear_error(self) -> None:
        if self._state is EngineState.ERROR:
            self._state = EngineState.READY
            self._last_error = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def deck(self) -> Optional[Deck]:
        return self._deck

    @property
    def reversal_probability(self) -> float:
        return self._reversal_probability

    def is_ready(self) -> bool:
        return self._state is EngineState.READY

    def has_error(self) -> bool:
        return self._state is EngineState.ERROR

    def perform_reading(self) -> OperationResult:
        if self._state is not EngineState.READY:
            return OperationResult.failure(
                f"Engine is not ready for reading. Current state: {self._state.name}"
            )

        try:
            self._state = EngineState.PERFORMING_READING
            cards = self._deck.draw_many(SPREAD_SIZE)
            if len(cards) != SPREAD_SIZE or len(set(cards)) != SPREAD_SIZE:
                raise OperationFailed(f"Deck returned an invalid spread: {cards!r}")
            apply_reversals(cards, self._reversal_rng, self._reversal_probability)
            timestamp = self._ids.now()
            reading = self.generator.create_reading(
                cards, reading_id=self._ids.next_id(timestamp), timestamp=timestamp
            )
        except Exception as e:
            log.exception("Reading failed")
            return self._fail(f"Reading failed: {e}", f"Failed to perform reading: {e}", e)

        self._history.append(reading)
        self._total_readings += 1
        self._state = EngineState.READY
        self._last_error = None
        log.info("Reading %s: %s", reading.id, reading.summary())
        return OperationResult.ok("Reading completed successfully", reading)

    def perform_readings(self, count: int) -> List[OperationResult]:
        """Run count readings back to back, stopping at the first failure."""
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise InvalidArgument(f"Count must be at least 1, got {count!r}")
        results = []
        for _ in range(count):
            result = self.perform_reading()
            results.append(result)
            if not result.success:
                break
        return results

    def interpret_cards(self, cards: Sequence[Card]) -> Reading:
        """Build a reading from caller-chosen cards.

        The cards are copied, so the caller's objects keep their orientation.
        Neither the deck nor the history is touched.
        """
        if self._state is EngineState.SHUTDOWN:
            raise NotReady("Engine has been shut down")
        if cards is None:
            raise InvalidArgument("Must provide exactly 3 cards for a reading")
        copies = [c.copy() if isinstance(c, Card) else c for c in cards]
        timestamp = self._ids.now()
        return self.generator.create_reading(
            copies, reading_id=self._ids.next_id(timestamp), timestamp=timestamp
        )

    def reset_deck(self) -> OperationResult:
        if self._state is EngineState.SHUTDOWN:
            return OperationResult.failure("Engine has been shut down")
        try:
            self._deck.reset()
        except Exception as e:
            log.exception("Deck reset failed")
            return self._fail(f"Deck reset failed: {e}", f"Failed to reset deck: {e}", e)

        self._deck_resets += 1
        self._clear_error()
        return OperationResult.ok(
            f"Deck reset successfully. All {self._deck.capacity} cards are now available."
        )

    def create_new_deck(self) -> OperationResult:
        if self._state is EngineState.SHUTDOWN:
            return OperationResult.failure("Engine has been shut down")
        try:
            self._deck = self._build_deck()
        except Exception as e:
            log.exception("New deck creation failed")
            return self._fail(
                f"New deck creation failed: {e}", f"Failed to create new deck: {e}", e
            )

        # counted the same as a reset in the session statistics
        self._deck_resets += 1
        self._clear_error()
        return OperationResult.ok("New deck created successfully.")

    def recover_from_error(self) -> OperationResult:
        if self._state is EngineState.SHUTDOWN:
            return OperationResult.failure("Engine has been shut down")
        if self._state is not EngineState.ERROR:
            return OperationResult.ok("Engine is not in error state. No recovery needed.")

        try:
            deck = self._build_deck()
            if not self.catalog.is_ready():
                raise NotReady("Interpretation catalog is not ready after recovery attempt")
        except Exception as e:
            log.exception("Recovery failed")
            self._last_error = f"Recovery failed: {e}"
            return OperationResult.failure(f"Recovery failed: {e}", e)

        self._deck = deck
        self._state = EngineState.READY
        self._last_error = None
        log.info("Recovered from error state")
        return OperationResult.ok("Successfully recovered from error state.")

    def clear_history(self) -> OperationResult:
        cleared = len(self._history)
        self._history.clear()
        return OperationResult.ok(f"Cleared {cleared} readings from session history.")

    def session_readings(self) -> Tuple[Reading, ...]:
        return tuple(self._history)

    def get_reading(self, index: int) -> Optional[Reading]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if index < 0 or index >= len(self._history):
            return None
        return self._history[index]

    def last_reading(self) -> Optional[Reading]:
        return self._history[-1] if self._history else None

    def session_stats(self) -> SessionStats:
        elapsed = max((self._clock() - self.session_start).total_seconds(), 0.0)
        return SessionStats(
            total_readings=self._total_readings,
            readings_in_history=len(self._history),
            deck_resets=self._deck_resets,
            session_start=self.session_start,
            uptime=format_uptime(elapsed),
            uptime_seconds=elapsed,
        )

    def shutdown(self) -> None:
        self._state = EngineState.SHUTDOWN
        log.info("Session engine shut down after %d readings", self._total_readings)

    def engine_status(self) -> str:
        stats = self.session_stats()
        lines = [
            f"{STATUS_RULE} TAROT SESSION ENGINE STATUS {STATUS_RULE}",
            f"State: {self._state.name} - {self._state.description}",
            f"Session Start: {self.session_start:%b} {self.session_start.day}, {self.session_start:%Y %H:%M}",
            f"Uptime: {stats.uptime}",
            "",
            f"{STATUS_RULE} SESSION STATISTICS {STATUS_RULE}",
            f"Total Readings: {stats.total_readings}",
            f"Readings in History: {stats.readings_in_history}",
            f"Deck Resets: {stats.deck_resets}",
            "",
            f"{STATUS_RULE} CURRENT DECK STATUS {STATUS_RULE}",
            self._deck.status() if self._deck is not None else "No deck available",
            "",
            f"{STATUS_RULE} SERVICE STATUS {STATUS_RULE}",
            self.catalog.status(),
        ]
        if self._last_error is not None:
            lines.extend(["", f"{STATUS_RULE} LAST ERROR {STATUS_RULE}", self._last_error])
        return "\n".join(lines) + "\n"

    def quick_status(self) -> str:
        if self._deck is None:
            return f"Engine: {self._state.name} | No deck available"
        deck_status = self._deck.status().replace("Deck Status: ", "")
        return f"Engine: {self._state.name} | {deck_status} | Readings: {self._total_readings}"
