"""Tests for the session engine: readings, history, deck management and recovery."""

from datetime import datetime, timedelta

import pytest

from tarot_reader.catalog import DATA_PATH, InterpretationCatalog, get_catalog
from tarot_reader.config import REPO_ROOT, Settings
from tarot_reader.errors import InvalidArgument, NotReady
from tarot_reader.session import (
    EngineState,
    SessionOrchestrator,
    apply_reversals,
    format_uptime,
)
from tarot_reader.utils.rng import seeded_random

START = datetime(2025, 3, 14, 9, 0, 0)


class FakeClock:
    def __init__(self, start=START):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def make_engine(seed=42, probability=0.3, clock=None):
    return SessionOrchestrator(
        get_catalog(), seed=seed, reversal_probability=probability, clock=clock or FakeClock()
    )


def card(number, reversed_=False):
    c = get_catalog().card_for(number)
    c.set_orientation(reversed_)
    return c


def _boom(*args, **kwargs):
    raise RuntimeError("interpretation service exploded")


class TestInitialization:

    def test_ready_after_init(self):
        engine = make_engine()
        assert engine.state is EngineState.READY
        assert engine.is_ready()
        assert not engine.has_error()
        assert engine.last_error is None
        assert engine.deck.size() == 22

    def test_incomplete_catalog_refuses_to_start(self):
        partial = InterpretationCatalog(get_catalog().entries()[:21])
        with pytest.raises(NotReady, match="21 of 22"):
            SessionOrchestrator(partial)

    def test_bad_probability_rejected(self):
        with pytest.raises(InvalidArgument):
            make_engine(probability=1.5)
        with pytest.raises(InvalidArgument):
            make_engine(probability=-0.1)


class TestPerformReading:

    def test_successful_reading_is_recorded(self):
        engine = make_engine()
        result = engine.perform_reading()

        assert result.success
        assert result.message == "Reading completed successfully"
        assert result.has_reading
        assert result.error is None
        assert engine.session_readings() == (result.reading,)
        assert engine.last_reading() is result.reading
        assert engine.session_stats().total_readings == 1
        assert engine.state is EngineState.READY

    def test_reading_has_three_distinct_cards(self):
        engine = make_engine()
        for _ in range(10):
            reading = engine.perform_reading().reading
            assert len({c.identity for c in reading.cards}) == 3

    def test_same_seed_same_readings(self):
        a = make_engine(seed=42)
        b = make_engine(seed=42)
        for _ in range(4):
            ra = a.perform_reading().reading
            rb = b.perform_reading().reading
            assert ra.id == rb.id
            assert ra.cards == rb.cards
            assert ra.interpretation == rb.interpretation

    def test_no_reversals_when_probability_zero(self):
        engine = make_engine(seed=42, probability=0.0)
        reading = engine.perform_reading().reading
        assert all(not c.reversed for c in reading.cards)
        for c in reading.cards:
            assert c.display_name in reading.interpretation.overall

    def test_every_card_reversed_when_probability_one(self):
        engine = make_engine(probability=1.0)
        reading = engine.perform_reading().reading
        assert all(c.reversed for c in reading.cards)

    def test_ids_are_unique_within_a_second(self):
        engine = make_engine()
        ids = [engine.perform_reading().reading.id for _ in range(3)]
        assert ids == [
            "R20250314-090000-001",
            "R20250314-090000-002",
            "R20250314-090000-003",
        ]

    def test_deck_reshuffles_silently_across_eight_readings(self):
        engine = make_engine()
        sizes = []
        for _ in range(8):
            assert engine.perform_reading().success
            sizes.append(engine.deck.size())
        assert sizes == [19, 16, 13, 10, 7, 4, 1, 19]
        stats = engine.session_stats()
        assert stats.deck_resets == 0
        assert stats.total_readings == 8

    def test_perform_readings_batch(self):
        engine = make_engine()
        results = engine.perform_readings(3)
        assert [r.success for r in results] == [True, True, True]
        assert len(engine.session_readings()) == 3

    @pytest.mark.parametrize("count", [0, -2, True, 2.0])
    def test_perform_readings_rejects_bad_count(self, count):
        with pytest.raises(InvalidArgument):
            make_engine().perform_readings(count)


class TestHistory:

    def test_clear_history_keeps_total(self):
        engine = make_engine()
        engine.perform_readings(5)

        result = engine.clear_history()

        assert result.success
        assert result.message == "Cleared 5 readings from session history."
        stats = engine.session_stats()
        assert stats.readings_in_history == 0
        assert stats.total_readings == 5
        assert engine.last_reading() is None

    def test_get_reading_bounds(self):
        engine = make_engine()
        engine.perform_readings(2)
        assert engine.get_reading(0) is engine.session_readings()[0]
        assert engine.get_reading(1) is engine.last_reading()
        assert engine.get_reading(2) is None
        assert engine.get_reading(-1) is None
        assert engine.get_reading(True) is None

    def test_history_is_read_only_view(self):
        engine = make_engine()
        engine.perform_reading()
        view = engine.session_readings()
        assert isinstance(view, tuple)
        engine.perform_reading()
        assert len(view) == 1


class TestInterpretCards:

    def test_interprets_without_touching_deck_or_history(self):
        engine = make_engine()
        spread = [card(0), card(13, True), card(21)]

        reading = engine.interpret_cards(spread)

        assert reading.summary() == "Past: The Fool | Present: Death (Reversed) | Future: The World"
        assert engine.deck.size() == 22
        assert engine.session_readings() == ()
        assert engine.session_stats().total_readings == 0
        assert [c.reversed for c in spread] == [False, True, False]

    def test_wrong_count(self):
        engine = make_engine()
        with pytest.raises(InvalidArgument):
            engine.interpret_cards([card(0), card(1)])
        with pytest.raises(InvalidArgument):
            engine.interpret_cards(None)

    def test_after_shutdown(self):
        engine = make_engine()
        engine.shutdown()
        with pytest.raises(NotReady):
            engine.interpret_cards([card(0), card(1), card(2)])


class TestDeckManagement:

    def test_reset_deck_counts(self):
        engine = make_engine()
        engine.perform_reading()
        result = engine.reset_deck()
        assert result.success
        assert result.message == "Deck reset successfully. All 22 cards are now available."
        assert engine.deck.size() == 22
        assert engine.session_stats().deck_resets == 1

    def test_create_new_deck_counts_as_reset(self):
        engine = make_engine()
        old = engine.deck
        result = engine.create_new_deck()
        assert result.success
        assert engine.deck is not old
        assert engine.deck.size() == 22
        assert engine.session_stats().deck_resets == 1

    def test_failed_reset_enters_error(self, monkeypatch):
        engine = make_engine()
        monkeypatch.setattr(engine.deck, "reset", _boom)

        result = engine.reset_deck()

        assert not result.success
        assert result.error == "RuntimeError: interpretation service exploded"
        assert engine.state is EngineState.ERROR
        assert engine.last_error.startswith("Deck reset failed")
        assert engine.session_stats().deck_resets == 0


class TestErrorRecovery:

    def _broken_engine(self, monkeypatch):
        engine = make_engine()
        monkeypatch.setattr(engine.generator, "generate", _boom)
        result = engine.perform_reading()
        assert not result.success
        assert result.message == "Failed to perform reading: interpretation service exploded"
        return engine

    def test_failed_reading_enters_error(self, monkeypatch):
        engine = self._broken_engine(monkeypatch)
        assert engine.state is EngineState.ERROR
        assert engine.has_error()
        assert engine.last_error == "Reading failed: interpretation service exploded"
        assert engine.session_readings() == ()
        assert engine.session_stats().total_readings == 0

    def test_reading_refused_while_in_error(self, monkeypatch):
        engine = self._broken_engine(monkeypatch)
        monkeypatch.undo()
        result = engine.perform_reading()
        assert not result.success
        assert result.message == "Engine is not ready for reading. Current state: ERROR"

    def test_batch_stops_at_first_failure(self, monkeypatch):
        engine = make_engine()
        monkeypatch.setattr(engine.generator, "generate", _boom)
        results = engine.perform_readings(4)
        assert len(results) == 1
        assert not results[0].success

    def test_recover_from_error(self, monkeypatch):
        engine = self._broken_engine(monkeypatch)
        monkeypatch.undo()

        result = engine.recover_from_error()

        assert result.success
        assert result.message == "Successfully recovered from error state."
        assert engine.is_ready()
        assert engine.last_error is None
        assert engine.deck.size() == 22
        assert engine.perform_reading().success

    def test_recover_when_healthy_is_a_no_op(self):
        engine = make_engine()
        result = engine.recover_from_error()
        assert result.success
        assert result.message == "Engine is not in error state. No recovery needed."

    def test_reset_deck_clears_error(self, monkeypatch):
        engine = self._broken_engine(monkeypatch)
        monkeypatch.undo()
        assert engine.reset_deck().success
        assert engine.is_ready()
        assert engine.last_error is None

    def test_new_deck_clears_error(self, monkeypatch):
        engine = self._broken_engine(monkeypatch)
        monkeypatch.undo()
        assert engine.create_new_deck().success
        assert engine.is_ready()


class TestShutdown:

    def test_shutdown_is_terminal(self):
        engine = make_engine()
        engine.shutdown()

        assert engine.state is EngineState.SHUTDOWN
        assert not engine.is_ready()
        reading = engine.perform_reading()
        assert not reading.success
        assert reading.message == "Engine is not ready for reading. Current state: SHUTDOWN"
        for op in (engine.reset_deck, engine.create_new_deck, engine.recover_from_error):
            result = op()
            assert not result.success
            assert result.message == "Engine has been shut down"
        assert engine.state is EngineState.SHUTDOWN


class TestStatus:

    def test_stats_track_uptime(self):
        clock = FakeClock()
        engine = make_engine(clock=clock)
        clock.advance(minutes=75)
        stats = engine.session_stats()
        assert stats.session_start == START
        assert stats.uptime == "1h 15m"
        assert stats.uptime_seconds == 75 * 60

    def test_format_uptime(self):
        assert format_uptime(59) == "0 minutes"
        assert format_uptime(45 * 60) == "45 minutes"
        assert format_uptime(3700) == "1h 1m"

    def test_quick_status(self):
        engine = make_engine()
        engine.perform_reading()
        assert engine.quick_status() == "Engine: READY | 19/22 cards available (3 drawn) | Readings: 1"

    def test_engine_status_report(self):
        engine = make_engine()
        text = engine.engine_status()
        assert "TAROT SESSION ENGINE STATUS" in text
        assert "State: READY - Ready for readings" in text
        assert "Session Start: Mar 14, 2025 09:00" in text
        assert "Deck Status: 22/22 cards available (0 drawn)" in text
        assert "Interpretation catalog: 22 cards loaded, Ready: True" in text
        assert "LAST ERROR" not in text

    def test_engine_status_shows_last_error(self, monkeypatch):
        engine = make_engine()
        monkeypatch.setattr(engine.generator, "generate", _boom)
        engine.perform_reading()
        text = engine.engine_status()
        assert "State: ERROR - Error occurred" in text
        assert "LAST ERROR" in text
        assert "Reading failed: interpretation service exploded" in text


def test_reversal_rate_over_many_cards():
    cards = [card(i % 22) for i in range(2000)]
    apply_reversals(cards, seeded_random(99, "reversal"), 0.3)
    fraction = sum(c.reversed for c in cards) / len(cards)
    assert abs(fraction - 0.3) <= 0.05


class TestSettings:

    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.meanings_path == DATA_PATH
        assert settings.reversal_probability == 0.3
        assert settings.seed is None
        assert settings.log_level == "INFO"

    def test_overrides(self):
        settings = Settings.from_env({
            "TAROT_MEANINGS_PATH": "custom/meanings.json",
            "TAROT_REVERSAL_PROBABILITY": "0.5",
            "TAROT_SEED": "42",
            "TAROT_LOG_LEVEL": "debug",
        })
        assert settings.meanings_path == REPO_ROOT / "custom" / "meanings.json"
        assert settings.reversal_probability == 0.5
        assert settings.seed == "42"
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["lots", "1.2", "-0.1"])
    def test_bad_probability(self, value):
        with pytest.raises(InvalidArgument):
            Settings.from_env({"TAROT_REVERSAL_PROBABILITY": value})
