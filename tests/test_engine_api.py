"""
Tests for the RoundEngine public API.
"""

import pytest

from balloon_pop.round_core.game import RoundEngine
from balloon_pop.round_core.state import Phase


class RecordingAudio:
    def __init__(self):
        self.tones = []

    def play_tone(self, frequency_hz, duration_s):
        self.tones.append((frequency_hz, duration_s))


class BrokenAudio:
    def play_tone(self, frequency_hz, duration_s):
        raise RuntimeError("no audio device")


@pytest.fixture
def engine(config, scripted):
    engine = RoundEngine(config=config, rng=scripted)
    yield engine
    engine.close()


def _place(engine, balloon_factory, *specs):
    """Put balloons straight into the live set: (id, kind, points)."""
    for balloon_id, kind, points in specs:
        engine.state.balloons[balloon_id] = balloon_factory(balloon_id, kind, points)


class TestRoundControl:
    """Test start, tick and phase handling."""

    def test_initially_idle(self, engine):
        assert engine.phase is Phase.IDLE
        assert engine.score == 0
        assert engine.time_remaining == 30
        assert engine.outcome is None

    def test_idle_tick_is_inert(self, engine):
        result = engine.tick()
        assert not result.ticked
        assert engine.time_remaining == 30

    def test_start_enters_active(self, engine):
        snapshot = engine.start()
        assert snapshot.phase is Phase.ACTIVE
        assert engine.timer.running

    def test_tick_order_move_spawn_clock(self, engine, scripted, balloon_factory):
        engine.start()
        engine.state.balloons[100] = balloon_factory(100, y=-9.5, speed=1.0)
        # spawn, kind, x, color, speed
        scripted.push(0.0, 0.5, 0.0, 0.0, 0.0)

        result = engine.tick()

        assert [b.id for b in result.exited] == [100]
        assert result.spawned is not None
        # The new balloon has not moved yet this tick
        assert engine.state.balloons[result.spawned.id].y == engine.config.field.entry_y
        assert engine.time_remaining == 29

    def test_round_expires(self, engine):
        engine.start()
        results = [engine.tick() for _ in range(30)]

        assert results[-1].completed
        assert not any(r.completed for r in results[:-1])
        assert engine.phase is Phase.COMPLETED
        assert engine.is_over
        assert not engine.timer.running

        assert not engine.tick().ticked
        assert engine.time_remaining == 0

    def test_restart_after_completion(self, engine, balloon_factory):
        engine.start()
        _place(engine, balloon_factory, (1, "special", 50))
        engine.tap(1, now_ms=0)
        for _ in range(30):
            engine.tick()

        snapshot = engine.start()

        assert snapshot.phase is Phase.ACTIVE
        assert snapshot.score == 0
        assert snapshot.combo == 0
        assert snapshot.time_remaining == 30
        assert snapshot.balloons == ()
        assert engine.timer.running


class TestTaps:
    """Test tap resolution through the engine."""

    def test_combo_scenario(self, engine, balloon_factory):
        engine.start()
        _place(engine, balloon_factory, (1, "normal", 10), (2, "normal", 10), (3, "bonus", 25))

        engine.tap(1, now_ms=0)
        assert (engine.score, engine.combo) == (10, 0)
        engine.tap(2, now_ms=500)
        assert (engine.score, engine.combo) == (20, 1)
        engine.tap(3, now_ms=1200)
        assert (engine.score, engine.combo) == (50, 2)

    def test_tap_while_idle_ignored(self, engine, balloon_factory):
        _place(engine, balloon_factory, (1, "normal", 10))
        assert engine.tap(1, now_ms=0) is None
        assert engine.score == 0

    def test_tap_after_completion_ignored(self, engine, balloon_factory):
        engine.start()
        for _ in range(30):
            engine.tick()
        _place(engine, balloon_factory, (1, "normal", 10))

        assert engine.tap(1, now_ms=0) is None
        assert engine.score == 0

    def test_uses_time_source(self, config, scripted, balloon_factory):
        now = [0.0]
        engine = RoundEngine(config=config, rng=scripted, time_source=lambda: now[0])
        engine.start()
        _place(engine, balloon_factory, (1, "normal", 10), (2, "normal", 10))

        engine.tap(1)
        now[0] = 400.0
        engine.tap(2)

        assert engine.combo == 1
        assert engine.state.last_pop_ms == 400.0

    def test_tone_frequency_follows_combo(self, config, scripted, balloon_factory):
        audio = RecordingAudio()
        engine = RoundEngine(config=config, rng=scripted, audio=audio)
        engine.start()
        _place(engine, balloon_factory, (1, "normal", 10), (2, "normal", 10), (3, "normal", 10))

        engine.tap(1, now_ms=0)
        engine.tap(2, now_ms=100)
        engine.tap(3, now_ms=200)
        engine.tap(99, now_ms=300)

        assert audio.tones == [(800, 0.1), (900, 0.1), (1000, 0.1)]

    def test_broken_audio_never_blocks_scoring(self, config, scripted, balloon_factory):
        engine = RoundEngine(config=config, rng=scripted, audio=BrokenAudio())
        engine.start()
        _place(engine, balloon_factory, (1, "special", 50))

        event = engine.tap(1, now_ms=0)

        assert event is not None
        assert engine.score == 50
        assert 1 not in engine.state.balloons


class TestSnapshots:
    """Test the subscription contract."""

    def test_published_on_start_tick_and_pop(self, engine, balloon_factory):
        received = []
        engine.subscribe(received.append)

        engine.start()
        _place(engine, balloon_factory, (1, "normal", 10))
        engine.tap(1, now_ms=0)
        engine.tap(1, now_ms=10)
        engine.tick()

        assert [s.phase for s in received] == [Phase.ACTIVE] * 3
        assert [s.score for s in received] == [0, 10, 10]
        assert received[-1].time_remaining == 29

    def test_unsubscribe(self, engine):
        received = []
        unsubscribe = engine.subscribe(received.append)
        engine.start()
        unsubscribe()
        engine.tick()
        assert len(received) == 1

    def test_snapshot_is_a_copy(self, engine, balloon_factory):
        engine.start()
        _place(engine, balloon_factory, (1, "normal", 10))
        snapshot = engine.snapshot()

        engine.tap(1, now_ms=0)

        assert snapshot.score == 0
        assert snapshot.find(1) is not None
        assert engine.snapshot().find(1) is None

    def test_outcome_only_when_completed(self, engine):
        engine.start()
        assert engine.snapshot().outcome is None
        for _ in range(30):
            engine.tick()
        assert engine.snapshot().outcome is not None


class TestOutcomeActions:
    """Test continue and back."""

    def test_passing_round_scenario(self, config, scripted, balloon_factory):
        completed = []
        engine = RoundEngine(config=config, rng=scripted, on_complete=lambda: completed.append(True))
        engine.start()
        for i in range(25):
            _place(engine, balloon_factory, (i + 1, "normal", 10))
        for i in range(25):
            engine.tap(i + 1, now_ms=i * 2000)
        assert engine.score == 250

        for _ in range(30):
            engine.tick()

        outcome = engine.outcome
        assert engine.phase is Phase.COMPLETED
        assert outcome.tier == 3
        assert outcome.label == "Great Popper!"
        assert outcome.can_continue
        assert engine.complete()
        assert completed == [True]

    def test_complete_refused_below_threshold(self, config, scripted):
        completed = []
        engine = RoundEngine(config=config, rng=scripted, on_complete=lambda: completed.append(True))
        engine.start()
        for _ in range(30):
            engine.tick()

        assert not engine.complete()
        assert completed == []

    def test_complete_refused_while_active(self, engine):
        engine.start()
        assert not engine.complete()

    def test_back_tears_down(self, config, scripted, balloon_factory):
        left = []
        engine = RoundEngine(config=config, rng=scripted, on_back=lambda: left.append(True))
        received = []
        engine.subscribe(received.append)
        engine.start()
        _place(engine, balloon_factory, (1, "normal", 10))

        engine.back()

        assert left == [True]
        assert not engine.timer.running
        assert engine.update(5.0) == 0
        assert engine.tap(1, now_ms=0) is None
        assert not engine.tick().ticked
        assert engine.time_remaining == 30
        assert len(received) == 1


class TestTimerDriven:
    """Test update(dt) driving ticks."""

    def test_ticks_on_interval(self, engine):
        engine.start()
        assert engine.update(0.5) == 0
        assert engine.update(0.5) == 1
        assert engine.time_remaining == 29

    def test_catch_up_is_capped(self, engine):
        engine.start()
        assert engine.update(10.0) == engine.config.timer.max_catch_up_ticks

    def test_no_ticks_before_start(self, engine):
        assert engine.update(3.0) == 0
        assert engine.phase is Phase.IDLE

    def test_stops_at_completion(self, engine):
        engine.start()
        total = 0
        for _ in range(100):
            total += engine.update(1.0)
        assert total == 30
        assert engine.phase is Phase.COMPLETED


class TestRoundProperties:
    """Whole-round invariants with a seeded spawner."""

    def test_tapped_or_exited_never_both(self, config):
        engine = RoundEngine(config=config, seed=42)
        engine.start()

        spawned, popped, exited = set(), set(), set()
        now_ms = 0.0
        tick = 0
        while not engine.is_over:
            # Tap every other live balloon on even ticks
            if tick % 2 == 0:
                for view in list(engine.snapshot().balloons)[::2]:
                    event = engine.tap(view.id, now_ms=now_ms)
                    if event is not None:
                        popped.add(event.balloon_id)
            result = engine.tick()
            exited.update(b.id for b in result.exited)
            if result.spawned is not None:
                spawned.add(result.spawned.id)
            now_ms += 1000.0
            tick += 1

        remaining = set(engine.state.balloons)
        assert spawned
        assert popped.isdisjoint(exited)
        assert popped | exited | remaining == spawned
        assert engine.state.popped_count == len(popped)
        assert engine.state.escaped_count == len(exited)

    def test_score_monotonic_and_frozen(self, config):
        engine = RoundEngine(config=config, seed=7)
        scores = []
        engine.subscribe(lambda s: scores.append(s.score))
        engine.start()

        now_ms = 0.0
        while not engine.is_over:
            for view in engine.snapshot().balloons:
                engine.tap(view.id, now_ms=now_ms)
                now_ms += 200.0
            engine.tick()
            now_ms += 1000.0

        final = engine.score
        assert scores == sorted(scores)
        for view in engine.snapshot().balloons:
            engine.tap(view.id, now_ms=now_ms)
        engine.tick()
        assert engine.score == final
