"""
Round Engine
============

Main game orchestrator combining spawning, motion, scoring, clock and outcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from balloon_pop.round_core.audio import AudioSink, emit_pop_tone
from balloon_pop.round_core.config_loader import GameConfig, get_config
from balloon_pop.round_core.motion import advance_balloons
from balloon_pop.round_core.outcome import Outcome, classify_outcome
from balloon_pop.round_core.rng import BalloonSpawner, RandomSource
from balloon_pop.round_core.rules import ClockResult, RoundClock
from balloon_pop.round_core.scoring import ComboScorer, PopEvent
from balloon_pop.round_core.state import Balloon, Phase, RoundState
from balloon_pop.round_core.state_snapshot import RoundSnapshot, SnapshotBuilder
from balloon_pop.round_core.timer import TickTimer

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[RoundSnapshot], None]


@dataclass
class TickResult:
    """Result of a single round tick (move, spawn, clock)."""
    snapshot: RoundSnapshot
    exited: List[Balloon] = field(default_factory=list)
    spawned: Optional[Balloon] = None
    clock: Optional[ClockResult] = None

    @property
    def ticked(self) -> bool:
        return self.clock is not None and self.clock.ticked

    @property
    def completed(self) -> bool:
        return self.clock is not None and self.clock.completed


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RoundEngine:
    """
    One balloon-pop round.

    Orchestrates:
    - Spawner (RNG)
    - Motion / lifecycle
    - Tap scoring with combo window
    - Countdown clock and phase
    - Outcome classification
    - Snapshots for subscribers

    One tick = move all balloons, drop exited ones, maybe spawn, decrement
    the clock. Taps are applied between ticks. Every tick and tap runs to
    completion before the snapshot is published.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[RandomSource] = None,
        audio: Optional[AudioSink] = None,
        time_source: Optional[Callable[[], float]] = None,
        on_complete: Optional[Callable[[], None]] = None,
        on_back: Optional[Callable[[], None]] = None
    ):
        """
        Initialize an idle round.

        Args:
            config: Game configuration. Uses default if None.
            seed: Seed for the default random source.
            rng: Injected random source; overrides ``seed``.
            audio: Sink for pop tones. Silent if None.
            time_source: Returns the current time in milliseconds for taps
                without an explicit timestamp. Monotonic clock if None.
            on_complete: Called by complete() when the round was passed.
            on_back: Called by back() after teardown.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._audio = audio
        self._time_source = time_source or _monotonic_ms
        self._on_complete = on_complete
        self._on_back = on_back

        # Initialize subsystems
        self._spawner = BalloonSpawner(config, rng=rng, seed=seed)
        self._scorer = ComboScorer(config)
        self._clock = RoundClock(config)
        self._timer = TickTimer(config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Round state
        self._state: RoundState = self._clock.new_state()
        self._listeners: List[SnapshotListener] = []
        self._closed: bool = False

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def state(self) -> RoundState:
        """The live round state (do not mutate from outside the engine)."""
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def time_remaining(self) -> int:
        return self._state.time_remaining

    @property
    def combo(self) -> int:
        return self._state.combo

    @property
    def is_over(self) -> bool:
        """True once the countdown has expired."""
        return self._state.is_completed

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def timer(self) -> TickTimer:
        return self._timer

    @property
    def spawner(self) -> BalloonSpawner:
        return self._spawner

    @property
    def outcome(self) -> Optional[Outcome]:
        """Outcome of the round, once completed."""
        if not self._state.is_completed:
            return None
        return classify_outcome(self._state.score)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a snapshot listener.

        Args:
            listener: Called with a RoundSnapshot after every start, tick
                and successful tap.

        Returns:
            Callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> RoundSnapshot:
        """Build a snapshot of the current state."""
        return self._snapshot_builder.build(self._state)

    def _publish(self) -> RoundSnapshot:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Round control
    # ------------------------------------------------------------------

    def start(self, seed: Optional[int] = None) -> RoundSnapshot:
        """
        Start a new round, from any phase.

        Args:
            seed: Reseed the spawner's random source before starting.

        Returns:
            Snapshot of the fresh round.
        """
        if seed is not None:
            self._spawner.reseed(seed)

        self._closed = False
        self._clock.start(self._state)
        self._timer.start()
        logger.info("Round started: %ds", self._state.time_remaining)
        return self._publish()

    def tick(self) -> TickResult:
        """
        Advance the round by one tick.

        Inert unless the round is active.
        """
        if self._closed or not self._state.is_active:
            return TickResult(snapshot=self.snapshot())

        exited = advance_balloons(self._state, self._config)
        spawned = self._spawner.maybe_spawn(self._state)
        clock_result = self._clock.tick(self._state)

        if clock_result.completed:
            self._timer.cancel()

        snapshot = self._publish()
        return TickResult(
            snapshot=snapshot,
            exited=exited,
            spawned=spawned,
            clock=clock_result
        )

    def update(self, dt: float) -> int:
        """
        Feed elapsed wall time and run every due tick.

        Args:
            dt: Seconds since the previous update.

        Returns:
            Number of ticks run.
        """
        ran = 0
        for _ in range(self._timer.advance(dt)):
            if not self._state.is_active:
                break
            self.tick()
            ran += 1
        return ran

    def tap(self, balloon_id: int, now_ms: Optional[float] = None) -> Optional[PopEvent]:
        """
        Tap a balloon.

        Ignored while idle or completed, after close(), or when the balloon
        is no longer live.

        Args:
            balloon_id: Id of the tapped balloon.
            now_ms: Tap timestamp in milliseconds. Uses the time source if None.

        Returns:
            PopEvent if the balloon was popped, else None.
        """
        if self._closed:
            return None

        if now_ms is None:
            now_ms = self._time_source()

        event = self._scorer.resolve_tap(self._state, balloon_id, now_ms)
        if event is None:
            return None

        emit_pop_tone(self._audio, event.combo, self._config)
        self._publish()
        return event

    def complete(self) -> bool:
        """
        Take the continue action.

        Returns:
            True if the round was passed and on_complete was invoked.
        """
        outcome = self.outcome
        if outcome is None or not outcome.can_continue:
            return False
        if self._on_complete is not None:
            self._on_complete()
        return True

    def back(self) -> None:
        """Tear the round down and hand control back to the host."""
        self.close()
        if self._on_back is not None:
            self._on_back()

    def close(self) -> None:
        """Cancel the timer and drop listeners; later ticks and taps are ignored."""
        self._timer.cancel()
        self._listeners.clear()
        self._closed = True

    def get_info(self) -> Dict[str, Any]:
        """Summary counters for logging and evaluation."""
        return {
            "phase": self._state.phase.value,
            "score": self._state.score,
            "time_remaining": self._state.time_remaining,
            "combo": self._state.combo,
            "ticks": self._state.tick_index,
            "balloons": len(self._state.balloons),
            "popped": self._state.popped_count,
            "escaped": self._state.escaped_count,
        }
