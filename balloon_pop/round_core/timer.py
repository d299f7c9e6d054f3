"""
Tick Timer
==========

Fixed-interval timer driven by elapsed wall time from the host loop.

The host calls ``advance(dt)`` every frame; the timer accumulates time and
reports how many whole ticks are due. A cancelled timer never reports ticks,
so a torn-down round cannot be mutated by a late frame.
"""

from __future__ import annotations

from typing import Optional

from balloon_pop.round_core.config_loader import GameConfig, get_config


class TickTimer:
    """
    Scoped fixed-interval timer.

    Usage:
        timer = TickTimer(config)
        timer.start()

        # each frame:
        for _ in range(timer.advance(dt)):
            engine.tick()

        # on teardown or round end:
        timer.cancel()
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize a stopped timer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._interval = config.clock.tick_seconds
        self._max_catch_up = config.timer.max_catch_up_ticks
        self._accumulator: float = 0.0
        self._running: bool = False

    @property
    def interval(self) -> float:
        """Seconds per tick."""
        return self._interval

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> float:
        """Seconds accumulated toward the next tick."""
        return self._accumulator

    def start(self) -> None:
        """Start (or restart) the timer from zero."""
        self._accumulator = 0.0
        self._running = True

    def cancel(self) -> None:
        """Stop the timer and drop any accumulated time."""
        self._accumulator = 0.0
        self._running = False

    def advance(self, dt: float) -> int:
        """
        Feed elapsed time and collect due ticks.

        Args:
            dt: Seconds since the previous call. Negative values are ignored.

        Returns:
            Number of ticks due now, at most ``max_catch_up_ticks``.
        """
        if not self._running or dt <= 0:
            return 0

        self._accumulator += dt

        # Limit to prevent a stalled host from burst-running the round
        limit = self._interval * self._max_catch_up
        if self._accumulator > limit:
            self._accumulator = limit

        due = 0
        while self._accumulator >= self._interval:
            self._accumulator -= self._interval
            due += 1
        return due
