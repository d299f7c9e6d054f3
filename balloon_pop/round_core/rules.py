"""
Round Rules
===========

Handles the countdown clock and the round phase transitions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from balloon_pop.round_core.config_loader import GameConfig, get_config
from balloon_pop.round_core.state import Phase, RoundState

logger = logging.getLogger(__name__)


@dataclass
class ClockResult:
    """Result of one clock tick."""
    ticked: bool
    time_remaining: int
    completed: bool

    @staticmethod
    def inert(state: RoundState) -> "ClockResult":
        return ClockResult(False, state.time_remaining, False)


class RoundClock:
    """
    Countdown clock and phase state machine.

    - start(): any phase -> active, with a full countdown
    - tick(): decrements while active; at 0 the round becomes completed
    - ticks in idle or completed do nothing
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize clock.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._round_seconds = config.clock.round_seconds

    @property
    def round_seconds(self) -> int:
        """Length of a round in ticks."""
        return self._round_seconds

    def new_state(self) -> RoundState:
        """Create an idle round state with a full countdown."""
        return RoundState(time_remaining=self._round_seconds)

    def start(self, state: RoundState) -> None:
        """Reset the round and enter the active phase (also restarts)."""
        state.reset(self._round_seconds)

    def tick(self, state: RoundState) -> ClockResult:
        """
        Advance the countdown by one tick.

        Args:
            state: Round state, updated in place.

        Returns:
            ClockResult describing what happened.
        """
        if not state.is_active:
            return ClockResult.inert(state)

        state.time_remaining = max(0, state.time_remaining - 1)
        state.tick_index += 1

        if state.time_remaining == 0:
            state.phase = Phase.COMPLETED
            logger.info("Round completed with score %d", state.score)
            return ClockResult(True, 0, True)

        return ClockResult(True, state.time_remaining, False)
