"""
Scoring System
==============

Resolves taps into points, applying the combo time window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from balloon_pop.round_core.config_loader import GameConfig, get_config
from balloon_pop.round_core.state import RoundState

logger = logging.getLogger(__name__)


@dataclass
class PopEvent:
    """Record of a successful pop."""
    balloon_id: int
    kind: str
    base_points: int
    bonus: int
    combo: int       # Combo level after this pop
    now_ms: float

    @property
    def points(self) -> int:
        """Total points awarded for this pop."""
        return self.base_points + self.bonus

    def __repr__(self) -> str:
        if self.bonus:
            return f"PopEvent({self.kind}={self.base_points}+{self.bonus}, combo={self.combo})"
        return f"PopEvent({self.kind}={self.base_points})"


class ComboScorer:
    """
    Turns taps into score deltas.

    The combo is a pure time gate: a pop within ``window_ms`` of the previous
    pop extends it regardless of kind or position. The bonus is the combo
    level *before* the pop times ``bonus_per_level``:

    - first pop, or pop after a gap: combo -> 0, bonus 0
    - second rapid pop: bonus 0 * 5 = 0, combo -> 1
    - third rapid pop: bonus 1 * 5 = 5, combo -> 2
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize scorer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._window_ms = config.combo.window_ms
        self._bonus_per_level = config.combo.bonus_per_level

    @property
    def window_ms(self) -> float:
        return self._window_ms

    def is_rapid(self, state: RoundState, now_ms: float) -> bool:
        """True if a pop at ``now_ms`` falls inside the combo window."""
        if state.last_pop_ms is None:
            return False
        return now_ms - state.last_pop_ms < self._window_ms

    def resolve_tap(
        self,
        state: RoundState,
        balloon_id: int,
        now_ms: float
    ) -> Optional[PopEvent]:
        """
        Apply a tap to the round state.

        Taps outside the active phase and taps on balloons that are no longer
        live (exited, or already popped) are ignored.

        Args:
            state: Round state, updated in place.
            balloon_id: Id of the tapped balloon.
            now_ms: Timestamp of the tap in milliseconds.

        Returns:
            PopEvent for a successful pop, None if the tap was ignored.
        """
        if not state.is_active:
            logger.debug("Ignoring tap on %s: round is %s", balloon_id, state.phase.value)
            return None

        balloon = state.balloons.get(balloon_id)
        if balloon is None:
            logger.debug("Ignoring tap on %s: balloon not live", balloon_id)
            return None

        if self.is_rapid(state, now_ms):
            bonus = state.combo * self._bonus_per_level
            state.combo += 1
        else:
            bonus = 0
            state.combo = 0

        state.score += balloon.base_points + bonus
        state.last_pop_ms = now_ms
        del state.balloons[balloon_id]
        state.popped_count += 1

        return PopEvent(
            balloon_id=balloon_id,
            kind=balloon.kind,
            base_points=balloon.base_points,
            bonus=bonus,
            combo=state.combo,
            now_ms=now_ms
        )
