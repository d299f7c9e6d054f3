"""
RNG - Balloon Spawner
=====================

Decides each tick whether a balloon enters the field and rolls its
attributes from an injectable random source.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Protocol

from balloon_pop.round_core.config_loader import GameConfig, get_config
from balloon_pop.round_core.balloon_catalog import BalloonCatalog
from balloon_pop.round_core.state import Balloon, RoundState

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with a ``random()`` returning floats in [0, 1)."""

    def random(self) -> float:
        ...


class BalloonSpawner:
    """
    Per-tick balloon spawner.

    Every draw goes through ``rng.random()`` in a fixed order:
    spawn decision, kind, x, color, speed. A scripted source therefore
    pins every attribute of the spawned balloon.

    Balloon ids come from a counter that survives restarts, so an id is
    never reused by the same spawner.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize spawner.

        Args:
            config: Game configuration. Uses default if None.
            rng: Random source. A ``random.Random(seed)`` if None.
            seed: Seed for the default random source.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = BalloonCatalog(config)
        self._rng = rng if rng is not None else random.Random(seed)
        self._next_id: int = 1

    @property
    def rng(self) -> RandomSource:
        return self._rng

    def reseed(self, seed: Optional[int]) -> None:
        """Replace the random source with a freshly seeded one."""
        self._rng = random.Random(seed)

    def should_spawn(self) -> bool:
        """Draw the per-tick spawn decision."""
        return self._rng.random() < self._config.spawn.probability

    def create_balloon(self) -> Balloon:
        """Roll a new balloon at the entry edge."""
        kind = self._catalog.kind_for_draw(self._rng.random())

        x = self._rng.random() * self._config.field.x_max

        palette = self._config.spawn.palette
        color_index = min(int(self._rng.random() * len(palette)), len(palette) - 1)

        speed_min = self._config.spawn.speed_min
        speed_max = self._config.spawn.speed_max
        speed = speed_min + self._rng.random() * (speed_max - speed_min)

        balloon = Balloon(
            id=self._next_id,
            x=x,
            y=self._config.field.entry_y,
            speed=speed,
            size=kind.size,
            color=palette[color_index],
            kind=kind.name,
            base_points=kind.base_points
        )
        self._next_id += 1
        return balloon

    def maybe_spawn(self, state: RoundState) -> Optional[Balloon]:
        """
        Run the spawn decision for one tick and add the balloon to the state.

        Args:
            state: Round state to add the balloon to.

        Returns:
            The spawned balloon, or None if the spawner declined.
        """
        if not state.is_active:
            return None

        if not self.should_spawn():
            return None

        balloon = self.create_balloon()
        state.balloons[balloon.id] = balloon
        logger.debug(
            "Spawned %s balloon %d at x=%.1f speed=%.2f",
            balloon.kind, balloon.id, balloon.x, balloon.speed
        )
        return balloon
