"""
Round State
===========

Balloon entities and the mutable per-round record shared by the spawner,
motion updater, tap resolver and clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple


class Phase(str, Enum):
    """Round phase. Transitions only move forward, except via start()."""
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Balloon:
    """
    A live balloon.

    Everything except ``y`` is fixed at spawn; motion produces a moved copy.
    """
    id: int
    x: float                     # Percent of field width
    y: float                     # Percent of field height
    speed: float                 # Field-height percent per tick
    size: int                    # Diameter in pixels
    color: Tuple[int, int, int]
    kind: str
    base_points: int

    def moved(self) -> "Balloon":
        """Return this balloon advanced by one tick of drift."""
        return replace(self, y=self.y - self.speed)


@dataclass
class RoundState:
    """
    Mutable state for one round.

    Owned by the engine and passed explicitly into every component
    operation.
    """
    time_remaining: int
    balloons: Dict[int, Balloon] = field(default_factory=dict)
    score: int = 0
    combo: int = 0
    last_pop_ms: Optional[float] = None
    phase: Phase = Phase.IDLE
    tick_index: int = 0
    popped_count: int = 0
    escaped_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.phase is Phase.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.phase is Phase.COMPLETED

    def reset(self, round_seconds: int) -> None:
        """Clear every field and enter the active phase."""
        self.balloons = {}
        self.score = 0
        self.combo = 0
        self.last_pop_ms = None
        self.time_remaining = round_seconds
        self.tick_index = 0
        self.popped_count = 0
        self.escaped_count = 0
        self.phase = Phase.ACTIVE
