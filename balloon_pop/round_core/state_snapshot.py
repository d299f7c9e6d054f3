"""
State Snapshot
==============

Immutable views of the round state published to renderers, plus packing
into fixed-size numpy arrays for bots and array-based renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np

from balloon_pop.round_core.balloon_catalog import BalloonCatalog
from balloon_pop.round_core.config_loader import GameConfig, get_config
from balloon_pop.round_core.outcome import Outcome, classify_outcome
from balloon_pop.round_core.state import Balloon, Phase, RoundState


@dataclass(frozen=True)
class BalloonView:
    """What a renderer needs to draw one balloon."""
    id: int
    x: float
    y: float
    size: int
    color: Tuple[int, int, int]
    kind: str
    base_points: int

    @staticmethod
    def of(balloon: Balloon) -> "BalloonView":
        return BalloonView(
            id=balloon.id,
            x=balloon.x,
            y=balloon.y,
            size=balloon.size,
            color=balloon.color,
            kind=balloon.kind,
            base_points=balloon.base_points
        )


@dataclass(frozen=True)
class RoundSnapshot:
    """
    Read-only copy of the round state after a start, tick or tap.

    ``outcome`` is only set once the round is completed.
    """
    phase: Phase
    score: int
    time_remaining: int
    combo: int
    tick_index: int
    balloons: Tuple[BalloonView, ...]
    outcome: Optional[Outcome] = None

    @property
    def balloon_count(self) -> int:
        return len(self.balloons)

    def find(self, balloon_id: int) -> Optional[BalloonView]:
        """Look up a balloon by id."""
        for balloon in self.balloons:
            if balloon.id == balloon_id:
                return balloon
        return None

    def to_arrays(
        self,
        max_balloons: int,
        catalog: BalloonCatalog
    ) -> Dict[str, np.ndarray]:
        """
        Pack the balloon set into fixed-size arrays with a validity mask.

        Balloons beyond ``max_balloons`` are dropped, lowest ids first kept.

        Args:
            max_balloons: Length of every per-balloon array.
            catalog: Catalog used to map kind names to numeric ids.

        Returns:
            Dict of numpy arrays; scalars are 0-d arrays.
        """
        ids = np.zeros(max_balloons, dtype=np.int64)
        kind_id = np.full(max_balloons, -1, dtype=np.int16)
        xs = np.zeros(max_balloons, dtype=np.float32)
        ys = np.zeros(max_balloons, dtype=np.float32)
        sizes = np.zeros(max_balloons, dtype=np.float32)
        points = np.zeros(max_balloons, dtype=np.int32)
        colors = np.zeros((max_balloons, 3), dtype=np.uint8)
        mask = np.zeros(max_balloons, dtype=bool)

        ordered = sorted(self.balloons, key=lambda b: b.id)[:max_balloons]
        for i, balloon in enumerate(ordered):
            ids[i] = balloon.id
            kind_id[i] = catalog.index_of(balloon.kind)
            xs[i] = balloon.x
            ys[i] = balloon.y
            sizes[i] = balloon.size
            points[i] = balloon.base_points
            colors[i] = balloon.color
            mask[i] = True

        return {
            "score": np.array(self.score, dtype=np.int64),
            "time_remaining": np.array(self.time_remaining, dtype=np.int32),
            "combo": np.array(self.combo, dtype=np.int32),
            "balloon_count": np.array(len(ordered), dtype=np.int32),
            "obj_id": ids,
            "obj_kind_id": kind_id,
            "obj_x": xs,
            "obj_y": ys,
            "obj_size": sizes,
            "obj_points": points,
            "obj_color": colors,
            "obj_mask": mask,
        }


class SnapshotBuilder:
    """Builds round snapshots and their array form."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = BalloonCatalog(config)
        self._max_balloons = config.snapshot.max_balloons

    @property
    def max_balloons(self) -> int:
        return self._max_balloons

    def build(self, state: RoundState) -> RoundSnapshot:
        """Build a snapshot from the current round state."""
        outcome = classify_outcome(state.score) if state.is_completed else None
        return RoundSnapshot(
            phase=state.phase,
            score=state.score,
            time_remaining=state.time_remaining,
            combo=state.combo,
            tick_index=state.tick_index,
            balloons=tuple(BalloonView.of(b) for b in state.balloons.values()),
            outcome=outcome
        )

    def to_arrays(self, snapshot: RoundSnapshot) -> Dict[str, np.ndarray]:
        """Pack a snapshot using the configured array length."""
        return snapshot.to_arrays(self._max_balloons, self._catalog)
