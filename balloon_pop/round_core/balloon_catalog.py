"""
Balloon Catalog
===============

Provides convenient access to balloon kind definitions loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Optional

from balloon_pop.round_core.config_loader import (
    GameConfig,
    BalloonKindConfig,
    get_config
)


@dataclass
class BalloonKind:
    """
    Runtime representation of a balloon kind.

    Wraps BalloonKindConfig with its position in the catalog.
    """
    index: int
    config: BalloonKindConfig

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def base_points(self) -> int:
        return self.config.base_points

    @property
    def size(self) -> int:
        return self.config.size

    @property
    def border_width(self) -> int:
        return self.config.border_width

    @property
    def threshold(self) -> float:
        return self.config.threshold

    def __repr__(self) -> str:
        return f"BalloonKind({self.name}: {self.base_points}pts)"


class BalloonCatalog:
    """
    Collection of all balloon kinds, ordered by draw threshold.

    The kinds partition [0, 1): a draw belongs to the first kind whose
    threshold exceeds it.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._kinds: Tuple[BalloonKind, ...] = tuple(
            BalloonKind(index, kind_config)
            for index, kind_config in enumerate(config.kinds)
        )

    def __len__(self) -> int:
        """Total number of kinds."""
        return len(self._kinds)

    def __getitem__(self, name: str) -> BalloonKind:
        """Get balloon kind by name."""
        for kind in self._kinds:
            if kind.name == name:
                return kind
        raise KeyError(f"Unknown balloon kind: {name}")

    def __iter__(self):
        """Iterate over all kinds in threshold order."""
        return iter(self._kinds)

    @property
    def all_kinds(self) -> Tuple[BalloonKind, ...]:
        return self._kinds

    def kind_for_draw(self, draw: float) -> BalloonKind:
        """
        Map a uniform draw in [0, 1) to a balloon kind.

        Args:
            draw: Value from the random source.

        Returns:
            The first kind whose threshold is above the draw.
        """
        for kind in self._kinds:
            if draw < kind.threshold:
                return kind
        # Draws at or above 1.0 only come from misbehaving sources
        return self._kinds[-1]

    def index_of(self, name: str) -> int:
        """Numeric id of a kind, used for array packing."""
        return self[name].index

