"""
Motion / Lifecycle
==================

Advances live balloons by their own speed and removes the ones that have
drifted past the exit edge.
"""

from __future__ import annotations

from typing import List, Optional

from balloon_pop.round_core.config_loader import GameConfig, get_config
from balloon_pop.round_core.state import Balloon, RoundState


def has_exited(balloon: Balloon, exit_y: float) -> bool:
    """True once a balloon is at or beyond the exit edge."""
    return balloon.y <= exit_y


def advance_balloons(
    state: RoundState,
    config: Optional[GameConfig] = None
) -> List[Balloon]:
    """
    Move every live balloon one tick, then drop the ones that left the field.

    Exited balloons are removed without any score effect.

    Args:
        state: Round state whose balloon set is updated in place.
        config: Game configuration. Uses default if None.

    Returns:
        Balloons that exited this tick, at their final position.
    """
    if not state.is_active:
        return []

    if config is None:
        config = get_config()

    exit_y = config.field.exit_y
    survivors = {}
    exited: List[Balloon] = []

    for balloon_id, balloon in state.balloons.items():
        moved = balloon.moved()
        if has_exited(moved, exit_y):
            exited.append(moved)
        else:
            survivors[balloon_id] = moved

    state.balloons = survivors
    state.escaped_count += len(exited)
    return exited
