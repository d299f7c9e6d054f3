"""
Shared fixtures: a scripted random source so spawner draws are exact.
"""

from typing import Iterable, List

import pytest

from balloon_pop.round_core.config_loader import load_config
from balloon_pop.round_core.state import Balloon


class ScriptedRandom:
    """
    Returns queued values from random(), then ``fallback`` forever.

    The default fallback is above the spawn probability, so an exhausted
    script never spawns.
    """

    def __init__(self, values: Iterable[float] = (), fallback: float = 0.99):
        self._values: List[float] = list(values)
        self._fallback = fallback
        self.calls = 0

    def push(self, *values: float) -> None:
        self._values.extend(values)

    def random(self) -> float:
        self.calls += 1
        if self._values:
            return self._values.pop(0)
        return self._fallback


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scripted():
    return ScriptedRandom()


def make_balloon(
    balloon_id: int,
    kind: str = "normal",
    base_points: int = 10,
    y: float = 50.0,
    speed: float = 1.0,
    x: float = 10.0
) -> Balloon:
    return Balloon(
        id=balloon_id,
        x=x,
        y=y,
        speed=speed,
        size=40,
        color=(255, 107, 157),
        kind=kind,
        base_points=base_points
    )


@pytest.fixture
def balloon_factory():
    return make_balloon
