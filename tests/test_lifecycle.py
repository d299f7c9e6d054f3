"""
Tests for balloon motion and removal at the exit edge.
"""

import pytest

from balloon_pop.round_core.motion import advance_balloons, has_exited
from balloon_pop.round_core.rules import RoundClock
from balloon_pop.round_core.state import Phase


@pytest.fixture
def state(config):
    clock = RoundClock(config)
    state = clock.new_state()
    clock.start(state)
    return state


class TestMotion:
    """Test per-tick drift."""

    def test_moves_by_own_speed(self, config, state, balloon_factory):
        state.balloons[1] = balloon_factory(1, y=110.0, speed=2.0)
        state.balloons[2] = balloon_factory(2, y=110.0, speed=0.5)

        advance_balloons(state, config)

        assert state.balloons[1].y == pytest.approx(108.0)
        assert state.balloons[2].y == pytest.approx(109.5)

    def test_immutable_attributes_preserved(self, config, state, balloon_factory):
        original = balloon_factory(5, kind="bonus", base_points=25, y=60.0, speed=1.5, x=33.0)
        state.balloons[5] = original

        advance_balloons(state, config)
        moved = state.balloons[5]

        assert moved.id == original.id
        assert moved.x == original.x
        assert moved.speed == original.speed
        assert moved.kind == original.kind
        assert moved.base_points == original.base_points
        assert moved.size == original.size
        assert moved.color == original.color

    def test_inert_when_not_active(self, config, state, balloon_factory):
        state.balloons[1] = balloon_factory(1, y=50.0)
        state.phase = Phase.COMPLETED

        assert advance_balloons(state, config) == []
        assert state.balloons[1].y == 50.0


class TestExit:
    """Test removal without score effect."""

    def test_exit_threshold(self, config, balloon_factory):
        assert has_exited(balloon_factory(1, y=-10.0), config.field.exit_y)
        assert not has_exited(balloon_factory(1, y=-9.99), config.field.exit_y)

    def test_exited_balloon_removed(self, config, state, balloon_factory):
        state.balloons[1] = balloon_factory(1, y=-9.0, speed=1.0)
        state.balloons[2] = balloon_factory(2, y=-8.5, speed=1.0)

        exited = advance_balloons(state, config)

        assert [b.id for b in exited] == [1]
        assert list(state.balloons) == [2]
        assert state.escaped_count == 1

    def test_exit_has_no_score_effect(self, config, state, balloon_factory):
        state.score = 40
        state.combo = 2
        state.balloons[1] = balloon_factory(1, y=-9.5, speed=2.0)

        advance_balloons(state, config)

        assert state.score == 40
        assert state.combo == 2
        assert state.balloons == {}

    def test_full_crossing(self, config, state, balloon_factory):
        """A balloon entering at the entry edge leaves after a bounded number of ticks."""
        state.balloons[1] = balloon_factory(1, y=config.field.entry_y, speed=2.0)

        ticks = 0
        while state.balloons:
            advance_balloons(state, config)
            ticks += 1

        # (110 - (-10)) / 2 = 60 ticks
        assert ticks == 60
