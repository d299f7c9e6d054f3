"""
Tests for round snapshots and their array packing.
"""

import pytest
import numpy as np

from balloon_pop.round_core.rules import RoundClock
from balloon_pop.round_core.state import Phase
from balloon_pop.round_core.state_snapshot import SnapshotBuilder


@pytest.fixture
def builder(config):
    return SnapshotBuilder(config)


@pytest.fixture
def state(config, balloon_factory):
    clock = RoundClock(config)
    state = clock.new_state()
    clock.start(state)
    state.balloons[7] = balloon_factory(7, "special", 50, y=80.0, x=20.0)
    state.balloons[3] = balloon_factory(3, "normal", 10, y=40.0, x=60.0)
    state.score = 35
    state.combo = 2
    return state


class TestSnapshot:
    """Test snapshot contents."""

    def test_fields(self, builder, state):
        snapshot = builder.build(state)

        assert snapshot.phase is Phase.ACTIVE
        assert snapshot.score == 35
        assert snapshot.combo == 2
        assert snapshot.time_remaining == 30
        assert snapshot.balloon_count == 2
        assert snapshot.outcome is None
        assert {b.id for b in snapshot.balloons} == {3, 7}

    def test_find(self, builder, state):
        snapshot = builder.build(state)
        view = snapshot.find(7)
        assert view.kind == "special"
        assert view.x == 20.0
        assert snapshot.find(99) is None

    def test_immutable(self, builder, state):
        snapshot = builder.build(state)
        with pytest.raises(AttributeError):
            snapshot.score = 1000

    def test_outcome_when_completed(self, builder, state):
        state.phase = Phase.COMPLETED
        state.time_remaining = 0
        snapshot = builder.build(state)
        assert snapshot.outcome is not None
        assert snapshot.outcome.score == 35
        assert snapshot.outcome.tier == 5


class TestArrays:
    """Test fixed-size numpy packing."""

    def test_shapes_and_mask(self, builder, state):
        arrays = builder.to_arrays(builder.build(state))
        max_b = builder.max_balloons

        assert arrays["obj_x"].shape == (max_b,)
        assert arrays["obj_color"].shape == (max_b, 3)
        assert arrays["obj_mask"].dtype == np.bool_
        assert int(arrays["obj_mask"].sum()) == 2
        assert int(arrays["balloon_count"]) == 2
        assert int(arrays["score"]) == 35

    def test_ordered_by_id(self, builder, state):
        arrays = builder.to_arrays(builder.build(state))

        assert list(arrays["obj_id"][:2]) == [3, 7]
        assert arrays["obj_points"][0] == 10
        assert arrays["obj_points"][1] == 50
        assert arrays["obj_y"][0] == pytest.approx(40.0)
        # Catalog order: special, bonus, normal
        assert arrays["obj_kind_id"][0] == 2
        assert arrays["obj_kind_id"][1] == 0
        assert arrays["obj_kind_id"][2] == -1

    def test_truncates_to_capacity(self, config, builder, balloon_factory):
        clock = RoundClock(config)
        state = clock.new_state()
        clock.start(state)
        for i in range(builder.max_balloons + 5):
            state.balloons[i] = balloon_factory(i)

        arrays = builder.to_arrays(builder.build(state))

        assert int(arrays["obj_mask"].sum()) == builder.max_balloons
        assert int(arrays["obj_id"][-1]) == builder.max_balloons - 1
