"""Tests for the periodic hide-from-observer controller."""

import pytest

from concealment.avoider import Avoider, AvoiderParams
from concealment.navigation import NavArea
from concealment.prng import PCG32
from concealment.types import InfiniteCostPolicy, Point3, Pose
from concealment.visibility import Observer, occluders_from_polygons

FLOOR = [(-10.0, -10.0), (10.0, -10.0), (10.0, 10.0), (-10.0, 10.0)]
# Long wall in front of the agent, from the observer's point of view.
WALL = [(-4.0, 1.0), (4.0, 1.0), (4.0, 2.0), (-4.0, 2.0)]


def _world(fov_deg=90.0, max_distance=20.0, obstacles=(WALL,)):
    nav = NavArea(FLOOR, obstacles=list(obstacles))
    observer = Observer(
        position=Point3(0.0, 0.0, -8.0),
        fov_deg=fov_deg,
        max_distance=max_distance,
        occluders=tuple(occluders_from_polygons(obstacles)),
    )
    return nav, observer


def _avoider(seed=3, **world_kwargs):
    nav, observer = _world(**world_kwargs)
    return Avoider(AvoiderParams(), observer, nav, rng=PCG32(seed))


AGENT = Pose(Point3(0.0, 0.0, 0.0))


class TestUpdate:
    def test_seen_agent_gets_a_hiding_spot(self):
        avoider = _avoider()
        decision = avoider.update(0.0, AGENT)

        assert decision.searched
        assert decision.result is not None and decision.result.found
        assert decision.destination is not None
        assert not avoider.observer.can_see(decision.destination)
        assert decision.next_update == pytest.approx(0.1)
        assert avoider.destination == decision.destination

    def test_waits_until_due(self):
        avoider = _avoider()
        first = avoider.update(0.0, AGENT)
        early = avoider.update(0.05, AGENT)
        assert not early.searched
        assert early.destination == first.destination
        assert early.next_update == first.next_update

    def test_unseen_agent_keeps_polling(self):
        avoider = _avoider()
        hidden_agent = Pose(Point3(0.0, 0.0, 5.0))  # behind the wall
        decision = avoider.update(2.0, hidden_agent)
        assert not decision.searched
        assert decision.destination is None
        assert decision.next_update == pytest.approx(2.1)

    def test_nowhere_to_hide_backs_off(self):
        avoider = _avoider(fov_deg=360.0, max_distance=100.0, obstacles=())
        decision = avoider.update(1.0, AGENT)
        assert decision.searched
        assert not decision.result.found
        assert decision.destination is None
        assert decision.next_update == pytest.approx(2.0)

    def test_failed_search_keeps_previous_destination(self):
        avoider = _avoider()
        first = avoider.update(0.0, AGENT)
        # Observer now sees everything.
        avoider.observer = Observer(
            position=Point3(0.0, 0.0, -8.0),
            fov_deg=360.0,
            max_distance=100.0,
        )
        later = avoider.update(1.0, AGENT)
        assert later.searched
        assert not later.result.found
        assert later.destination == first.destination


class TestParams:
    def test_defaults(self):
        p = AvoiderParams.from_dict(None)
        assert p.search_area_size == 10.0
        assert p.search_cell_size == 1.0
        assert p.poll_interval == 0.1
        assert p.retry_delay == 1.0
        assert p.infinite_cost is InfiniteCostPolicy.RANK_LAST

    def test_from_dict(self):
        p = AvoiderParams.from_dict(
            {"retry_delay": 2.5, "infinite_cost": "exclude"}
        )
        assert p.retry_delay == 2.5
        assert p.infinite_cost is InfiniteCostPolicy.EXCLUDE

    def test_rejects_non_positive_intervals(self):
        with pytest.raises(ValueError):
            AvoiderParams(poll_interval=0.0)
