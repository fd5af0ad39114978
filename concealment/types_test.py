import math

import pytest

from concealment.types import (
    Candidate,
    InfiniteCostPolicy,
    Point2,
    Point3,
    Pose,
    SamplingRegion,
    SearchParams,
    SearchResult,
)


class TestPose:
    def test_identity_heading(self):
        pose = Pose(Point3(1.0, 2.0, 3.0))
        assert pose.transform_point(Point3(1.0, 0.0, 2.0)) == Point3(
            2.0, 2.0, 5.0
        )

    def test_quarter_turn(self):
        pose = Pose(Point3(0.0, 0.0, 0.0), yaw_deg=90.0)
        fwd = pose.forward
        assert fwd.x == pytest.approx(1.0)
        assert fwd.z == pytest.approx(0.0, abs=1e-12)
        # Local right is world -z after turning to face +x.
        p = pose.transform_point(Point3(1.0, 0.5, 0.0))
        assert p.x == pytest.approx(0.0, abs=1e-12)
        assert p.y == 0.5
        assert p.z == pytest.approx(-1.0)

    def test_dict_round_trip(self):
        pose = Pose(Point3(1.0, 0.0, -2.0), yaw_deg=30.0)
        assert Pose.from_dict(pose.to_dict()) == pose


def test_region_is_half_open():
    region = SamplingRegion(2.0, 1.0)
    assert region.contains(Point2(0.0, 0.0))
    assert region.contains(Point2(1.999, 0.999))
    assert not region.contains(Point2(2.0, 0.5))
    assert not region.contains(Point2(0.5, 1.0))
    assert not region.contains(Point2(-0.001, 0.5))


def test_point_distances():
    assert Point2(0, 0).distance_to(Point2(3, 4)) == 5.0
    assert Point3(1, 2, 2).length() == 3.0
    assert Point3(1, 5, 2).ground() == (1, 2)


class TestSearchResult:
    def test_not_found_is_falsy(self):
        r = SearchResult.not_found(samples_drawn=4, rejected_visible=4)
        assert not r
        assert r.position is None
        assert math.isinf(r.path_cost)
        assert r.to_dict() == {
            "found": False,
            "samples_drawn": 4,
            "rejected_unnavigable": 0,
            "rejected_visible": 4,
            "candidate_count": 0,
        }

    def test_unreachable_cost_serialized_as_null(self):
        pos = Point3(1.0, 0.0, 1.0)
        r = SearchResult(
            found=True,
            position=pos,
            candidates=(Candidate(pos, math.inf, 0),),
            samples_drawn=1,
        )
        assert r
        d = r.to_dict()
        assert d["path_cost"] is None
        assert d["position"] == {"x": 1.0, "y": 0.0, "z": 1.0}


class TestSearchParams:
    def test_defaults(self):
        assert SearchParams.from_dict(None) == SearchParams()
        assert SearchParams().infinite_cost is InfiniteCostPolicy.RANK_LAST

    def test_round_trip(self):
        p = SearchParams(
            region_size=6.0,
            cell_size=0.5,
            infinite_cost=InfiniteCostPolicy.EXCLUDE,
            seed=11,
            max_samples=40,
        )
        assert SearchParams.from_dict(p.to_dict()) == p

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            SearchParams.from_dict({"infinite_cost": "maybe"})
