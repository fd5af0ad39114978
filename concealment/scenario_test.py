"""Tests for scenario wiring and JSON persistence."""

import pytest

from concealment.navigation import path_length
from concealment.scenario_io import (
    builtin_scenario_path,
    load_scenario,
    save_scenario_dict,
)
from concealment.types import InfiniteCostPolicy, Point3


@pytest.fixture
def courtyard():
    return load_scenario(builtin_scenario_path("courtyard"))


class TestLoad:
    def test_builtin_exists(self):
        assert builtin_scenario_path("courtyard").is_file()

    def test_fields(self, courtyard):
        assert courtyard.name == "courtyard"
        assert len(courtyard.nav.obstacles) == 2
        assert courtyard.observer.fov_deg == 90
        assert courtyard.search.seed == 7
        # One occluder per obstacle edge.
        assert len(courtyard.observer.occluders) == 8

    def test_round_trip(self, courtyard, tmp_path):
        path = tmp_path / "nested" / "courtyard.json"
        save_scenario_dict(courtyard.to_dict(), path)
        assert path.read_text().endswith("\n")
        reloaded = load_scenario(path)
        assert reloaded.to_dict() == courtyard.to_dict()


class TestFindHidingSpot:
    def test_agent_starts_in_view(self, courtyard):
        assert courtyard.agent_is_seen()

    def test_finds_hidden_spot(self, courtyard):
        outcome = courtyard.find_hiding_spot()
        assert outcome.result.found
        assert not courtyard.observer.can_see(outcome.result.position)

    def test_deterministic_by_seed(self, courtyard):
        a = courtyard.find_hiding_spot()
        b = courtyard.find_hiding_spot()
        assert a.result == b.result
        assert a.trace == b.trace

    def test_trace_records_both_outcomes(self, courtyard):
        outcome = courtyard.find_hiding_spot()
        visible = [t.visible for t in outcome.trace]
        assert any(visible)
        assert not all(visible)
        assert len(outcome.trace) == (
            outcome.result.samples_drawn
            - outcome.result.rejected_unnavigable
        )

    def test_route_matches_cost(self, courtyard):
        outcome = courtyard.find_hiding_spot()
        route = outcome.route
        assert route is not None
        assert route[0] == Point3(0.0, 0.0, 0.0)
        assert route[-1] == outcome.result.position
        assert path_length(route) == pytest.approx(outcome.result.path_cost)

    def test_outcome_dict(self, courtyard):
        d = courtyard.find_hiding_spot().to_dict()
        assert d["found"] is True
        assert d["route"][0] == {"x": 0.0, "y": 0.0, "z": 0.0}
        assert d["path_cost"] == pytest.approx(
            path_length([Point3.from_dict(p) for p in d["route"]])
        )

    def test_policy_override(self, courtyard):
        courtyard.search.infinite_cost = InfiniteCostPolicy.EXCLUDE
        outcome = courtyard.find_hiding_spot()
        assert outcome.result.found
        assert all(
            c.path_cost != float("inf") for c in outcome.result.candidates
        )

    def test_max_samples_limits_search(self, courtyard):
        courtyard.search.max_samples = 3
        outcome = courtyard.find_hiding_spot()
        assert outcome.result.samples_drawn <= 3
        assert len(outcome.trace) <= 3
