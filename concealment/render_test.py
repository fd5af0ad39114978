"""Tests for the Pillow debug renderers."""

from concealment import render
from concealment.scenario_io import builtin_scenario_path, load_scenario
from concealment.types import Point2


def test_render_samples_size_and_dots():
    img = render.render_samples([Point2(5.0, 5.0)], 10.0, 10.0, scale=20)
    assert img.size == (200, 200)
    assert img.getpixel((100, 100)) == render.SAMPLE
    assert img.getpixel((5, 5)) == render.BACKGROUND


def test_render_samples_flips_y():
    img = render.render_samples([Point2(1.0, 9.0)], 10.0, 10.0, scale=20)
    # y=9 is near the top of the image.
    assert img.getpixel((20, 20)) == render.SAMPLE


class TestRenderOutcome:
    def setup_method(self):
        self.scenario = load_scenario(builtin_scenario_path("courtyard"))
        self.outcome = self.scenario.find_hiding_spot()

    def test_size(self):
        img = render.render_outcome(self.scenario, self.outcome, scale=5)
        assert img.size == (100, 100)

    def test_chosen_spot_on_top(self):
        img = render.render_outcome(self.scenario, self.outcome, scale=5)
        p = self.outcome.result.position
        px = int((p.x + 10.0) * 5)
        py = int((10.0 - p.z) * 5)
        assert img.getpixel((px, py)) == render.CHOSEN

    def test_coverage_tint(self):
        img = render.render_outcome(self.scenario, self.outcome, scale=5)
        # Behind the observer: plain floor.
        assert img.getpixel((50, 97)) == render.FLOOR
        # Straight ahead of the observer: tinted.
        assert img.getpixel((50, 82)) != render.FLOOR

    def test_coverage_can_be_disabled(self):
        img = render.render_outcome(
            self.scenario, self.outcome, scale=5, show_coverage=False
        )
        assert img.getpixel((50, 82)) == render.FLOOR
