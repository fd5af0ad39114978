"""Debug images of sample sets and concealment searches (Pillow).

``render_samples`` draws a raw blue-noise sample set. ``render_outcome``
draws a whole search: the floor with its obstacles, the observer's
coverage (tinted from ``Observer.visible_mask`` evaluated at every pixel),
each navigable sample coloured red if the observer saw it and green if it
was hidden, the agent, the chosen spot and the walking route to it.

World x maps to image x and world z to image y, flipped so +z is up.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from PIL import Image, ImageDraw

from .scenario import Scenario, ScenarioOutcome
from .types import Point2, Point3

BACKGROUND = (30, 30, 30)
FLOOR = (70, 70, 70)
OBSTACLE = (140, 110, 80)
COVERAGE_TINT = (220, 200, 60)
SAMPLE = (230, 230, 230)
SEEN = (220, 60, 60)
HIDDEN = (60, 200, 90)
AGENT = (90, 150, 240)
OBSERVER = (240, 240, 90)
CHOSEN = (255, 255, 255)
ROUTE = (90, 150, 240)


def render_samples(
    points: Iterable[Point2],
    width: float,
    height: float,
    scale: float = 20.0,
    dot_radius: float = 2.0,
) -> Image.Image:
    """One dot per sample over a ``width`` x ``height`` region."""
    img_w = max(1, int(round(width * scale)))
    img_h = max(1, int(round(height * scale)))
    img = Image.new("RGB", (img_w, img_h), BACKGROUND)
    draw = ImageDraw.Draw(img)
    for p in points:
        px = p.x * scale
        py = (height - p.y) * scale
        r = dot_radius
        draw.ellipse([px - r, py - r, px + r, py + r], fill=SAMPLE)
    return img


class _Viewport:
    def __init__(
        self, bounds: tuple[float, float, float, float], scale: float
    ) -> None:
        self.min_x, self.min_z, self.max_x, self.max_z = bounds
        self.scale = scale
        self.width = max(1, int(round((self.max_x - self.min_x) * scale)))
        self.height = max(1, int(round((self.max_z - self.min_z) * scale)))

    def to_px(self, x: float, z: float) -> tuple[float, float]:
        return (
            (x - self.min_x) * self.scale,
            (self.max_z - z) * self.scale,
        )

    def pixel_centres(self, elevation: float) -> np.ndarray:
        """World-space (x, elevation, z) for every pixel, row-major."""
        cols = self.min_x + (np.arange(self.width) + 0.5) / self.scale
        rows = self.max_z - (np.arange(self.height) + 0.5) / self.scale
        xs, zs = np.meshgrid(cols, rows)
        ys = np.full_like(xs, elevation)
        return np.stack([xs.ravel(), ys.ravel(), zs.ravel()], axis=1)


def _dot(
    draw: ImageDraw.ImageDraw,
    view: _Viewport,
    p: Point3,
    radius: float,
    fill: tuple[int, int, int],
) -> None:
    px, py = view.to_px(p.x, p.z)
    r = radius
    draw.ellipse([px - r, py - r, px + r, py + r], fill=fill)


def render_outcome(
    scenario: Scenario,
    outcome: ScenarioOutcome,
    scale: float = 20.0,
    show_coverage: bool = True,
) -> Image.Image:
    nav = scenario.nav
    view = _Viewport(nav.walkable.bounds, scale)
    img = Image.new("RGB", (view.width, view.height), BACKGROUND)
    draw = ImageDraw.Draw(img)

    floor = nav.walkable
    polys = list(floor.geoms) if hasattr(floor, "geoms") else [floor]
    for poly in polys:
        draw.polygon(
            [view.to_px(x, z) for x, z in poly.exterior.coords], fill=FLOOR
        )
    for ring in nav.obstacles:
        draw.polygon([view.to_px(x, z) for x, z in ring], fill=OBSTACLE)

    if show_coverage:
        mask = scenario.observer.visible_mask(
            view.pixel_centres(nav.elevation)
        ).reshape(view.height, view.width)
        pixels = np.array(img, dtype=np.float64)
        tint = np.array(COVERAGE_TINT, dtype=np.float64)
        pixels[mask] = pixels[mask] * 0.6 + tint * 0.4
        img = Image.fromarray(pixels.astype(np.uint8))
        draw = ImageDraw.Draw(img)

    for t in outcome.trace:
        _dot(draw, view, t.position, 2.5, SEEN if t.visible else HIDDEN)

    if outcome.route:
        draw.line(
            [view.to_px(p.x, p.z) for p in outcome.route], fill=ROUTE, width=2
        )

    _dot(draw, view, scenario.observer.position, 5.0, OBSERVER)
    _dot(draw, view, scenario.agent.position, 5.0, AGENT)
    if outcome.result.found and outcome.result.position is not None:
        _dot(draw, view, outcome.result.position, 4.0, CHOSEN)
    return img
