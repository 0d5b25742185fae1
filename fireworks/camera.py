#!/usr/bin/env python3
"""
Camera utilities for mapping between simulation meters and canvas pixels.

Simulation space has its origin at the bottom-left corner with y growing
upward; canvas space has its origin at the top-left with y growing downward.
The scale is fixed, so resizing the window changes how much sky is visible
rather than how large things look.
"""
import random
from typing import Optional, Tuple

from .constants import LAUNCHER_OFFSET_PX, PIXELS_PER_METER, VIEW_HEIGHT, VIEW_WIDTH
from .utils import random_arbitrary
from .vector_utils import Vec2


class Camera2D:
    """
    Fixed-scale 2D camera for the fireworks viewport.

    Attributes:
        ppm: pixels per meter.
        viewport_size: (width, height) in pixels, kept current by the window.
    """

    def __init__(self, pixels_per_meter: float = PIXELS_PER_METER,
                 viewport_size: Tuple[int, int] = (VIEW_WIDTH, VIEW_HEIGHT)):
        if pixels_per_meter <= 0:
            raise ValueError(f"pixels_per_meter must be positive, got {pixels_per_meter!r}")
        self.ppm = float(pixels_per_meter)
        self.viewport_size = (viewport_size[0], viewport_size[1])

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def play_area(self) -> Vec2:
        """Visible (width, height) in meters."""
        return (self.viewport_size[0] / self.ppm, self.viewport_size[1] / self.ppm)

    def world_to_screen(self, pos: Vec2) -> Vec2:
        vertical_center = self.viewport_size[1] / 2
        px = pos[0] * self.ppm
        py = vertical_center + (vertical_center - pos[1] * self.ppm)
        return (px, py)

    def screen_to_world(self, screen: Vec2) -> Vec2:
        vertical_center = self.viewport_size[1] / 2
        wx = screen[0] / self.ppm
        wy = (vertical_center + (vertical_center - screen[1])) / self.ppm
        return (wx, wy)

    def launcher_position(self) -> Vec2:
        """Horizontal centre, just below the bottom edge; follows the current viewport."""
        w, h = self.viewport_size
        return self.screen_to_world((w / 2, h + LAUNCHER_OFFSET_PX))

    def random_target(self, rng: Optional[random.Random] = None) -> Vec2:
        """A uniformly random point in the upper half of the visible area."""
        w, h = self.viewport_size
        return self.screen_to_world((
            random_arbitrary(0, w, rng),
            random_arbitrary(0, h / 2, rng),
        ))
