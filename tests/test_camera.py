#!/usr/bin/env python3
"""
Tests for the meters <-> pixels camera

Key behaviours tested:
- Vertical flip: simulation y grows upward, canvas y grows downward
- Fixed scale of PIXELS_PER_METER
- Round trip screen_to_world(world_to_screen(p)) == p
- Launcher position follows the viewport size
- Random targets land in the upper half of the visible area
"""

import random
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fireworks.camera import Camera2D
from fireworks.constants import LAUNCHER_OFFSET_PX, PIXELS_PER_METER


@pytest.fixture
def camera():
    return Camera2D(viewport_size=(800, 600))


class TestMapping:

    def test_origin_is_bottom_left(self, camera):
        assert camera.world_to_screen((0.0, 0.0)) == pytest.approx((0.0, 600.0))

    def test_top_right_corner(self, camera):
        assert camera.world_to_screen((80.0, 60.0)) == pytest.approx((800.0, 0.0))

    def test_scale(self, camera):
        a = camera.world_to_screen((1.0, 1.0))
        b = camera.world_to_screen((2.0, 2.0))
        assert b[0] - a[0] == pytest.approx(PIXELS_PER_METER)
        assert a[1] - b[1] == pytest.approx(PIXELS_PER_METER)

    def test_round_trip(self, camera):
        rng = random.Random(42)
        for _ in range(200):
            p = (rng.uniform(0, 80), rng.uniform(0, 60))
            assert camera.screen_to_world(camera.world_to_screen(p)) == pytest.approx(p)

    def test_round_trip_from_canvas(self, camera):
        for px in [(0, 0), (400, 300), (799, 1), (13, 577)]:
            assert camera.world_to_screen(camera.screen_to_world(px)) == pytest.approx(px)

    def test_play_area(self, camera):
        assert camera.play_area == pytest.approx((80.0, 60.0))

    def test_invalid_scale_rejected(self):
        with pytest.raises(ValueError):
            Camera2D(pixels_per_meter=0)


class TestLauncher:

    def test_bottom_centre_below_edge(self, camera):
        assert camera.launcher_position() == pytest.approx((40.0, -LAUNCHER_OFFSET_PX / PIXELS_PER_METER))

    def test_follows_resize(self, camera):
        camera.set_viewport_size(1200, 900)
        assert camera.launcher_position()[0] == pytest.approx(60.0)


class TestRandomTarget:

    def test_upper_half(self, camera):
        rng = random.Random(7)
        for _ in range(300):
            x, y = camera.random_target(rng)
            assert 0.0 <= x <= 80.0
            assert 30.0 <= y <= 60.0
