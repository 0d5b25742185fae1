#!/usr/bin/env python3
"""
General utilities for the Fireworks Simulator.

Random helpers accept an optional random.Random so tests and independent
simulations can use their own seeded generator.
"""
import colorsys
import math
import random
from typing import Optional, Tuple

from .constants import COLOR_HUE_RANGE, COLOR_LIGHTNESS_RANGE, COLOR_SATURATION_RANGE


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


def random_integer(lo: float, hi: float, rng: Optional[random.Random] = None) -> int:
    """Random integer in the inclusive range [ceil(lo), floor(hi)]."""
    rng = rng or random
    return rng.randint(math.ceil(lo), math.floor(hi))


def random_arbitrary(lo: float, hi: float, rng: Optional[random.Random] = None) -> float:
    """Random float in the half-open range [lo, hi)."""
    rng = rng or random
    return rng.random() * (hi - lo) + lo


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> Tuple[int, int, int]:
    """Convert hue in degrees and saturation/lightness in percent to an RGB tuple."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness / 100.0, saturation / 100.0)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def random_color(rng: Optional[random.Random] = None) -> Tuple[int, int, int]:
    """A bright, saturated firework colour."""
    hue = random_integer(*COLOR_HUE_RANGE, rng=rng)
    saturation = random_integer(*COLOR_SATURATION_RANGE, rng=rng)
    lightness = random_integer(*COLOR_LIGHTNESS_RANGE, rng=rng)
    return hsl_to_rgb(hue, saturation, lightness)
