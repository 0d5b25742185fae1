#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

These are small, fast functions for vector math used throughout the engine.
Vectors are plain (x, y) tuples in simulation units.
"""
import math
from typing import Tuple

Vec2 = Tuple[float, float]

ZERO: Vec2 = (0.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Vec2, s: float) -> Vec2:
    return (a[0] * s, a[1] * s)


def vec_len(a: Vec2) -> float:
    return math.hypot(a[0], a[1])


def vec_norm(a: Vec2) -> Vec2:
    """Unit vector along a, or the zero vector when a has no direction."""
    l = vec_len(a)
    if l == 0:
        return ZERO
    return (a[0] / l, a[1] / l)


def vec_distance(a: Vec2, b: Vec2) -> float:
    return vec_len(vec_sub(b, a))


def vec_from_polar(magnitude: float, angle: float) -> Vec2:
    return (math.cos(angle) * magnitude, math.sin(angle) * magnitude)
