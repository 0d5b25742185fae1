#!/usr/bin/env python3
"""
Stars: the burning pellets a shell releases when it detonates.

A star gets its outward velocity at creation; the burst itself is treated as
instantaneous. After that only drag and gravity act on it until it burns out.
"""
import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple

from .constants import (
    STAR_CROSS_SECTIONAL_AREA,
    STAR_DRAG_COEFFICIENT,
    STAR_MASS,
    STAR_MAX_DURATION,
    STAR_MAX_SPEED,
    STAR_MIN_DURATION,
    STAR_MIN_SPEED,
)
from .data_models import Body
from .utils import random_arbitrary
from .vector_utils import ZERO, Vec2, vec_from_polar


def star_body(position: Vec2, velocity: Vec2) -> Body:
    """A thrust-less star body at `position` moving with `velocity`."""
    return Body(
        position=position,
        velocity=velocity,
        acceleration=ZERO,
        mass=STAR_MASS,
        drag_coefficient=STAR_DRAG_COEFFICIENT,
        cross_sectional_area=STAR_CROSS_SECTIONAL_AREA,
    )


@dataclass
class Star:
    """
    A burst particle with a finite burn time.

    Fields:
    - body: physical state (no thrust)
    - duration: seconds the star burns after it is spawned
    - color: RGB tuple inherited from the parent shell
    """
    body: Body
    duration: float
    color: Tuple[int, int, int]

    @classmethod
    def from_shell(cls, shell, rng: Optional[random.Random] = None) -> "Star":
        """A star at the shell's current position, flung in a random direction."""
        magnitude = random_arbitrary(STAR_MIN_SPEED, STAR_MAX_SPEED, rng)
        direction = random_arbitrary(0.0, 2 * math.pi, rng)
        return cls(
            body=star_body(shell.position, vec_from_polar(magnitude, direction)),
            duration=random_arbitrary(STAR_MIN_DURATION, STAR_MAX_DURATION, rng),
            color=shell.color,
        )

    @property
    def position(self) -> Vec2:
        return self.body.position

    def spawn(self, now: float, frame: Optional[int] = None) -> bool:
        return self.body.spawn(now, frame)

    def update(self, now: float) -> Vec2:
        return self.body.update(now)

    def burn_time(self, now: float) -> float:
        if self.body.spawned_at is None:
            return 0.0
        return now - self.body.spawned_at

    def is_decayed(self, now: float) -> bool:
        """True once the star has burned for longer than its duration."""
        return self.body.spawned_at is not None and self.burn_time(now) > self.duration
