#!/usr/bin/env python3
"""
Shells: thrust-propelled projectiles that detonate into stars.

A shell leaves the launcher at rest, pointed at its target by its initial
acceleration. From then on its lift charge pushes along whatever direction it
is already moving, so gravity and drag bend the path away from the straight
line.

Detonation is range-triggered: a shell bursts once its straight-line distance
from the launcher reaches the launcher-to-target distance, wherever it has
drifted to. It is not aimed to burst on the target point itself.
"""
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import (
    MIN_TARGET_DISTANCE,
    SHELL_CROSS_SECTIONAL_AREA,
    SHELL_DRAG_COEFFICIENT,
    SHELL_THRUST,
    STAR_COUNT,
)
from .data_models import ActiveSet, Body
from .kinematics import straight_line_displacement
from .settings import ShowSettings
from .star import Star
from .utils import random_color
from .vector_utils import ZERO, Vec2, vec_distance, vec_norm, vec_scale, vec_sub

logger = logging.getLogger(__name__)


class DirectedThrust:
    """Thrust strategy pushing a body along its current velocity."""

    def __init__(self, force: float = SHELL_THRUST):
        self.force = float(force)

    def __call__(self, body: Body) -> Vec2:
        direction = vec_norm(body.velocity)
        if direction == ZERO:
            return ZERO
        return vec_scale(direction, self.force / body.mass)

    def __repr__(self):
        return f"DirectedThrust(force={self.force})"


def calculate_initial_acceleration(initial_position: Vec2, target: Vec2,
                                   mass: float, thrust: float) -> Vec2:
    """
    Acceleration pointing from the launcher to the target with magnitude thrust / mass.

    Args:
        initial_position: Launcher position in meters
        target: Target position in meters
        mass: Shell mass in kg
        thrust: Lift charge thrust in newtons

    Returns:
        (ax, ay) in m/s^2

    Raises:
        ValueError: if the target is closer than MIN_TARGET_DISTANCE or mass <= 0
    """
    if not mass > 0:
        raise ValueError(f"Shell mass must be positive, got {mass!r}")
    distance = vec_distance(initial_position, target)
    if distance < MIN_TARGET_DISTANCE:
        raise ValueError(
            f"Target {target} is {distance:.3f} m from the launcher; "
            f"it must be at least {MIN_TARGET_DISTANCE} m away"
        )
    direction = vec_norm(vec_sub(target, initial_position))
    return vec_scale(direction, thrust / mass)


@dataclass
class Shell:
    """
    A launched firework shell.

    Fields:
    - body: physical state, with a DirectedThrust strategy
    - target: position (meters) whose range from the launcher sets the burst point
    - color: RGB tuple handed down to every star
    - star_count: stars released on detonation
    - detonated: becomes True exactly once
    """
    body: Body
    target: Vec2
    color: Tuple[int, int, int]
    star_count: int = STAR_COUNT
    detonated: bool = False

    @classmethod
    def create(cls, launcher: Vec2, target: Vec2,
               settings: Optional[ShowSettings] = None,
               color: Optional[Tuple[int, int, int]] = None,
               rng: Optional[random.Random] = None) -> "Shell":
        """Build a shell resting on the launcher and aimed at `target`."""
        settings = settings or ShowSettings()
        mass = settings.shell_mass
        body = Body(
            position=launcher,
            velocity=ZERO,
            acceleration=calculate_initial_acceleration(launcher, target, mass, settings.shell_thrust),
            mass=mass,
            drag_coefficient=SHELL_DRAG_COEFFICIENT,
            cross_sectional_area=SHELL_CROSS_SECTIONAL_AREA,
            thrust=DirectedThrust(settings.shell_thrust),
        )
        return cls(
            body=body,
            target=target,
            color=color if color is not None else random_color(rng),
            star_count=settings.star_count,
        )

    @property
    def position(self) -> Vec2:
        return self.body.position

    def spawn(self, now: float, frame: Optional[int] = None) -> bool:
        return self.body.spawn(now, frame)

    def update(self, now: float) -> Vec2:
        return self.body.update(now)

    def has_reached_range(self, launcher: Vec2) -> bool:
        """True once the shell is at least as far from the launcher as its target is."""
        travelled = straight_line_displacement(launcher, self.position)
        target_range = straight_line_displacement(launcher, self.target)
        return travelled >= target_range

    def detonate(self, stars: ActiveSet, now: float, frame: Optional[int] = None,
                 rng: Optional[random.Random] = None) -> List[Star]:
        """
        Burst the shell, spawning its stars into `stars`.

        Repeated calls are ignored and return an empty list.
        """
        if self.detonated:
            return []
        self.detonated = True

        spawned: List[Star] = []
        for _ in range(self.star_count):
            star = Star.from_shell(self, rng)
            star.spawn(now, frame)
            stars.add(star)
            spawned.append(star)

        logger.debug("Shell detonated at (%.1f, %.1f) m releasing %d stars",
                     self.position[0], self.position[1], len(spawned))
        return spawned
