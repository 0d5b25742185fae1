#!/usr/bin/env python3
"""
Data models for the Fireworks Simulator.

This module defines the physical Body shared by shells and stars, and the
ActiveSet collection the simulation keeps its live entities in.

Units and usage
- position is in meters [m] from the bottom-left of the play area, velocity in
  [m/s], acceleration in [m/s^2], mass in kg.
- Bodies integrate themselves against a caller-supplied clock; the first
  update() only records the baseline time so a body never jumps by the time it
  spent waiting to be drawn.
- Shell and Star each compose a Body; a Shell adds a thrust strategy, a Star
  has none.
- Access to live bodies is coordinated by FireworksSimulation using a lock.
"""
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Iterator, List, Optional, Set, TypeVar

from .constants import AIR_DENSITY, GRAVITY
from .kinematics import displacement, drag_acceleration, speed
from .vector_utils import ZERO, Vec2

ThrustStrategy = Callable[["Body"], Vec2]

T = TypeVar("T")


@dataclass
class Body:
    """
    A point mass moving under gravity, drag and an optional thrust.

    Fields:
    - position, velocity, acceleration: current kinematic state
    - mass: kg, must be > 0
    - drag_coefficient: dimensionless, >= 0
    - cross_sectional_area: m^2, >= 0
    - thrust: optional strategy returning the thrust acceleration for this body
    - spawned_at: simulation time the body went live (set once)
    - spawned_frame: index of the simulation frame it went live in
    - last_update_at: integration clock, never decreases
    """
    position: Vec2
    velocity: Vec2
    acceleration: Vec2
    mass: float
    drag_coefficient: float
    cross_sectional_area: float
    thrust: Optional[ThrustStrategy] = field(default=None, repr=False)
    spawned_at: Optional[float] = None
    spawned_frame: Optional[int] = None
    last_update_at: Optional[float] = None

    def __post_init__(self):
        if not self.mass > 0:
            raise ValueError(f"Body mass must be positive, got {self.mass!r}")
        if self.drag_coefficient < 0:
            raise ValueError(f"Drag coefficient must be non-negative, got {self.drag_coefficient!r}")
        if self.cross_sectional_area < 0:
            raise ValueError(f"Cross-sectional area must be non-negative, got {self.cross_sectional_area!r}")

    @property
    def spawned(self) -> bool:
        return self.spawned_at is not None

    def spawn(self, now: float, frame: Optional[int] = None) -> bool:
        """Mark the body live. Returns False if it already was."""
        if self.spawned_at is not None:
            return False
        self.spawned_at = now
        self.spawned_frame = frame
        return True

    def update(self, now: float) -> Vec2:
        """
        Advance the body to time `now` and return its new position.

        Position moves by the constant-acceleration displacement since the last
        update; velocity is re-derived from that displacement, and the new
        acceleration is drag plus thrust (both from the previous velocity) plus
        gravity on the y axis.
        """
        if self.last_update_at is None:
            self.last_update_at = now
            return self.position

        dt = now - self.last_update_at
        if dt <= 0:
            return self.position

        last_position = self.position
        last_velocity = self.velocity
        last_acceleration = self.acceleration

        step = (
            displacement(last_velocity[0], dt, last_acceleration[0]),
            displacement(last_velocity[1], dt, last_acceleration[1]),
        )

        drag = drag_acceleration(
            AIR_DENSITY,
            self.drag_coefficient,
            self.cross_sectional_area,
            last_velocity,
            self.mass,
        )
        thrust = self.thrust(self) if self.thrust is not None else ZERO

        self.position = (last_position[0] + step[0], last_position[1] + step[1])

        # Straight-line approximation: curvature within the step is ignored
        self.velocity = (speed(step[0], dt), speed(step[1], dt))

        self.acceleration = (
            thrust[0] + drag[0],
            thrust[1] + drag[1] + GRAVITY,
        )

        self.last_update_at = now
        return self.position


class ActiveSet(Generic[T]):
    """
    Insertion-ordered collection of live entities, unique by identity.

    Iteration walks a snapshot, so removing entities while iterating never
    skips or repeats one.
    """

    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = []
        self._ids: Set[int] = set()
        for item in items:
            self.add(item)

    def add(self, item: T) -> bool:
        if id(item) in self._ids:
            return False
        self._ids.add(id(item))
        self._items.append(item)
        return True

    def discard_all(self, items: Iterable[T]) -> int:
        """Remove every given item that is present; returns how many were removed."""
        doomed = {id(item) for item in items if id(item) in self._ids}
        if doomed:
            self._items = [item for item in self._items if id(item) not in doomed]
            self._ids -= doomed
        return len(doomed)

    def snapshot(self) -> List[T]:
        return list(self._items)

    def __contains__(self, item) -> bool:
        return id(item) in self._ids

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._items)
