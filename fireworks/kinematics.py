#!/usr/bin/env python3
"""
Kinematics helpers for the Fireworks Simulator

Responsibilities
- Distance covered along one axis under constant velocity and acceleration.
- Average speed over a time step.
- Acceleration due to aerodynamic drag for a body moving through air.

Units and conventions
- Positions are in meters [m], velocities in [m/s], accelerations in [m/s^2].
- Time steps are in seconds [s], masses in kilograms [kg].
- Functions are pure and stateless; vectors are (x, y) tuples.

Numerical notes
- Bodies advance with a constant-acceleration step (d = v0*t + a*t^2/2) per axis
  and re-derive velocity from the realised displacement. This ignores curvature
  of the path within a step, so fast-turning bodies drift slightly at low
  framerates. The error is imperceptible above roughly 30 fps.
"""

import math

from .vector_utils import ZERO, Vec2, vec_distance


def displacement(initial_speed: float, time: float, acceleration: float) -> float:
    """
    Distance travelled along one axis in a time step.

        d = v0 * t + 0.5 * a * t^2

    Args:
        initial_speed: Speed along the axis at the start of the step in m/s
        time: Length of the step in seconds
        acceleration: Constant acceleration along the axis in m/s^2

    Returns:
        Distance in meters (signed)
    """
    return (initial_speed * time) + (0.5 * acceleration * (time * time))


def speed(distance: float, time: float) -> float:
    """
    Average speed over a time step. Callers must guarantee time > 0.

    Args:
        distance: Distance travelled in meters
        time: Length of the step in seconds

    Returns:
        Speed in m/s
    """
    return distance / time


def drag_acceleration(fluid_density: float, drag_coefficient: float,
                      cross_sectional_area: float, velocity: Vec2,
                      mass: float) -> Vec2:
    """
    Acceleration due to drag for a body moving through a fluid.

        F = 0.5 * rho * Cd * A * v^2
        a = F / m

    The acceleration opposes the velocity and is split between the axes in
    proportion to each component's share of the speed.

    Args:
        fluid_density: Density of the fluid in kg/m^3
        drag_coefficient: Dimensionless drag coefficient
        cross_sectional_area: Area facing the direction of motion in m^2
        velocity: (vx, vy) in m/s
        mass: Body mass in kg

    Returns:
        (ax, ay) in m/s^2; the zero vector for a stationary body
    """
    body_speed = math.hypot(velocity[0], velocity[1])
    if body_speed == 0:
        return ZERO

    drag = -(0.5 * fluid_density * drag_coefficient * cross_sectional_area * (body_speed * body_speed))
    magnitude = drag / mass

    return (
        magnitude * (velocity[0] / body_speed),
        magnitude * (velocity[1] / body_speed),
    )


def straight_line_displacement(initial_position: Vec2, final_position: Vec2) -> float:
    """Straight-line distance between two positions in meters."""
    return vec_distance(initial_position, final_position)
