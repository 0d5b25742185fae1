#!/usr/bin/env python3
"""
Shared constants for the Fireworks Simulator (SI units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier. Values a show file may override are
collected again in fireworks.settings.ShowSettings.
"""

# Physical constants
GRAVITY = -9.80665  # m/s^2, acts on the y axis only
AIR_DENSITY = 1.29  # kg/m^3

# Stars (assumed spherical: same cross-section in every direction of motion)
STAR_MASS = 0.01  # kg
STAR_DRAG_COEFFICIENT = 0.4
STAR_CROSS_SECTIONAL_AREA = 0.01  # m^2
STAR_COUNT = 100  # stars packed into one shell
STAR_MIN_SPEED = 3.0  # m/s
STAR_MAX_SPEED = 100.0  # m/s (exclusive)
STAR_MIN_DURATION = 2.5  # s
STAR_MAX_DURATION = 3.0  # s (exclusive)

# Shells
SHELL_BASE_MASS = 0.6  # kg, casing and lift charge without its stars
SHELL_THRUST = 100.0  # N
SHELL_DRAG_COEFFICIENT = 0.47
SHELL_CROSS_SECTIONAL_AREA = 0.002  # m^2
MIN_TARGET_DISTANCE = 1.0  # m; closer targets have no usable launch direction

# Framerate monitoring
FRAMERATE_TOLERANCE = 15.0  # f/s; at or below this new motion is throttled

# Idle auto-spawn
MINIMUM_RANDOM_SPAWN_PERIOD = 2.0  # s
MAXIMUM_RANDOM_SPAWN_PERIOD = 5.0  # s (soft limit, exceeded at low framerates)

# Fanfare burst
FANFARE_RATE = 16.0  # shells per second
FANFARE_DURATION = 4.0  # s
FANFARE_MAX_CATCHUP = 4  # shells per tick when the loop falls behind

# Random shell colours (HSL, degrees and percent)
COLOR_HUE_RANGE = (0, 360)
COLOR_SATURATION_RANGE = (70, 100)
COLOR_LIGHTNESS_RANGE = (50, 70)

# Rendering (viewport)
PIXELS_PER_METER = 10.0
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
TARGET_FPS = 60
LAUNCHER_OFFSET_PX = 20  # launcher sits this far below the bottom edge
PARTICLE_RADIUS_PX = 1
FADE_ALPHA = 0.2  # translucent clear per frame, leaves comet trails
BACKGROUND_COLOR = (0, 0, 0)
HUD_COLOR = (200, 200, 200)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
