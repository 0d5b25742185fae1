#!/usr/bin/env python3
"""
Show settings: the tunable part of a fireworks display.

Defaults come from fireworks.constants; show files (see shows_loader) override
individual fields.
"""
import math
from dataclasses import dataclass, fields, replace
from typing import Any, Dict

from .constants import (
    FADE_ALPHA,
    FANFARE_DURATION,
    FANFARE_RATE,
    FRAMERATE_TOLERANCE,
    MAXIMUM_RANDOM_SPAWN_PERIOD,
    MINIMUM_RANDOM_SPAWN_PERIOD,
    SHELL_BASE_MASS,
    SHELL_THRUST,
    STAR_COUNT,
    STAR_MASS,
)


_NUMERIC_FIELDS = (
    "star_count",
    "shell_thrust",
    "fanfare_rate",
    "fanfare_duration",
    "min_spawn_period",
    "max_spawn_period",
    "framerate_tolerance",
    "fade_alpha",
)


@dataclass
class ShowSettings:
    """
    Container for display-wide settings.

    Fields:
    - name: human-friendly show name
    - star_count: stars released by each shell
    - shell_thrust: thrust of a shell's lift charge in newtons
    - fanfare_rate: shells per second during a fanfare
    - fanfare_duration: approximate fanfare length in seconds
    - min_spawn_period / max_spawn_period: idle auto-spawn period range in seconds
    - framerate_tolerance: framerate (f/s) at or below which new motion is throttled
    - idle_launches: whether the idle auto-spawn timer may launch shells
    - fade_alpha: opacity of the per-frame fade overlay (0..1)
    """
    name: str = "Default"
    star_count: int = STAR_COUNT
    shell_thrust: float = SHELL_THRUST
    fanfare_rate: float = FANFARE_RATE
    fanfare_duration: float = FANFARE_DURATION
    min_spawn_period: float = MINIMUM_RANDOM_SPAWN_PERIOD
    max_spawn_period: float = MAXIMUM_RANDOM_SPAWN_PERIOD
    framerate_tolerance: float = FRAMERATE_TOLERANCE
    idle_launches: bool = True
    fade_alpha: float = FADE_ALPHA

    @property
    def shell_mass(self) -> float:
        """A shell weighs its casing plus every star it carries."""
        return SHELL_BASE_MASS + STAR_MASS * self.star_count

    def validate(self) -> "ShowSettings":
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number, got {value!r}")
        if self.star_count < 0:
            raise ValueError(f"star_count must be >= 0, got {self.star_count}")
        if self.shell_thrust <= 0:
            raise ValueError(f"shell_thrust must be > 0, got {self.shell_thrust}")
        if self.fanfare_rate <= 0:
            raise ValueError(f"fanfare_rate must be > 0, got {self.fanfare_rate}")
        if self.fanfare_duration < 0:
            raise ValueError(f"fanfare_duration must be >= 0, got {self.fanfare_duration}")
        if not 0 < self.min_spawn_period < self.max_spawn_period:
            raise ValueError(
                f"spawn period range must satisfy 0 < min < max, got "
                f"[{self.min_spawn_period}, {self.max_spawn_period})"
            )
        if self.framerate_tolerance < 0:
            raise ValueError(f"framerate_tolerance must be >= 0, got {self.framerate_tolerance}")
        if not 0.0 <= self.fade_alpha <= 1.0:
            raise ValueError(f"fade_alpha must be within [0, 1], got {self.fade_alpha}")
        return self

    def with_overrides(self, overrides: Dict[str, Any]) -> "ShowSettings":
        """Copy with the known keys of `overrides` applied; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in overrides.items() if k in known})
