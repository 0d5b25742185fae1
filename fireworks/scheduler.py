#!/usr/bin/env python3
"""
Launch scheduling for the Fireworks Simulator.

Shells come from three sources, all of which end in FireworksSimulation
spawning a shell:
- Manual: the viewer picks a target; the simulation launches immediately.
- Fanfare: a burst of randomly aimed shells at a fixed cadence for a few
  seconds. Only one burst runs at a time.
- Idle auto-spawn: while the framerate is healthy, a randomly aimed shell
  goes up whenever a randomly drawn period has passed since the last launch.

Every launch, whatever its source, resets the idle timer, so a busy viewer or
a running fanfare keeps the idle cadence quiet.

There are no timers of their own here: the simulation polls this state once
per tick, which keeps all mutation of the live shells on the tick boundary.
"""
import logging
import random
from typing import Optional

from .constants import FANFARE_MAX_CATCHUP
from .settings import ShowSettings
from .utils import random_arbitrary

logger = logging.getLogger(__name__)


class IdleSpawnTimer:
    """Randomised cadence for background launches."""

    def __init__(self, min_period: float, max_period: float,
                 rng: Optional[random.Random] = None):
        self.min_period = float(min_period)
        self.max_period = float(max_period)
        self.rng = rng
        self.last_spawn_at: Optional[float] = None
        self.current_period: Optional[float] = None

    def reset(self, now: float) -> None:
        """Restart the countdown from `now` with a freshly drawn period."""
        self.last_spawn_at = now
        self.current_period = random_arbitrary(self.min_period, self.max_period, self.rng)

    def is_due(self, now: float) -> bool:
        if self.last_spawn_at is None or self.current_period is None:
            return True
        return (now - self.last_spawn_at) > self.current_period


class FanfareBurst:
    """
    State of a fanfare: a run of evenly spaced launches.

    Firing slots sit at started_at + k / rate for k = 1, 2, ... up to
    started_at + duration; no slot past that deadline ever fires. If the loop
    stalls, at most `max_catchup` overdue slots fire in one tick and the rest
    are dropped. A tick that arrives after the deadline only fires a slot that
    is at most one period late, then ends the burst.
    """

    def __init__(self, rate: float, duration: float, max_catchup: int = FANFARE_MAX_CATCHUP):
        self.period = 1.0 / rate
        self.duration = float(duration)
        self.max_catchup = max(1, int(max_catchup))
        self.active = False
        self.started_at: Optional[float] = None
        self.next_fire_at: Optional[float] = None

    def start(self, now: float) -> bool:
        """Begin a burst at `now`. Returns False if one is already running."""
        if self.active:
            return False
        self.active = True
        self.started_at = now
        self.next_fire_at = now + self.period
        return True

    def due_shots(self, now: float) -> int:
        """Number of shells to launch at `now`; advances the burst."""
        if not self.active:
            return 0

        deadline = self.started_at + self.duration
        window_closed = now > deadline
        shots = 0
        while (self.next_fire_at <= now and self.next_fire_at <= deadline
               and shots < self.max_catchup):
            slot = self.next_fire_at
            self.next_fire_at = slot + self.period
            if window_closed and now - slot > self.period:
                continue  # missed while stalled; too late to fire
            shots += 1

        if window_closed or self.next_fire_at > deadline:
            self.active = False
        elif self.next_fire_at <= now:
            self.next_fire_at = now + self.period

        return shots


class LaunchScheduler:
    """Decides when randomly aimed shells should be launched."""

    def __init__(self, settings: Optional[ShowSettings] = None,
                 rng: Optional[random.Random] = None):
        self.rng = rng
        self.idle: Optional[IdleSpawnTimer] = None
        self.fanfare: Optional[FanfareBurst] = None
        self.configure(settings or ShowSettings())

    def configure(self, settings: ShowSettings) -> None:
        """Adopt new settings, keeping the idle countdown and any running fanfare."""
        self.settings = settings
        previous_idle = self.idle
        self.idle = IdleSpawnTimer(settings.min_spawn_period, settings.max_spawn_period, self.rng)
        if previous_idle is not None:
            self.idle.last_spawn_at = previous_idle.last_spawn_at
            self.idle.current_period = previous_idle.current_period

        previous_fanfare = self.fanfare
        if previous_fanfare is None or not previous_fanfare.active:
            self.fanfare = FanfareBurst(settings.fanfare_rate, settings.fanfare_duration)

    def note_launch(self, now: float) -> None:
        """Every launch counts as activity for the idle timer."""
        self.idle.reset(now)

    def start_fanfare(self, now: float) -> bool:
        if not self.fanfare.start(now):
            logger.debug("Fanfare already in progress; ignoring trigger")
            return False
        logger.info("Fanfare started (%.0f shells/s for ~%.1f s)",
                    self.settings.fanfare_rate, self.settings.fanfare_duration)
        return True

    @property
    def fanfare_in_progress(self) -> bool:
        return self.fanfare.active

    def fanfare_shots(self, now: float) -> int:
        was_active = self.fanfare.active
        shots = self.fanfare.due_shots(now)
        if was_active and not self.fanfare.active:
            logger.info("Fanfare finished")
        return shots

    def idle_spawn_due(self, now: float, framerate: Optional[float]) -> bool:
        """True when the idle timer has run out and the framerate can afford a launch."""
        if not self.settings.idle_launches:
            return False
        if framerate is None or framerate <= self.settings.framerate_tolerance:
            return False
        return self.idle.is_due(now)
