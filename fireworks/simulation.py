#!/usr/bin/env python3
"""
Simulation loop for the Fireworks Simulator.

FireworksSimulation owns the live shells and stars of one display and advances
them one frame per tick():
1) measure the framerate from the time since the previous tick
2) let the launch scheduler add fanfare and idle shells
3) detonate shells that reached their range, update and draw the rest
4) update and draw stars, dropping the ones that burned out
5) ask the renderer for a translucent fade, which leaves comet trails

Threading
- tick() is driven by the viewport's frame loop; launch() and fanfare() may be
  called from input handlers on other threads. Every public method takes the
  simulation's re-entrant lock, so no two operations ever interleave.

Failures
- Each entity is updated and drawn in isolation. An entity that raises, or
  whose position stops being finite, is logged and dropped; the frame goes on.
"""
import logging
import math
import random
import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Protocol, Tuple

from .camera import Camera2D
from .data_models import ActiveSet
from .scheduler import LaunchScheduler
from .settings import ShowSettings
from .shell import Shell
from .star import Star
from .vector_utils import Vec2

logger = logging.getLogger(__name__)


class FrameRenderer(Protocol):
    """Drawing primitives the simulation needs from the viewport."""

    def draw_particle(self, position: Vec2, color: Tuple[int, int, int]) -> None:
        """Draw a point at `position` (canvas pixels)."""

    def fade(self, alpha: float, rect: Tuple[int, int, int, int]) -> None:
        """Composite a translucent clear of opacity `alpha` over `rect`."""


@dataclass
class FrameStats:
    """Summary of one tick, for HUDs and diagnostics."""
    frame: int
    time: float
    framerate: Optional[float]
    shells: int
    stars: int
    launched: int
    detonated: int
    decayed: int


def _is_finite(vec: Vec2) -> bool:
    return math.isfinite(vec[0]) and math.isfinite(vec[1])


class FireworksSimulation:
    """
    One independent fireworks display.

    Args:
        camera: maps between meters and canvas pixels; tracks the viewport size
        settings: show settings (validated on construction)
        clock: monotonic clock returning seconds
        rng: random generator for targets, colours and stars
        renderer: optional FrameRenderer; None runs headless
    """

    def __init__(self, camera: Optional[Camera2D] = None,
                 settings: Optional[ShowSettings] = None,
                 clock: Callable[[], float] = time.perf_counter,
                 rng: Optional[random.Random] = None,
                 renderer: Optional[FrameRenderer] = None):
        self.lock = threading.RLock()
        self.running = True  # app running; cleared when either window closes
        self.camera = camera or Camera2D()
        self.settings = (settings or ShowSettings()).validate()
        self.clock = clock
        self.rng = rng
        self.renderer = renderer

        self.shells: ActiveSet[Shell] = ActiveSet()
        self.stars: ActiveSet[Star] = ActiveSet()
        self.scheduler = LaunchScheduler(self.settings, rng)

        self.frame = 0
        self.last_tick_at: Optional[float] = None
        self.framerate: Optional[float] = None
        self.last_stats: Optional[FrameStats] = None
        self._launched_since_tick = 0

        self.scheduler.note_launch(self.clock())
        logger.info("Fireworks simulation created for show '%s' (%dx%d px viewport)",
                    self.settings.name, *self.camera.viewport_size)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def apply_settings(self, settings: ShowSettings) -> None:
        settings.validate()
        with self.lock:
            self.settings = settings
            self.scheduler.configure(settings)
        logger.info("Applied show settings '%s'", settings.name)

    def set_viewport_size(self, w: int, h: int) -> None:
        with self.lock:
            self.camera.set_viewport_size(w, h)

    def set_idle_launches(self, enabled: bool) -> None:
        with self.lock:
            self.settings = replace(self.settings, idle_launches=bool(enabled))
            self.scheduler.configure(self.settings)

    # ------------------------------------------------------------------
    # Launching
    # ------------------------------------------------------------------

    def launch(self, target: Vec2) -> Optional[Shell]:
        """Launch a shell toward `target` (meters). Returns None if the target is unusable."""
        with self.lock:
            return self._launch(target, self.clock())

    def launch_at_pixel(self, point: Vec2) -> Optional[Shell]:
        """Launch a shell toward a canvas point, e.g. a mouse click."""
        with self.lock:
            return self._launch(self.camera.screen_to_world(point), self.clock())

    def launch_random(self) -> Optional[Shell]:
        with self.lock:
            return self._launch(self.camera.random_target(self.rng), self.clock())

    def fanfare(self) -> bool:
        """Start a fanfare burst. Returns False if one is already running."""
        with self.lock:
            return self.scheduler.start_fanfare(self.clock())

    @property
    def fanfare_in_progress(self) -> bool:
        with self.lock:
            return self.scheduler.fanfare_in_progress

    def _launch(self, target: Vec2, now: float) -> Optional[Shell]:
        try:
            shell = Shell.create(self.camera.launcher_position(), target, self.settings, rng=self.rng)
        except ValueError as exc:
            logger.warning("Launch rejected: %s", exc)
            return None
        self._spawn_shell(shell, now)
        return shell

    def _spawn_shell(self, shell: Shell, now: float) -> None:
        shell.spawn(now, self.frame)
        if self.shells.add(shell):
            self._launched_since_tick += 1
            self.scheduler.note_launch(now)
            logger.debug("Launched shell toward (%.1f, %.1f) m", shell.target[0], shell.target[1])

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def framerate_ok(self) -> bool:
        return self.framerate is not None and self.framerate > self.settings.framerate_tolerance

    def tick(self) -> FrameStats:
        """Advance the display by one frame."""
        with self.lock:
            now = self.clock()
            self.frame += 1

            self._measure_framerate(now)
            self._run_scheduler(now)
            detonated = self._update_shells(now)
            decayed = self._update_stars(now)
            self._fade()

            stats = FrameStats(
                frame=self.frame,
                time=now,
                framerate=self.framerate,
                shells=len(self.shells),
                stars=len(self.stars),
                launched=self._launched_since_tick,
                detonated=detonated,
                decayed=decayed,
            )
            self._launched_since_tick = 0
            self.last_stats = stats
            return stats

    def _measure_framerate(self, now: float) -> None:
        if self.last_tick_at is not None:
            change = now - self.last_tick_at
            if change > 0:
                self.framerate = 1.0 / change
        self.last_tick_at = now

    def _run_scheduler(self, now: float) -> None:
        for _ in range(self.scheduler.fanfare_shots(now)):
            self._launch(self.camera.random_target(self.rng), now)

        if self.scheduler.idle_spawn_due(now, self.framerate):
            self._launch(self.camera.random_target(self.rng), now)

    def _update_shells(self, now: float) -> int:
        launcher = self.camera.launcher_position()
        moving_allowed = self.framerate_ok()
        finished: List[Shell] = []
        detonations = 0

        for shell in self.shells:
            try:
                if not shell.detonated and shell.has_reached_range(launcher):
                    shell.detonate(self.stars, now, self.frame, self.rng)
                    detonations += 1

                if shell.detonated:
                    finished.append(shell)
                    continue

                # Under load, hold back shells launched this frame
                spawned_frame = shell.body.spawned_frame
                if moving_allowed or spawned_frame is None or spawned_frame < self.frame:
                    shell.update(now)
                    if not _is_finite(shell.position):
                        logger.warning("Dropping shell with non-finite position %s", shell.position)
                        finished.append(shell)
                        continue
                    self._draw(shell)
            except Exception:
                logger.exception("Dropping shell after update failure")
                finished.append(shell)

        self.shells.discard_all(finished)
        return detonations

    def _update_stars(self, now: float) -> int:
        burned_out: List[Star] = []

        for star in self.stars:
            try:
                star.update(now)
                if not _is_finite(star.position):
                    logger.warning("Dropping star with non-finite position %s", star.position)
                    burned_out.append(star)
                    continue
                self._draw(star)

                if star.is_decayed(now):
                    burned_out.append(star)
            except Exception:
                logger.exception("Dropping star after update failure")
                burned_out.append(star)

        return self.stars.discard_all(burned_out)

    def _draw(self, entity) -> None:
        if self.renderer is None:
            return
        self.renderer.draw_particle(self.camera.world_to_screen(entity.position), entity.color)

    def _fade(self) -> None:
        if self.renderer is None:
            return
        w, h = self.camera.viewport_size
        try:
            self.renderer.fade(self.settings.fade_alpha, (0, 0, w, h))
        except Exception:
            logger.exception("Fade overlay failed")
