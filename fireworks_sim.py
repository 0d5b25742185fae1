#!/usr/bin/env python3
"""
Fireworks Simulator application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame viewport thread that drives the simulation
  frame by frame, and the Dear PyGui control panel (running on the main thread).
- Shares one FireworksSimulation between them; every simulation operation
  takes the simulation's re-entrant lock, so launches from either window land
  between frames.
- Implements the simulation's drawing primitives (particles and the fading
  overlay that leaves comet trails) on a Pygame surface.

Controls
- Viewport: click to launch a shell toward the cursor; release any key for a
  fanfare; resize freely (the launcher stays at the bottom centre).
- Control panel: pick a show, start a fanfare, launch a random shell, launch
  toward typed coordinates, toggle idle launches, watch frame statistics.

Units and conventions
- SI units throughout the simulation; the viewport maps 10 px to 1 m.
- Colors are RGB tuples in 0..255.

Running
1) Install dependencies: `pip install pygame dearpygui`
2) Run this module: `python fireworks_sim.py [--show classic.json] [--log-level DEBUG]`
"""

import argparse
import logging
import threading
from typing import Optional, Tuple

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from fireworks.constants import (
    BACKGROUND_COLOR,
    HUD_COLOR,
    PARTICLE_RADIUS_PX,
    SAFE_COORD_LIMIT,
    TARGET_FPS,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from fireworks.settings import ShowSettings
from fireworks.shows_loader import list_shows, load_show
from fireworks.simulation import FireworksSimulation, FrameStats
from fireworks.utils import try_float
from fireworks.vector_utils import clamp

logger = logging.getLogger("fireworks_sim")

# ============================================================
# Pygame drawing primitives
# ============================================================

def _safe_point(pt) -> Optional[Tuple[int, int]]:
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


class PygameCanvas:
    """FrameRenderer backed by a Pygame surface."""

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self._fade_surface: Optional[pygame.Surface] = None

    def set_surface(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self._fade_surface = None

    def draw_particle(self, position, color) -> None:
        pt = _safe_point(position)
        if pt is None:
            return
        gfxdraw.filled_circle(self.surface, pt[0], pt[1], PARTICLE_RADIUS_PX, color)

    def fade(self, alpha: float, rect) -> None:
        x, y, w, h = rect
        if self._fade_surface is None or self._fade_surface.get_size() != (w, h):
            self._fade_surface = pygame.Surface((max(1, w), max(1, h)))
            self._fade_surface.fill(BACKGROUND_COLOR)
        self._fade_surface.set_alpha(int(round(clamp(alpha, 0.0, 1.0) * 255)))
        self.surface.blit(self._fade_surface, (x, y))


_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        try:
            _cached_font = pygame.font.SysFont("consolas", 16)
        except (pygame.error, OSError):
            _cached_font = pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color, BACKGROUND_COLOR)
    surface.blit(img, (x, y))

# ============================================================
# Pygame Viewport Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: ticks the simulation once per display frame and draws the HUD.
    Handles launch clicks, fanfare keypresses and window resizes.
    """
    def __init__(self, sim: FireworksSimulation):
        super().__init__(daemon=True)
        self.sim = sim
        self.surface = None
        self.canvas: Optional[PygameCanvas] = None
        self.clock = None
        self.running = True

    def run(self):
        pygame.init()
        pygame.display.set_caption("Fireworks Simulator - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.surface.fill(BACKGROUND_COLOR)
        self.canvas = PygameCanvas(self.surface)
        with self.sim.lock:
            self.sim.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
            self.sim.renderer = self.canvas
        self.clock = pygame.time.Clock()

        while self.running and self.sim.running:
            self.handle_events()
            stats = self.sim.tick()
            self.draw_hud(stats)
            pygame.display.flip()
            # Frame pacing; the next tick follows this one
            self.clock.tick(TARGET_FPS)

        with self.sim.lock:
            self.sim.renderer = None
        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.surface.fill(BACKGROUND_COLOR)
                self.canvas.set_surface(self.surface)
                self.sim.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.sim.launch_at_pixel(event.pos)

            elif event.type == pygame.KEYUP:
                self.sim.fanfare()

    def draw_hud(self, stats: FrameStats):
        fps = f"{stats.framerate:5.1f}" if stats.framerate is not None else "  ---"
        draw_text(self.surface, "Click: launch | Any key: fanfare", 10, 10, HUD_COLOR)
        draw_text(self.surface, f"FPS: {fps}  Shells: {stats.shells:3d}  Stars: {stats.stars:5d}", 10, 30, HUD_COLOR)

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: show selection, launch controls and frame statistics.
    """
    def __init__(self, sim: FireworksSimulation, renderer: PygameRenderer, show_file: Optional[str] = None):
        self.sim = sim
        self.renderer = renderer

        # IDs for widgets
        self.show_combo_id = None
        self.target_x_id = None
        self.target_y_id = None
        self.idle_checkbox_id = None
        self.stats_id = None
        self.fanfare_state_id = None
        self.status_msg_id = None

        self._show_map = {display: fn for fn, display in list_shows()}
        self._initial_show = show_file

        self._build_ui()

        # Periodic UI sync without using timers (for wider DPG version support)
        dpg.set_frame_callback(1, self._post_setup)
        self._schedule_sync()

    def _post_setup(self):
        if self._initial_show:
            self._apply_show(load_show(self._initial_show))

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Fireworks Simulator - Controls', width=460, height=420)

        with dpg.window(label="Controls", width=440, height=400, pos=(10, 10), tag="main_window"):
            dpg.add_text("Show")
            with dpg.group(horizontal=True):
                names = list(self._show_map.keys()) or ["Default"]
                self.show_combo_id = dpg.add_combo(names, default_value=names[0], width=220)
                dpg.add_button(label="Load", callback=self._on_load_show)

            dpg.add_separator()
            dpg.add_text("Launch")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Fanfare", callback=self._on_fanfare)
                dpg.add_button(label="Random shell", callback=self._on_random_launch)
            with dpg.group(horizontal=True):
                self.target_x_id = dpg.add_input_text(label="X (m)", default_value="55.0", width=80)
                self.target_y_id = dpg.add_input_text(label="Y (m)", default_value="60.0", width=80)
                dpg.add_button(label="Launch at", callback=self._on_targeted_launch)
            self.idle_checkbox_id = dpg.add_checkbox(label="Idle launches", default_value=self.sim.settings.idle_launches,
                                                     callback=lambda s, a, u: self.sim.set_idle_launches(a))

            dpg.add_separator()
            dpg.add_text("Statistics")
            self.stats_id = dpg.add_text("")
            self.fanfare_state_id = dpg.add_text("")
            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _apply_show(self, settings: ShowSettings):
        self.sim.apply_settings(settings)
        dpg.set_value(self.idle_checkbox_id, settings.idle_launches)
        self._set_status(f"Loaded show '{settings.name}'.")

    def _on_load_show(self):
        display = dpg.get_value(self.show_combo_id)
        fn = self._show_map.get(display)
        if fn is None:
            self._apply_show(ShowSettings())
            return
        self._apply_show(load_show(fn))

    def _on_fanfare(self):
        if self.sim.fanfare():
            self._set_status("Fanfare!")
        else:
            self._set_status("A fanfare is already running.", color=(220, 220, 150))

    def _on_random_launch(self):
        if self.sim.launch_random() is None:
            self._set_error("Launch rejected; see log for details.")

    def _on_targeted_launch(self):
        x = try_float(dpg.get_value(self.target_x_id))
        y = try_float(dpg.get_value(self.target_y_id))
        if x is None or y is None:
            self._set_error("Target coordinates must be numbers.")
            return
        if self.sim.launch((x, y)) is None:
            self._set_error("Target is too close to the launcher.")
            return
        self._set_status(f"Launched toward ({x:.1f}, {y:.1f}) m.")

    # -----------------------
    # Periodic sync
    # -----------------------

    def _sync_ui_with_sim(self):
        if not self.sim.running:
            dpg.stop_dearpygui()
            return

        stats = self.sim.last_stats
        if stats is not None:
            fps = f"{stats.framerate:.1f}" if stats.framerate is not None else "---"
            dpg.set_value(self.stats_id, f"Frame {stats.frame}  FPS {fps}  Shells {stats.shells}  Stars {stats.stars}")
        dpg.set_value(self.fanfare_state_id,
                      "Fanfare in progress" if self.sim.fanfare_in_progress else "")
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Real-time 2D fireworks display.")
    parser.add_argument("--show", default=None, help="Show file name inside the shows/ directory")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sim = FireworksSimulation()

    renderer = PygameRenderer(sim)

    # Start Pygame viewport thread
    renderer.start()

    UI(sim, renderer, show_file=args.show)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop simulation and renderer
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
        logger.info("Fireworks simulator closed")

if __name__ == "__main__":
    main()
