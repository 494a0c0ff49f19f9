#!/usr/bin/env python3
"""
Passive bearing display: pygame viewer and operator input for the simulator.

What this module does
- Loads a scenario into a SimulationWorld (sonarcore) and drives it once per
  frame with the real elapsed time; the world turns that into fixed ticks.
- Reads world.snapshot() every frame and draws one of two views:
  - Tactical: north-up plot of own-ship, contacts and their trails.
  - Bearing-time: relative bearing (x, 000-360) against time (y, newest at
    the top) for every contact. Pairs that cross 000/360 are drawn as two
    segments to the plot edges.

Controls
- LEFT/RIGHT (hold): turn own-ship; the turn accumulated this frame is
  applied before the tick pass.
- UP/DOWN: one-shot speed change.
- TAB: switch view.  SPACE: pause/resume.  Mouse wheel: zoom (tactical).

Running
1) Install dependencies: `pip install pygame` (or `pip install -e .`)
2) Run: `python sonar_display.py [--scenario crossing_north.json]`
"""

import argparse
import functools
import logging
import math
import os
import sys
import time
from typing import Optional, Tuple

import pygame
from pygame import gfxdraw

from sonarcore.camera import Camera2D
from sonarcore.constants import (
    BACKGROUND_COLOR,
    BEARING_TRACE_COLOR,
    GRID_COLOR,
    GRID_FINE_COLOR,
    SAFE_COORD_LIMIT,
    SPEED_STEP_KNOTS,
    TEXT_COLOR,
    TURN_RATE_DEG_PER_S,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    WRAPAROUND_THRESHOLD_DEG,
)
from sonarcore.errors import ScenarioError
from sonarcore.presets_loader import build_world, list_scenarios, load_scenario, load_scenario_file
from sonarcore.tracking import history_segments
from sonarcore.vector_utils import heading_vector
from sonarcore.world import SimulationWorld, WorldSettings, WorldSnapshot

logger = logging.getLogger(__name__)

VIEW_TACTICAL = "Tactical"
VIEW_BEARING = "Bearing-time"
VIEWS = (VIEW_TACTICAL, VIEW_BEARING)

PLOT_MARGIN = (60, 70, 30, 40)  # left, top, right, bottom (pixels)


# ============================================================
# Display
# ============================================================

class SonarDisplay:
    """
    Pygame loop: input, world update, draw.
    The world is the only simulation state; this class holds view state only.
    """
    def __init__(self, world: SimulationWorld, title: str = "Bearing Simulator",
                 wraparound_threshold: float = WRAPAROUND_THRESHOLD_DEG):
        self.world = world
        self.title = title
        self.wraparound_threshold = wraparound_threshold
        self.camera = Camera2D(center=world.own_ship.position)
        self.surface = None
        self.clock = None
        self.view_index = 0
        self.follow_own_ship = True
        self.paused = False
        self.running = True

    @property
    def view(self) -> str:
        return VIEWS[self.view_index]

    def run(self):
        pygame.init()
        pygame.display.set_caption(self.title)
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)

            if not self.paused:
                self.world.update(real_dt)

            self.draw(self.world.snapshot())

            # Limit FPS
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        turn = 0.0
        if keys[pygame.K_LEFT]:
            turn -= TURN_RATE_DEG_PER_S * real_dt
        if keys[pygame.K_RIGHT]:
            turn += TURN_RATE_DEG_PER_S * real_dt
        if turn and not self.paused:
            self.world.steer(turn)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_UP:
                    self.world.change_speed(SPEED_STEP_KNOTS)
                elif event.key == pygame.K_DOWN:
                    self.world.change_speed(-SPEED_STEP_KNOTS)
                elif event.key == pygame.K_TAB:
                    self.view_index = (self.view_index + 1) % len(VIEWS)
                elif event.key == pygame.K_SPACE:
                    self.paused = not self.paused
                elif event.key == pygame.K_f:
                    self.follow_own_ship = not self.follow_own_ship
                elif event.key == pygame.K_ESCAPE:
                    self.running = False

            elif event.type == pygame.MOUSEWHEEL and self.view == VIEW_TACTICAL:
                factor = 1.1 if event.y > 0 else 1.0/1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

    # ------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------

    def draw(self, snap: WorldSnapshot):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        if self.view == VIEW_TACTICAL:
            self.draw_tactical(surf, snap)
        else:
            self.draw_bearing_time(surf, snap)

        own = snap.own_ship
        draw_text(surf, f"[{self.view}]  T+{snap.sim_time:7.1f}s  {'PAUSED' if self.paused else ''}", 10, 10, TEXT_COLOR)
        draw_text(surf, f"CRS {own.heading:05.1f}  SPD {own.speed:4.1f} kn", 10, 30, TEXT_COLOR)
        draw_text(surf, "Arrows: course/speed | Tab: view | Space: pause | F: follow | Wheel: zoom",
                  10, surf.get_height() - 22, (110, 110, 110))

        pygame.display.flip()

    def draw_grid(self, surf):
        """Square metric grid, major lines about 100 px apart, minor at 1/5."""
        w, h = self.camera.viewport_size
        major = nice_grid_spacing(self.camera.mpp * 100)
        west, north = self.camera.screen_to_world((0, 0))
        east, south = self.camera.screen_to_world((w, h))
        for spacing, color in ((major / 5, GRID_FINE_COLOR), (major, GRID_COLOR)):
            first_x = math.ceil(west / spacing)
            last_x = math.floor(east / spacing)
            for k in range(first_x, last_x + 1):
                sx = self.camera.world_to_screen((k * spacing, 0.0))[0]
                pygame.draw.line(surf, color, (sx, 0), (sx, h), 1)
            first_y = math.ceil(south / spacing)
            last_y = math.floor(north / spacing)
            for k in range(first_y, last_y + 1):
                sy = self.camera.world_to_screen((0.0, k * spacing))[1]
                pygame.draw.line(surf, color, (0, sy), (w, sy), 1)

    def draw_tactical(self, surf, snap: WorldSnapshot):
        if self.follow_own_ship:
            self.camera.follow(snap.own_ship.position)
        self.draw_grid(surf)

        bodies = [snap.own_ship] + list(snap.targets.values())
        for b in bodies:
            if len(b.trail) > 1:
                pts = [p for p in (clip_point(self.camera.world_to_screen(q)) for q in b.trail) if p]
                if len(pts) > 1:
                    pygame.draw.aalines(surf, b.color, False, pts)

        for b in bodies:
            pos = clip_point(self.camera.world_to_screen(b.position))
            if pos is None:
                continue
            gfxdraw.filled_circle(surf, pos[0], pos[1], 5, b.color)
            gfxdraw.aacircle(surf, pos[0], pos[1], 5, (0, 0, 0))
            draw_heading_marker(surf, pos, b.heading, b.color)
            draw_text(surf, b.name, pos[0] + 8, pos[1] + 6, b.color)

        y = 50
        for cid, t in snap.targets.items():
            hist = snap.bearings.get(cid, ())
            brg = f"{hist[-1].relative_bearing:05.1f}" if hist else "---.-"
            draw_text(surf, f"#{cid} {t.name}: REL {brg}", 10, y, t.color)
            y += 18

    def _plot_rect(self) -> Tuple[int, int, int, int]:
        w, h = self.surface.get_size()
        left, top, right, bottom = PLOT_MARGIN
        return left, top, max(1, w - left - right), max(1, h - top - bottom)

    def draw_bearing_time(self, surf, snap: WorldSnapshot):
        x0, y0, pw, ph = self._plot_rect()
        window = self.world.settings.history_window or snap.time_step
        t_now = snap.sim_time

        def to_screen(t: float, brg: float) -> Tuple[int, int]:
            sx = x0 + brg / 360.0 * pw
            sy = y0 + (t_now - t) / window * ph
            return (int(round(sx)), int(round(sy)))

        # Bearing grid every 30 deg, time grid every 10% of the window
        for brg in range(0, 361, 30):
            sx = x0 + int(brg / 360.0 * pw)
            pygame.draw.line(surf, GRID_COLOR, (sx, y0), (sx, y0 + ph), 1)
            draw_text(surf, f"{brg:03d}", sx - 12, y0 - 20, TEXT_COLOR)
        for i in range(11):
            sy = y0 + int(i / 10 * ph)
            pygame.draw.line(surf, GRID_FINE_COLOR, (x0, sy), (x0 + pw, sy), 1)
            draw_text(surf, f"-{window * i / 10:.0f}s", 4, sy - 8, (110, 110, 110))
        pygame.draw.rect(surf, GRID_COLOR, (x0, y0, pw, ph), 1)

        for cid, records in snap.bearings.items():
            color = snap.targets[cid].color if cid in snap.targets else BEARING_TRACE_COLOR
            pairs = self.world.tracker.consecutive_pairs(cid)
            for a, b in history_segments(pairs, self.wraparound_threshold):
                pygame.draw.aaline(surf, color, to_screen(*a), to_screen(*b))
            if records:
                head = to_screen(records[-1].timestamp, records[-1].relative_bearing)
                gfxdraw.filled_circle(surf, head[0], head[1], 3, color)


# ============================================================
# Drawing helpers
# ============================================================

@functools.lru_cache(maxsize=None)
def _font(size: int):
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.SysFont("consolas", size)


def draw_text(surface, text, x, y, color, size=16):
    surface.blit(_font(size).render(text, True, color), (x, y))


def clip_point(pt) -> Optional[Tuple[int, int]]:
    """Integer pixel for pt, or None when it is off any sane canvas."""
    x, y = pt
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    if abs(x) > SAFE_COORD_LIMIT or abs(y) > SAFE_COORD_LIMIT:
        return None
    return (int(round(x)), int(round(y)))


def draw_heading_marker(surface, pos, heading_deg, color, length=40, barb=8):
    """Heading leader from pos with a chevron at its tip."""
    hx, hy = heading_vector(heading_deg)
    tip = clip_point((pos[0] + hx * length, pos[1] - hy * length))
    if tip is None:
        return
    pygame.draw.line(surface, color, pos, tip, 1)
    # Barbs sit 150 deg either side of the heading
    for side in (-150.0, 150.0):
        bx, by = heading_vector(heading_deg + side)
        end = clip_point((tip[0] + bx * barb, tip[1] - by * barb))
        if end:
            pygame.draw.line(surface, color, tip, end, 2)


def nice_grid_spacing(raw: float) -> float:
    """Smallest 1/2/5 x 10^n spacing that is at least raw."""
    if raw <= 0:
        return 1.0
    base = 10 ** math.floor(math.log10(raw))
    for m in (1, 2, 5, 10):
        if m * base >= raw:
            return m * base
    return 10 * base


# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Own-ship / contact bearing display")
    p.add_argument("--scenario", default="default.json",
                   help="bundled scenario file name, or a path to a scenario JSON file")
    p.add_argument("--list", action="store_true", help="list bundled scenarios and exit")
    p.add_argument("--time-step", type=float, help="override seconds per simulation tick")
    p.add_argument("--history-window", type=float, help="override seconds of bearing history")
    p.add_argument("--wraparound-threshold", type=float, default=WRAPAROUND_THRESHOLD_DEG,
                   help="bearing jump (deg) treated as a 000/360 crossing when plotting")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(levelname)s: %(message)s')

    if args.list:
        for fn, name in list_scenarios():
            print(f"{fn:24s} {name}")
        return 0

    try:
        if os.path.isfile(args.scenario):
            scenario = load_scenario_file(args.scenario)
        else:
            scenario = load_scenario(args.scenario)
    except ScenarioError as e:
        logger.error("%s", e)
        return 1

    if not 180.0 <= args.wraparound_threshold < 360.0:
        logger.error("--wraparound-threshold must be in [180, 360), got %s", args.wraparound_threshold)
        return 2

    settings = scenario.settings
    if args.time_step is not None or args.history_window is not None:
        try:
            settings = WorldSettings(
                time_step=args.time_step if args.time_step is not None else settings.time_step,
                history_window=args.history_window if args.history_window is not None else settings.history_window,
                track_length=settings.track_length,
            )
        except ValueError as e:
            logger.error("%s", e)
            return 2
        scenario = scenario._replace(settings=settings)

    world = build_world(scenario)
    SonarDisplay(world, title=f"Bearing Simulator - {scenario.name}",
                 wraparound_threshold=args.wraparound_threshold).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
