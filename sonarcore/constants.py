#!/usr/bin/env python3
"""
Shared constants for the bearing simulator.

Units: meters, knots, degrees, seconds unless stated otherwise.
"""

# Unit conversion
METERS_PER_NAUTICAL_MILE = 1852.0
KNOTS_TO_MPS = METERS_PER_NAUTICAL_MILE / 3600.0  # 1 kn = 0.5144... m/s

# Simulation controls
DEFAULT_TIME_STEP = 1.0  # seconds of simulation time per tick
DEFAULT_HISTORY_WINDOW = 60.0  # seconds of bearing history kept per contact
DEFAULT_TRACK_LENGTH = 200  # past positions kept per body for trails

# Bearing plot: adjacent samples further apart than this are treated as
# crossing 0/360 instead of sweeping the whole scale. Rendering heuristic.
WRAPAROUND_THRESHOLD_DEG = 300.0

# Own-ship controls
TURN_RATE_DEG_PER_S = 30.0
SPEED_STEP_KNOTS = 1.0

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (5, 10, 30)
GRID_COLOR = (30, 40, 70)
GRID_FINE_COLOR = (18, 26, 50)
TEXT_COLOR = (200, 200, 200)
OWN_SHIP_COLOR = (0, 200, 255)
TARGET_COLOR = (255, 120, 60)
BEARING_TRACE_COLOR = (0, 255, 0)

# Camera zoom bounds (meters-per-pixel)
DEFAULT_METERS_PER_PIXEL = 15.0
MIN_METERS_PER_PIXEL = 0.5
MAX_METERS_PER_PIXEL = 500.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
