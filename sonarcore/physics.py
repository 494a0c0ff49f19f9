#!/usr/bin/env python3
"""
Kinematics for surface bodies.

Responsibilities
- Convert speed in knots to meters per second.
- Advance a position along a compass heading for a fixed time step.

Units and conventions
- Positions are in meters [m], x east and y north.
- Speed is in knots [kn]; 1 kn = 1852 m / 3600 s.
- Headings are compass degrees, 0 = north, clockwise positive.
- Time steps are in seconds [s].

This module is pure compute. Bodies are updated by their owner with the
returned positions.
"""

import math
from typing import Tuple

from .constants import KNOTS_TO_MPS
from .vector_utils import heading_vector, vec_add, vec_scale


def knots_to_mps(speed_knots: float) -> float:
    """
    Convert a speed in knots to meters per second.

    Args:
        speed_knots: Speed in knots

    Returns:
        Speed in m/s
    """
    return speed_knots * KNOTS_TO_MPS


def velocity_vector(speed_knots: float, heading_deg: float) -> Tuple[float, float]:
    """Velocity (vx, vy) in m/s for a speed and compass heading."""
    return vec_scale(heading_vector(heading_deg), knots_to_mps(speed_knots))


def advance_position(position: Tuple[float, float], speed_knots: float,
                     heading_deg: float, dt: float) -> Tuple[float, float]:
    """
    Dead-reckon a position forward by dt seconds.

    The displacement is speed [m/s] * dt along (sin(heading), cos(heading)),
    so 0 deg moves along +y (north) and 90 deg along +x (east). Zero speed
    or a zero step leaves the position unchanged.

    Args:
        position: Current (x, y) position in meters
        speed_knots: Speed over ground in knots (>= 0)
        heading_deg: Compass heading in degrees
        dt: Time step in seconds (>= 0)

    Returns:
        New (x, y) position in meters
    """
    if not math.isfinite(dt) or dt < 0:
        raise ValueError(f"time step must be finite and >= 0, got {dt!r}")
    if not (math.isfinite(position[0]) and math.isfinite(position[1])):
        raise ValueError(f"position must be finite, got {position!r}")
    if not math.isfinite(speed_knots) or speed_knots < 0:
        raise ValueError(f"speed must be finite and >= 0, got {speed_knots!r}")
    if speed_knots == 0 or dt == 0:
        return (position[0], position[1])
    return vec_add(position, vec_scale(velocity_vector(speed_knots, heading_deg), dt))
