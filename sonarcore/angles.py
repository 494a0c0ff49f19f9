#!/usr/bin/env python3
"""
Angle normalization and bearing computation.

Conventions
- Bearings and headings are compass degrees: 0 = north, increasing clockwise.
- Bearings are computed with atan2(dx, dy) (x first). That is the
  north-referenced form; the usual atan2(dy, dx) would measure from east and
  mirror every bearing.

Preconditions
- Inputs must be finite. NaN or infinite angles/positions raise ValueError
  instead of leaking NaN into the bearing history.
"""
import math
from typing import Tuple

from .vector_utils import vec_len, vec_sub


def normalize(angle: float) -> float:
    """Return the representative of angle in [0, 360)."""
    if not math.isfinite(angle):
        raise ValueError(f"cannot normalize non-finite angle {angle!r}")
    result = angle % 360.0
    # Tiny negative inputs round up to exactly 360.0
    if result >= 360.0:
        result -= 360.0
    return result


def true_bearing(observer: Tuple[float, float], target: Tuple[float, float]) -> float:
    """
    Bearing from observer to target, degrees clockwise from north.

    Coincident positions have no defined bearing; 0.0 is returned so the
    result is stable.
    """
    dx, dy = vec_sub(target, observer)
    if not (math.isfinite(dx) and math.isfinite(dy)):
        raise ValueError(f"non-finite position delta ({dx!r}, {dy!r})")
    if dx == 0.0 and dy == 0.0:
        return 0.0
    return normalize(math.degrees(math.atan2(dx, dy)))


def relative_bearing(bearing: float, own_heading: float) -> float:
    """Bearing relative to the observer's bow."""
    return normalize(bearing - own_heading)


def angle_difference(a: float, b: float) -> float:
    """Signed shortest rotation from a to b, in (-180, 180]."""
    diff = normalize(b - a)
    if diff > 180.0:
        diff -= 360.0
    return diff


def range_between(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return vec_len(vec_sub(b, a))
