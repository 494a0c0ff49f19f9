#!/usr/bin/env python3
"""
Vector helper functions for 2D operations.

Positions are (x, y) tuples with x pointing east and y pointing north.
"""
import math
from typing import Tuple


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_add(a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float]:
    return (a[0] + b[0], a[1] + b[1])


def vec_sub(a: Tuple[float, float], b: Tuple[float, float]) -> Tuple[float, float]:
    return (a[0] - b[0], a[1] - b[1])


def vec_scale(a: Tuple[float, float], s: float) -> Tuple[float, float]:
    return (a[0] * s, a[1] * s)


def vec_len(a: Tuple[float, float]) -> float:
    return math.hypot(a[0], a[1])


def heading_vector(heading_deg: float) -> Tuple[float, float]:
    """Unit vector for a compass heading: 0 points north, 90 points east."""
    rad = math.radians(heading_deg)
    return (math.sin(rad), math.cos(rad))
