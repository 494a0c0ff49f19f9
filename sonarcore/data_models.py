#!/usr/bin/env python3
"""
Data models for the bearing simulator.

This module defines the KinematicBody dataclass shared by the world,
tracking and rendering code.

Units and usage
- position is in meters [m] (x east, y north), heading in compass degrees,
  speed in knots [kn].
- heading is kept normalized to [0, 360) and speed is never negative.
- trail stores past positions to render motion paths; the owning world sets
  its length and appends once per simulation tick.
"""
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Tuple

from .angles import normalize
from .constants import DEFAULT_TRACK_LENGTH
from .physics import advance_position


@dataclass
class KinematicBody:
    """
    A moving entity: the own-ship or a contact.

    Fields:
    - name: Display label
    - position: 2D position (x, y) in meters
    - heading: Direction of travel in degrees [0, 360)
    - speed: Speed in knots (>= 0)
    - color: RGB tuple used for rendering
    - trail: Deque of past positions, oldest evicted first
    """
    name: str
    position: Tuple[float, float]
    heading: float = 0.0
    speed: float = 0.0
    color: Tuple[int, int, int] = (200, 200, 255)
    trail: Deque[Tuple[float, float]] = field(default_factory=lambda: deque(maxlen=DEFAULT_TRACK_LENGTH))

    def __post_init__(self) -> None:
        self.position = (float(self.position[0]), float(self.position[1]))
        self.heading = normalize(float(self.heading))
        self.speed = float(self.speed)
        self.check_state()

    def check_state(self) -> None:
        """Raise ValueError unless position and speed are finite and speed >= 0."""
        x, y = self.position
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"{self.name}: position must be finite, got {self.position!r}")
        if not math.isfinite(self.speed) or self.speed < 0:
            raise ValueError(f"{self.name}: speed must be finite and >= 0, got {self.speed!r}")

    def turn(self, delta_deg: float) -> None:
        """Add a signed heading change and renormalize."""
        self.heading = normalize(self.heading + delta_deg)

    def change_speed(self, delta_knots: float) -> None:
        """Add a signed speed change; speed bottoms out at zero."""
        if not math.isfinite(delta_knots):
            raise ValueError(f"speed change must be finite, got {delta_knots!r}")
        self.speed = max(0.0, self.speed + delta_knots)

    def step(self, dt: float) -> None:
        self.position = advance_position(self.position, self.speed, self.heading, dt)

    def set_trail_length(self, n: int) -> None:
        self.trail = deque(self.trail, maxlen=max(1, int(n)))

    def add_trail_point(self) -> None:
        """Append the current position to the trail."""
        self.trail.append(self.position)
