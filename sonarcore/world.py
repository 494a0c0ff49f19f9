#!/usr/bin/env python3
"""
Simulation world: own-ship, contacts and their bearing histories.

SimulationWorld owns every piece of mutable simulation state. The frame loop
calls steer()/change_speed() with the operator's input, then update(real_dt);
the renderer then reads snapshot(). Everything runs on one thread, so there
is no locking.

Per tick, in order:
1. own-ship advances by one time step
2. each target advances and appends its position to its trail
3. each target's relative bearing is recorded at the new sim time and
   samples older than the history window are pruned
"""
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .angles import range_between, relative_bearing, true_bearing
from .clock import SimulationClock
from .constants import DEFAULT_HISTORY_WINDOW, DEFAULT_TIME_STEP, DEFAULT_TRACK_LENGTH
from .data_models import KinematicBody
from .errors import UnknownContactError
from .tracking import BearingRecord, BearingTracker

logger = logging.getLogger(__name__)


class WorldSettings:
    """Container for per-run simulation settings."""
    def __init__(self, time_step: float = DEFAULT_TIME_STEP,
                 history_window: float = DEFAULT_HISTORY_WINDOW,
                 track_length: int = DEFAULT_TRACK_LENGTH):
        self.time_step = float(time_step)
        self.history_window = float(history_window)
        self.track_length = int(track_length)
        if not math.isfinite(self.time_step) or self.time_step <= 0:
            raise ValueError(f"time_step must be finite and > 0, got {time_step!r}")
        if not math.isfinite(self.history_window) or self.history_window < 0:
            raise ValueError(f"history_window must be finite and >= 0, got {history_window!r}")
        if self.track_length < 1:
            raise ValueError(f"track_length must be >= 1, got {track_length!r}")

    def __repr__(self) -> str:
        return (f"WorldSettings(time_step={self.time_step}, history_window={self.history_window}, "
                f"track_length={self.track_length})")


@dataclass(frozen=True)
class BodyState:
    """Read-only copy of a KinematicBody for rendering."""
    name: str
    position: Tuple[float, float]
    heading: float
    speed: float
    color: Tuple[int, int, int]
    trail: Tuple[Tuple[float, float], ...]

    @classmethod
    def of(cls, body: KinematicBody) -> "BodyState":
        return cls(body.name, body.position, body.heading, body.speed, body.color, tuple(body.trail))


@dataclass(frozen=True)
class WorldSnapshot:
    """Everything the renderer reads in one frame."""
    sim_time: float
    time_step: float
    own_ship: BodyState
    targets: Dict[int, BodyState]
    bearings: Dict[int, Tuple[BearingRecord, ...]]


class SimulationWorld:
    """
    Own-ship plus tracked targets, advanced on a fixed timestep.

    Targets are keyed by an integer contact id handed out by add_target().
    Bearing histories live only here, in the tracker; targets know nothing
    about being observed.
    """

    def __init__(self, own_ship: KinematicBody, settings: Optional[WorldSettings] = None):
        self.settings = settings or WorldSettings()
        self.own_ship = own_ship
        self.own_ship.set_trail_length(self.settings.track_length)
        self.targets: Dict[int, KinematicBody] = {}
        self.tracker = BearingTracker()
        self.clock = SimulationClock(self.settings.time_step)
        self._next_contact_id = 1

    @property
    def sim_time(self) -> float:
        return self.clock.sim_time

    @property
    def time_step(self) -> float:
        return self.clock.time_step

    def add_target(self, body: KinematicBody) -> int:
        contact_id = self._next_contact_id
        self._next_contact_id += 1
        body.set_trail_length(self.settings.track_length)
        self.targets[contact_id] = body
        self.tracker.register(contact_id)
        logger.debug("added contact %d (%s)", contact_id, body.name)
        return contact_id

    def remove_target(self, contact_id: int) -> KinematicBody:
        body = self._target(contact_id)
        self.tracker.unregister(contact_id)
        del self.targets[contact_id]
        logger.debug("removed contact %d (%s)", contact_id, body.name)
        return body

    def _target(self, contact_id: int) -> KinematicBody:
        try:
            return self.targets[contact_id]
        except KeyError:
            raise UnknownContactError(contact_id) from None

    # Operator input, applied before the tick pass of the same frame

    def steer(self, delta_deg: float) -> None:
        self.own_ship.turn(delta_deg)

    def change_speed(self, delta_knots: float) -> None:
        self.own_ship.change_speed(delta_knots)

    def update(self, real_dt: float) -> int:
        """
        Feed real elapsed time in and run every whole tick it completes.

        Returns the number of ticks run (0 when the frame was shorter than
        the remaining part of a tick).
        """
        # Bad state is rejected before any tick is consumed
        self.own_ship.check_state()
        for body in self.targets.values():
            body.check_state()
        self.clock.accumulate(real_dt)
        ticks = self.clock.consume_ticks()
        # tick_count already includes this frame's ticks
        first_tick = self.clock.tick_count - ticks
        for i in range(1, ticks + 1):
            self._tick((first_tick + i) * self.clock.time_step)
        return ticks

    def _tick(self, now: float) -> None:
        dt = self.clock.time_step
        self.own_ship.step(dt)
        self.own_ship.add_trail_point()

        for body in self.targets.values():
            body.step(dt)
            body.add_trail_point()

        own_pos = self.own_ship.position
        own_heading = self.own_ship.heading
        window = self.settings.history_window
        for contact_id, body in self.targets.items():
            rel = relative_bearing(true_bearing(own_pos, body.position), own_heading)
            self.tracker.record(contact_id, now, rel)
            self.tracker.prune(contact_id, now, window)

    # Read side

    def bearing_to(self, contact_id: int) -> float:
        """Current true bearing from own-ship to a contact."""
        return true_bearing(self.own_ship.position, self._target(contact_id).position)

    def range_to(self, contact_id: int) -> float:
        return range_between(self.own_ship.position, self._target(contact_id).position)

    def bearing_history(self, contact_id: int) -> Tuple[BearingRecord, ...]:
        return self.tracker.history(contact_id)

    def contact_ids(self) -> List[int]:
        return list(self.targets)

    def snapshot(self) -> WorldSnapshot:
        return WorldSnapshot(
            sim_time=self.sim_time,
            time_step=self.time_step,
            own_ship=BodyState.of(self.own_ship),
            targets={cid: BodyState.of(b) for cid, b in self.targets.items()},
            bearings={cid: self.tracker.history(cid) for cid in self.targets},
        )
