#!/usr/bin/env python3
"""
Fixed-timestep clock.

Real elapsed time arrives in variable frame-sized pieces. The clock banks it
and hands out whole ticks of a constant length, so the simulation advances
the same way for the same sequence of deltas regardless of frame rate.
Ticks are never dropped: a slow frame simply yields several.
"""
import logging
import math

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Accumulator that converts real time into discrete simulation ticks.

    Attributes:
        time_step: Length of one tick in seconds (constant for a run).
        accumulated_time: Unconsumed real time; below time_step after
            consume_ticks() returns.
        tick_count: Total ticks handed out so far.
    """

    def __init__(self, time_step: float):
        time_step = float(time_step)
        if not math.isfinite(time_step) or time_step <= 0:
            raise ValueError(f"time_step must be finite and > 0, got {time_step!r}")
        self.time_step = time_step
        self.accumulated_time = 0.0
        self.tick_count = 0

    @property
    def sim_time(self) -> float:
        """Simulated seconds elapsed, a whole multiple of time_step."""
        return self.tick_count * self.time_step

    def accumulate(self, real_dt: float) -> None:
        if not math.isfinite(real_dt) or real_dt < 0:
            raise ValueError(f"real_dt must be finite and >= 0, got {real_dt!r}")
        self.accumulated_time += real_dt

    def consume_ticks(self) -> int:
        """Drain all whole ticks and return how many there were."""
        ticks = 0
        while self.accumulated_time >= self.time_step:
            self.accumulated_time -= self.time_step
            ticks += 1
        self.tick_count += ticks
        if ticks > 1:
            logger.debug("frame fell behind: draining %d ticks", ticks)
        return ticks

