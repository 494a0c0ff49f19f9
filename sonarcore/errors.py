#!/usr/bin/env python3
"""
Exceptions raised by the simulation core.

All of them signal a caller defect or bad configuration; the core never
retries or coerces around them.
"""


class SimulationError(Exception):
    """Base class for simulation core errors."""


class UnknownContactError(SimulationError, KeyError):
    """A contact id has no registered bearing history or body."""

    def __init__(self, contact_id):
        super().__init__(contact_id)
        self.contact_id = contact_id

    def __str__(self) -> str:
        return f"unknown contact {self.contact_id!r}"


class OutOfOrderSampleError(SimulationError, ValueError):
    """A bearing sample is older than the newest sample already recorded."""


class ScenarioError(SimulationError, ValueError):
    """A scenario file could not be read or does not describe an own-ship."""
