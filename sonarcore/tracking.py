#!/usr/bin/env python3
"""
Bearing-time history per contact.

Each tracked contact owns a BearingHistory: relative-bearing samples in
timestamp order, appended at the tail once per tick and pruned from the head
once they fall out of the history window. BearingTracker maps contact ids to
their histories.

The plotting helpers at the bottom turn adjacent samples into line segments
on a (time, bearing) plot. A pair whose bearings differ by more than the
wraparound threshold is taken to cross 0/360 along the short way round, and
is drawn as two segments meeting the top and bottom edges of the plot rather
than one line sweeping across the whole bearing scale.
"""
import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Tuple

from .angles import angle_difference
from .constants import WRAPAROUND_THRESHOLD_DEG
from .errors import OutOfOrderSampleError, UnknownContactError

logger = logging.getLogger(__name__)

PlotPoint = Tuple[float, float]  # (time s, bearing deg)
Segment = Tuple[PlotPoint, PlotPoint]


@dataclass(frozen=True)
class BearingRecord:
    """One relative-bearing sample taken at a simulation time."""
    timestamp: float
    relative_bearing: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.timestamp):
            raise ValueError(f"non-finite timestamp {self.timestamp!r}")
        if not 0.0 <= self.relative_bearing < 360.0:
            raise ValueError(f"relative bearing {self.relative_bearing!r} outside [0, 360)")


class BearingHistory:
    """Append-only-at-tail, prune-at-head sequence of BearingRecord."""

    def __init__(self):
        self._records: Deque[BearingRecord] = deque()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[BearingRecord]:
        return iter(self._records)

    @property
    def latest(self) -> Optional[BearingRecord]:
        return self._records[-1] if self._records else None

    def append(self, record: BearingRecord) -> None:
        last = self.latest
        if last is not None and record.timestamp < last.timestamp:
            raise OutOfOrderSampleError(
                f"sample at t={record.timestamp} is older than last sample at t={last.timestamp}"
            )
        self._records.append(record)

    def prune(self, current_time: float, window_seconds: float) -> int:
        """
        Drop records older than window_seconds, oldest first.

        Ages only shrink towards the tail, so the scan stops at the first
        record still inside the window. Returns the number removed.
        """
        removed = 0
        records = self._records
        while records and current_time - records[0].timestamp > window_seconds:
            records.popleft()
            removed += 1
        return removed


class BearingTracker:
    """
    Bearing histories keyed by contact id.

    Every contact must be registered before samples are recorded for it;
    looking up an unregistered id raises UnknownContactError.
    """

    def __init__(self):
        self._histories: Dict[int, BearingHistory] = {}

    def __contains__(self, contact_id: int) -> bool:
        return contact_id in self._histories

    def __len__(self) -> int:
        return len(self._histories)

    def contact_ids(self) -> List[int]:
        return list(self._histories)

    def register(self, contact_id: int) -> None:
        if contact_id in self._histories:
            raise ValueError(f"contact {contact_id!r} is already tracked")
        self._histories[contact_id] = BearingHistory()
        logger.debug("tracking contact %s", contact_id)

    def unregister(self, contact_id: int) -> None:
        self._get(contact_id)
        del self._histories[contact_id]
        logger.debug("stopped tracking contact %s", contact_id)

    def _get(self, contact_id: int) -> BearingHistory:
        try:
            return self._histories[contact_id]
        except KeyError:
            raise UnknownContactError(contact_id) from None

    def record(self, contact_id: int, timestamp: float, relative_bearing: float) -> BearingRecord:
        rec = BearingRecord(float(timestamp), float(relative_bearing))
        self._get(contact_id).append(rec)
        return rec

    def prune(self, contact_id: int, current_time: float, window_seconds: float) -> int:
        removed = self._get(contact_id).prune(current_time, window_seconds)
        if removed:
            logger.debug("contact %s: pruned %d samples older than %.1fs", contact_id, removed, window_seconds)
        return removed

    def history(self, contact_id: int) -> Tuple[BearingRecord, ...]:
        """Records for a contact, oldest first."""
        return tuple(self._get(contact_id))

    def latest(self, contact_id: int) -> Optional[BearingRecord]:
        return self._get(contact_id).latest

    def consecutive_pairs(self, contact_id: int) -> Iterator[Tuple[BearingRecord, BearingRecord]]:
        """
        Yield adjacent (record, next_record) pairs in chronological order.

        Each call returns a new generator over the history as it stands when
        iteration runs.
        """
        history = self._get(contact_id)

        def _pairs():
            prev = None
            for rec in history:
                if prev is not None:
                    yield prev, rec
                prev = rec

        return _pairs()


# ============================================================
# Plotting helpers
# ============================================================

def is_wraparound(r1: BearingRecord, r2: BearingRecord,
                  threshold: float = WRAPAROUND_THRESHOLD_DEG) -> bool:
    """
    True when the pair should be read as crossing 0/360.

    threshold must lie in [180, 360): below 180 the short way round between
    two flagged bearings would not pass through north.
    """
    if not 180.0 <= threshold < 360.0:
        raise ValueError(f"wraparound threshold must be in [180, 360), got {threshold!r}")
    return abs(r1.relative_bearing - r2.relative_bearing) > threshold


def plot_segments(r1: BearingRecord, r2: BearingRecord,
                  threshold: float = WRAPAROUND_THRESHOLD_DEG) -> List[Segment]:
    """
    Line segments on a (time, bearing) plot connecting two adjacent samples.

    Normally a single segment. For a wraparound pair, r1 is joined to the
    boundary it crosses (360 when bearing increases through north, 0 when it
    decreases) and the opposite boundary is joined to r2. The crossing time
    is interpolated along the short path between the two bearings.
    """
    t1, b1 = r1.timestamp, r1.relative_bearing
    t2, b2 = r2.timestamp, r2.relative_bearing
    if not is_wraparound(r1, r2, threshold):
        return [((t1, b1), (t2, b2))]

    delta = angle_difference(b1, b2)
    if delta > 0:
        exit_edge, entry_edge = 360.0, 0.0
    else:
        exit_edge, entry_edge = 0.0, 360.0
    frac = (exit_edge - b1) / delta
    t_cross = t1 + frac * (t2 - t1)
    return [((t1, b1), (t_cross, exit_edge)), ((t_cross, entry_edge), (t2, b2))]


def history_segments(pairs: Iterable[Tuple[BearingRecord, BearingRecord]],
                     threshold: float = WRAPAROUND_THRESHOLD_DEG) -> List[Segment]:
    """Flatten consecutive pairs into plot segments."""
    segments: List[Segment] = []
    for r1, r2 in pairs:
        segments.extend(plot_segments(r1, r2, threshold))
    return segments
