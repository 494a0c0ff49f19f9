import random
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from sonarcore.constants import WRAPAROUND_THRESHOLD_DEG
from sonarcore.errors import OutOfOrderSampleError, UnknownContactError
from sonarcore.tracking import (
    BearingRecord,
    BearingTracker,
    history_segments,
    is_wraparound,
    plot_segments,
)


def make_tracker(*contact_ids):
    tracker = BearingTracker()
    for cid in contact_ids:
        tracker.register(cid)
    return tracker


def test_record_appends_in_order():
    tracker = make_tracker(1)
    tracker.record(1, 1.0, 10.0)
    tracker.record(1, 2.0, 12.0)
    tracker.record(1, 2.0, 13.0)  # equal timestamps are allowed
    assert [r.timestamp for r in tracker.history(1)] == [1.0, 2.0, 2.0]
    assert tracker.latest(1) == BearingRecord(2.0, 13.0)


def test_out_of_order_record_is_rejected_and_history_untouched():
    tracker = make_tracker(1)
    tracker.record(1, 5.0, 10.0)
    with pytest.raises(OutOfOrderSampleError):
        tracker.record(1, 4.0, 11.0)
    assert tracker.history(1) == (BearingRecord(5.0, 10.0),)


def test_record_rejects_unnormalized_bearing():
    tracker = make_tracker(1)
    with pytest.raises(ValueError):
        tracker.record(1, 0.0, 360.0)
    with pytest.raises(ValueError):
        tracker.record(1, 0.0, -1.0)


def test_records_are_immutable():
    rec = BearingRecord(1.0, 20.0)
    with pytest.raises(AttributeError):
        rec.relative_bearing = 30.0


def test_unknown_contact_fails_explicitly():
    tracker = make_tracker(1)
    with pytest.raises(UnknownContactError):
        tracker.record(2, 0.0, 0.0)
    with pytest.raises(KeyError):
        tracker.prune(2, 10.0, 5.0)
    with pytest.raises(UnknownContactError):
        list(tracker.consecutive_pairs(2))


def test_register_twice_is_an_error():
    tracker = make_tracker(1)
    with pytest.raises(ValueError):
        tracker.register(1)


def test_unregister_drops_history():
    tracker = make_tracker(1, 2)
    tracker.record(1, 0.0, 5.0)
    tracker.unregister(1)
    assert 1 not in tracker
    assert tracker.contact_ids() == [2]
    with pytest.raises(UnknownContactError):
        tracker.history(1)


def test_prune_removes_only_expired_head():
    tracker = make_tracker(7)
    for t in range(11):
        tracker.record(7, float(t), float(t))
    removed = tracker.prune(7, 10.0, 4.0)
    assert removed == 6
    # age == window is kept
    assert [r.timestamp for r in tracker.history(7)] == [6.0, 7.0, 8.0, 9.0, 10.0]


def test_prune_on_empty_history():
    tracker = make_tracker(1)
    assert tracker.prune(1, 100.0, 1.0) == 0
    assert tracker.history(1) == ()


def test_pruning_invariant_holds_after_random_operations():
    rng = random.Random(1234)
    tracker = make_tracker(1)
    window = 15.0
    t = 0.0
    for _ in range(500):
        t += rng.choice([0.0, 0.5, 1.0, 2.5])
        tracker.record(1, t, rng.uniform(0.0, 359.999))
        if rng.random() < 0.7:
            tracker.prune(1, t, window)
            assert all(t - r.timestamp <= window for r in tracker.history(1))
    tracker.prune(1, t, window)
    history = tracker.history(1)
    assert history
    assert all(t - r.timestamp <= window for r in history)
    assert [r.timestamp for r in history] == sorted(r.timestamp for r in history)


def test_consecutive_pairs_are_chronological_and_restartable():
    tracker = make_tracker(1)
    for t, b in [(1.0, 10.0), (2.0, 11.0), (3.0, 12.0)]:
        tracker.record(1, t, b)
    pairs = list(tracker.consecutive_pairs(1))
    assert [(a.timestamp, b.timestamp) for a, b in pairs] == [(1.0, 2.0), (2.0, 3.0)]
    assert list(tracker.consecutive_pairs(1)) == pairs


def test_consecutive_pairs_reflect_history_at_iteration():
    tracker = make_tracker(1)
    tracker.record(1, 1.0, 10.0)
    assert list(tracker.consecutive_pairs(1)) == []
    tracker.record(1, 2.0, 20.0)
    assert len(list(tracker.consecutive_pairs(1))) == 1


def test_wraparound_detection_uses_configurable_threshold():
    a, b = BearingRecord(0.0, 358.0), BearingRecord(1.0, 2.0)
    assert WRAPAROUND_THRESHOLD_DEG == 300.0
    assert is_wraparound(a, b)
    assert is_wraparound(b, a)
    assert not is_wraparound(BearingRecord(0.0, 10.0), BearingRecord(1.0, 300.0))
    assert is_wraparound(BearingRecord(0.0, 10.0), BearingRecord(1.0, 300.0), threshold=250.0)


def test_wraparound_increasing_through_north_splits_at_360():
    segs = plot_segments(BearingRecord(0.0, 358.0), BearingRecord(1.0, 2.0))
    assert len(segs) == 2
    (p0, p1), (p2, p3) = segs
    assert p0 == (0.0, 358.0)
    assert p1[1] == 360.0
    assert p2[1] == 0.0
    assert p3 == (1.0, 2.0)
    assert p1[0] == pytest.approx(0.5)
    assert p2[0] == pytest.approx(0.5)


def test_wraparound_decreasing_through_north_splits_at_0():
    segs = plot_segments(BearingRecord(10.0, 1.0), BearingRecord(12.0, 355.0))
    (p0, p1), (p2, p3) = segs
    assert p1 == (pytest.approx(10.0 + 2.0 * 1.0 / 6.0), 0.0)
    assert p2 == (pytest.approx(10.0 + 2.0 * 1.0 / 6.0), 360.0)
    assert p0 == (10.0, 1.0)
    assert p3 == (12.0, 355.0)


def test_ordinary_pair_is_one_segment():
    segs = plot_segments(BearingRecord(0.0, 100.0), BearingRecord(1.0, 140.0))
    assert segs == [((0.0, 100.0), (1.0, 140.0))]


def test_history_segments_from_tracker_pairs():
    tracker = make_tracker(3)
    for t, b in [(0.0, 350.0), (1.0, 356.0), (2.0, 2.0), (3.0, 8.0)]:
        tracker.record(3, t, b)
    segs = history_segments(tracker.consecutive_pairs(3))
    # three pairs, one of them wraps
    assert len(segs) == 4
    assert segs[1][1][1] == 360.0
    assert segs[2][0][1] == 0.0
    assert all(abs(a[1] - b[1]) <= WRAPAROUND_THRESHOLD_DEG for a, b in segs)


@pytest.mark.parametrize("threshold", [179.9, 100.0, 360.0])
def test_wraparound_threshold_outside_range_is_rejected(threshold):
    with pytest.raises(ValueError):
        is_wraparound(BearingRecord(0.0, 10.0), BearingRecord(1.0, 20.0), threshold=threshold)


def test_wraparound_crossing_with_lower_threshold():
    segs = plot_segments(BearingRecord(0.0, 10.0), BearingRecord(2.0, 200.0), threshold=180.0)
    (p0, p1), (p2, p3) = segs
    # short way from 010 to 200 is -170 deg, through 000
    assert p1 == (pytest.approx(2.0 * 10.0 / 170.0), 0.0)
    assert p2 == (pytest.approx(2.0 * 10.0 / 170.0), 360.0)
    assert p3 == (2.0, 200.0)
