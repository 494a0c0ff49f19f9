import math
import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from sonarcore.constants import KNOTS_TO_MPS
from sonarcore.data_models import KinematicBody
from sonarcore.physics import advance_position, knots_to_mps, velocity_vector


def test_knots_conversion_uses_1852_m_per_nm():
    assert knots_to_mps(1.0) == pytest.approx(1852.0 / 3600.0)
    assert KNOTS_TO_MPS == pytest.approx(0.514444, abs=1e-6)


def test_advance_north_and_east():
    v = 10.0 * 1852.0 / 3600.0
    x, y = advance_position((0.0, 0.0), 10.0, 0.0, 2.0)
    assert x == pytest.approx(0.0, abs=1e-9)
    assert y == pytest.approx(2 * v)
    x, y = advance_position((0.0, 0.0), 10.0, 90.0, 2.0)
    assert x == pytest.approx(2 * v)
    assert y == pytest.approx(0.0, abs=1e-9)


def test_advance_zero_speed_or_zero_dt_is_stationary():
    assert advance_position((12.5, -3.0), 0.0, 123.0, 5.0) == (12.5, -3.0)
    assert advance_position((12.5, -3.0), 8.0, 123.0, 0.0) == (12.5, -3.0)


def test_advance_rejects_negative_dt():
    with pytest.raises(ValueError):
        advance_position((0.0, 0.0), 5.0, 0.0, -1.0)


def test_velocity_vector_heading_225():
    vx, vy = velocity_vector(10.0, 225.0)
    assert vx == pytest.approx(-10 * KNOTS_TO_MPS * math.sqrt(0.5))
    assert vy == pytest.approx(-10 * KNOTS_TO_MPS * math.sqrt(0.5))


def test_body_normalizes_heading_on_creation():
    body = KinematicBody("S1", (0, 0), heading=-90.0, speed=3.0)
    assert body.heading == pytest.approx(270.0)
    assert body.position == (0.0, 0.0)


def test_body_rejects_negative_speed():
    with pytest.raises(ValueError):
        KinematicBody("S1", (0.0, 0.0), heading=0.0, speed=-1.0)


def test_turn_stays_in_range():
    body = KinematicBody("own", (0.0, 0.0), heading=350.0)
    body.turn(20.0)
    assert body.heading == pytest.approx(10.0)
    body.turn(-30.0)
    assert body.heading == pytest.approx(340.0)
    for _ in range(1000):
        body.turn(-7.3)
        assert 0.0 <= body.heading < 360.0


def test_speed_decrease_is_clamped_at_zero():
    body = KinematicBody("own", (0.0, 0.0), speed=2.0)
    for _ in range(10):
        body.change_speed(-1.0)
        assert body.speed >= 0.0
    assert body.speed == 0.0
    body.change_speed(1.5)
    assert body.speed == pytest.approx(1.5)


def test_step_updates_position_in_place():
    body = KinematicBody("own", (5000.0, 5000.0), heading=45.0, speed=5.0)
    body.step(1.0)
    d = 5 * 1852 / 3600 * math.sin(math.radians(45.0))
    assert body.position[0] == pytest.approx(5000.0 + d)
    assert body.position[1] == pytest.approx(5000.0 + d)


def test_trail_is_bounded_oldest_first():
    body = KinematicBody("S1", (0.0, 0.0), heading=0.0, speed=10.0)
    body.set_trail_length(3)
    for _ in range(5):
        body.step(1.0)
        body.add_trail_point()
    assert len(body.trail) == 3
    assert body.trail[-1] == body.position
    assert body.trail[0][1] < body.trail[1][1] < body.trail[2][1]


@pytest.mark.parametrize(
    "position, speed",
    [((math.nan, 0.0), 5.0), ((0.0, math.inf), 5.0), ((0.0, 0.0), math.nan), ((0.0, 0.0), math.inf)],
)
def test_body_rejects_non_finite_state(position, speed):
    with pytest.raises(ValueError):
        KinematicBody("own", position, heading=0.0, speed=speed)


@pytest.mark.parametrize(
    "position, speed",
    [((math.nan, 0.0), 5.0), ((0.0, -math.inf), 5.0), ((0.0, 0.0), math.nan), ((0.0, 0.0), -1.0)],
)
def test_advance_rejects_non_finite_position_and_speed(position, speed):
    with pytest.raises(ValueError):
        advance_position(position, speed, 0.0, 1.0)


def test_speed_change_must_be_finite():
    body = KinematicBody("own", (0.0, 0.0), speed=3.0)
    with pytest.raises(ValueError):
        body.change_speed(math.nan)
    assert body.speed == 3.0
