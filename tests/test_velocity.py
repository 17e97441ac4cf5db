import pytest

from conftest import point
from velocity import (
    calculate_acceleration,
    calculate_average_velocity,
    calculate_horizontal_velocity,
    calculate_peak_velocity,
    calculate_speed,
    calculate_velocity,
    calculate_vertical_velocity,
    calculate_vertical_velocity_physics,
    cm_per_sec_to_m_per_sec,
)


def test_velocity_scales_with_fps():
    result = calculate_velocity(point(0.5, 0.5), point(0.53, 0.54), fps=30)
    assert result.is_valid
    assert result.vx == pytest.approx(0.9)
    assert result.vy == pytest.approx(1.2)
    assert result.speed == pytest.approx(1.5)


def test_invalid_fps_falls_back_to_default():
    assert calculate_velocity(point(0.5, 0.5), point(0.6, 0.5), fps=0).vx == pytest.approx(3.0)


@pytest.mark.parametrize("fps", [0, -15.0])
def test_every_rate_function_treats_nonpositive_fps_as_thirty(fps):
    p1, p2 = point(0.5, 0.5), point(0.6, 0.6)
    assert calculate_vertical_velocity(p1, p2, fps) == pytest.approx(3.0)
    assert calculate_vertical_velocity_physics(p1, p2, fps) == pytest.approx(-3.0)
    assert calculate_horizontal_velocity(p1, p2, fps) == pytest.approx(3.0)
    assert calculate_speed(p1, p2, fps).speed == pytest.approx(calculate_speed(p1, p2, 30).speed)

    acc = calculate_acceleration(point(0.5, 0.5), point(0.5, 0.6), point(0.5, 0.8), fps)
    assert acc.x == pytest.approx(0.0)
    assert acc.y == pytest.approx(90.0)

    avg = calculate_average_velocity([point(0.5, 0.5), point(0.5, 0.55), point(0.5, 0.6)], fps)
    assert avg.is_valid
    assert avg.vy == pytest.approx(1.5)
    assert avg.speed == pytest.approx(1.5)


def test_low_visibility_velocity_is_invalid():
    result = calculate_velocity(point(0.5, 0.5, 0.1), point(0.6, 0.5))
    assert not result.is_valid
    assert result.speed == 0.0


def test_speed_matches_distance_rate():
    assert calculate_speed(point(0.1, 0.1), point(0.4, 0.5), fps=10).speed == pytest.approx(5.0)


def test_vertical_velocity_sign_conventions():
    rising = (point(0.5, 0.6), point(0.5, 0.5))
    assert calculate_vertical_velocity(*rising, fps=30) == pytest.approx(-3.0)
    assert calculate_vertical_velocity_physics(*rising, fps=30) == pytest.approx(3.0)


def test_constant_velocity_has_no_acceleration():
    acc = calculate_acceleration(point(0.1, 0.1), point(0.2, 0.1), point(0.3, 0.1), fps=30)
    assert acc.x == pytest.approx(0.0)
    assert acc.y == pytest.approx(0.0)


def test_average_velocity_uses_net_displacement():
    points = [point(0.1, 0.5), point(0.5, 0.5), point(0.2, 0.5), point(0.4, 0.5)]
    result = calculate_average_velocity(points, fps=30)
    assert result.vx == pytest.approx(0.3 / (3 / 30))
    assert result.is_valid


def test_average_velocity_low_confidence():
    points = [point(0.1, 0.5, 0.1), point(0.2, 0.5, 0.2)]
    assert not calculate_average_velocity(points).is_valid


def test_peak_velocity_index_is_later_frame():
    points = [point(0.1, 0.5), point(0.11, 0.5), point(0.31, 0.5), point(0.32, 0.5)]
    speed, index = calculate_peak_velocity(points, fps=10)
    assert index == 2
    assert speed == pytest.approx(2.0)


def test_unit_conversion():
    assert cm_per_sec_to_m_per_sec(250) == pytest.approx(2.5)
