import pytest

from conftest import point
from distances import (
    calculate_arm_extension,
    calculate_distance,
    calculate_distance_ratio,
    calculate_horizontal_distance,
    calculate_torso_length,
    calculate_vertical_distance_physics,
    estimate_scale_factor,
    normalized_to_real,
)


def test_distance_between_points():
    result = calculate_distance(point(0.1, 0.1), point(0.4, 0.5))
    assert result.is_valid
    assert result.normalized == pytest.approx(0.5)


@pytest.mark.parametrize("vis_a,vis_b", [(0.1, 0.9), (0.9, 0.29), (0.0, 0.0)])
def test_low_visibility_distance_is_invalid_and_zero(vis_a, vis_b):
    result = calculate_distance(point(0.1, 0.1, vis_a), point(0.4, 0.5, vis_b))
    assert result.is_valid is False
    assert result.normalized == 0


def test_missing_point_distance():
    assert not calculate_distance(None, point(0.1, 0.1)).is_valid


def test_horizontal_distance_keeps_sign_and_value():
    result = calculate_horizontal_distance(point(0.6, 0.5, 0.1), point(0.4, 0.5))
    assert result.normalized == pytest.approx(-0.2)
    assert not result.is_valid


def test_physics_vertical_distance_is_positive_upward():
    result = calculate_vertical_distance_physics(point(0.5, 0.8), point(0.5, 0.3))
    assert result.normalized == pytest.approx(0.5)


def test_torso_length_between_midpoints():
    result = calculate_torso_length(point(0.56, 0.3), point(0.44, 0.3), point(0.54, 0.55), point(0.46, 0.55))
    assert result.normalized == pytest.approx(0.25)


def test_distance_ratio_guards_invalid_and_zero():
    valid = calculate_distance(point(0, 0), point(0.3, 0.4))
    zero = calculate_distance(point(0, 0), point(0, 0))
    invalid = calculate_distance(point(0, 0, 0.1), point(0.3, 0.4))
    assert calculate_distance_ratio(valid, valid) == pytest.approx(1.0)
    assert calculate_distance_ratio(valid, zero) == 0.0
    assert calculate_distance_ratio(invalid, valid) == 0.0


def test_straight_arm_is_fully_extended():
    assert calculate_arm_extension(point(0.5, 0.1), point(0.5, 0.3), point(0.5, 0.5)) == pytest.approx(100.0)


def test_bent_arm_extension_below_full():
    assert calculate_arm_extension(point(0.5, 0.1), point(0.7, 0.3), point(0.5, 0.5)) < 100.0


def test_scale_factor():
    assert estimate_scale_factor(0.21) == pytest.approx(200.0)
    assert estimate_scale_factor(0.0) == 0.0
    assert normalized_to_real(0.1, 200.0) == pytest.approx(20.0)
