import pytest

from conftest import PEAK, jump_lift, make_frame, point
from jump import (
    analyze_jump,
    calculate_hip_center,
    estimate_jump_height,
    estimate_scale_factor_from_height,
    find_baseline_frame,
    find_peak_jump_frame,
    jump_height_to_cm,
)
from pose_types import Keyframes


def test_hip_center_is_midpoint():
    hip = calculate_hip_center(point(0.4, 0.5, 0.9), point(0.6, 0.7, 0.8))
    assert hip.is_valid
    assert hip.position.x == pytest.approx(0.5)
    assert hip.position.y == pytest.approx(0.6)
    assert hip.confidence == pytest.approx(0.8)


def test_hip_center_rejects_low_visibility():
    hip = calculate_hip_center(point(0.4, 0.5, 0.9), point(0.6, 0.7, 0.2))
    assert not hip.is_valid
    assert hip.confidence == pytest.approx(0.2)
    assert not calculate_hip_center(None, point(0.6, 0.7)).is_valid


def test_missing_visibility_counts_as_fully_visible():
    hip = calculate_hip_center(point(0.4, 0.5, None), point(0.6, 0.7, None))
    assert hip.is_valid
    assert hip.confidence == 1.0

    frames = [make_frame(i, lift=jump_lift(i), visibility=None) for i in range(60)]
    assert find_peak_jump_frame(frames) == PEAK
    analysis = analyze_jump(frames, 30.0)
    assert analysis.is_valid
    assert analysis.takeoff_frame == 20
    assert analysis.landing_frame == 34


def test_peak_and_baseline(jump_frames):
    assert find_peak_jump_frame(jump_frames) == PEAK
    assert find_baseline_frame(jump_frames) == 0
    assert find_baseline_frame(jump_frames[:4]) is None


def test_jump_height(jump_frames):
    result = estimate_jump_height(jump_frames, PEAK, 0)
    assert result.is_valid
    assert result.height_normalized == pytest.approx(0.1)
    assert result.height_percentage == pytest.approx(0.1 / 0.6 * 100)


def test_tiny_jump_is_noise():
    frames = [make_frame(i, lift=0.005 if i == 5 else 0.0) for i in range(10)]
    assert not estimate_jump_height(frames, 5, 0).is_valid


def test_analyze_jump(jump_frames):
    analysis = analyze_jump(jump_frames, 30.0)
    assert analysis.is_valid
    assert analysis.peak_frame == PEAK
    assert analysis.height_normalized == pytest.approx(0.1)
    # First upward hip speed above 0.5/s, and first near-still frame more than 3 frames past the peak.
    assert analysis.takeoff_frame == 20
    assert analysis.landing_frame == 34
    assert analysis.flight_time == pytest.approx(14 / 30.0)
    assert analysis.peak_velocity > 0.5


def test_analyze_jump_prefers_keyframes(jump_frames):
    analysis = analyze_jump(jump_frames, 30.0, Keyframes(start=0, peak_jump=25))
    assert analysis.peak_frame == 25
    assert analysis.height_normalized < 0.1


def test_analyze_jump_needs_frames_and_fps(jump_frames):
    assert not analyze_jump(jump_frames[:9], 30.0).is_valid
    assert not analyze_jump(jump_frames, 0.0).is_valid


def test_standing_clip_has_no_jump(standing_frames):
    assert not analyze_jump(standing_frames, 30.0).is_valid


def test_unit_conversion():
    scale = estimate_scale_factor_from_height(175.0, 0.7)
    assert scale == pytest.approx(250.0)
    assert jump_height_to_cm(0.1, scale) == pytest.approx(25.0)
    assert estimate_scale_factor_from_height(175.0, 0.0) == 0.0


def ramp_clip(rise: float, fall: float, n: int = 50) -> list:
    """Hips still until frame 10, rise at a constant rate to frame 20, fall until frame 40, then still."""

    def lift(i):
        if i <= 10:
            return 0.0
        top = rise * 10
        if i <= 20:
            return rise * (i - 10)
        return max(0.0, top - fall * (min(i, 40) - 20))

    return [make_frame(i, lift=lift(i)) for i in range(n)]


@pytest.mark.parametrize(
    "rise,expected",
    [
        (0.0175, 10),  # 0.525/s
        (0.0160, None),  # 0.48/s
    ],
)
def test_takeoff_threshold(rise, expected):
    analysis = analyze_jump(ramp_clip(rise, 0.03), 30.0)
    assert analysis.is_valid
    assert analysis.peak_frame == 20
    assert analysis.takeoff_frame == expected


@pytest.mark.parametrize(
    "fall,expected",
    [
        (0.0090, 24),  # 0.27/s, held off until 3 frames past the peak
        (0.0110, 40),  # 0.33/s, still only once the hips stop
    ],
)
def test_landing_threshold(fall, expected):
    analysis = analyze_jump(ramp_clip(0.03, fall), 30.0)
    assert analysis.is_valid
    assert analysis.peak_frame == 20
    assert analysis.landing_frame == expected
    assert analysis.flight_time == pytest.approx((expected - 10) / 30.0)
