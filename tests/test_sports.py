import pytest

from conftest import make_frame
from pose_types import Keyframes, LandmarkIndex as L
from sports import (
    MetricCalculationInput,
    calculate_badminton_metrics,
    calculate_basketball_metrics,
    calculate_volleyball_metrics,
)
from sports.base import (
    RIGHT_ARM,
    body_posture_score,
    contact_height,
    find_contact_frame,
    hand_symmetry,
    higher_wrist_side,
    locate_overhead_contact,
    stability_score,
    trunk_rotation,
)

SHOT_KEYFRAMES = Keyframes(start=5, peak_jump=30, release=30, end=55)


def shot_input(frames, action, keyframes=SHOT_KEYFRAMES, fps=30.0):
    return MetricCalculationInput(smoothed_frames=frames, keyframes=keyframes, fps=fps, action=action)


def test_standing_helpers():
    frame = make_frame()
    assert contact_height(frame, RIGHT_ARM, 0.5) == 62
    assert trunk_rotation(frame, 0.5) == 0.0
    assert body_posture_score(frame, 0.5) == 100
    assert hand_symmetry(frame, 0.5) == 100


def test_helpers_respect_visibility():
    frame = make_frame(visibility=0.3)
    assert contact_height(frame, RIGHT_ARM, 0.5) is None
    assert trunk_rotation(frame, 0.5) is None
    assert hand_symmetry(frame, 0.5) is None


def test_contact_height_needs_a_visible_body():
    # Shoulders and ankles nearly level: no usable body height.
    frame = make_frame(overrides={L.LEFT_ANKLE: (0.54, 0.32), L.RIGHT_ANKLE: (0.46, 0.32)})
    assert contact_height(frame, RIGHT_ARM, 0.5) is None


def test_leaning_lowers_posture():
    frame = make_frame(overrides={L.LEFT_SHOULDER: (0.66, 0.32), L.RIGHT_SHOULDER: (0.54, 0.32)})
    assert body_posture_score(frame, 0.5) < 100


def test_stability_drops_with_sideways_drift():
    frames = [make_frame(0), make_frame(1, overrides={L.LEFT_HIP: (0.58, 0.55), L.RIGHT_HIP: (0.50, 0.55)})]
    assert stability_score(frames, 0, 0, 0.5) == 100
    # 0.04 of drift over a 0.12 shoulder width
    assert stability_score(frames, 0, 1, 0.5) == 58


def test_raised_hand_decides_side(shot_frames):
    assert higher_wrist_side(shot_frames[30], 0.5) == "right"
    assert find_contact_frame(shot_frames, "right", 0.5) == 30


def test_overhead_contact_without_release(shot_frames):
    hit = locate_overhead_contact(shot_frames, Keyframes(), 0.45)
    assert hit.contact == 30
    assert hit.side == "right"
    assert hit.arm == RIGHT_ARM


def test_jump_shot_metrics(shot_frames):
    metrics = calculate_basketball_metrics(shot_input(shot_frames, "jump_shot"))
    assert set(metrics) == {
        "release_angle",
        "elbow_angle_at_release",
        "knee_angle_at_peak",
        "jump_height_normalized",
        "stability_index",
        "follow_through_score",
        "release_timing_ms",
    }
    assert metrics["release_angle"] == 90.0
    assert metrics["elbow_angle_at_release"] > 165
    assert metrics["knee_angle_at_peak"] > 175
    assert metrics["jump_height_normalized"] == pytest.approx(0.1)
    assert metrics["stability_index"] == 100
    assert metrics["follow_through_score"] == 100
    assert metrics["release_timing_ms"] == 0


def test_release_timing_sign(shot_frames):
    keyframes = Keyframes(start=5, peak_jump=30, release=27, end=55)
    metrics = calculate_basketball_metrics(shot_input(shot_frames, "jump_shot", keyframes))
    assert metrics["release_timing_ms"] == -100


def test_missing_keyframes_leave_metrics_empty(shot_frames):
    metrics = calculate_basketball_metrics(shot_input(shot_frames, "jump_shot", Keyframes()))
    assert metrics["release_angle"] is None
    assert metrics["jump_height_normalized"] is None
    assert metrics["release_timing_ms"] is None


@pytest.mark.parametrize("fps", [0.0, float("nan")])
def test_invalid_fps_yields_all_none(shot_frames, fps):
    metrics = calculate_basketball_metrics(shot_input(shot_frames, "jump_shot", fps=fps))
    assert metrics and all(value is None for value in metrics.values())


def test_dribbling_standing(standing_frames):
    metrics = calculate_basketball_metrics(shot_input(standing_frames, "dribbling", Keyframes()))
    assert metrics["knee_bend_score"] == 0
    assert metrics["stance_width"] == 67
    assert metrics["balance_score"] == 100
    assert metrics["trunk_lean"] == 0


def test_free_throw_and_layup_keys(shot_frames):
    free_throw = calculate_basketball_metrics(shot_input(shot_frames, "free_throw"))
    assert "rhythm_consistency" in free_throw
    assert free_throw["release_angle"] == 90.0
    layup = calculate_basketball_metrics(shot_input(shot_frames, "layup"))
    assert set(layup) == {"approach_speed", "takeoff_angle", "peak_height", "stability_index", "finish_hand_position"}


@pytest.mark.parametrize(
    "calculate", [calculate_basketball_metrics, calculate_volleyball_metrics, calculate_badminton_metrics]
)
def test_unknown_action_returns_empty(shot_frames, calculate, caplog):
    assert calculate(shot_input(shot_frames, "cartwheel")) == {}
    assert "Unknown" in caplog.text


def test_spike_metrics(shot_frames):
    metrics = calculate_volleyball_metrics(shot_input(shot_frames, "spike"))
    assert metrics["contact_height"] == 130
    assert metrics["elbow_at_contact"] > 165
    assert metrics["jump_height"] == pytest.approx(0.1)
    assert metrics["trunk_rotation"] == 0.0
    assert metrics["body_alignment"] == 100
    assert metrics["stability"] == 100
    assert metrics["arm_swing_score"] > 50


def test_block_metrics(jump_frames):
    metrics = calculate_volleyball_metrics(shot_input(jump_frames, "block", Keyframes(start=0, peak_jump=30)))
    assert metrics["hand_height"] == 62
    assert metrics["hand_symmetry"] == 100
    assert metrics["arm_extension"] > 160
    assert metrics["jump_height"] == pytest.approx(0.1)


def test_set_finds_contact_without_release(shot_frames):
    metrics = calculate_volleyball_metrics(shot_input(shot_frames, "set", Keyframes()))
    assert set(metrics) == {"hand_symmetry", "elbow_angle", "contact_height", "body_alignment", "stability"}
    assert metrics["contact_height"] is not None
    # No start keyframe, so no drift window.
    assert metrics["stability"] is None


@pytest.mark.parametrize(
    "action,keys",
    [
        ("smash", {"elbow_at_contact", "contact_height", "trunk_rotation", "wrist_speed", "jump_height",
                   "follow_through", "body_alignment"}),
        ("clear", {"elbow_at_contact", "contact_height", "trunk_rotation", "wrist_speed", "follow_through",
                   "body_alignment"}),
        ("drop_shot", {"contact_height", "elbow_angle", "trunk_rotation", "body_alignment", "stability"}),
        ("serve", {"stability", "elbow_at_contact", "follow_through", "body_alignment"}),
    ],
)
def test_badminton_metric_keys(shot_frames, action, keys):
    metrics = calculate_badminton_metrics(shot_input(shot_frames, action))
    assert set(metrics) == keys
    assert any(value is not None for value in metrics.values())


def test_badminton_shares_overhead_measurements(shot_frames):
    smash = calculate_badminton_metrics(shot_input(shot_frames, "smash"))
    spike = calculate_volleyball_metrics(shot_input(shot_frames, "spike"))
    assert smash["elbow_at_contact"] == spike["elbow_at_contact"]
    assert smash["wrist_speed"] == spike["arm_swing_score"]
    drop = calculate_badminton_metrics(shot_input(shot_frames, "drop_shot"))
    assert drop["elbow_angle"] == smash["elbow_at_contact"]


def test_badminton_without_frames():
    metrics = calculate_badminton_metrics(shot_input([], "serve"))
    assert metrics == {"stability": None, "elbow_at_contact": None, "follow_through": None, "body_alignment": None}
