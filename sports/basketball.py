import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from angles import calculate_knee_angle
from geometry import round_half_up
from pose_types import Keyframes, LandmarkIndex, NormalizedPoint, PoseFrame
from sports.base import (
    ArmLandmarks,
    MetricCalculationInput,
    MetricResult,
    contact_height,
    empty_metrics,
    follow_through_score,
    frame_at,
    get_landmark,
    higher_wrist_side,
    joint_elbow_angle,
    jump_height,
    side_landmarks,
    stability_score,
)

logger = logging.getLogger(__name__)

MIN_LANDMARK_CONFIDENCE = 0.5
FOLLOW_THROUGH_FRAMES = 15
FULL_EXTENSION_ANGLE = 170.0


def _lm(frame: Optional[PoseFrame], index: int) -> Optional[NormalizedPoint]:
    return get_landmark(frame, index, MIN_LANDMARK_CONFIDENCE)


def shooting_side(frame: Optional[PoseFrame]) -> str:
    return higher_wrist_side(frame, MIN_LANDMARK_CONFIDENCE)


def release_angle(wrist: Optional[NormalizedPoint], elbow: Optional[NormalizedPoint]) -> Optional[float]:
    """Forearm elevation above horizontal at release, 0-90 degrees."""
    if wrist is None or elbow is None:
        return None
    dx = wrist.x - elbow.x
    dy = wrist.y - elbow.y
    degrees = abs(math.degrees(math.atan2(-dy, abs(dx))))
    if math.isnan(degrees):
        return None
    return round_half_up(max(0.0, min(90.0, degrees)), 1)


def elbow_angle(frame: Optional[PoseFrame], arm: ArmLandmarks) -> Optional[float]:
    return joint_elbow_angle(frame, arm, MIN_LANDMARK_CONFIDENCE)


def knee_angle(frame: Optional[PoseFrame], arm: ArmLandmarks) -> Optional[float]:
    hip = _lm(frame, arm.hip)
    knee = _lm(frame, arm.knee)
    ankle = _lm(frame, arm.ankle)
    if hip is None or knee is None or ankle is None:
        return None
    result = calculate_knee_angle(hip, knee, ankle)
    if not result.is_valid or math.isnan(result.degrees):
        return None
    return round_half_up(result.degrees, 1)


def stability_index(frames: Sequence[PoseFrame], start: Optional[int], release: Optional[int]) -> Optional[float]:
    if start is None or release is None:
        return None
    if start < 0 or release >= len(frames) or start >= release:
        return None
    return stability_score(frames, start, release, MIN_LANDMARK_CONFIDENCE)


def follow_through(frames: Sequence[PoseFrame], release: Optional[int], arm: ArmLandmarks) -> Optional[float]:
    if release is None:
        return None
    return follow_through_score(
        frames, arm, release, MIN_LANDMARK_CONFIDENCE, FOLLOW_THROUGH_FRAMES, FULL_EXTENSION_ANGLE
    )


def release_timing_ms(keyframes: Keyframes, fps: float) -> Optional[float]:
    # Negative means the ball left the hand before the jump peak.
    if keyframes.release is None or keyframes.peak_jump is None or fps <= 0:
        return None
    return round_half_up((keyframes.release - keyframes.peak_jump) / fps * 1000.0)


def _valid_fps(fps: float) -> bool:
    return fps > 0 and not math.isnan(fps)


def jump_shot_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics(
        "release_angle",
        "elbow_angle_at_release",
        "knee_angle_at_peak",
        "jump_height_normalized",
        "stability_index",
        "follow_through_score",
        "release_timing_ms",
    )
    if not frames:
        logger.warning("No frames provided")
        return metrics
    if not _valid_fps(fps):
        logger.warning("Invalid FPS: %s", fps)
        return metrics

    release_frame = frame_at(frames, keyframes.release)
    side = shooting_side(release_frame) if release_frame is not None else "right"
    arm = side_landmarks(side)

    if release_frame is not None:
        metrics["release_angle"] = release_angle(_lm(release_frame, arm.wrist), _lm(release_frame, arm.elbow))
        metrics["elbow_angle_at_release"] = elbow_angle(release_frame, arm)

    peak_frame = frame_at(frames, keyframes.peak_jump)
    if peak_frame is not None:
        metrics["knee_angle_at_peak"] = knee_angle(peak_frame, arm)

    metrics["jump_height_normalized"] = jump_height(frames, fps, keyframes)
    metrics["stability_index"] = stability_index(frames, keyframes.start, keyframes.release)
    metrics["follow_through_score"] = follow_through(frames, keyframes.release, arm)
    metrics["release_timing_ms"] = release_timing_ms(keyframes, fps)
    return metrics


def free_throw_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics(
        "release_angle",
        "elbow_angle_at_release",
        "knee_angle_push",
        "stability_index",
        "follow_through_score",
        "rhythm_consistency",
    )
    if not frames or not _valid_fps(fps):
        return metrics

    release = keyframes.release if keyframes.release is not None else keyframes.peak_jump
    release_frame = frame_at(frames, release)
    side = shooting_side(release_frame) if release_frame is not None else "right"
    arm = side_landmarks(side)

    if release_frame is not None:
        metrics["release_angle"] = release_angle(_lm(release_frame, arm.wrist), _lm(release_frame, arm.elbow))
        metrics["elbow_angle_at_release"] = elbow_angle(release_frame, arm)

    push = release if release is not None else len(frames) // 2
    push_frame = frame_at(frames, push)
    if push_frame is not None:
        metrics["knee_angle_push"] = knee_angle(push_frame, arm)

    metrics["stability_index"] = stability_index(frames, keyframes.start, release)
    metrics["follow_through_score"] = follow_through(frames, release, arm)

    # Steady wrist height through the set-up reads as a repeatable rhythm.
    if keyframes.start is not None and release is not None and release > keyframes.start:
        ys = []
        for i in range(keyframes.start, release + 1):
            wrist = _lm(frame_at(frames, i), arm.wrist)
            if wrist is not None:
                ys.append(wrist.y)
        if len(ys) >= 4:
            variance = float(np.var(ys))
            metrics["rhythm_consistency"] = round_half_up(max(0.0, 100.0 - variance / 0.002 * 100.0))
    return metrics


def layup_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics(
        "approach_speed",
        "takeoff_angle",
        "peak_height",
        "stability_index",
        "finish_hand_position",
    )
    if not frames or not _valid_fps(fps):
        return metrics

    start = keyframes.start if keyframes.start is not None else 0
    end = keyframes.end if keyframes.end is not None else len(frames) - 1
    peak = keyframes.peak_jump if keyframes.peak_jump is not None else (start + end) // 2
    release = keyframes.release if keyframes.release is not None else peak

    metrics["approach_speed"] = _approach_speed(frames, start, fps)
    metrics["takeoff_angle"] = _takeoff_angle(frame_at(frames, start), frame_at(frames, peak))
    metrics["peak_height"] = jump_height(frames, fps, keyframes)
    metrics["stability_index"] = stability_index(frames, start, release)

    release_frame = frame_at(frames, release)
    if release_frame is not None:
        arm = side_landmarks(shooting_side(release_frame))
        metrics["finish_hand_position"] = contact_height(release_frame, arm, MIN_LANDMARK_CONFIDENCE)
    return metrics


def _hip_center(frame: Optional[PoseFrame]) -> Optional[NormalizedPoint]:
    left = _lm(frame, LandmarkIndex.LEFT_HIP)
    right = _lm(frame, LandmarkIndex.RIGHT_HIP)
    if left is None or right is None:
        return None
    return NormalizedPoint((left.x + right.x) / 2.0, (left.y + right.y) / 2.0)


def _approach_speed(frames: Sequence[PoseFrame], start: int, fps: float) -> Optional[float]:
    """Horizontal hip travel over the 8 frames before takeoff, where 8 body widths per second scores 100."""
    approach_start = max(0, start - 8)
    first = frame_at(frames, approach_start)
    last = frame_at(frames, start)
    a = _hip_center(first)
    b = _hip_center(last)
    if a is None or b is None:
        return None
    duration = (start - approach_start) / fps
    if duration <= 0:
        return None
    ls = _lm(first, LandmarkIndex.LEFT_SHOULDER)
    rs = _lm(first, LandmarkIndex.RIGHT_SHOULDER)
    body_width = abs(rs.x - ls.x) if ls is not None and rs is not None else 0.15
    reference = max(body_width, 0.05) * 8.0
    raw_speed = abs(b.x - a.x) / duration
    return round_half_up(min(100.0, raw_speed / reference * 100.0))


def _takeoff_angle(takeoff: Optional[PoseFrame], peak: Optional[PoseFrame]) -> Optional[float]:
    a = _hip_center(takeoff)
    b = _hip_center(peak)
    if a is None or b is None:
        return None
    dx = abs(b.x - a.x)
    dy = abs(b.y - a.y)
    if dy <= 0.001:
        return None
    return round_half_up(math.degrees(math.atan2(dy, dx)))


def dribbling_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, fps = data.smoothed_frames, data.fps
    metrics = empty_metrics("knee_bend_score", "stance_width", "balance_score", "trunk_lean")
    if not frames or not _valid_fps(fps):
        return metrics

    step = max(1, len(frames) // 20)
    samples = [f for f in frames[::step] if f is not None]
    if len(samples) < 3:
        return metrics

    hip_drops: List[float] = []
    width_ratios: List[float] = []
    hip_xs: List[float] = []
    leans: List[float] = []
    for frame in samples:
        ls = _lm(frame, LandmarkIndex.LEFT_SHOULDER)
        rs = _lm(frame, LandmarkIndex.RIGHT_SHOULDER)
        lh = _lm(frame, LandmarkIndex.LEFT_HIP)
        rh = _lm(frame, LandmarkIndex.RIGHT_HIP)
        la = _lm(frame, LandmarkIndex.LEFT_ANKLE)
        ra = _lm(frame, LandmarkIndex.RIGHT_ANKLE)
        shoulders = ls is not None and rs is not None
        hips = lh is not None and rh is not None
        ankles = la is not None and ra is not None

        if shoulders and hips and ankles:
            sh_y = (ls.y + rs.y) / 2.0
            body_height = (la.y + ra.y) / 2.0 - sh_y
            if body_height > 0.15:
                hip_drops.append(((lh.y + rh.y) / 2.0 - sh_y) / body_height)

        if ankles and shoulders:
            sw = abs(ls.x - rs.x)
            if sw > 0.03:
                width_ratios.append(abs(la.x - ra.x) / sw * 100.0)

        if hips:
            hip_xs.append((lh.x + rh.x) / 2.0)

        if shoulders and hips:
            dy = (lh.y + rh.y) / 2.0 - (ls.y + rs.y) / 2.0
            # positive dx: shoulders ahead of hips
            dx = (ls.x + rs.x) / 2.0 - (lh.x + rh.x) / 2.0
            lean = abs(math.degrees(math.atan2(dx, dy)))
            if not math.isnan(lean):
                leans.append(lean)

    if hip_drops:
        # Hip drop ratio 0.45 is upright, 0.78 is a deep athletic crouch.
        avg = sum(hip_drops) / len(hip_drops)
        metrics["knee_bend_score"] = round_half_up(max(0.0, min(100.0, (avg - 0.45) / (0.78 - 0.45) * 100.0)))
    if width_ratios:
        metrics["stance_width"] = round_half_up(sum(width_ratios) / len(width_ratios))
    if len(hip_xs) > 2:
        std = float(np.std(hip_xs))
        metrics["balance_score"] = round_half_up(max(0.0, min(100.0, (1 - std / 0.12) * 100.0)))
    if leans:
        metrics["trunk_lean"] = round_half_up(sum(leans) / len(leans))
    return metrics


ACTIONS = {
    "jump_shot": jump_shot_metrics,
    "free_throw": free_throw_metrics,
    "layup": layup_metrics,
    "dribbling": dribbling_metrics,
}


def calculate_basketball_metrics(data: MetricCalculationInput) -> MetricResult:
    calculator = ACTIONS.get(data.action)
    if calculator is None:
        logger.warning("Unknown basketball action: %s", data.action)
        return {}
    metrics = calculator(data)
    logger.debug("Basketball %s metrics: %s", data.action, metrics)
    return metrics
