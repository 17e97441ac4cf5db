import logging
from typing import Optional

from geometry import round_half_up
from pose_types import LandmarkIndex
from sports.base import (
    LEFT_ARM,
    RIGHT_ARM,
    MetricCalculationInput,
    MetricResult,
    arm_swing_score,
    body_posture_score,
    contact_height,
    empty_metrics,
    follow_through_score,
    frame_at,
    get_landmark,
    hand_symmetry,
    higher_wrist_side,
    joint_elbow_angle,
    jump_height,
    locate_overhead_contact,
    side_landmarks,
    stability_score,
    trunk_rotation,
)

logger = logging.getLogger(__name__)

MIN_VISIBILITY = 0.45
FULL_EXTENSION_ANGLE = 172.0


def _stability(frames, start: Optional[int], contact: int) -> Optional[float]:
    if start is None or start < 0 or contact >= len(frames):
        return None
    return stability_score(frames, start, contact, MIN_VISIBILITY)


def _both_elbows(frame) -> Optional[float]:
    left = joint_elbow_angle(frame, LEFT_ARM, MIN_VISIBILITY)
    right = joint_elbow_angle(frame, RIGHT_ARM, MIN_VISIBILITY)
    if left is not None and right is not None:
        return round_half_up((left + right) / 2.0)
    return left if left is not None else right


def spike_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics(
        "elbow_at_contact",
        "contact_height",
        "arm_swing_score",
        "jump_height",
        "trunk_rotation",
        "body_alignment",
        "stability",
    )
    if not frames or fps <= 0:
        return metrics
    hit = locate_overhead_contact(frames, keyframes, MIN_VISIBILITY)
    if hit is None:
        return metrics

    metrics["elbow_at_contact"] = joint_elbow_angle(hit.frame, hit.arm, MIN_VISIBILITY)
    metrics["contact_height"] = contact_height(hit.frame, hit.arm, MIN_VISIBILITY)
    metrics["arm_swing_score"] = arm_swing_score(frames, hit.arm, hit.contact, fps, MIN_VISIBILITY)
    metrics["jump_height"] = jump_height(frames, fps, keyframes)
    metrics["trunk_rotation"] = trunk_rotation(hit.frame, MIN_VISIBILITY)
    metrics["body_alignment"] = body_posture_score(hit.frame, MIN_VISIBILITY)
    metrics["stability"] = _stability(frames, keyframes.start, hit.contact)
    return metrics


def serve_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics(
        "elbow_at_contact",
        "contact_height",
        "trunk_rotation",
        "follow_through",
        "stability",
        "arm_swing_score",
    )
    if not frames or fps <= 0:
        return metrics
    hit = locate_overhead_contact(frames, keyframes, MIN_VISIBILITY)
    if hit is None:
        return metrics

    metrics["elbow_at_contact"] = joint_elbow_angle(hit.frame, hit.arm, MIN_VISIBILITY)
    metrics["contact_height"] = contact_height(hit.frame, hit.arm, MIN_VISIBILITY)
    metrics["trunk_rotation"] = trunk_rotation(hit.frame, MIN_VISIBILITY)
    metrics["follow_through"] = follow_through_score(
        frames, hit.arm, hit.contact, MIN_VISIBILITY, 15, FULL_EXTENSION_ANGLE
    )
    metrics["stability"] = _stability(frames, keyframes.start, hit.contact)
    metrics["arm_swing_score"] = arm_swing_score(frames, hit.arm, hit.contact, fps, MIN_VISIBILITY, lookback=10)
    return metrics


def block_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics("jump_height", "arm_extension", "hand_height", "hand_symmetry", "body_alignment")
    if not frames or fps <= 0:
        return metrics

    peak = keyframes.peak_jump
    if peak is None:
        peak = len(frames) // 2
        min_y = float("inf")
        for i, frame in enumerate(frames):
            lh = get_landmark(frame, LandmarkIndex.LEFT_HIP, MIN_VISIBILITY)
            rh = get_landmark(frame, LandmarkIndex.RIGHT_HIP, MIN_VISIBILITY)
            if lh is None or rh is None:
                continue
            y = (lh.y + rh.y) / 2.0
            if y < min_y:
                min_y = y
                peak = i

    peak_frame = frame_at(frames, peak)
    if peak_frame is None:
        return metrics

    metrics["jump_height"] = jump_height(frames, fps, keyframes)
    metrics["arm_extension"] = _both_elbows(peak_frame)
    arm = side_landmarks(higher_wrist_side(peak_frame, MIN_VISIBILITY))
    metrics["hand_height"] = contact_height(peak_frame, arm, MIN_VISIBILITY)
    metrics["hand_symmetry"] = hand_symmetry(peak_frame, MIN_VISIBILITY)
    metrics["body_alignment"] = body_posture_score(peak_frame, MIN_VISIBILITY)
    return metrics


def set_metrics(data: MetricCalculationInput) -> MetricResult:
    frames, keyframes, fps = data.smoothed_frames, data.keyframes, data.fps
    metrics = empty_metrics("hand_symmetry", "elbow_angle", "contact_height", "body_alignment", "stability")
    if not frames or fps <= 0:
        return metrics

    search_start = keyframes.start if keyframes.start is not None else 0
    search_end = keyframes.end if keyframes.end is not None else len(frames) - 1
    contact = keyframes.release
    if contact is None:
        # Setting contact: both hands at their highest.
        contact = (search_start + search_end) // 2
        min_y = float("inf")
        for i in range(search_start, search_end + 1):
            frame = frame_at(frames, i)
            lw = get_landmark(frame, LandmarkIndex.LEFT_WRIST, MIN_VISIBILITY)
            rw = get_landmark(frame, LandmarkIndex.RIGHT_WRIST, MIN_VISIBILITY)
            if lw is not None and rw is not None:
                y = (lw.y + rw.y) / 2.0
            elif lw is not None or rw is not None:
                y = (lw or rw).y
            else:
                continue
            if y < min_y:
                min_y = y
                contact = i

    contact_frame = frame_at(frames, contact)
    if contact_frame is None:
        return metrics

    metrics["hand_symmetry"] = hand_symmetry(contact_frame, MIN_VISIBILITY)
    metrics["elbow_angle"] = _both_elbows(contact_frame)
    arm = side_landmarks(higher_wrist_side(contact_frame, MIN_VISIBILITY))
    metrics["contact_height"] = contact_height(contact_frame, arm, MIN_VISIBILITY)
    metrics["body_alignment"] = body_posture_score(contact_frame, MIN_VISIBILITY)
    metrics["stability"] = _stability(frames, keyframes.start, contact)
    return metrics


ACTIONS = {
    "spike": spike_metrics,
    "serve": serve_metrics,
    "block": block_metrics,
    "set": set_metrics,
}


def calculate_volleyball_metrics(data: MetricCalculationInput) -> MetricResult:
    calculator = ACTIONS.get(data.action)
    if calculator is None:
        logger.warning("Unknown volleyball action: %s", data.action)
        return {}
    metrics = calculator(data)
    logger.debug("Volleyball %s metrics: %s", data.action, metrics)
    return metrics
