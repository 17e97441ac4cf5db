import logging
from typing import Optional

from sports.base import (
    MetricCalculationInput,
    MetricResult,
    OverheadContact,
    arm_swing_score,
    body_posture_score,
    contact_height,
    empty_metrics,
    follow_through_score,
    joint_elbow_angle,
    jump_height,
    locate_overhead_contact,
    stability_score,
    trunk_rotation,
)

logger = logging.getLogger(__name__)

MIN_VISIBILITY = 0.45
FULL_EXTENSION_ANGLE = 172.0
FOLLOW_THROUGH_FRAMES = 12

ACTION_METRICS = {
    "smash": (
        "elbow_at_contact",
        "contact_height",
        "trunk_rotation",
        "wrist_speed",
        "jump_height",
        "follow_through",
        "body_alignment",
    ),
    "clear": (
        "elbow_at_contact",
        "contact_height",
        "trunk_rotation",
        "follow_through",
        "body_alignment",
        "wrist_speed",
    ),
    "drop_shot": ("contact_height", "elbow_angle", "trunk_rotation", "body_alignment", "stability"),
    "serve": ("stability", "elbow_at_contact", "follow_through", "body_alignment"),
}


def _stability(data: MetricCalculationInput, hit: OverheadContact) -> Optional[float]:
    start = data.keyframes.start
    if start is None or start < 0 or hit.contact >= len(data.smoothed_frames):
        return None
    return stability_score(data.smoothed_frames, start, hit.contact, MIN_VISIBILITY)


def _measure(key: str, data: MetricCalculationInput, hit: OverheadContact) -> Optional[float]:
    frames, fps = data.smoothed_frames, data.fps
    if key in ("elbow_at_contact", "elbow_angle"):
        return joint_elbow_angle(hit.frame, hit.arm, MIN_VISIBILITY)
    if key == "contact_height":
        return contact_height(hit.frame, hit.arm, MIN_VISIBILITY)
    if key == "trunk_rotation":
        return trunk_rotation(hit.frame, MIN_VISIBILITY)
    if key == "wrist_speed":
        return arm_swing_score(frames, hit.arm, hit.contact, fps, MIN_VISIBILITY)
    if key == "jump_height":
        return jump_height(frames, fps, data.keyframes)
    if key == "follow_through":
        return follow_through_score(
            frames, hit.arm, hit.contact, MIN_VISIBILITY, FOLLOW_THROUGH_FRAMES, FULL_EXTENSION_ANGLE
        )
    if key == "body_alignment":
        return body_posture_score(hit.frame, MIN_VISIBILITY)
    if key == "stability":
        return _stability(data, hit)
    raise KeyError(key)


def calculate_badminton_metrics(data: MetricCalculationInput) -> MetricResult:
    """Badminton strokes reuse the overhead-strike measurements shared with volleyball."""
    keys = ACTION_METRICS.get(data.action)
    if keys is None:
        logger.warning("Unknown badminton action: %s", data.action)
        return {}

    metrics = empty_metrics(*keys)
    if not data.smoothed_frames or data.fps <= 0:
        return metrics
    hit = locate_overhead_contact(data.smoothed_frames, data.keyframes, MIN_VISIBILITY)
    if hit is None:
        return metrics

    for key in keys:
        metrics[key] = _measure(key, data, hit)
    logger.debug("Badminton %s metrics: %s", data.action, metrics)
    return metrics
