import logging
import math
from dataclasses import dataclass
from typing import Optional

from geometry import EPSILON, Vector2D, cross, dot, magnitude, midpoint, safe_acos, vector_between
from pose_types import NormalizedPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AngleResult:
    degrees: float
    radians: float
    is_valid: bool
    confidence: float


INVALID_ANGLE = AngleResult(0.0, 0.0, False, 0.0)


def calculate_angle(
    a: Optional[NormalizedPoint],
    b: Optional[NormalizedPoint],
    c: Optional[NormalizedPoint],
) -> AngleResult:
    """Angle at vertex b formed by b->a and b->c, in [0, 180] degrees."""
    if a is None or b is None or c is None:
        return INVALID_ANGLE

    confidence = min(_vis(a), _vis(b), _vis(c))
    ba = vector_between(b, a)
    bc = vector_between(b, c)
    mag_ba = magnitude(ba)
    mag_bc = magnitude(bc)
    if mag_ba < EPSILON or mag_bc < EPSILON:
        logger.warning("Zero-length vector in angle calculation")
        return INVALID_ANGLE

    radians = safe_acos(dot(ba, bc) / (mag_ba * mag_bc))
    return AngleResult(math.degrees(radians), radians, True, confidence)


def calculate_angle_with_threshold(
    a: Optional[NormalizedPoint],
    b: Optional[NormalizedPoint],
    c: Optional[NormalizedPoint],
    visibility_threshold: float = 0.5,
) -> Optional[AngleResult]:
    # Missing visibility counts as not visible here.
    for p in (a, b, c):
        vis = p.visibility if p is not None and p.visibility is not None else 0.0
        if vis < visibility_threshold:
            return None
    return calculate_angle(a, b, c)


def calculate_signed_angle(va: Vector2D, vb: Vector2D) -> float:
    """Signed rotation from va to vb in degrees, (-180, 180]."""
    if magnitude(va) < EPSILON or magnitude(vb) < EPSILON:
        return 0.0
    return math.degrees(math.atan2(cross(va, vb), dot(va, vb)))


def calculate_signed_joint_angle(
    a: Optional[NormalizedPoint],
    b: Optional[NormalizedPoint],
    c: Optional[NormalizedPoint],
) -> float:
    if a is None or b is None or c is None:
        return 0.0
    return calculate_signed_angle(vector_between(b, a), vector_between(b, c))


def calculate_elbow_angle(shoulder, elbow, wrist) -> AngleResult:
    return calculate_angle(shoulder, elbow, wrist)


def calculate_knee_angle(hip, knee, ankle) -> AngleResult:
    return calculate_angle(hip, knee, ankle)


def calculate_shoulder_angle(hip, shoulder, elbow) -> AngleResult:
    return calculate_angle(hip, shoulder, elbow)


def calculate_hip_angle(shoulder, hip, knee) -> AngleResult:
    return calculate_angle(shoulder, hip, knee)


def calculate_wrist_angle(elbow, wrist, index_tip) -> AngleResult:
    return calculate_angle(elbow, wrist, index_tip)


def calculate_ankle_angle(knee, ankle, foot) -> AngleResult:
    return calculate_angle(knee, ankle, foot)


def calculate_torso_lean(
    left_shoulder: Optional[NormalizedPoint],
    right_shoulder: Optional[NormalizedPoint],
    left_hip: Optional[NormalizedPoint],
    right_hip: Optional[NormalizedPoint],
) -> float:
    # Signed lean of the hip->shoulder line away from image-up (0, -1).
    if left_shoulder is None or right_shoulder is None or left_hip is None or right_hip is None:
        return 0.0
    torso = vector_between(midpoint(left_hip, right_hip), midpoint(left_shoulder, right_shoulder))
    return calculate_signed_angle(Vector2D(0.0, -1.0), torso)


def calculate_shoulder_rotation(
    left_shoulder: Optional[NormalizedPoint],
    right_shoulder: Optional[NormalizedPoint],
) -> float:
    if left_shoulder is None or right_shoulder is None:
        return 0.0
    z_diff = (left_shoulder.z or 0.0) - (right_shoulder.z or 0.0)
    x_diff = right_shoulder.x - left_shoulder.x
    if abs(x_diff) < EPSILON:
        return 0.0
    return math.degrees(math.atan2(z_diff, x_diff))


def angle_difference(angle1: float, angle2: float) -> float:
    diff = abs(angle1 - angle2)
    if diff > 180:
        diff = 360 - diff
    return diff


def is_angle_in_range(angle: float, target: float, tolerance: float) -> bool:
    return angle_difference(angle, target) <= tolerance


def angle_match_percentage(user_angle: float, target_angle: float, max_deviation: float = 45.0) -> float:
    diff = angle_difference(user_angle, target_angle)
    return min(100.0, max(0.0, 100.0 - (diff / max_deviation) * 100.0))


def _vis(p: NormalizedPoint) -> float:
    return 1.0 if p.visibility is None else p.visibility
