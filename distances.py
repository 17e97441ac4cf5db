import math
from dataclasses import dataclass
from typing import Optional

from geometry import EPSILON, clamp
from pose_types import NormalizedPoint

MIN_VISIBILITY = 0.3


@dataclass(frozen=True)
class DistanceResult:
    normalized: float
    is_valid: bool
    confidence: float


def _vis(p: NormalizedPoint) -> float:
    return 1.0 if p.visibility is None else p.visibility


def _gated(a: NormalizedPoint, b: NormalizedPoint, value: float) -> DistanceResult:
    confidence = min(_vis(a), _vis(b))
    if _vis(a) < MIN_VISIBILITY or _vis(b) < MIN_VISIBILITY:
        return DistanceResult(0.0, False, confidence)
    return DistanceResult(value, True, confidence)


def calculate_distance(a: Optional[NormalizedPoint], b: Optional[NormalizedPoint]) -> DistanceResult:
    if a is None or b is None:
        return DistanceResult(0.0, False, 0.0)
    return _gated(a, b, math.hypot(b.x - a.x, b.y - a.y))


def calculate_distance_3d(a: Optional[NormalizedPoint], b: Optional[NormalizedPoint]) -> DistanceResult:
    if a is None or b is None:
        return DistanceResult(0.0, False, 0.0)
    dz = (b.z or 0.0) - (a.z or 0.0)
    return _gated(a, b, math.sqrt((b.x - a.x) ** 2 + (b.y - a.y) ** 2 + dz ** 2))


def calculate_horizontal_distance(a: Optional[NormalizedPoint], b: Optional[NormalizedPoint]) -> DistanceResult:
    # Signed; the value is kept even when a point falls under the visibility gate.
    if a is None or b is None:
        return DistanceResult(0.0, False, 0.0)
    valid = _vis(a) >= MIN_VISIBILITY and _vis(b) >= MIN_VISIBILITY
    return DistanceResult(b.x - a.x, valid, min(_vis(a), _vis(b)))


def calculate_vertical_distance(a: Optional[NormalizedPoint], b: Optional[NormalizedPoint]) -> DistanceResult:
    if a is None or b is None:
        return DistanceResult(0.0, False, 0.0)
    valid = _vis(a) >= MIN_VISIBILITY and _vis(b) >= MIN_VISIBILITY
    return DistanceResult(b.y - a.y, valid, min(_vis(a), _vis(b)))


def calculate_vertical_distance_physics(a: Optional[NormalizedPoint], b: Optional[NormalizedPoint]) -> DistanceResult:
    result = calculate_vertical_distance(a, b)
    return DistanceResult(-result.normalized, result.is_valid, result.confidence)


def calculate_upper_arm_length(shoulder, elbow) -> DistanceResult:
    return calculate_distance(shoulder, elbow)


def calculate_forearm_length(elbow, wrist) -> DistanceResult:
    return calculate_distance(elbow, wrist)


def calculate_full_arm_length(shoulder, wrist) -> DistanceResult:
    return calculate_distance(shoulder, wrist)


def calculate_thigh_length(hip, knee) -> DistanceResult:
    return calculate_distance(hip, knee)


def calculate_shin_length(knee, ankle) -> DistanceResult:
    return calculate_distance(knee, ankle)


def calculate_torso_length(
    left_shoulder: Optional[NormalizedPoint],
    right_shoulder: Optional[NormalizedPoint],
    left_hip: Optional[NormalizedPoint],
    right_hip: Optional[NormalizedPoint],
) -> DistanceResult:
    if left_shoulder is None or right_shoulder is None or left_hip is None or right_hip is None:
        return DistanceResult(0.0, False, 0.0)
    shoulder_mid = NormalizedPoint(
        (left_shoulder.x + right_shoulder.x) / 2.0,
        (left_shoulder.y + right_shoulder.y) / 2.0,
        visibility=min(_vis(left_shoulder), _vis(right_shoulder)),
    )
    hip_mid = NormalizedPoint(
        (left_hip.x + right_hip.x) / 2.0,
        (left_hip.y + right_hip.y) / 2.0,
        visibility=min(_vis(left_hip), _vis(right_hip)),
    )
    return calculate_distance(shoulder_mid, hip_mid)


def calculate_shoulder_width(left_shoulder, right_shoulder) -> DistanceResult:
    return calculate_distance(left_shoulder, right_shoulder)


def calculate_hip_width(left_hip, right_hip) -> DistanceResult:
    return calculate_distance(left_hip, right_hip)


def calculate_stance_width(left_ankle, right_ankle) -> DistanceResult:
    return calculate_horizontal_distance(left_ankle, right_ankle)


def calculate_distance_ratio(d1: DistanceResult, d2: DistanceResult) -> float:
    if not d1.is_valid or not d2.is_valid:
        return 0.0
    if d2.normalized < EPSILON:
        return 0.0
    return d1.normalized / d2.normalized


def calculate_arm_extension(
    shoulder: Optional[NormalizedPoint],
    elbow: Optional[NormalizedPoint],
    wrist: Optional[NormalizedPoint],
) -> float:
    """Straight-line shoulder->wrist reach as a percentage of the segment path length."""
    upper = calculate_distance(shoulder, elbow)
    fore = calculate_distance(elbow, wrist)
    full = calculate_distance(shoulder, wrist)
    if not (upper.is_valid and fore.is_valid and full.is_valid):
        return 0.0
    max_length = upper.normalized + fore.normalized
    if max_length < EPSILON:
        return 0.0
    return clamp(full.normalized / max_length * 100.0, 0.0, 100.0)


def estimate_scale_factor(shoulder_width_normalized: float, reference_shoulder_width_cm: float = 42.0) -> float:
    if shoulder_width_normalized < EPSILON:
        return 0.0
    return reference_shoulder_width_cm / shoulder_width_normalized


def normalized_to_real(normalized_distance: float, scale_factor: float) -> float:
    return normalized_distance * scale_factor
